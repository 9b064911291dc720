# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-request context threaded from the transport down to the gateway"""

from dataclasses import dataclass
from typing import Optional

PAGERDUTY_TOKEN_HEADER = "X-PagerDuty-Token"


@dataclass(frozen=True)
class RequestContext:
    """Request-scoped overlay on top of the process-wide configuration.

    A fresh instance is built for every inbound request and handed down
    explicitly; it is never stored on shared objects. When
    ``pagerduty_token`` is set it replaces the default API key for every
    backend call made while serving that request.
    """

    pagerduty_token: Optional[str] = None

    @classmethod
    def from_headers(cls, headers) -> "RequestContext":
        token = headers.get(PAGERDUTY_TOKEN_HEADER)
        return cls(pagerduty_token=token or None)


DEFAULT_CONTEXT = RequestContext()
