# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""PagerDuty REST API access for the MCP server"""

from .client import (
    MissingCredentialError,
    PagerDutyAPIError,
    PagerDutyClient,
    PagerDutyError,
    PagerDutyTransportError,
)

__all__ = [
    "MissingCredentialError",
    "PagerDutyAPIError",
    "PagerDutyClient",
    "PagerDutyError",
    "PagerDutyTransportError",
]
