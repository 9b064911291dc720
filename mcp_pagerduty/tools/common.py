# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Helpers shared by the tool modules for shaping requests and responses."""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from mcp_pagerduty.tools.arguments import Arguments


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def list_response(data: Any, key: str) -> str:
    """Wrap the backend's array field in the uniform ``{"response": [...]}`` envelope."""
    items = data.get(key) if isinstance(data, dict) else None
    return to_json({"response": items or []})


def entity_response(data: Any, key: str) -> str:
    """Unwrap a single entity (``{"incident": {...}}`` -> ``{...}``)."""
    if isinstance(data, dict) and key in data:
        return to_json(data[key])
    return to_json(data)


def segment(value: str) -> str:
    """Percent-encode an ID for use as a single URL path segment.

    Slashes are encoded and dot segments are escaped, so an ID can never
    move the request to another endpoint.
    """
    encoded = quote(value, safe="")
    if encoded in (".", ".."):
        return encoded.replace(".", "%2E")
    return encoded


def reference(entity_id: str, ref_type: str) -> Dict[str, str]:
    return {"id": entity_id, "type": ref_type}


def scalar_params(args: Arguments, *names: str) -> Dict[str, Any]:
    """Copy optional string arguments into scalar query parameters."""
    params: Dict[str, Any] = {}
    for name in names:
        value = args.optional_string(name)
        if value is not None:
            params[name] = value
    return params


def add_limit(params: Dict[str, Any], args: Arguments, name: str = "limit") -> None:
    # Bounds are advertised in the schema only; PagerDuty validates them
    value = args.optional_number(name)
    if value is not None:
        params[name] = int(value)


def csv_filters(args: Arguments, *names: str) -> Dict[str, List[str]]:
    """Forward comma-separated filters as one value under the bracketed key.

    ``team_ids="A,B"`` becomes ``team_ids[]=A,B``. The string is passed
    through unchanged, it is not split into repeated keys.
    """
    filters: Dict[str, List[str]] = {}
    for name in names:
        value = args.optional_string(name)
        if value is not None:
            filters[f"{name}[]"] = [value]
    return filters


def optional_fields(args: Arguments, *names: str) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for name in names:
        value: Optional[str] = args.optional_string(name)
        if value is not None:
            fields[name] = value
    return fields
