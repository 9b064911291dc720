# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typed access to tool call arguments

Arguments arrive as an untyped JSON object. Handlers read them through
``Arguments`` instead of indexing the dict directly:

- ``require_*`` raises ``ToolArgumentError`` when the key is absent.
- ``optional_*`` returns None when the key is absent.
- both raise ``ToolArgumentError`` when the value has the wrong type.

Empty strings and JSON null count as absent. Unknown keys are ignored.
"""

import json
import math
from typing import Any, List, Mapping, Optional, Union

Number = Union[int, float]


class ToolArgumentError(ValueError):
    """A tool was called with a missing or malformed argument."""


def split_ids(value: str) -> List[str]:
    """Split a comma-separated list, trimming whitespace and dropping empties."""
    return [part.strip() for part in value.split(",") if part.strip()]


class Arguments:
    def __init__(self, raw: Optional[Mapping[str, Any]] = None):
        self._raw = dict(raw or {})

    def _present(self, name: str) -> bool:
        value = self._raw.get(name)
        return value is not None and value != ""

    def optional_string(self, name: str) -> Optional[str]:
        if not self._present(name):
            return None
        value = self._raw[name]
        if not isinstance(value, str):
            raise ToolArgumentError(f"{name} must be a string")
        return value

    def require_string(self, name: str) -> str:
        value = self.optional_string(name)
        if value is None:
            raise ToolArgumentError(f"{name} is required")
        return value

    def optional_number(self, name: str) -> Optional[Number]:
        if not self._present(name):
            return None
        value = self._raw[name]
        # bool is an int subclass but never a valid number here
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ToolArgumentError(f"{name} must be a number")
        # json.loads accepts NaN and Infinity
        if isinstance(value, float) and not math.isfinite(value):
            raise ToolArgumentError(f"{name} must be a finite number")
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    def require_number(self, name: str) -> Number:
        value = self.optional_number(name)
        if value is None:
            raise ToolArgumentError(f"{name} is required")
        return value

    def optional_bool(self, name: str) -> Optional[bool]:
        if not self._present(name):
            return None
        value = self._raw[name]
        if not isinstance(value, bool):
            raise ToolArgumentError(f"{name} must be a boolean")
        return value

    def require_ids(self, name: str) -> List[str]:
        """Read a required comma-separated ID list as discrete values."""
        ids = split_ids(self.require_string(name))
        if not ids:
            raise ToolArgumentError(f"{name} is required")
        return ids

    def optional_json(self, name: str) -> Any:
        """Decode an optional argument that carries a JSON document as a string."""
        text = self.optional_string(name)
        if text is None:
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise ToolArgumentError(f"invalid {name} JSON: {e}") from e

    def require_json(self, name: str) -> Any:
        value = self.optional_json(name)
        if value is None:
            raise ToolArgumentError(f"{name} is required")
        return value
