# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tool descriptors and the catalog that holds them

Every PagerDuty operation is declared once as a ``ToolSpec``: its name,
title, description, parameters and behavioural hints, bound to the async
handler that implements it. The ``ToolCatalog`` collects the specs at
startup, enforces the naming and policy rules, and renders them into
``mcp.types.Tool`` values for ``tools/list``.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Tuple

from mcp.types import Tool, ToolAnnotations

from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments

READ_VERBS = frozenset({"get", "list"})
WRITE_VERBS = frozenset({"create", "update", "delete", "add", "remove", "start", "manage", "append"})
VERBS = READ_VERBS | WRITE_VERBS

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"

# handler(client, arguments, ctx) -> text
Handler = Callable[[Any, Arguments, RequestContext], Awaitable[str]]


@dataclass(frozen=True)
class Param:
    """One declared tool parameter."""

    name: str
    kind: str
    description: str
    required: bool = False
    enum: Optional[Tuple[str, ...]] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {"type": self.kind, "description": self.description}
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        return schema


def string(name: str, description: str, required: bool = False, enum: Optional[Tuple[str, ...]] = None) -> Param:
    return Param(name, STRING, description, required=required, enum=enum)


def number(
    name: str,
    description: str,
    required: bool = False,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> Param:
    return Param(name, NUMBER, description, required=required, minimum=minimum, maximum=maximum)


def boolean(name: str, description: str, required: bool = False) -> Param:
    return Param(name, BOOLEAN, description, required=required)


def limit_param(description: str = "Maximum number of results to return (1-100)") -> Param:
    return number("limit", description, minimum=1, maximum=100)


@dataclass(frozen=True)
class ToolSpec:
    """Immutable description of a tool and the handler that runs it.

    ``read_only`` is the static read/write classification used by the
    write-tools policy. ``destructive`` and ``idempotent`` are advisory
    hints surfaced to the caller and are never enforced.
    """

    name: str
    title: str
    description: str
    handler: Handler
    params: Tuple[Param, ...] = ()
    read_only: bool = True
    destructive: bool = False
    idempotent: bool = False

    @property
    def verb(self) -> str:
        return self.name.split("_", 1)[0]

    @property
    def required(self) -> frozenset:
        return frozenset(p.name for p in self.params if p.required)

    def input_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.params},
        }
        required = [p.name for p in self.params if p.required]
        if required:
            schema["required"] = required
        return schema

    def annotations(self) -> ToolAnnotations:
        if self.read_only:
            return ToolAnnotations(title=self.title, readOnlyHint=True)
        return ToolAnnotations(
            title=self.title,
            readOnlyHint=False,
            destructiveHint=self.destructive,
            idempotentHint=self.idempotent or None,
        )

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema(),
            annotations=self.annotations(),
        )


class ToolCatalog:
    """Ordered, name-unique set of tools for one server instance.

    A catalog built with ``allow_write=False`` refuses write-capable specs,
    so a read-only server has no way to acquire them later.
    """

    def __init__(self, allow_write: bool = False):
        self.allow_write = allow_write
        self._tools: Dict[str, ToolSpec] = {}

    def add(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Duplicate tool name: {spec.name}")
        if spec.verb not in VERBS:
            raise ValueError(f"Tool {spec.name} does not start with a known verb")
        if spec.read_only and spec.verb not in READ_VERBS:
            raise ValueError(f"Tool {spec.name} is marked read-only but its verb implies a write")
        if not spec.read_only and spec.verb not in WRITE_VERBS:
            raise ValueError(f"Tool {spec.name} is marked write-capable but its verb implies a read")
        if spec.destructive and spec.read_only:
            raise ValueError(f"Tool {spec.name} cannot be both read-only and destructive")
        if not spec.read_only and not self.allow_write:
            raise ValueError(f"Write tool {spec.name} cannot be added to a read-only catalog")
        self._tools[spec.name] = spec

    def extend(self, specs) -> None:
        for spec in specs:
            self.add(spec)

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[Tool]:
        return [spec.to_tool() for spec in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)
