# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Event orchestration operations for PagerDuty MCP

PagerDuty only accepts the router configuration as a whole document, so
``append_event_orchestration_router_rule`` reads the router, appends the
rule locally and writes the full document back. There is no version
token on the router: two appends racing on the same orchestration can
lose one of the rules (last writer wins).
"""

import logging
from typing import Any, Dict

from mcp_pagerduty.api.client import PagerDutyClient, PagerDutyError
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments, ToolArgumentError
from mcp_pagerduty.tools.common import add_limit, entity_response, list_response, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string

logger = logging.getLogger(__name__)

ORCHESTRATION_ID = string("orchestration_id", "The unique orchestration ID (e.g., 'E1A2B3C')", required=True)

# Name of the rule set PagerDuty evaluates first
START_SET_ID = "start"


def _router_path(orchestration_id: str) -> str:
    return f"/event_orchestrations/{segment(orchestration_id)}/router"


async def list_event_orchestrations(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = {}
    add_limit(params, args)
    data = await client.get("/event_orchestrations", params=params, ctx=ctx)
    return list_response(data, "orchestrations")


async def get_event_orchestration(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    orchestration_id = args.require_string("orchestration_id")
    data = await client.get(f"/event_orchestrations/{segment(orchestration_id)}", ctx=ctx)
    return entity_response(data, "orchestration")


async def get_event_orchestration_router(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    orchestration_id = args.require_string("orchestration_id")
    data = await client.get(_router_path(orchestration_id), ctx=ctx)
    return entity_response(data, "orchestration_path")


async def get_event_orchestration_global(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    orchestration_id = args.require_string("orchestration_id")
    data = await client.get(f"/event_orchestrations/{segment(orchestration_id)}/global", ctx=ctx)
    return entity_response(data, "orchestration_path")


async def get_event_orchestration_service(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    service_id = args.require_string("service_id")
    data = await client.get(f"/event_orchestrations/services/{segment(service_id)}", ctx=ctx)
    return entity_response(data, "orchestration_path")


async def update_event_orchestration_router(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    orchestration_id = args.require_string("orchestration_id")
    config = args.require_json("config")
    if not isinstance(config, dict):
        raise ToolArgumentError("invalid config JSON: expected an object")
    # Accept the bare path as well as the {"orchestration_path": ...} envelope
    if "orchestration_path" not in config:
        config = {"orchestration_path": config}

    data = await client.put(_router_path(orchestration_id), config, ctx=ctx)
    return entity_response(data, "orchestration_path")


def append_rule(path: Dict[str, Any], rule: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a router path with ``rule`` appended to its first set.

    Every other field of the path, its sets and their existing rules is
    carried over untouched. A router without sets gets a ``start`` set
    holding only the new rule.
    """
    sets = [dict(rule_set) for rule_set in (path.get("sets") or [])]
    if sets:
        sets[0]["rules"] = list(sets[0].get("rules") or []) + [rule]
    else:
        sets = [{"id": START_SET_ID, "rules": [rule]}]

    updated = dict(path)
    updated["sets"] = sets
    return updated


async def append_event_orchestration_router_rule(
    client: PagerDutyClient, args: Arguments, ctx: RequestContext
) -> str:
    orchestration_id = args.require_string("orchestration_id")
    route_to = args.require_string("route_to")

    rule: Dict[str, Any] = {}
    label = args.optional_string("label")
    if label:
        rule["label"] = label
    conditions = args.optional_json("conditions")
    if conditions is not None:
        if not isinstance(conditions, list):
            raise ToolArgumentError("invalid conditions JSON: expected an array")
        rule["conditions"] = conditions
    rule["actions"] = {"route_to": route_to}

    try:
        current = await client.get(_router_path(orchestration_id), ctx=ctx)
    except PagerDutyError as e:
        raise PagerDutyError(f"failed to get current router: {e}") from e

    path = current.get("orchestration_path") if isinstance(current, dict) else None
    updated = append_rule(path or {}, rule)

    logger.info(f"Appending router rule to orchestration {orchestration_id} (route_to={route_to})")
    payload = {"orchestration_path": {"sets": updated["sets"], "catch_all": updated.get("catch_all")}}
    data = await client.put(_router_path(orchestration_id), payload, ctx=ctx)
    return entity_response(data, "orchestration_path")


READ_TOOLS = (
    ToolSpec(
        name="list_event_orchestrations",
        title="List Event Orchestrations",
        description=(
            "List event orchestrations (Event Rules). Orchestrations process incoming events "
            "and route them to services; they can transform, enrich, suppress or deduplicate "
            "events before an incident is created."
        ),
        handler=list_event_orchestrations,
        params=(limit_param(),),
    ),
    ToolSpec(
        name="get_event_orchestration",
        title="Get Event Orchestration",
        description="Get one event orchestration, including the integration URL it receives events on.",
        handler=get_event_orchestration,
        params=(ORCHESTRATION_ID,),
    ),
    ToolSpec(
        name="get_event_orchestration_router",
        title="Get Orchestration Router Rules",
        description=(
            "Get the router rules of an event orchestration. Router rules pick the service an "
            "event goes to by matching conditions on event fields."
        ),
        handler=get_event_orchestration_router,
        params=(ORCHESTRATION_ID,),
    ),
    ToolSpec(
        name="get_event_orchestration_global",
        title="Get Global Orchestration Rules",
        description=(
            "Get the global rules of an event orchestration, applied before routing. They can "
            "suppress, deduplicate or transform events."
        ),
        handler=get_event_orchestration_global,
        params=(ORCHESTRATION_ID,),
    ),
    ToolSpec(
        name="get_event_orchestration_service",
        title="Get Service Orchestration Rules",
        description=(
            "Get the service-level orchestration rules of a service. They run after routing "
            "and can set severity, add notes or trigger automation."
        ),
        handler=get_event_orchestration_service,
        params=(string("service_id", "The unique service ID (e.g., 'PSVC123')", required=True),),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="update_event_orchestration_router",
        title="Update Orchestration Router",
        description=(
            "Replace the whole router configuration of an event orchestration. Existing rules "
            "are overwritten. To add a single rule, use append_event_orchestration_router_rule."
        ),
        handler=update_event_orchestration_router,
        read_only=False,
        idempotent=True,
        params=(
            ORCHESTRATION_ID,
            string(
                "config",
                "Full router configuration as a JSON object with an 'orchestration_path' "
                "holding 'sets' and 'catch_all'",
                required=True,
            ),
        ),
    ),
    ToolSpec(
        name="append_event_orchestration_router_rule",
        title="Add Router Rule",
        description=(
            "Add one routing rule to an event orchestration while keeping the existing rules. "
            "The rule is appended to the first rule set."
        ),
        handler=append_event_orchestration_router_rule,
        read_only=False,
        params=(
            ORCHESTRATION_ID,
            string("label", "Readable label for the rule (e.g., 'Route database alerts')"),
            string(
                "conditions",
                "JSON array of conditions, each with an 'expression' in PCL "
                "(e.g., [{\"expression\": \"event.source matches 'database'\"}])",
            ),
            string("route_to", "ID of the service matching events are routed to (e.g., 'PSVC123')", required=True),
        ),
    ),
)
