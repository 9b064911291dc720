# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Change event lookups for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, csv_filters, entity_response, list_response, scalar_params, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string

SINCE = string("since", "Start of the range in ISO 8601 format (e.g., '2024-01-15T00:00:00Z')")
UNTIL = string("until", "End of the range in ISO 8601 format (e.g., '2024-01-16T00:00:00Z')")


async def list_change_events(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "since", "until")
    add_limit(params, args)
    filters = csv_filters(args, "team_ids", "service_ids")
    data = await client.get("/change_events", params=params, array_params=filters, ctx=ctx)
    return list_response(data, "change_events")


async def get_change_event(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    change_event_id = args.require_string("change_event_id")
    data = await client.get(f"/change_events/{segment(change_event_id)}", ctx=ctx)
    return entity_response(data, "change_event")


async def list_service_change_events(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    service_id = args.require_string("service_id")
    params = scalar_params(args, "since", "until")
    add_limit(params, args)
    data = await client.get(f"/services/{segment(service_id)}/change_events", params=params, ctx=ctx)
    return list_response(data, "change_events")


async def list_incident_change_events(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    params = {}
    add_limit(params, args)
    data = await client.get(f"/incidents/{segment(incident_id)}/related_change_events", params=params, ctx=ctx)
    return list_response(data, "change_events")


READ_TOOLS = (
    ToolSpec(
        name="list_change_events",
        title="List Change Events",
        description=(
            "List change events (deployments, releases, configuration changes) across the "
            "account. Use it to check whether a recent change caused an incident."
        ),
        handler=list_change_events,
        params=(
            SINCE,
            UNTIL,
            string("team_ids", "Comma-separated team IDs (e.g., 'PTEAM1,PTEAM2')"),
            string("service_ids", "Comma-separated service IDs (e.g., 'PSVC1,PSVC2')"),
            limit_param(),
        ),
    ),
    ToolSpec(
        name="get_change_event",
        title="Get Change Event",
        description="Get one change event with its summary, source and links.",
        handler=get_change_event,
        params=(string("change_event_id", "The unique change event ID", required=True),),
    ),
    ToolSpec(
        name="list_service_change_events",
        title="List Service Change Events",
        description="List the change events of one service, e.g. recent deployments that might explain an incident.",
        handler=list_service_change_events,
        params=(
            string("service_id", "The unique service ID (e.g., 'PSVC123')", required=True),
            SINCE,
            UNTIL,
            limit_param(),
        ),
    ),
    ToolSpec(
        name="list_incident_change_events",
        title="List Related Change Events",
        description=(
            "List the change events PagerDuty correlated with an incident: deployments and "
            "changes made around the time it started."
        ),
        handler=list_incident_change_events,
        params=(string("incident_id", "The unique incident ID (e.g., 'PABC123')", required=True), limit_param()),
    ),
)

WRITE_TOOLS = ()
