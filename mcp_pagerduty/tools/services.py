# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Service operations for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import (
    add_limit,
    csv_filters,
    entity_response,
    list_response,
    optional_fields,
    reference,
    scalar_params,
    segment,
)
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string


async def list_services(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query")
    add_limit(params, args)
    data = await client.get("/services", params=params, array_params=csv_filters(args, "team_ids"), ctx=ctx)
    return list_response(data, "services")


async def get_service(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    service_id = args.require_string("service_id")
    data = await client.get(f"/services/{segment(service_id)}", ctx=ctx)
    return entity_response(data, "service")


async def create_service(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    name = args.require_string("name")
    escalation_policy_id = args.require_string("escalation_policy_id")

    service = {
        "type": "service",
        "name": name,
        "escalation_policy": reference(escalation_policy_id, "escalation_policy_reference"),
    }
    service.update(optional_fields(args, "description"))

    data = await client.post("/services", {"service": service}, ctx=ctx)
    return entity_response(data, "service")


async def update_service(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    service_id = args.require_string("service_id")

    service = {"type": "service"}
    service.update(optional_fields(args, "name", "description"))
    escalation_policy_id = args.optional_string("escalation_policy_id")
    if escalation_policy_id:
        service["escalation_policy"] = reference(escalation_policy_id, "escalation_policy_reference")

    data = await client.put(f"/services/{segment(service_id)}", {"service": service}, ctx=ctx)
    return entity_response(data, "service")


READ_TOOLS = (
    ToolSpec(
        name="list_services",
        title="List Services",
        description=(
            "List PagerDuty services, the monitored applications and components that receive "
            "alerts and open incidents. Use it to look up service IDs for filtering incidents "
            "or to see what is being monitored."
        ),
        handler=list_services,
        params=(
            string("query", "Filter services by name (partial match)"),
            string("team_ids", "Comma-separated IDs of owning teams (e.g., 'PTEAM1,PTEAM2')"),
            limit_param(),
        ),
    ),
    ToolSpec(
        name="get_service",
        title="Get Service Details",
        description="Get one service with its escalation policy, integrations and settings.",
        handler=get_service,
        params=(string("service_id", "The unique service ID (e.g., 'PSVC123')", required=True),),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_service",
        title="Create Service",
        description=(
            "Create a service for a monitored application or component. An escalation policy "
            "is required; it decides who is notified when the service opens an incident."
        ),
        handler=create_service,
        read_only=False,
        params=(
            string("name", "Service name (e.g., 'Production API')", required=True),
            string("escalation_policy_id", "Escalation policy ID (e.g., 'PPOL123')", required=True),
            string("description", "What the service monitors and its business impact"),
        ),
    ),
    ToolSpec(
        name="update_service",
        title="Update Service",
        description="Rename a service, change its description, or move it to another escalation policy.",
        handler=update_service,
        read_only=False,
        idempotent=True,
        params=(
            string("service_id", "ID of the service to update (e.g., 'PSVC123')", required=True),
            string("name", "New service name"),
            string("description", "New service description"),
            string("escalation_policy_id", "New escalation policy ID (e.g., 'PPOL123')"),
        ),
    ),
)
