# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Escalation policy operations for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, csv_filters, entity_response, list_response, scalar_params, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string


async def list_escalation_policies(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query", "sort_by")
    add_limit(params, args)
    filters = csv_filters(args, "user_ids", "team_ids")
    data = await client.get("/escalation_policies", params=params, array_params=filters, ctx=ctx)
    return list_response(data, "escalation_policies")


async def get_escalation_policy(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    policy_id = args.require_string("escalation_policy_id")
    data = await client.get(f"/escalation_policies/{segment(policy_id)}", ctx=ctx)
    return entity_response(data, "escalation_policy")


READ_TOOLS = (
    ToolSpec(
        name="list_escalation_policies",
        title="List Escalation Policies",
        description=(
            "List escalation policies. A policy sets the order in which users and schedules "
            "are notified about an incident, and every service needs one. Use it to find "
            "policy IDs when creating services or tracing a notification chain."
        ),
        handler=list_escalation_policies,
        params=(
            string("query", "Filter policies by name (partial match)"),
            string("user_ids", "Comma-separated IDs of users in the policy (e.g., 'PUSER1,PUSER2')"),
            string("team_ids", "Comma-separated team IDs (e.g., 'PTEAM1,PTEAM2')"),
            string("sort_by", "Sort order", enum=("name", "name:asc", "name:desc")),
            limit_param(),
        ),
    ),
    ToolSpec(
        name="get_escalation_policy",
        title="Get Escalation Policy Details",
        description="Get one escalation policy with every escalation level and the users or schedules it targets.",
        handler=get_escalation_policy,
        params=(
            string("escalation_policy_id", "The unique escalation policy ID (e.g., 'PPOL123')", required=True),
        ),
    ),
)

WRITE_TOOLS = ()
