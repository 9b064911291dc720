# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""User operations for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, csv_filters, entity_response, list_response, scalar_params
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string


async def get_user_data(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    data = await client.get("/users/me", ctx=ctx)
    return entity_response(data, "user")


async def list_users(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query")
    add_limit(params, args)
    data = await client.get("/users", params=params, array_params=csv_filters(args, "team_ids"), ctx=ctx)
    return list_response(data, "users")


READ_TOOLS = (
    ToolSpec(
        name="get_user_data",
        title="Get Current User",
        description=(
            "Get the user that owns the API token in use: ID, name, email and role. Call this "
            "first when later requests should be scoped to the current user."
        ),
        handler=get_user_data,
    ),
    ToolSpec(
        name="list_users",
        title="List Users",
        description="List users in the account. Use it to find user IDs for assignments, team membership or incident filters.",
        handler=list_users,
        params=(
            string("query", "Filter users by name or email (partial match)"),
            string("team_ids", "Comma-separated team IDs (e.g., 'PTEAM1,PTEAM2')"),
            limit_param(),
        ),
    ),
)

WRITE_TOOLS = ()
