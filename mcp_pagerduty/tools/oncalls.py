# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""On-call lookups for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, csv_filters, list_response, scalar_params
from mcp_pagerduty.tools.registry import ToolSpec, boolean, limit_param, string


async def list_oncalls(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "time_zone", "since", "until")
    # PagerDuty treats any value as true, so only send it when set
    if args.optional_bool("earliest"):
        params["earliest"] = "true"
    add_limit(params, args)
    filters = csv_filters(args, "schedule_ids", "user_ids", "escalation_policy_ids")

    data = await client.get("/oncalls", params=params, array_params=filters, ctx=ctx)
    return list_response(data, "oncalls")


READ_TOOLS = (
    ToolSpec(
        name="list_oncalls",
        title="List On-Calls",
        description=(
            "List on-call entries for now or for a time range. This is the main tool for "
            "finding who to contact about an incident. Set 'earliest' to true to get only "
            "the current on-call person for each schedule."
        ),
        handler=list_oncalls,
        params=(
            string("time_zone", "IANA time zone for returned times (e.g., 'America/New_York', 'UTC')"),
            string("since", "Start of the range in ISO 8601 format. Defaults to now."),
            string("until", "End of the range in ISO 8601 format. Defaults to now."),
            boolean("earliest", "Return only the earliest on-call entry for each schedule"),
            string("schedule_ids", "Comma-separated schedule IDs (e.g., 'PSCHED1,PSCHED2')"),
            string("user_ids", "Comma-separated user IDs (e.g., 'PUSER1,PUSER2')"),
            string("escalation_policy_ids", "Comma-separated escalation policy IDs (e.g., 'PPOL1,PPOL2')"),
            limit_param(),
        ),
    ),
)

WRITE_TOOLS = ()
