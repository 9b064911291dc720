# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schedule operations for PagerDuty MCP

create_schedule only creates the schedule shell with no rotation
layers; layers must be configured separately in PagerDuty.
"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import (
    add_limit,
    entity_response,
    list_response,
    optional_fields,
    reference,
    scalar_params,
    segment,
)
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string

SCHEDULE_ID = string("schedule_id", "The unique schedule ID (e.g., 'PSCHED123')", required=True)
SINCE = string("since", "Start of the range in ISO 8601 format (e.g., '2024-01-15T00:00:00Z')")
UNTIL = string("until", "End of the range in ISO 8601 format (e.g., '2024-01-22T00:00:00Z')")


async def list_schedules(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query")
    add_limit(params, args)
    data = await client.get("/schedules", params=params, ctx=ctx)
    return list_response(data, "schedules")


async def get_schedule(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    schedule_id = args.require_string("schedule_id")
    data = await client.get(f"/schedules/{segment(schedule_id)}", params=scalar_params(args, "since", "until"), ctx=ctx)
    return entity_response(data, "schedule")


async def list_schedule_users(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    schedule_id = args.require_string("schedule_id")
    data = await client.get(
        f"/schedules/{segment(schedule_id)}/users", params=scalar_params(args, "since", "until"), ctx=ctx
    )
    return list_response(data, "users")


async def create_schedule(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    schedule = {
        "type": "schedule",
        "name": args.require_string("name"),
        "time_zone": args.require_string("time_zone"),
        "schedule_layers": [],
    }
    schedule.update(optional_fields(args, "description"))
    data = await client.post("/schedules", {"schedule": schedule}, ctx=ctx)
    return entity_response(data, "schedule")


async def create_schedule_override(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    schedule_id = args.require_string("schedule_id")
    user_id = args.require_string("user_id")
    start = args.require_string("start")
    end = args.require_string("end")

    override = {"start": start, "end": end, "user": reference(user_id, "user_reference")}
    data = await client.post(f"/schedules/{segment(schedule_id)}/overrides", {"override": override}, ctx=ctx)
    return entity_response(data, "override")


async def update_schedule(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    schedule_id = args.require_string("schedule_id")
    schedule = {"type": "schedule"}
    schedule.update(optional_fields(args, "name", "description", "time_zone"))
    data = await client.put(f"/schedules/{segment(schedule_id)}", {"schedule": schedule}, ctx=ctx)
    return entity_response(data, "schedule")


READ_TOOLS = (
    ToolSpec(
        name="list_schedules",
        title="List Schedules",
        description=(
            "List on-call schedules. A schedule describes the rotation that decides who is "
            "on call at a given time. Use it to find schedule IDs."
        ),
        handler=list_schedules,
        params=(string("query", "Filter schedules by name (partial match)"), limit_param()),
    ),
    ToolSpec(
        name="get_schedule",
        title="Get Schedule Details",
        description="Get one schedule with its rotation layers and the rendered on-call periods for a time range.",
        handler=get_schedule,
        params=(SCHEDULE_ID, SINCE, UNTIL),
    ),
    ToolSpec(
        name="list_schedule_users",
        title="List Schedule Users",
        description="List the users taking part in a schedule's rotation during a time range.",
        handler=list_schedule_users,
        params=(SCHEDULE_ID, SINCE, UNTIL),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_schedule",
        title="Create Schedule",
        description=(
            "Create an on-call schedule. The schedule is created empty; rotation layers have "
            "to be added separately."
        ),
        handler=create_schedule,
        read_only=False,
        params=(
            string("name", "Schedule name (e.g., 'Primary On-Call')", required=True),
            string("time_zone", "IANA time zone (e.g., 'America/New_York', 'UTC')", required=True),
            string("description", "What the schedule covers"),
        ),
    ),
    ToolSpec(
        name="create_schedule_override",
        title="Create Schedule Override",
        description=(
            "Put a user on call in place of the normal rotation for a time window, e.g. for "
            "vacation cover or a shift swap. The override wins over the regular schedule."
        ),
        handler=create_schedule_override,
        read_only=False,
        params=(
            SCHEDULE_ID,
            string("user_id", "ID of the user who will be on call (e.g., 'PUSER123')", required=True),
            string("start", "Override start in ISO 8601 format (e.g., '2024-01-15T09:00:00Z')", required=True),
            string("end", "Override end in ISO 8601 format (e.g., '2024-01-15T17:00:00Z')", required=True),
        ),
    ),
    ToolSpec(
        name="update_schedule",
        title="Update Schedule",
        description="Change a schedule's name, description or time zone. Rotation layers are left untouched.",
        handler=update_schedule,
        read_only=False,
        idempotent=True,
        params=(
            SCHEDULE_ID,
            string("name", "New schedule name"),
            string("description", "New schedule description"),
            string("time_zone", "New IANA time zone"),
        ),
    ),
)
