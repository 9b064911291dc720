# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Team operations for PagerDuty MCP

Deleting a team and removing a member are flagged destructive. The flag
is advisory; once write tools are enabled nothing blocks the call.
"""

import logging

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, entity_response, list_response, optional_fields, scalar_params, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string

logger = logging.getLogger(__name__)

TEAM_ID = string("team_id", "The unique team ID (e.g., 'PTEAM123')", required=True)
USER_ID = string("user_id", "The user ID (e.g., 'PUSER123')", required=True)


async def list_teams(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query")
    add_limit(params, args)
    data = await client.get("/teams", params=params, ctx=ctx)
    return list_response(data, "teams")


async def get_team(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    data = await client.get(f"/teams/{segment(team_id)}", ctx=ctx)
    return entity_response(data, "team")


async def list_team_members(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    params = {}
    add_limit(params, args)
    data = await client.get(f"/teams/{segment(team_id)}/members", params=params, ctx=ctx)
    return list_response(data, "members")


async def create_team(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team = {"type": "team", "name": args.require_string("name")}
    team.update(optional_fields(args, "description"))
    data = await client.post("/teams", {"team": team}, ctx=ctx)
    return entity_response(data, "team")


async def update_team(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    team = {"type": "team"}
    team.update(optional_fields(args, "name", "description"))
    data = await client.put(f"/teams/{segment(team_id)}", {"team": team}, ctx=ctx)
    return entity_response(data, "team")


async def delete_team(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    logger.warning(f"Deleting team {team_id}")
    await client.delete(f"/teams/{segment(team_id)}", ctx=ctx)
    return f"Team {team_id} deleted successfully"


async def add_team_member(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    user_id = args.require_string("user_id")
    await client.put(f"/teams/{segment(team_id)}/users/{segment(user_id)}", optional_fields(args, "role"), ctx=ctx)
    return f"User {user_id} added to team {team_id}"


async def remove_team_member(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    team_id = args.require_string("team_id")
    user_id = args.require_string("user_id")
    logger.warning(f"Removing user {user_id} from team {team_id}")
    await client.delete(f"/teams/{segment(team_id)}/users/{segment(user_id)}", ctx=ctx)
    return f"User {user_id} removed from team {team_id}"


READ_TOOLS = (
    ToolSpec(
        name="list_teams",
        title="List Teams",
        description=(
            "List PagerDuty teams. Teams group users together; use this to find team IDs "
            "for filtering services, escalation policies or incidents."
        ),
        handler=list_teams,
        params=(string("query", "Filter teams by name (partial match)"), limit_param()),
    ),
    ToolSpec(
        name="get_team",
        title="Get Team Details",
        description="Get one team with its description and settings.",
        handler=get_team,
        params=(TEAM_ID,),
    ),
    ToolSpec(
        name="list_team_members",
        title="List Team Members",
        description="List the members of a team together with their role (manager, responder or observer).",
        handler=list_team_members,
        params=(TEAM_ID, limit_param()),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_team",
        title="Create Team",
        description=(
            "Create a team to organize users. Teams can own services and escalation "
            "policies and can be used to filter incidents."
        ),
        handler=create_team,
        read_only=False,
        params=(
            string("name", "Team name", required=True),
            string("description", "What the team is responsible for"),
        ),
    ),
    ToolSpec(
        name="update_team",
        title="Update Team",
        description="Change a team's name or description.",
        handler=update_team,
        read_only=False,
        idempotent=True,
        params=(TEAM_ID, string("name", "New team name"), string("description", "New team description")),
    ),
    ToolSpec(
        name="delete_team",
        title="Delete Team",
        description=(
            "WARNING: DESTRUCTIVE. Permanently delete a team. The team is detached from every "
            "service and escalation policy it was linked to. This cannot be undone."
        ),
        handler=delete_team,
        read_only=False,
        destructive=True,
        idempotent=True,
        params=(TEAM_ID,),
    ),
    ToolSpec(
        name="add_team_member",
        title="Add Team Member",
        description="Add a user to a team, optionally with a specific role.",
        handler=add_team_member,
        read_only=False,
        idempotent=True,
        params=(
            TEAM_ID,
            USER_ID,
            string("role", "Role of the user within the team", enum=("manager", "responder", "observer")),
        ),
    ),
    ToolSpec(
        name="remove_team_member",
        title="Remove Team Member",
        description=(
            "WARNING: DESTRUCTIVE. Remove a user from a team. The user loses team permissions "
            "and may drop out of schedules and escalation policies tied to the team."
        ),
        handler=remove_team_member,
        read_only=False,
        destructive=True,
        idempotent=True,
        params=(TEAM_ID, USER_ID),
    ),
)
