# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Status page operations for PagerDuty MCP

Posts and post updates are public: they are shown to customers on the
status page as soon as they are created.
"""

from typing import Any, Dict

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, entity_response, list_response, optional_fields, reference, segment
from mcp_pagerduty.tools.registry import ToolSpec, boolean, limit_param, string

STATUS_PAGE_ID = string("status_page_id", "The unique status page ID", required=True)
POST_ID = string("post_id", "The unique post ID", required=True)


def _status_and_severity(args: Arguments, target: Dict[str, Any]) -> None:
    status_id = args.optional_string("status_id")
    if status_id:
        target["status"] = reference(status_id, "status_page_status_reference")
    severity_id = args.optional_string("severity_id")
    if severity_id:
        target["severity"] = reference(severity_id, "status_page_severity_reference")


async def list_status_pages(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = {}
    add_limit(params, args)
    data = await client.get("/status_pages", params=params, ctx=ctx)
    return list_response(data, "status_pages")


async def list_status_page_severities(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    data = await client.get(f"/status_pages/{segment(status_page_id)}/severities", ctx=ctx)
    return list_response(data, "severities")


async def list_status_page_impacts(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    data = await client.get(f"/status_pages/{segment(status_page_id)}/impacts", ctx=ctx)
    return list_response(data, "impacts")


async def list_status_page_statuses(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    data = await client.get(f"/status_pages/{segment(status_page_id)}/statuses", ctx=ctx)
    return list_response(data, "statuses")


async def get_status_page_post(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    post_id = args.require_string("post_id")
    data = await client.get(f"/status_pages/{segment(status_page_id)}/posts/{segment(post_id)}", ctx=ctx)
    return entity_response(data, "post")


async def list_status_page_post_updates(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    post_id = args.require_string("post_id")
    data = await client.get(f"/status_pages/{segment(status_page_id)}/posts/{segment(post_id)}/post_updates", ctx=ctx)
    return list_response(data, "post_updates")


async def create_status_page_post(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    post = {
        "type": "status_page_post",
        "post_type": args.require_string("post_type"),
        "title": args.require_string("title"),
    }
    _status_and_severity(args, post)
    post.update(optional_fields(args, "starts_at", "ends_at"))

    data = await client.post(f"/status_pages/{segment(status_page_id)}/posts", {"post": post}, ctx=ctx)
    return entity_response(data, "post")


async def create_status_page_post_update(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    status_page_id = args.require_string("status_page_id")
    post_id = args.require_string("post_id")
    update = {"type": "status_page_post_update", "message": args.require_string("message")}
    _status_and_severity(args, update)
    notify = args.optional_bool("notify_subscribers")
    if notify is not None:
        update["notify_subscribers"] = notify

    data = await client.post(
        f"/status_pages/{segment(status_page_id)}/posts/{segment(post_id)}/post_updates",
        {"post_update": update},
        ctx=ctx,
    )
    return entity_response(data, "post_update")


READ_TOOLS = (
    ToolSpec(
        name="list_status_pages",
        title="List Status Pages",
        description=(
            "List public status pages. Status pages tell customers and stakeholders about "
            "service availability, incidents and maintenance windows."
        ),
        handler=list_status_pages,
        params=(limit_param(),),
    ),
    ToolSpec(
        name="list_status_page_severities",
        title="List Status Page Severities",
        description="List the severity levels configured on a status page; they set how critical a post looks.",
        handler=list_status_page_severities,
        params=(STATUS_PAGE_ID,),
    ),
    ToolSpec(
        name="list_status_page_impacts",
        title="List Status Page Impacts",
        description="List the impact levels of a status page, e.g. major outage or partial degradation.",
        handler=list_status_page_impacts,
        params=(STATUS_PAGE_ID,),
    ),
    ToolSpec(
        name="list_status_page_statuses",
        title="List Status Page Statuses",
        description="List the statuses a post can go through on a status page, e.g. investigating or resolved.",
        handler=list_status_page_statuses,
        params=(STATUS_PAGE_ID,),
    ),
    ToolSpec(
        name="get_status_page_post",
        title="Get Status Page Post",
        description="Get one status page post (incident or maintenance) with its status, severity and timeline.",
        handler=get_status_page_post,
        params=(STATUS_PAGE_ID, POST_ID),
    ),
    ToolSpec(
        name="list_status_page_post_updates",
        title="List Status Page Post Updates",
        description="List the updates published on a status page post, from detection to resolution.",
        handler=list_status_page_post_updates,
        params=(STATUS_PAGE_ID, POST_ID),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_status_page_post",
        title="Create Status Page Post",
        description=(
            "Publish an incident or maintenance post on a public status page. Use "
            "list_status_page_statuses and list_status_page_severities to find valid IDs."
        ),
        handler=create_status_page_post,
        read_only=False,
        params=(
            STATUS_PAGE_ID,
            string("post_type", "Kind of post", required=True, enum=("incident", "maintenance")),
            string("title", "Public title of the incident or maintenance", required=True),
            string("status_id", "Initial status ID (see list_status_page_statuses)"),
            string("severity_id", "Severity ID (see list_status_page_severities)"),
            string("starts_at", "Start in ISO 8601 format (e.g., '2024-01-15T09:00:00Z')"),
            string("ends_at", "Expected end in ISO 8601 format (e.g., '2024-01-15T11:00:00Z')"),
        ),
    ),
    ToolSpec(
        name="create_status_page_post_update",
        title="Add Status Page Update",
        description=(
            "Publish an update on an existing status page post, optionally changing its "
            "status or severity and notifying subscribers."
        ),
        handler=create_status_page_post_update,
        read_only=False,
        params=(
            STATUS_PAGE_ID,
            POST_ID,
            string("message", "Public update message", required=True),
            string("status_id", "New status ID (see list_status_page_statuses)"),
            string("severity_id", "New severity ID"),
            boolean("notify_subscribers", "Notify subscribers about this update (default false)"),
        ),
    ),
)
