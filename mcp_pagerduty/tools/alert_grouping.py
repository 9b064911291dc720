# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Alert grouping settings for PagerDuty MCP"""

import logging

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, csv_filters, entity_response, list_response, reference, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, number, string

logger = logging.getLogger(__name__)

GROUPING_TYPES = ("time", "intelligent", "content_based")

SETTING_ID = string("setting_id", "The unique alert grouping setting ID", required=True)


async def list_alert_grouping_settings(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = {}
    add_limit(params, args)
    data = await client.get(
        "/alert_grouping_settings", params=params, array_params=csv_filters(args, "service_ids"), ctx=ctx
    )
    return list_response(data, "alert_grouping_settings")


async def get_alert_grouping_setting(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    setting_id = args.require_string("setting_id")
    data = await client.get(f"/alert_grouping_settings/{segment(setting_id)}", ctx=ctx)
    return entity_response(data, "alert_grouping_setting")


async def create_alert_grouping_setting(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    name = args.require_string("name")
    service_ids = args.require_ids("service_ids")
    grouping_type = args.require_string("type")

    config = {"type": grouping_type}
    timeout = args.optional_number("timeout")
    if timeout is not None:
        config["timeout"] = int(timeout)

    setting = {
        "type": "alert_grouping_setting",
        "name": name,
        "services": [reference(sid, "service_reference") for sid in service_ids],
        "config": config,
    }
    data = await client.post("/alert_grouping_settings", {"alert_grouping_setting": setting}, ctx=ctx)
    return entity_response(data, "alert_grouping_setting")


async def update_alert_grouping_setting(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    setting_id = args.require_string("setting_id")

    setting = {"type": "alert_grouping_setting"}
    name = args.optional_string("name")
    if name:
        setting["name"] = name

    config = {}
    grouping_type = args.optional_string("type")
    if grouping_type:
        config["type"] = grouping_type
    timeout = args.optional_number("timeout")
    if timeout is not None:
        config["timeout"] = int(timeout)
    if config:
        setting["config"] = config

    data = await client.put(f"/alert_grouping_settings/{segment(setting_id)}", {"alert_grouping_setting": setting}, ctx=ctx)
    return entity_response(data, "alert_grouping_setting")


async def delete_alert_grouping_setting(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    setting_id = args.require_string("setting_id")
    logger.warning(f"Deleting alert grouping setting {setting_id}")
    await client.delete(f"/alert_grouping_settings/{segment(setting_id)}", ctx=ctx)
    return f"Alert grouping setting {setting_id} deleted successfully"


READ_TOOLS = (
    ToolSpec(
        name="list_alert_grouping_settings",
        title="List Alert Grouping Settings",
        description=(
            "List alert grouping settings. Alert grouping merges related alerts into one "
            "incident to cut noise; grouping can be time based, intelligent (ML) or content based."
        ),
        handler=list_alert_grouping_settings,
        params=(string("service_ids", "Comma-separated service IDs (e.g., 'PSVC1,PSVC2')"), limit_param()),
    ),
    ToolSpec(
        name="get_alert_grouping_setting",
        title="Get Alert Grouping Setting",
        description="Get one alert grouping setting with its grouping type and the services it applies to.",
        handler=get_alert_grouping_setting,
        params=(SETTING_ID,),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_alert_grouping_setting",
        title="Create Alert Grouping Setting",
        description=(
            "Create an alert grouping setting for one or more services. Use 'time' for a "
            "fixed time window, 'intelligent' for ML grouping or 'content_based' to group on "
            "matching fields."
        ),
        handler=create_alert_grouping_setting,
        read_only=False,
        params=(
            string("name", "Name of the setting", required=True),
            string("service_ids", "Comma-separated IDs of the services to apply it to (e.g., 'PSVC1,PSVC2')", required=True),
            string("type", "Grouping strategy", required=True, enum=GROUPING_TYPES),
            number("timeout", "Grouping window in minutes, 'time' type only (default 5)", minimum=1, maximum=1440),
        ),
    ),
    ToolSpec(
        name="update_alert_grouping_setting",
        title="Update Alert Grouping Setting",
        description="Rename an alert grouping setting or change its strategy or timeout.",
        handler=update_alert_grouping_setting,
        read_only=False,
        idempotent=True,
        params=(
            SETTING_ID,
            string("name", "New name"),
            string("type", "New grouping strategy", enum=GROUPING_TYPES),
            number("timeout", "New grouping window in minutes, 'time' type only", minimum=1, maximum=1440),
        ),
    ),
    ToolSpec(
        name="delete_alert_grouping_setting",
        title="Delete Alert Grouping Setting",
        description=(
            "WARNING: DESTRUCTIVE. Permanently delete an alert grouping setting. The services "
            "it covered fall back to their default grouping behaviour."
        ),
        handler=delete_alert_grouping_setting,
        read_only=False,
        destructive=True,
        idempotent=True,
        params=(SETTING_ID,),
    ),
)
