# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""
PagerDuty MCP Server

Assembles the tool catalog and the dispatcher. Read tools are always
registered; write tools only when the server is started with write tools
enabled. The decision is made once here and cannot change at runtime.
"""

import logging
from typing import Optional

import httpx

from mcp_pagerduty.__about__ import __version__
from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.config import ClientConfig, ServerConfig
from mcp_pagerduty.protocol import Dispatcher
from mcp_pagerduty.tools import DOMAIN_MODULES
from mcp_pagerduty.tools.registry import ToolCatalog

logger = logging.getLogger(__name__)

SERVER_NAME = "PagerDuty MCP Server"
SERVER_VERSION = __version__

MCP_SERVER_INSTRUCTIONS = """# PagerDuty MCP Server

You have access to a PagerDuty account through the tools below. When the user
asks about "their" resources, call get_user_data first and scope follow-up
requests with the returned user ID.

## Concepts

- Incidents: issues that need attention. Status is triggered (new),
  acknowledged (being worked on) or resolved. Urgency is high or low.
- Services: monitored applications or components. Incidents are opened on a
  service, and the service's escalation policy decides who is notified.
- Teams: groups of users. Services and escalation policies can belong to teams.
- Schedules: on-call rotations. Overrides temporarily replace the rotation.
- Escalation policies: the ordered levels of users and schedules to notify.
- Event orchestrations: rules that route and transform incoming events.

## Safety

- list_* and get_* tools only read data.
- create_*, update_*, manage_incidents, add_*, start_* and append_* change data.
- delete_team, remove_team_member and delete_alert_grouping_setting
  permanently remove data. ALWAYS confirm with the user before calling them.

## Common workflows

Investigating an incident: list_incidents (statuses=triggered,acknowledged),
get_incident, list_incident_notes, get_past_incidents, get_related_incidents,
list_incident_change_events.

Finding who is on call: list_oncalls with schedule_ids or
escalation_policy_ids, or list_schedule_users for a time range.

Responding: manage_incidents to acknowledge or resolve, add_note_to_incident
to record findings, add_responders to bring in help.

Service health: list_services, list_incidents filtered by service_ids,
list_service_change_events.
"""


def build_catalog(server_config: ServerConfig) -> ToolCatalog:
    """Register every read tool, plus the write tools when they are enabled."""
    catalog = ToolCatalog(allow_write=server_config.enable_write_tools)

    for module in DOMAIN_MODULES:
        catalog.extend(module.READ_TOOLS)

    if server_config.enable_write_tools:
        for module in DOMAIN_MODULES:
            catalog.extend(module.WRITE_TOOLS)

    logger.info(f"Registered {len(catalog)} tools")
    return catalog


def create_server(
    client_config: ClientConfig,
    server_config: ServerConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dispatcher:
    """Create and configure the PagerDuty MCP dispatcher."""
    if server_config.enable_write_tools:
        logger.warning("Write tools are ENABLED: the server can create, modify and delete PagerDuty data")
    else:
        logger.info("Write tools are disabled, serving read-only tools")

    client = PagerDutyClient(client_config, transport=transport)
    return Dispatcher(
        catalog=build_catalog(server_config),
        client=client,
        name=SERVER_NAME,
        version=SERVER_VERSION,
        instructions=MCP_SERVER_INSTRUCTIONS,
    )
