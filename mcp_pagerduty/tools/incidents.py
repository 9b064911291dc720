# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incident operations for PagerDuty MCP

Reference: https://developer.pagerduty.com/api-reference/9d0b4b12e36f9-list-incidents
"""

import logging
from datetime import datetime, timezone

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import (
    add_limit,
    csv_filters,
    entity_response,
    list_response,
    reference,
    scalar_params,
    segment,
    to_json,
)
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, number, string

logger = logging.getLogger(__name__)

INCIDENT_ID = string("incident_id", "The unique incident ID (e.g., 'PABC123')", required=True)


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


async def list_incidents(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "date_range", "since", "until")
    add_limit(params, args)
    filters = csv_filters(args, "statuses", "urgencies", "service_ids", "team_ids", "user_ids")

    data = await client.get("/incidents", params=params, array_params=filters, ctx=ctx)
    return list_response(data, "incidents")


async def get_incident(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    data = await client.get(f"/incidents/{segment(incident_id)}", ctx=ctx)
    return entity_response(data, "incident")


async def get_outlier_incident(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    params = scalar_params(args, "since")
    data = await client.get(f"/incidents/{segment(incident_id)}/outlier_incident", params=params, ctx=ctx)
    return to_json(data)


async def get_past_incidents(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    params = {}
    add_limit(params, args)
    data = await client.get(f"/incidents/{segment(incident_id)}/past_incidents", params=params, ctx=ctx)
    return to_json(data)


async def get_related_incidents(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    data = await client.get(f"/incidents/{segment(incident_id)}/related_incidents", ctx=ctx)
    return to_json(data)


async def list_incident_notes(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    data = await client.get(f"/incidents/{segment(incident_id)}/notes", ctx=ctx)
    return list_response(data, "notes")


async def create_incident(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    title = args.require_string("title")
    service_id = args.require_string("service_id")

    incident = {
        "type": "incident",
        "title": title,
        "service": reference(service_id, "service_reference"),
    }
    urgency = args.optional_string("urgency")
    if urgency:
        incident["urgency"] = urgency
    body = args.optional_string("body")
    if body:
        incident["body"] = {"type": "incident_body", "details": body}
    incident_key = args.optional_string("incident_key")
    if incident_key:
        incident["incident_key"] = incident_key

    data = await client.post("/incidents", {"incident": incident}, ctx=ctx)
    return entity_response(data, "incident")


async def manage_incidents(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    """Apply the same sparse change set to every incident in one PUT /incidents."""
    incident_ids = args.require_ids("incident_ids")
    status = args.optional_string("status")
    urgency = args.optional_string("urgency")
    assignee_id = args.optional_string("assignee_id")
    escalation_level = args.optional_number("escalation_level")

    incidents = []
    for incident_id in incident_ids:
        incident = {"type": "incident_reference", "id": incident_id}
        if status:
            incident["status"] = status
        if urgency:
            incident["urgency"] = urgency
        if escalation_level is not None and escalation_level > 0:
            incident["escalation_level"] = int(escalation_level)
        if assignee_id:
            incident["assignments"] = [
                {"at": _now(), "assignee": reference(assignee_id, "user_reference")},
            ]
        incidents.append(incident)

    logger.info(f"Updating {len(incidents)} incident(s)")
    data = await client.put("/incidents", {"incidents": incidents}, ctx=ctx)
    return list_response(data, "incidents")


async def add_responders(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    responder_ids = args.require_ids("responder_ids")

    request = {
        "responder_request_targets": [reference(rid, "user_reference") for rid in responder_ids],
    }
    message = args.optional_string("message")
    if message:
        request["message"] = message

    data = await client.post(f"/incidents/{segment(incident_id)}/responder_requests", request, ctx=ctx)
    return to_json(data)


async def add_note_to_incident(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    incident_id = args.require_string("incident_id")
    note = args.require_string("note")
    data = await client.post(f"/incidents/{segment(incident_id)}/notes", {"note": {"content": note}}, ctx=ctx)
    return entity_response(data, "note")


READ_TOOLS = (
    ToolSpec(
        name="list_incidents",
        title="List Incidents",
        description=(
            "List PagerDuty incidents with optional filters. Use it to find open incidents "
            "(triggered or acknowledged), review recent history, or narrow down to specific "
            "services, teams or assignees. To find similar historical incidents for one "
            "incident, use get_past_incidents instead."
        ),
        handler=list_incidents,
        params=(
            string(
                "statuses",
                "Filter by status. Comma-separated values (e.g., 'triggered,acknowledged')",
                enum=("triggered", "acknowledged", "resolved"),
            ),
            string("date_range", "Predefined date range", enum=("all", "past_month", "past_week")),
            string("since", "Start of the range in ISO 8601 format (e.g., '2024-01-15T10:00:00Z')"),
            string("until", "End of the range in ISO 8601 format (e.g., '2024-01-15T18:00:00Z')"),
            string(
                "urgencies",
                "Filter by urgency. Comma-separated values (e.g., 'high,low')",
                enum=("high", "low"),
            ),
            string("service_ids", "Comma-separated service IDs (e.g., 'PSVC1,PSVC2')"),
            string("team_ids", "Comma-separated team IDs (e.g., 'PTEAM1,PTEAM2')"),
            string("user_ids", "Comma-separated IDs of assigned users (e.g., 'PUSER1,PUSER2')"),
            limit_param("Maximum number of results to return (1-100, PagerDuty defaults to 25)"),
        ),
    ),
    ToolSpec(
        name="get_incident",
        title="Get Incident Details",
        description="Get one incident by ID, including its status, urgency, assignments and timestamps.",
        handler=get_incident,
        params=(INCIDENT_ID,),
    ),
    ToolSpec(
        name="get_outlier_incident",
        title="Get Outlier Analysis",
        description=(
            "Check whether an incident is unusual for its service compared with historical "
            "patterns. Returns PagerDuty's machine learning outlier analysis."
        ),
        handler=get_outlier_incident,
        params=(
            INCIDENT_ID,
            string("since", "Start of the historical window in ISO 8601 format (e.g., '2024-01-01T00:00:00Z')"),
        ),
    ),
    ToolSpec(
        name="get_past_incidents",
        title="Get Similar Past Incidents",
        description=(
            "Find historical incidents similar to this one to help with troubleshooting. "
            "Matching is based on alert patterns and metadata. For incidents happening at "
            "the same time, use get_related_incidents."
        ),
        handler=get_past_incidents,
        params=(INCIDENT_ID, limit_param("Maximum number of past incidents to return (1-100, default 5)")),
    ),
    ToolSpec(
        name="get_related_incidents",
        title="Get Related Incidents",
        description=(
            "Find incidents that are probably related to this one based on timing and "
            "service relationships. Useful for spotting widespread outages. For similar "
            "incidents from the past, use get_past_incidents."
        ),
        handler=get_related_incidents,
        params=(INCIDENT_ID,),
    ),
    ToolSpec(
        name="list_incident_notes",
        title="List Incident Notes",
        description=(
            "List the notes responders added to an incident: investigation details, status "
            "updates and resolution information."
        ),
        handler=list_incident_notes,
        params=(INCIDENT_ID,),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="create_incident",
        title="Create Incident",
        description=(
            "Open a new incident on a service by hand, for problems monitoring did not catch. "
            "Responders are notified according to the service's escalation policy."
        ),
        handler=create_incident,
        read_only=False,
        params=(
            string("title", "Short, descriptive incident title", required=True),
            string("service_id", "ID of the service to open the incident on (e.g., 'PSVC123')", required=True),
            string("urgency", "Incident urgency", enum=("high", "low")),
            string("body", "Details of the incident: symptoms, impact and any useful context"),
            string(
                "incident_key",
                "Deduplication key. Incidents with the same key on the same service are grouped.",
            ),
        ),
    ),
    ToolSpec(
        name="manage_incidents",
        title="Manage Incidents",
        description=(
            "Update one or more incidents at once: acknowledge, resolve, change urgency, "
            "reassign or escalate. Every listed incident receives the same changes. Status "
            "cannot be set back to 'triggered'; use create_incident for new incidents."
        ),
        handler=manage_incidents,
        read_only=False,
        params=(
            string("incident_ids", "Comma-separated incident IDs (e.g., 'PABC123,PDEF456')", required=True),
            string("status", "New status", enum=("acknowledged", "resolved")),
            string("urgency", "New urgency", enum=("high", "low")),
            string("assignee_id", "ID of the user to assign the incidents to (e.g., 'PUSER123')"),
            number("escalation_level", "Escalation level to move the incidents to", minimum=1),
        ),
    ),
    ToolSpec(
        name="add_responders",
        title="Add Responders",
        description=(
            "Ask additional users to help with an incident. Each user is notified with a "
            "request to join the response."
        ),
        handler=add_responders,
        read_only=False,
        params=(
            INCIDENT_ID,
            string("responder_ids", "Comma-separated user IDs to request (e.g., 'PUSER1,PUSER2')", required=True),
            string("message", "Why these responders are needed"),
        ),
    ),
    ToolSpec(
        name="add_note_to_incident",
        title="Add Incident Note",
        description=(
            "Record investigation progress, findings or resolution details on an incident. "
            "Notes are visible to every responder and kept in the incident history."
        ),
        handler=add_note_to_incident,
        read_only=False,
        params=(INCIDENT_ID, string("note", "Content of the note", required=True)),
    ),
)
