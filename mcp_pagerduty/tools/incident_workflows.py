# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incident workflow operations for PagerDuty MCP"""

from mcp_pagerduty.api.client import PagerDutyClient
from mcp_pagerduty.context import RequestContext
from mcp_pagerduty.tools.arguments import Arguments
from mcp_pagerduty.tools.common import add_limit, entity_response, list_response, reference, scalar_params, segment
from mcp_pagerduty.tools.registry import ToolSpec, limit_param, string

WORKFLOW_ID = string("workflow_id", "The unique workflow ID (e.g., 'PWFLOW123')", required=True)


async def list_incident_workflows(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    params = scalar_params(args, "query")
    add_limit(params, args)
    data = await client.get("/incident_workflows", params=params, ctx=ctx)
    return list_response(data, "incident_workflows")


async def get_incident_workflow(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    workflow_id = args.require_string("workflow_id")
    data = await client.get(f"/incident_workflows/{segment(workflow_id)}", ctx=ctx)
    return entity_response(data, "incident_workflow")


async def start_incident_workflow(client: PagerDutyClient, args: Arguments, ctx: RequestContext) -> str:
    workflow_id = args.require_string("workflow_id")
    incident_id = args.require_string("incident_id")

    instance = {
        "incident": reference(incident_id, "incident_reference"),
        "workflow": reference(workflow_id, "incident_workflow_reference"),
    }
    data = await client.post(
        f"/incident_workflows/{segment(workflow_id)}/instances",
        {"incident_workflow_instance": instance},
        ctx=ctx,
    )
    return entity_response(data, "incident_workflow_instance")


READ_TOOLS = (
    ToolSpec(
        name="list_incident_workflows",
        title="List Incident Workflows",
        description=(
            "List incident workflows: automated sequences of actions that can run on an "
            "incident, such as opening a Slack channel or notifying stakeholders."
        ),
        handler=list_incident_workflows,
        params=(string("query", "Filter workflows by name (partial match)"), limit_param()),
    ),
    ToolSpec(
        name="get_incident_workflow",
        title="Get Incident Workflow",
        description="Get one incident workflow with its trigger conditions and configured steps.",
        handler=get_incident_workflow,
        params=(WORKFLOW_ID,),
    ),
)

WRITE_TOOLS = (
    ToolSpec(
        name="start_incident_workflow",
        title="Start Incident Workflow",
        description=(
            "Run an incident workflow on an incident by hand. The workflow executes its "
            "configured steps, e.g. creating a war room or running diagnostics."
        ),
        handler=start_incident_workflow,
        read_only=False,
        params=(
            WORKFLOW_ID,
            string("incident_id", "ID of the incident to run the workflow on (e.g., 'PABC123')", required=True),
        ),
    ),
)
