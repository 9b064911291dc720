"""Tests for the tool catalog: registration rules, write policy and schemas."""

import pytest

from mcp_pagerduty.config import ServerConfig
from mcp_pagerduty.context import DEFAULT_CONTEXT
from mcp_pagerduty.server import build_catalog
from mcp_pagerduty.tools.arguments import Arguments, ToolArgumentError
from mcp_pagerduty.tools.registry import ToolCatalog, ToolSpec, limit_param, string

READ_TOOL_NAMES = {
    "list_incidents",
    "get_incident",
    "get_outlier_incident",
    "get_past_incidents",
    "get_related_incidents",
    "list_incident_notes",
    "list_services",
    "get_service",
    "list_teams",
    "get_team",
    "list_team_members",
    "get_user_data",
    "list_users",
    "list_schedules",
    "get_schedule",
    "list_schedule_users",
    "list_oncalls",
    "list_escalation_policies",
    "get_escalation_policy",
    "list_event_orchestrations",
    "get_event_orchestration",
    "get_event_orchestration_router",
    "get_event_orchestration_global",
    "get_event_orchestration_service",
    "list_incident_workflows",
    "get_incident_workflow",
    "list_change_events",
    "get_change_event",
    "list_service_change_events",
    "list_incident_change_events",
    "list_alert_grouping_settings",
    "get_alert_grouping_setting",
    "list_status_pages",
    "list_status_page_severities",
    "list_status_page_impacts",
    "list_status_page_statuses",
    "get_status_page_post",
    "list_status_page_post_updates",
}

WRITE_TOOL_NAMES = {
    "create_incident",
    "manage_incidents",
    "add_responders",
    "add_note_to_incident",
    "create_service",
    "update_service",
    "create_team",
    "update_team",
    "delete_team",
    "add_team_member",
    "remove_team_member",
    "create_schedule",
    "create_schedule_override",
    "update_schedule",
    "update_event_orchestration_router",
    "append_event_orchestration_router_rule",
    "start_incident_workflow",
    "create_alert_grouping_setting",
    "update_alert_grouping_setting",
    "delete_alert_grouping_setting",
    "create_status_page_post",
    "create_status_page_post_update",
}

DESTRUCTIVE_TOOL_NAMES = {"delete_team", "remove_team_member", "delete_alert_grouping_setting"}

# Valid placeholder values for required parameters
PLACEHOLDERS = {"config": '{"orchestration_path": {"sets": []}}'}


async def _noop(client, args, ctx):
    return "ok"


@pytest.fixture
def full_catalog():
    return build_catalog(ServerConfig(enable_write_tools=True))


class TestCatalogContents:
    """Tests for which tools each mode registers."""

    def test_read_only_mode(self):
        """Test that a read-only catalog holds exactly the read tools."""
        catalog = build_catalog(ServerConfig(enable_write_tools=False))
        assert set(catalog.names()) == READ_TOOL_NAMES
        assert len(catalog) == 38

    def test_write_mode(self, full_catalog):
        """Test that enabling writes adds exactly the write tools."""
        assert set(full_catalog.names()) == READ_TOOL_NAMES | WRITE_TOOL_NAMES
        assert len(full_catalog) == 60

    def test_descriptor_names_are_unique(self, full_catalog):
        names = [tool.name for tool in full_catalog.list_tools()]
        assert len(names) == len(set(names))

    def test_read_annotations(self, full_catalog):
        for spec in full_catalog:
            annotations = spec.to_tool().annotations
            assert annotations.title == spec.title
            assert annotations.readOnlyHint is (spec.name in READ_TOOL_NAMES)

    def test_destructive_annotations(self, full_catalog):
        """Test that exactly the irreversible tools are flagged destructive."""
        flagged = {
            spec.name for spec in full_catalog if spec.to_tool().annotations.destructiveHint is True
        }
        assert flagged == DESTRUCTIVE_TOOL_NAMES

    def test_idempotent_annotations(self, full_catalog):
        for spec in full_catalog:
            if spec.verb in ("update", "delete", "remove") or spec.name == "add_team_member":
                assert spec.to_tool().annotations.idempotentHint is True, spec.name


class TestRegistrationRules:
    """Tests for the checks ToolCatalog.add enforces."""

    def test_duplicate_name(self):
        catalog = ToolCatalog()
        spec = ToolSpec(name="get_thing", title="Get Thing", description="d", handler=_noop)
        catalog.add(spec)
        with pytest.raises(ValueError, match="Duplicate tool name"):
            catalog.add(spec)

    def test_unknown_verb(self):
        with pytest.raises(ValueError, match="known verb"):
            ToolCatalog().add(ToolSpec(name="fetch_thing", title="t", description="d", handler=_noop))

    def test_write_verb_marked_read_only(self):
        with pytest.raises(ValueError, match="marked read-only"):
            ToolCatalog(allow_write=True).add(
                ToolSpec(name="delete_thing", title="t", description="d", handler=_noop)
            )

    def test_read_verb_marked_write(self):
        with pytest.raises(ValueError, match="marked write-capable"):
            ToolCatalog(allow_write=True).add(
                ToolSpec(name="get_thing", title="t", description="d", handler=_noop, read_only=False)
            )

    def test_read_only_catalog_cannot_be_escalated(self):
        """Test that a read-only catalog refuses write tools outright."""
        catalog = ToolCatalog(allow_write=False)
        with pytest.raises(ValueError, match="read-only catalog"):
            catalog.add(
                ToolSpec(name="create_thing", title="t", description="d", handler=_noop, read_only=False)
            )
        assert "create_thing" not in catalog

    def test_input_schema(self):
        spec = ToolSpec(
            name="list_things",
            title="List Things",
            description="d",
            handler=_noop,
            params=(string("thing_id", "id", required=True), limit_param()),
        )
        schema = spec.input_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["thing_id"]
        assert schema["properties"]["limit"] == {
            "type": "number",
            "description": "Maximum number of results to return (1-100)",
            "minimum": 1,
            "maximum": 100,
        }

    def test_schema_without_required(self):
        spec = ToolSpec(name="get_user_data", title="t", description="d", handler=_noop)
        assert "required" not in spec.input_schema()


def _required_arguments(spec, omit=None):
    return {name: PLACEHOLDERS.get(name, "X1") for name in spec.required if name != omit}


class TestDeclaredRequiredParameters:
    """Declared required parameters must match what the handlers reject."""

    @pytest.mark.asyncio
    async def test_each_required_parameter_is_enforced(self, full_catalog, pd_client):
        for spec in full_catalog:
            for name in spec.required:
                with pytest.raises(ToolArgumentError, match=f"{name} is required"):
                    await spec.handler(pd_client, Arguments(_required_arguments(spec, omit=name)), DEFAULT_CONTEXT)

    @pytest.mark.asyncio
    async def test_required_parameters_are_sufficient(self, full_catalog, pd_client, fake_pd):
        """Test that no handler demands a parameter it does not declare."""
        for spec in full_catalog:
            result = await spec.handler(pd_client, Arguments(_required_arguments(spec)), DEFAULT_CONTEXT)
            assert isinstance(result, str), spec.name
        assert len(fake_pd.requests) >= len(full_catalog)
