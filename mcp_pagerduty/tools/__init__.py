# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""PagerDuty tool modules. Each exposes ``READ_TOOLS`` and ``WRITE_TOOLS``."""

from mcp_pagerduty.tools import (
    alert_grouping,
    change_events,
    escalation_policies,
    event_orchestrations,
    incident_workflows,
    incidents,
    oncalls,
    schedules,
    services,
    status_pages,
    teams,
    users,
)

DOMAIN_MODULES = (
    incidents,
    services,
    teams,
    users,
    schedules,
    oncalls,
    escalation_policies,
    event_orchestrations,
    incident_workflows,
    change_events,
    alert_grouping,
    status_pages,
)
