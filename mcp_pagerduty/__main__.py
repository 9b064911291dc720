# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

from mcp_pagerduty import main

main()
