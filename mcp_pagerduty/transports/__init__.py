# Copyright 2025 CNOE Contributors
# SPDX-License-Identifier: Apache-2.0

"""Front doors for the dispatcher.

Import the submodule you need (``transports.stdio`` or ``transports.http``);
the HTTP one builds the Starlette app and uvicorn runner.
"""
