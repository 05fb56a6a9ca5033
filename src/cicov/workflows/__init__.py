# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""End-to-end CI workflows built from the cicov components."""

from __future__ import annotations

from .coverage import build_opencppcoverage_args, run_coverage
from .report import run_report
from .services import WorkflowServices

__all__ = ["WorkflowServices", "build_opencppcoverage_args", "run_coverage", "run_report"]
