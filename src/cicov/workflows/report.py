# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Send clang-tidy results to Codacy."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .. import actions
from ..codacy import CodacyClient
from ..errors import ConfigError
from ..repository import resolve_root

if TYPE_CHECKING:
    from ..config import CIEnvironment, ReportSettings
    from .services import WorkflowServices

CLANG_TIDY_LOG_PATTERN: Final[str] = "clang-tidy-*.log"


def collect_clang_tidy_logs(binary_dir: Path) -> str:
    """Return the concatenated clang-tidy logs found directly in ``binary_dir``."""

    return "".join(
        path.read_text(encoding="utf-8", errors="replace") for path in sorted(binary_dir.glob(CLANG_TIDY_LOG_PATTERN))
    )


def normalize_issue_paths(payload: str) -> str:
    """Collapse doubled backslashes emitted by the converter into ``/``."""

    return payload.replace("\\\\", "/")


def run_report(
    settings: ReportSettings,
    ci: CIEnvironment,
    *,
    services: WorkflowServices,
    codacy: CodacyClient,
    env: Mapping[str, str],
) -> None:
    """Send clang-tidy issues and/or the final marker for the current commit.

    Args:
        settings: Validated workflow inputs.
        ci: CI job description.
        services: Provisioner, tool catalogue, command runner and logger.
        codacy: Client posting to the Codacy API.
        env: Environment for every child process.
    """

    mode = settings.mode
    tool: Path | None = None
    if mode.sends_results:
        with actions.group("Installing codacy-clang-tidy"):
            tool = services.provisioner.provision(services.catalog.codacy_clang_tidy())

    with actions.group(f"Sending {mode.value} code analysis to codacy"):
        if tool is not None:
            if settings.source_dir is None or settings.binary_dir is None:
                raise ConfigError(f"Mode '{mode.value}' requires source-dir and binary-dir")
            checkout = resolve_root(settings.source_dir, ci.workspace, logger=services.logger)
            logs = collect_clang_tidy_logs(settings.binary_dir)
            converted = services.runner(
                ["java", "-jar", str(tool)],
                cwd=checkout,
                env=env,
                capture_output=True,
                input_text=logs,
            )
            payload = normalize_issue_paths(converted.stdout or "")
            log_file = ci.temp_dir / "clang-tidy.json"
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text(payload, encoding="utf-8")
            codacy.send_issues(ci.repository, ci.sha, payload)
            services.logger.ok(f"Sent clang-tidy results for {ci.sha}")
        if mode.sends_commit:
            codacy.send_results_final(ci.repository, ci.sha)
            services.logger.ok(f"Marked analysis of {ci.sha} as final")


__all__ = ["collect_clang_tidy_logs", "normalize_issue_paths", "run_report"]
