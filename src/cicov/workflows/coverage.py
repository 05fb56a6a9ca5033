# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collect C++ coverage with OpenCppCoverage and publish a portable report."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from .. import actions
from ..command_line import tokenize
from ..constants import CODECOV_UPLOADER_URL
from ..coverage_report import rewrite_report_file
from ..paths import to_posix, with_trailing_separator
from ..repository import resolve_root
from ..tools import CodacyReporter

if TYPE_CHECKING:
    from ..config import CIEnvironment, CoverageSettings
    from .services import WorkflowServices


def build_opencppcoverage_args(
    tool: Path,
    *,
    source_dir: Path,
    binary_dir: Path,
    coverage_file: Path,
    command: list[str],
) -> list[str]:
    """Return the OpenCppCoverage invocation wrapping ``command``."""

    return [
        str(tool),
        f"--modules={with_trailing_separator(binary_dir)}",
        f"--excluded_modules={with_trailing_separator(binary_dir / 'vcpkg_installed')}",
        f"--sources={with_trailing_separator(source_dir)}",
        f"--excluded_sources={with_trailing_separator(source_dir / 'test')}",
        f"--working_dir={binary_dir}",
        "--cover_children",
        f"--export_type=cobertura:{coverage_file}",
        "--",
        *command,
    ]


def run_coverage(
    settings: CoverageSettings,
    ci: CIEnvironment,
    *,
    services: WorkflowServices,
    env: Mapping[str, str],
) -> Path:
    """Run the configured command under OpenCppCoverage and upload the report.

    Args:
        settings: Validated workflow inputs.
        ci: CI job description.
        services: Provisioner, tool catalogue, command runner and logger.
        env: Environment for every child process.

    Returns:
        Path: Rewritten Cobertura report.
    """

    logger = services.logger
    with actions.group("Installing OpenCppCoverage"):
        tool = services.provisioner.provision(services.catalog.opencppcoverage())
        step_env = actions.add_path(tool.parent, env=env, path_file=ci.path_file)

    checkout = resolve_root(settings.source_dir, ci.workspace, logger=logger)

    reporter: CodacyReporter | None = None
    if settings.codacy_token:
        with actions.group("Loading codacy coverage reporter"):
            reporter = services.catalog.codacy_reporter()
            if reporter.cache_hit:
                logger.info(".codacy-coverage is found in cache")

    coverage_file = settings.binary_dir / f"coverage-{ci.repo_name}.xml"
    with actions.group(f"Getting code coverage for {settings.command}"):
        arguments = build_opencppcoverage_args(
            tool,
            source_dir=settings.source_dir,
            binary_dir=settings.binary_dir,
            coverage_file=coverage_file,
            command=tokenize(settings.command),
        )
        services.runner(arguments, cwd=settings.binary_dir, env=step_env)
        rewrite_report_file(
            coverage_file,
            binary_dir=str(settings.binary_dir),
            source_dir=str(settings.source_dir),
            repo_root=str(checkout),
        )

    if settings.codecov:
        with actions.group("Sending coverage to codecov"):
            # bash cannot handle drive letters, so the report is addressed relative to the checkout
            report = to_posix(os.path.relpath(coverage_file, checkout))
            services.runner(
                ["bash", "-c", f'bash <(curl -sS {CODECOV_UPLOADER_URL}) -Z -f "{report}"'],
                cwd=checkout,
                env=step_env,
            )

    if reporter is not None:
        with actions.group("Sending coverage to codacy"):
            _send_to_codacy(reporter, coverage_file, settings=settings, ci=ci, services=services, env=step_env)

    logger.ok(f"Coverage report written to {coverage_file}")
    return coverage_file


def _send_to_codacy(
    reporter: CodacyReporter,
    coverage_file: Path,
    *,
    settings: CoverageSettings,
    ci: CIEnvironment,
    services: WorkflowServices,
    env: Mapping[str, str],
) -> None:
    # the reporter downloads into .codacy-coverage below its working directory
    temp_dir = reporter.script.parent
    report = to_posix(os.path.relpath(coverage_file, temp_dir))
    script = to_posix(os.path.relpath(reporter.script, temp_dir))
    services.runner(
        [
            "bash",
            "-c",
            f"./{script} report -r '{report}' -l CPP -t {settings.codacy_token} --commit-uuid {ci.sha}",
        ],
        cwd=temp_dir,
        env=env,
    )
    if not reporter.cache_hit and services.provisioner.save([reporter.cache_dir], reporter.cache_key):
        services.logger.info("Added .codacy-coverage to cache")


__all__ = ["build_opencppcoverage_args", "run_coverage"]
