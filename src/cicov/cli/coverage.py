# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command collecting C++ coverage with OpenCppCoverage."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from .. import actions
from ..config import ActionInputs, CIEnvironment, load_coverage_settings
from ..workflows import run_coverage
from . import shared


def coverage_command(
    command: Annotated[str | None, typer.Option("--command", help="Test command run under OpenCppCoverage.")] = None,
    source_dir: Annotated[
        str | None, typer.Option("--source-dir", help="Source directory relative to the workspace.")
    ] = None,
    binary_dir: Annotated[
        str | None, typer.Option("--binary-dir", help="Build output directory relative to the workspace.")
    ] = None,
    codecov: Annotated[
        bool | None, typer.Option("--codecov/--no-codecov", help="Upload the report to codecov.")
    ] = None,
    codacy_token: Annotated[
        str | None, typer.Option("--codacy-token", help="Codacy project token; enables the codacy upload.")
    ] = None,
    github_token: Annotated[
        str | None, typer.Option("--github-token", help="Token used to query release metadata.")
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix messages with emoji.")] = False,
) -> None:
    """Collect coverage for a test command and publish a portable report.

    Options that are omitted fall back to the matching action inputs.
    """

    env = dict(os.environ)
    logger = shared.build_cli_logger(emoji=emoji)
    with shared.cli_errors(logger):
        ci = CIEnvironment.from_env(env, cwd=Path.cwd())
        settings = load_coverage_settings(
            ActionInputs(env),
            ci,
            command=command,
            source_dir=source_dir,
            binary_dir=binary_dir,
            codecov=codecov,
            codacy_token=codacy_token,
            github_token=github_token,
        )
        actions.mask_secret(settings.github_token)
        actions.mask_secret(settings.codacy_token)
        services = shared.build_workflow_services(ci, env=env, github_token=settings.github_token, logger=logger)
        run_coverage(settings, ci, services=services, env=env)


__all__ = ["coverage_command"]
