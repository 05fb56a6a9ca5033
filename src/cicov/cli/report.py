# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command sending clang-tidy analysis results to Codacy."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from .. import actions
from ..codacy import CodacyClient
from ..config import ActionInputs, CIEnvironment, load_report_settings
from ..workflows import run_report
from . import shared


def report_command(
    mode: Annotated[str | None, typer.Option("--mode", help="One of 'full', 'partial' or 'final'.")] = None,
    codacy_token: Annotated[str | None, typer.Option("--codacy-token", help="Codacy project token.")] = None,
    github_token: Annotated[
        str | None, typer.Option("--github-token", help="Token used to query release metadata.")
    ] = None,
    source_dir: Annotated[
        str | None, typer.Option("--source-dir", help="Source directory relative to the workspace.")
    ] = None,
    binary_dir: Annotated[
        str | None, typer.Option("--binary-dir", help="Directory holding clang-tidy-*.log files.")
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix messages with emoji.")] = False,
) -> None:
    """Send clang-tidy results and/or the final marker to Codacy."""

    env = dict(os.environ)
    logger = shared.build_cli_logger(emoji=emoji)
    with shared.cli_errors(logger):
        ci = CIEnvironment.from_env(env, cwd=Path.cwd())
        settings = load_report_settings(
            ActionInputs(env),
            ci,
            mode=mode,
            codacy_token=codacy_token,
            github_token=github_token,
            source_dir=source_dir,
            binary_dir=binary_dir,
        )
        actions.mask_secret(settings.codacy_token)
        actions.mask_secret(settings.github_token)
        services = shared.build_workflow_services(ci, env=env, github_token=settings.github_token, logger=logger)
        run_report(settings, ci, services=services, codacy=CodacyClient(settings.codacy_token), env=env)


__all__ = ["report_command"]
