# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, service wiring)."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager

import typer

from .. import actions
from ..cache import create_cache_backend, resolve_cache_backend_settings
from ..config import CIEnvironment
from ..downloads import HttpDownloader
from ..errors import CicovError
from ..logging import StatusLogger
from ..process_utils import run_command
from ..provisioning import ArtifactProvisioner
from ..releases import GitHubReleaseClient
from ..tools import ToolCatalog
from ..workflows import WorkflowServices

FAILURE_EXIT_CODE = 1


def build_cli_logger(*, emoji: bool) -> StatusLogger:
    """Return a logger honouring the CLI emoji flag; colour follows the TTY."""

    return StatusLogger(use_emoji=emoji)


@contextmanager
def cli_errors(logger: StatusLogger) -> Iterator[None]:
    """Turn fatal cicov errors into a single message and a failing exit code.

    Raises:
        typer.Exit: With :data:`FAILURE_EXIT_CODE` when the block fails.
    """

    try:
        yield
    except (CicovError, OSError) as exc:
        message = str(exc)
        logger.fail(message)
        actions.error(message)
        raise typer.Exit(code=FAILURE_EXIT_CODE) from exc


def build_workflow_services(
    ci: CIEnvironment,
    *,
    env: Mapping[str, str],
    github_token: str,
    logger: StatusLogger,
) -> WorkflowServices:
    """Wire the default collaborators for a workflow run."""

    cache = create_cache_backend(resolve_cache_backend_settings(ci.workspace, env=env))
    provisioner = ArtifactProvisioner(cache=cache, logger=logger)
    catalog = ToolCatalog(
        releases=GitHubReleaseClient(github_token),
        downloader=HttpDownloader(),
        provisioner=provisioner,
        temp_dir=ci.temp_dir,
        runner=run_command,
        env=env,
    )
    return WorkflowServices(provisioner=provisioner, catalog=catalog, runner=run_command, logger=logger)


__all__ = ["FAILURE_EXIT_CODE", "build_cli_logger", "build_workflow_services", "cli_errors"]
