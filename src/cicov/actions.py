# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GitHub Actions workflow commands."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

import typer


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def mask_secret(value: str) -> None:
    """Ask the runner to redact ``value`` from all subsequent log output."""

    if value:
        typer.echo(f"::add-mask::{_escape_data(value)}")


def error(message: str) -> None:
    """Emit an error annotation for ``message``."""

    typer.echo(f"::error::{_escape_data(message)}")


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold the output produced inside the block into a collapsible group."""

    typer.echo(f"::group::{_escape_data(title)}")
    try:
        yield
    finally:
        typer.echo("::endgroup::")


def add_path(directory: Path, *, env: Mapping[str, str], path_file: Path | None) -> dict[str, str]:
    """Prepend ``directory`` to ``PATH`` for this job.

    The directory is appended to the runner's ``GITHUB_PATH`` file so later
    steps see it, and a copy of ``env`` with the updated ``PATH`` is returned
    for the commands of the current step.

    Args:
        directory: Directory holding executables.
        env: Environment of the current step.
        path_file: ``GITHUB_PATH`` file, ``None`` outside of GitHub Actions.

    Returns:
        dict[str, str]: Copy of ``env`` with ``directory`` first on ``PATH``.
    """

    if path_file is not None:
        with path_file.open("a", encoding="utf-8") as handle:
            handle.write(f"{directory}{os.linesep}")
    updated = dict(env)
    current = updated.get("PATH", "")
    updated["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)
    return updated


__all__ = ["add_path", "error", "group", "mask_secret"]
