# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

from .coverage import coverage_command
from .report import report_command
from .typer_ext import create_typer

app = create_typer(name="cicov", help="Coverage and static analysis helpers for CI jobs.")
app.command("coverage")(coverage_command)
app.command("report")(report_command)


def main() -> None:
    """Run the cicov CLI."""

    app()


__all__ = ["app", "main"]
