# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer helpers producing alphabetically sorted option listings."""

from __future__ import annotations

from typing import Any

import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup


def _sort_key(param: Parameter) -> str:
    """Return the long option name of ``param`` without dashes."""

    names = [*getattr(param, "opts", ()), *getattr(param, "secondary_opts", ())]
    long_names = [name for name in names if name.startswith("--")]
    primary = long_names[0] if long_names else (names[0] if names else param.name or "")
    return primary.lstrip("-").lower()


class SortedTyperCommand(TyperCommand):
    """Typer command that renders its options sorted by long name."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        records = []
        for param in sorted(self.get_params(ctx), key=_sort_key):
            record = param.get_help_record(ctx)
            if record is not None:
                records.append(record)
        if records:
            with formatter.section("Options"):
                formatter.write_dl(records)


class SortedTyperGroup(TyperGroup):
    """Typer group whose commands default to :class:`SortedTyperCommand`."""

    command_class = SortedTyperCommand


class SortedTyper(typer.Typer):
    """Typer application registering commands with sorted help output."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("cls", SortedTyperGroup)
        super().__init__(*args, **kwargs)

    def command(self, name: str | None = None, *, cls: type[TyperCommand] | None = None, **kwargs: Any) -> Any:
        return super().command(name, cls=cls or SortedTyperCommand, **kwargs)


def create_typer(**kwargs: Any) -> SortedTyper:
    """Return a :class:`SortedTyper` configured with ``kwargs``."""

    kwargs.setdefault("no_args_is_help", True)
    kwargs.setdefault("add_completion", False)
    return SortedTyper(**kwargs)


__all__ = ["SortedTyper", "SortedTyperCommand", "SortedTyperGroup", "create_typer"]
