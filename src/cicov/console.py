# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console selection for CI job logs.

Runner logs are captured through a pipe, so ``isatty`` is false on CI even
though the log viewer renders ANSI escapes. Colour is therefore enabled for
interactive terminals and for GitHub Actions logs, and disabled whenever
``NO_COLOR`` is set.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def colour_capable(env: Mapping[str, str] | None = None) -> bool:
    """Return whether coloured output will be rendered for the current job.

    Args:
        env: Environment mapping to inspect; defaults to ``os.environ``.

    Returns:
        bool: ``True`` for terminals and GitHub Actions logs unless
        ``NO_COLOR`` is present.
    """

    variables = os.environ if env is None else env
    if "NO_COLOR" in variables:
        return False
    return detect_tty() or variables.get("GITHUB_ACTIONS", "").lower() == "true"


@dataclass(frozen=True, slots=True)
class _ConsoleKey:
    color: bool
    emoji: bool
    terminal: bool


class ConsoleCache:
    """Hand out one Rich console per colour, emoji and terminal combination."""

    def __init__(self) -> None:
        self._consoles: dict[_ConsoleKey, Console] = {}

    def console_for(self, *, color: bool, emoji: bool) -> Console:
        """Return the console rendering with the requested presentation flags.

        Coloured consoles are forced into terminal mode so escapes reach the
        runner log even when stdout is a pipe.
        """

        key = _ConsoleKey(color=color, emoji=emoji, terminal=detect_tty())
        console = self._consoles.get(key)
        if console is None:
            console = Console(
                color_system="standard" if color else None,
                force_terminal=color or key.terminal,
                no_color=not color,
                emoji=emoji,
                highlight=False,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console

    def reset(self) -> None:
        """Forget cached consoles, e.g. after stdout was replaced."""

        self._consoles.clear()


@lru_cache(maxsize=1)
def console_cache() -> ConsoleCache:
    """Return the process-wide :class:`ConsoleCache`."""

    return ConsoleCache()


__all__ = ["ConsoleCache", "colour_capable", "console_cache", "detect_tty"]
