# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Status messages for CI logs with optional colour and emoji prefixes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

from rich.text import Text

from .console import colour_capable, console_cache

Level = Literal["info", "ok", "warn", "fail"]


@dataclass(frozen=True, slots=True)
class _LevelStyle:
    symbol: str
    style: str


_LEVEL_STYLES: Final[dict[Level, _LevelStyle]] = {
    "info": _LevelStyle("ℹ️ ", "cyan"),
    "ok": _LevelStyle("✅ ", "green"),
    "warn": _LevelStyle("⚠️ ", "yellow"),
    "fail": _LevelStyle("❌ ", "bold red"),
}


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def emit(level: Level, message: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``message`` with the prefix and style registered for ``level``.

    Args:
        level: Severity name selecting prefix and style.
        message: Text to print.
        use_emoji: Prefix the message with the level's emoji.
        use_color: Explicit colour flag; ``None`` detects terminals and CI logs.
    """

    styling = _LEVEL_STYLES[level]
    color = colour_capable() if use_color is None else use_color
    text = Text(f"{emoji(styling.symbol, use_emoji)}{message}")
    if color:
        text.stylize(styling.style)
    console_cache().console_for(color=color, emoji=use_emoji).print(text)


@dataclass(slots=True)
class StatusLogger:
    """Status logger injected into the provisioner and the workflows.

    Tests substitute any object exposing the same four methods.
    """

    use_emoji: bool = False
    use_color: bool | None = None

    def info(self, message: str) -> None:
        emit("info", message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        emit("ok", message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        emit("warn", message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        emit("fail", message, use_emoji=self.use_emoji, use_color=self.use_color)


__all__ = ["Level", "StatusLogger", "emit", "emoji"]
