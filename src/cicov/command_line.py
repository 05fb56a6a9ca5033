# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Split a configured command string into an argument vector.

The grammar is intentionally narrower than a POSIX shell. A token is a run of
pieces up to the next unescaped whitespace, where each piece is tried in
order:

* a double-quoted run ``"..."`` in which ``\\X`` escapes any character;
* a single-quoted run ``'...'`` with the same escaping rule;
* a regex literal ``/.../flags`` (flags drawn from ``gimy``) that must be
  followed by whitespace or the end of the string;
* a backslash followed by whitespace, which keeps the whitespace in the token;
* any other non-whitespace character, including a lone backslash.

Quotes are removed when the token is rendered, regex literals are kept
verbatim, and backslashes outside quotes are kept unless they escape
whitespace.
"""

from __future__ import annotations

import re
from typing import Final

_DOUBLE_QUOTED: Final[str] = r'"(?P<double>[^"\\]*(?:\\[\s\S][^"\\]*)*)"'
_SINGLE_QUOTED: Final[str] = r"'(?P<single>[^'\\]*(?:\\[\s\S][^'\\]*)*)'"
_REGEX_LITERAL: Final[str] = r"(?P<regex>/[^/\\]*(?:\\[\s\S][^/\\]*)*/[gimy]*)(?=\s|\Z)"
_ESCAPED_SPACE: Final[str] = r"\\(?P<space>\s)"
_PLAIN: Final[str] = r"(?P<plain>\S)"

_PIECE: Final[str] = "|".join((_DOUBLE_QUOTED, _SINGLE_QUOTED, _REGEX_LITERAL, _ESCAPED_SPACE, _PLAIN))
_PIECE_RE: Final[re.Pattern[str]] = re.compile(_PIECE)
_TOKEN_RE: Final[re.Pattern[str]] = re.compile(rf"(?:{_PIECE})+(?=\s|\Z)")
_QUOTED_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"\\([\s\S])")


def tokenize(command: str) -> list[str]:
    """Return the argument vector encoded in ``command``.

    Args:
        command: Command line as configured by the user.

    Returns:
        list[str]: Arguments in input order. Tokens that render to an empty
        string, such as ``""``, are omitted.
    """

    arguments: list[str] = []
    for match in _TOKEN_RE.finditer(command):
        rendered = _render_token(match.group(0))
        if rendered:
            arguments.append(rendered)
    return arguments


def _render_token(raw: str) -> str:
    """Return the argument value for a single raw token.

    Args:
        raw: Token text exactly as it appeared in the command string.

    Returns:
        str: Token with quotes and whitespace escapes resolved.
    """

    parts: list[str] = []
    position = 0
    while position < len(raw):
        piece = _PIECE_RE.match(raw, position)
        if piece is None:  # pragma: no cover - every token is composed of pieces
            parts.append(raw[position:])
            break
        parts.append(_render_piece(piece))
        position = piece.end()
    return "".join(parts)


def _render_piece(piece: re.Match[str]) -> str:
    kind = piece.lastgroup
    if kind in {"double", "single"}:
        return _QUOTED_ESCAPE_RE.sub(r"\1", piece.group(kind))
    if kind is None:  # pragma: no cover - all alternatives are named
        return piece.group(0)
    return piece.group(kind)


__all__ = ["tokenize"]
