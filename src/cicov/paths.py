# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Separator-stable path normalisation helpers.

``posixpath.normpath`` and ``ntpath.normpath`` collapse redundant separators
and ``.``/``..`` segments but leave the foreign separator untouched, so each
helper performs an explicit substitution to guarantee a single canonical
form. Cache keys and report rewriting depend on that form being stable.
"""

from __future__ import annotations

import ntpath
import os
import posixpath
from os import PathLike
from typing import Final

_Pathish = str | PathLike[str]

_SEPARATORS: Final[str] = "/\\"


def to_posix(path: _Pathish) -> str:
    """Return ``path`` normalised with forward slashes only.

    Args:
        path: Path in either POSIX or Windows notation.

    Returns:
        str: Normalised path using ``/`` as the only separator.
    """

    return posixpath.normpath(os.fspath(path).replace("\\", "/"))


def to_win32(path: _Pathish) -> str:
    """Return ``path`` normalised with backslashes only."""

    return ntpath.normpath(os.fspath(path)).replace("/", "\\")


def to_native(path: _Pathish) -> str:
    """Return ``path`` normalised for the separator of the running platform."""

    if os.sep == "/":
        return to_posix(path)
    return to_win32(path)


def with_trailing_separator(path: _Pathish, sep: str = os.sep) -> str:
    """Return ``path`` followed by exactly one ``sep``.

    Args:
        path: Directory path that may already end with a separator.
        sep: Separator appended to the stripped path.

    Returns:
        str: ``path`` without trailing separators plus a single ``sep``.
    """

    return os.fspath(path).rstrip(_SEPARATORS) + sep


__all__ = ["to_native", "to_posix", "to_win32", "with_trailing_separator"]
