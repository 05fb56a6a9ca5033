# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate the repository root that report paths are made relative to."""

from __future__ import annotations

from pathlib import Path

from .constants import VCS_MARKER
from .errors import RepositoryRootError
from .logging import StatusLogger


def resolve_root(
    start_path: Path,
    workspace_path: Path,
    *,
    marker: str = VCS_MARKER,
    logger: StatusLogger | None = None,
) -> Path:
    """Return the closest directory at or above ``start_path`` holding ``marker``.

    The workspace is an acceptable root even without a marker, so the walk
    stops there before declaring failure.

    Args:
        start_path: Directory the walk starts from, usually the source dir.
        workspace_path: CI checkout directory used as a fallback root.
        marker: Name of the version-control marker entry.
        logger: Optional logger announcing which kind of root was chosen.

    Returns:
        Path: Directory containing ``marker`` or ``workspace_path``.

    Raises:
        RepositoryRootError: If the filesystem root is reached without a match.
    """

    current = start_path
    while current != workspace_path and not (current / marker).exists():
        parent = current.parent
        if parent == current:
            raise RepositoryRootError(start_path, current)
        current = parent

    if logger is not None:
        if (current / marker).exists():
            logger.info(f"Found Git repository at {current}")
        else:
            logger.info(f"Assume repository root as {current}")
    return current


__all__ = ["resolve_root"]
