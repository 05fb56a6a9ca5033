# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cache backends used to persist provisioned tools between CI runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..constants import CACHE_DIR_NAME
from .base import MAX_KEY_LENGTH, CacheBackend, validate_key
from .providers import DirectoryCacheBackend

_CACHE_DIR_ENV_VAR: Final[str] = "CICOV_CACHE_DIR"
_TOOL_CACHE_ENV_VAR: Final[str] = "RUNNER_TOOL_CACHE"


@dataclass(frozen=True, slots=True)
class CacheBackendSettings:
    """Describe where the cache backend keeps its snapshots."""

    directory: Path
    root: Path


def resolve_cache_backend_settings(workspace: Path, *, env: Mapping[str, str]) -> CacheBackendSettings:
    """Return cache settings derived from ``env``.

    ``CICOV_CACHE_DIR`` wins, then a ``cicov-cache`` directory inside the
    runner tool cache, then ``~/.cache/cicov``.

    Args:
        workspace: CI workspace that snapshot paths are recorded relative to.
        env: Environment mapping consulted for overrides.

    Returns:
        CacheBackendSettings: Effective cache location.
    """

    explicit = env.get(_CACHE_DIR_ENV_VAR, "").strip()
    if explicit:
        return CacheBackendSettings(directory=Path(explicit).expanduser(), root=workspace)
    tool_cache = env.get(_TOOL_CACHE_ENV_VAR, "").strip()
    if tool_cache:
        return CacheBackendSettings(directory=Path(tool_cache) / CACHE_DIR_NAME, root=workspace)
    return CacheBackendSettings(directory=Path.home() / ".cache" / "cicov", root=workspace)


def create_cache_backend(settings: CacheBackendSettings) -> CacheBackend:
    """Build the directory-backed cache described by ``settings``."""

    return DirectoryCacheBackend(settings.directory, root=settings.root)


__all__ = [
    "MAX_KEY_LENGTH",
    "CacheBackend",
    "CacheBackendSettings",
    "DirectoryCacheBackend",
    "create_cache_backend",
    "resolve_cache_backend_settings",
    "validate_key",
]
