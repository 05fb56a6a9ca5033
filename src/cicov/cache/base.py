# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cache backend contract for directory snapshots keyed by string."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final, Protocol, runtime_checkable

from ..errors import CacheError

MAX_KEY_LENGTH: Final[int] = 512


@runtime_checkable
class CacheBackend(Protocol):
    """Persist and restore snapshots of filesystem paths under string keys."""

    def restore(self, paths: Sequence[str], key: str, restore_keys: Sequence[str] = ()) -> str | None:
        """Restore ``paths`` and return the matched key, or ``None`` on a miss.

        Args:
            paths: POSIX-normalised paths captured by the snapshot.
            key: Primary key looked up verbatim.
            restore_keys: Ordered key prefixes tried when the primary key misses.

        Returns:
            str | None: Key of the restored entry, ``None`` when nothing matched.

        Raises:
            CacheError: If the backend fails while looking up or extracting.
        """
        ...

    def save(self, paths: Sequence[str], key: str) -> str:
        """Snapshot ``paths`` under ``key`` and return the backend's entry id.

        Raises:
            CacheError: If the key is taken or the snapshot cannot be written.
        """
        ...


def validate_key(key: str) -> None:
    """Reject keys the backends cannot store.

    Args:
        key: Candidate cache key.

    Raises:
        CacheError: If the key is empty, too long or contains a comma.
    """

    if not key:
        raise CacheError("Cache key must not be empty")
    if len(key) > MAX_KEY_LENGTH:
        raise CacheError(f"Key Validation Error: {key} cannot be larger than {MAX_KEY_LENGTH} characters.")
    if "," in key:
        raise CacheError(f"Key Validation Error: {key} cannot contain commas.")


__all__ = ["CacheBackend", "MAX_KEY_LENGTH", "validate_key"]
