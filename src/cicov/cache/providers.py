# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete cache backend implementations."""

from __future__ import annotations

import json
import tarfile
import time
from collections.abc import Sequence
from hashlib import sha256
from pathlib import Path, PurePosixPath
from typing import Final

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from ..errors import CacheError
from .base import validate_key

_INDEX_NAME: Final[str] = "index.json"


class _IndexEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    archive: str
    version: str
    created: float


_INDEX_ADAPTER: Final[TypeAdapter[dict[str, _IndexEntry]]] = TypeAdapter(dict[str, _IndexEntry])


def _paths_version(paths: Sequence[str]) -> str:
    """Return a digest identifying the set of snapshot paths."""

    return sha256("|".join(paths).encode("utf-8"), usedforsecurity=False).hexdigest()


class DirectoryCacheBackend:
    """Store snapshots as gzip tarballs inside a local cache directory.

    Archive members are recorded relative to ``root`` so a snapshot restores
    into the same location on the next run. Entries are immutable once saved
    and only match when they were taken for the same list of paths.
    """

    def __init__(self, directory: Path, *, root: Path) -> None:
        self._directory = directory
        self._root = root

    @property
    def directory(self) -> Path:
        return self._directory

    def restore(self, paths: Sequence[str], key: str, restore_keys: Sequence[str] = ()) -> str | None:
        """Extract the best matching snapshot for ``key`` into ``root``."""

        validate_key(key)
        for candidate in restore_keys:
            validate_key(candidate)
        version = _paths_version(paths)
        index = self._load_index()
        candidates = {name: entry for name, entry in index.items() if entry.version == version}

        matched = key if key in candidates else None
        if matched is None:
            for prefix in restore_keys:
                prefixed = [name for name in candidates if name.startswith(prefix)]
                if prefixed:
                    matched = max(prefixed, key=lambda name: candidates[name].created)
                    break
        if matched is None:
            return None

        archive = self._directory / candidates[matched].archive
        try:
            with tarfile.open(archive, "r:gz") as handle:
                handle.extractall(self._root, filter="data")
        except (OSError, tarfile.TarError) as exc:
            raise CacheError(f"Failed to restore cache entry {matched}: {exc}") from exc
        return matched

    def save(self, paths: Sequence[str], key: str) -> str:
        """Archive ``paths`` under ``key`` unless the key already exists."""

        validate_key(key)
        index = self._load_index()
        if key in index:
            raise CacheError(f"Unable to reserve cache with key {key}, another job may be creating this cache.")

        members = [(Path(path), self._archive_name(Path(path))) for path in paths]
        existing = [(source, name) for source, name in members if source.exists()]
        if not existing:
            raise CacheError(
                "Path Validation Error: Path(s) specified in the action for caching do(es) not exist, "
                "hence no cache is being saved."
            )

        archive_name = f"{sha256(key.encode('utf-8'), usedforsecurity=False).hexdigest()}.tar.gz"
        target = self._directory / archive_name
        partial = target.with_name(f"{archive_name}.partial")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tarfile.open(partial, "w:gz") as handle:
                for source, name in existing:
                    handle.add(source, arcname=name)
            partial.replace(target)
        except (OSError, tarfile.TarError) as exc:
            partial.unlink(missing_ok=True)
            raise CacheError(f"Failed to save cache entry {key}: {exc}") from exc

        index[key] = _IndexEntry(archive=archive_name, version=_paths_version(paths), created=time.time())
        self._write_index(index)
        return archive_name

    def _archive_name(self, path: Path) -> str:
        try:
            relative = path.resolve().relative_to(self._root.resolve())
        except ValueError as exc:
            raise CacheError(f"Cache path {path} is outside of {self._root}") from exc
        return PurePosixPath(*relative.parts).as_posix()

    def _load_index(self) -> dict[str, _IndexEntry]:
        path = self._directory / _INDEX_NAME
        if not path.is_file():
            return {}
        try:
            return _INDEX_ADAPTER.validate_json(path.read_bytes())
        except OSError as exc:
            raise CacheError(f"Cache index at {path} is unreadable: {exc}") from exc
        except ValidationError as exc:
            raise CacheError(f"Cache index at {path} is malformed: {exc}") from exc

    def _write_index(self, index: dict[str, _IndexEntry]) -> None:
        path = self._directory / _INDEX_NAME
        try:
            payload = json.dumps(_INDEX_ADAPTER.dump_python(index), indent=2, sort_keys=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise CacheError(f"Failed to update cache index at {path}: {exc}") from exc


__all__ = ["DirectoryCacheBackend"]
