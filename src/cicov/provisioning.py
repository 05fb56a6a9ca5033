# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cache-or-fetch provisioning of external tools.

Caching is an optimisation only: every cache failure is logged as a warning
and treated as a miss, while failures to obtain or unpack the artifact abort
provisioning.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .cache import CacheBackend
from .errors import ArtifactInstallError, CacheError, CicovError
from .logging import StatusLogger
from .paths import to_posix

Installer = Callable[["ArtifactSpec"], None]


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    """Identity and install layout of a fetchable tool.

    ``cache_key`` must identify the exact binary content (for example a
    release asset id or a content hash) so that a cache hit is safe to reuse
    verbatim.
    """

    name: str
    cache_key: str
    source_url: str
    install_dir: Path
    executable: str
    installer: Installer
    restore_keys: tuple[str, ...] = ()

    @property
    def tool_path(self) -> Path:
        """Return the executable path inside ``install_dir``."""

        return self.install_dir / self.executable


class ArtifactProvisioner:
    """Materialise tools from cache, downloading them only on a miss."""

    def __init__(self, *, cache: CacheBackend, logger: StatusLogger | None = None) -> None:
        self._cache = cache
        self._logger = logger or StatusLogger()

    def provision(self, spec: ArtifactSpec) -> Path:
        """Return a usable executable path for ``spec``.

        Args:
            spec: Tool to provision.

        Returns:
            Path: ``spec.tool_path`` after it was restored or installed.

        Raises:
            ArtifactInstallError: If the download or unpack step fails.
        """

        matched = self.restore([spec.install_dir], spec.cache_key, spec.restore_keys)
        if matched is not None:
            self._logger.info(f"Found {spec.name} in cache at {spec.install_dir}")
            return spec.tool_path

        self._logger.info(f"Downloading {spec.name} from {spec.source_url}")
        try:
            self._install(spec)
        except ArtifactInstallError:
            raise
        except (CicovError, OSError) as exc:
            raise ArtifactInstallError(f"Failed to install {spec.name}: {exc}") from exc

        self.save([spec.install_dir], spec.cache_key)
        self._logger.ok(f"Installed {spec.name} at {spec.install_dir}")
        return spec.tool_path

    @staticmethod
    def _install(spec: ArtifactSpec) -> None:
        """Run the installer, removing the partial install on any failure."""

        try:
            spec.installer(spec)
        except BaseException:
            shutil.rmtree(spec.install_dir, ignore_errors=True)
            raise

    def restore(self, paths: Sequence[Path], key: str, restore_keys: Sequence[str] = ()) -> str | None:
        """Restore ``paths`` from cache, returning ``None`` on a miss or failure."""

        try:
            return self._cache.restore([to_posix(path) for path in paths], key, tuple(restore_keys))
        except (CacheError, OSError) as exc:
            self._logger.warn(str(exc))
        return None

    def save(self, paths: Sequence[Path], key: str) -> str | None:
        """Save ``paths`` to cache, returning ``None`` when saving failed."""

        try:
            return self._cache.save([to_posix(path) for path in paths], key)
        except (CacheError, OSError) as exc:
            self._logger.warn(str(exc))
        return None


__all__ = ["ArtifactProvisioner", "ArtifactSpec", "Installer"]
