# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the cicov workflows."""

from __future__ import annotations

from pathlib import Path


class CicovError(RuntimeError):
    """Base error for failures that abort a cicov run."""


class ConfigError(CicovError):
    """Raised when configuration input is missing or invalid."""


class RepositoryRootError(CicovError):
    """Raised when no repository root can be found above a directory."""

    def __init__(self, start_path: Path, current: Path) -> None:
        super().__init__(f"Cannot find repository root for {start_path}, currently looking into {current}")
        self.start_path = start_path
        self.current = current


class MalformedReportError(CicovError):
    """Raised when a coverage report lacks the expected ``<source>`` element."""


class ReleaseLookupError(CicovError):
    """Raised when release metadata cannot be fetched or lacks a matching asset."""


class DownloadError(CicovError):
    """Raised when an artifact download fails."""


class ArtifactInstallError(CicovError):
    """Raised when an artifact cannot be downloaded or unpacked into place."""


class UploadError(CicovError):
    """Raised when analysis results cannot be sent to a quality service."""


class CacheError(CicovError):
    """Raised by cache backends; callers treat it as a cache miss."""


__all__ = [
    "ArtifactInstallError",
    "CacheError",
    "CicovError",
    "ConfigError",
    "DownloadError",
    "MalformedReportError",
    "ReleaseLookupError",
    "RepositoryRootError",
    "UploadError",
]
