# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Constants shared across cicov modules."""

from __future__ import annotations

from typing import Final

TEMP_DIR_NAME: Final[str] = ".cicov"
VCS_MARKER: Final[str] = ".git"
CACHE_DIR_NAME: Final[str] = "cicov-cache"

GITHUB_API_URL: Final[str] = "https://api.github.com"
CODACY_API_URL: Final[str] = "https://api.codacy.com/2.0/gh"
CODACY_COVERAGE_SCRIPT_URL: Final[str] = "https://coverage.codacy.com/get.sh"
CODECOV_UPLOADER_URL: Final[str] = "https://codecov.io/bash"

TRUE_VALUES: Final[frozenset[str]] = frozenset({"true", "True", "TRUE"})

DEFAULT_HTTP_TIMEOUT: Final[float] = 60.0

__all__ = [
    "CACHE_DIR_NAME",
    "CODACY_API_URL",
    "CODACY_COVERAGE_SCRIPT_URL",
    "CODECOV_UPLOADER_URL",
    "DEFAULT_HTTP_TIMEOUT",
    "GITHUB_API_URL",
    "TEMP_DIR_NAME",
    "TRUE_VALUES",
    "VCS_MARKER",
]
