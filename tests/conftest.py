# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import pytest
from doubles import MemoryCache, RecordingLogger, RecordingRunner


@pytest.fixture
def logger() -> RecordingLogger:
    """Return a logger capturing status messages."""
    return RecordingLogger()


@pytest.fixture
def memory_cache() -> MemoryCache:
    """Return an empty in-memory cache backend."""
    return MemoryCache()


@pytest.fixture
def runner() -> RecordingRunner:
    """Return a command runner that records invocations."""
    return RecordingRunner()
