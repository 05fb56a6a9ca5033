# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for cache-or-fetch tool provisioning."""

from __future__ import annotations

import shutil
from dataclasses import replace
from pathlib import Path

import pytest

from cicov.cache import DirectoryCacheBackend
from cicov.errors import ArtifactInstallError, DownloadError
from cicov.paths import to_posix
from cicov.provisioning import ArtifactProvisioner, ArtifactSpec

from doubles import MemoryCache, RecordingLogger


def make_spec(install_dir: Path, downloads: list[str], *, error: Exception | None = None) -> ArtifactSpec:
    def install(spec: ArtifactSpec) -> None:
        downloads.append(spec.source_url)
        spec.tool_path.parent.mkdir(parents=True, exist_ok=True)
        if error is not None:
            raise error
        spec.tool_path.write_text("binary", encoding="utf-8")

    return ArtifactSpec(
        name="demo 1.0",
        cache_key="demo-42",
        source_url="https://example.invalid/demo-1.0.zip",
        install_dir=install_dir,
        executable="bin/demo.exe",
        installer=install,
    )


def test_provision_installs_then_reuses_cache(
    tmp_path: Path,
    memory_cache: MemoryCache,
    logger: RecordingLogger,
) -> None:
    downloads: list[str] = []
    spec = make_spec(tmp_path / "tools" / "demo", downloads)
    provisioner = ArtifactProvisioner(cache=memory_cache, logger=logger)

    first = provisioner.provision(spec)
    second = provisioner.provision(spec)

    assert first == second == tmp_path / "tools" / "demo" / "bin" / "demo.exe"
    assert first.read_text(encoding="utf-8") == "binary"
    assert downloads == ["https://example.invalid/demo-1.0.zip"]
    assert memory_cache.entries == {"demo-42": [to_posix(tmp_path / "tools" / "demo")]}
    assert f"Found demo 1.0 in cache at {spec.install_dir}" in logger.of("info")


def test_provision_survives_cache_save_failure(tmp_path: Path, logger: RecordingLogger) -> None:
    downloads: list[str] = []
    spec = make_spec(tmp_path / "demo", downloads)
    provisioner = ArtifactProvisioner(cache=MemoryCache(fail_save=True), logger=logger)

    path = provisioner.provision(spec)

    assert path.is_file()
    assert logger.of("warn") == ["save backend unavailable"]


def test_provision_treats_restore_failure_as_miss(tmp_path: Path, logger: RecordingLogger) -> None:
    downloads: list[str] = []
    cache = MemoryCache(fail_restore=True)
    spec = make_spec(tmp_path / "demo", downloads)

    path = ArtifactProvisioner(cache=cache, logger=logger).provision(spec)

    assert path.is_file()
    assert len(downloads) == 1
    assert logger.of("warn") == ["restore backend unavailable"]
    assert "demo-42" in cache.entries


def test_provision_passes_restore_keys(tmp_path: Path, memory_cache: MemoryCache) -> None:
    memory_cache.entries["demo-old"] = []
    downloads: list[str] = []
    spec = replace(make_spec(tmp_path / "demo", downloads), restore_keys=("demo-",))

    ArtifactProvisioner(cache=memory_cache).provision(spec)

    assert downloads == []
    assert memory_cache.restore_calls[0][2] == ("demo-",)


@pytest.mark.parametrize(
    "error",
    [DownloadError("connection reset"), OSError("disk full"), ArtifactInstallError("bad archive")],
)
def test_provision_failure_removes_partial_install(
    tmp_path: Path,
    memory_cache: MemoryCache,
    error: Exception,
) -> None:
    downloads: list[str] = []
    spec = make_spec(tmp_path / "demo", downloads, error=error)

    with pytest.raises(ArtifactInstallError, match=str(error)):
        ArtifactProvisioner(cache=memory_cache).provision(spec)

    assert not spec.install_dir.exists()
    assert memory_cache.entries == {}


def test_provision_restores_from_directory_cache(tmp_path: Path, logger: RecordingLogger) -> None:
    workspace = tmp_path / "ws"
    workspace.mkdir()
    cache = DirectoryCacheBackend(tmp_path / "cache", root=workspace)
    downloads: list[str] = []
    spec = make_spec(workspace / ".cicov" / "demo", downloads)
    provisioner = ArtifactProvisioner(cache=cache, logger=logger)

    provisioner.provision(spec)
    shutil.rmtree(spec.install_dir)
    restored = provisioner.provision(spec)

    assert restored.read_text(encoding="utf-8") == "binary"
    assert len(downloads) == 1
    assert logger.of("warn") == []


def test_provision_reinstalls_when_cache_index_is_malformed(tmp_path: Path, logger: RecordingLogger) -> None:
    workspace = tmp_path / "ws"
    workspace.mkdir()
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    (cache_dir / "index.json").write_text('{"other-key": {"archive": "x.tar.gz"}}', encoding="utf-8")
    downloads: list[str] = []
    spec = make_spec(workspace / ".cicov" / "demo", downloads)

    path = ArtifactProvisioner(cache=DirectoryCacheBackend(cache_dir, root=workspace), logger=logger).provision(spec)

    assert path.read_text(encoding="utf-8") == "binary"
    assert len(downloads) == 1
    assert any("malformed" in message for message in logger.of("warn"))


def test_provision_removes_partial_install_on_unexpected_error(tmp_path: Path, memory_cache: MemoryCache) -> None:
    downloads: list[str] = []
    spec = make_spec(tmp_path / "demo", downloads, error=ValueError("encrypted member"))

    with pytest.raises(ValueError, match="encrypted member"):
        ArtifactProvisioner(cache=memory_cache).provision(spec)

    assert not spec.install_dir.exists()
    assert memory_cache.entries == {}
