# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the tool catalogue and its installers."""

from __future__ import annotations

import hashlib
import io
import zipfile
from pathlib import Path

import pytest

from cicov.errors import ArtifactInstallError, ReleaseLookupError
from cicov.provisioning import ArtifactProvisioner
from cicov.releases import Release
from cicov.tools import CODACY_REPORTER_KEY_PREFIX, ToolCatalog

from doubles import MemoryCache, RecordingLogger, RecordingRunner

RELEASES = {
    ("OpenCppCoverage", "OpenCppCoverage"): {
        "tag_name": "release-0.9.9.0",
        "name": "0.9.9.0",
        "assets": [
            {
                "name": "OpenCppCoverageSetup-x86-0.9.9.0.exe",
                "id": 21,
                "browser_download_url": "https://example.invalid/occ-x86.exe",
            },
            {
                "name": "OpenCppCoverageSetup-x64-0.9.9.0.exe",
                "id": 22,
                "browser_download_url": "https://example.invalid/occ-x64.exe",
            },
        ],
    },
    ("dscharrer", "innoextract"): {
        "tag_name": "1.9",
        "name": "innoextract 1.9",
        "assets": [
            {"name": "innoextract-1.9.tar.gz", "id": 10, "browser_download_url": "https://example.invalid/ie.tgz"},
            {"name": "innoextract-1.9-windows.zip", "id": 11, "browser_download_url": "https://example.invalid/ie.zip"},
        ],
    },
    ("codacy", "codacy-clang-tidy"): {
        "tag_name": "1.3.8",
        "assets": [
            {
                "name": "codacy-clang-tidy-1.3.8.jar",
                "id": 33,
                "browser_download_url": "https://example.invalid/cct.jar",
            },
        ],
    },
}


def _zip_bytes(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, payload in members.items():
            archive.writestr(name, payload)
    return buffer.getvalue()


class FakeReleases:
    def __init__(self) -> None:
        self.lookups: list[tuple[str, str]] = []

    def latest_release(self, owner: str, repo: str) -> Release:
        self.lookups.append((owner, repo))
        return Release.model_validate(RELEASES[(owner, repo)])


class FakeDownloader:
    def __init__(self, payloads: dict[str, bytes]) -> None:
        self.payloads = payloads
        self.urls: list[str] = []

    def download(self, url: str, destination: Path) -> Path:
        self.urls.append(url)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.payloads[url])
        return destination


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader(
        {
            "https://example.invalid/ie.zip": _zip_bytes({"innoextract-1.9-windows/innoextract.exe": b"ie"}),
            "https://example.invalid/occ-x64.exe": b"setup",
            "https://example.invalid/cct.jar": b"jar",
            "https://example.invalid/reporter.sh": b"#!/bin/sh\necho report\n",
        },
    )


def make_catalog(
    tmp_path: Path,
    downloader: FakeDownloader,
    cache: MemoryCache,
    runner: RecordingRunner,
) -> tuple[ToolCatalog, ArtifactProvisioner]:
    provisioner = ArtifactProvisioner(cache=cache, logger=RecordingLogger())
    catalog = ToolCatalog(
        releases=FakeReleases(),
        downloader=downloader,
        provisioner=provisioner,
        temp_dir=tmp_path / ".cicov",
        runner=runner,
        env={"PATH": "/usr/bin"},
    )
    return catalog, provisioner


def test_opencppcoverage_is_unpacked_with_innoextract(
    tmp_path: Path,
    downloader: FakeDownloader,
    memory_cache: MemoryCache,
) -> None:
    temp_dir = tmp_path / ".cicov"

    def unpack(args: list[str]) -> None:
        output = Path(args[args.index("--output-dir") + 1])
        (output / "app").mkdir(parents=True)
        (output / "app" / "OpenCppCoverage.exe").write_bytes(b"occ")

    runner = RecordingRunner(on_call=unpack)
    catalog, provisioner = make_catalog(tmp_path, downloader, memory_cache, runner)

    spec = catalog.opencppcoverage()
    tool = provisioner.provision(spec)

    assert spec.cache_key == "opencppcoverage-22"
    assert tool == temp_dir / "OpenCppCoverage" / "app" / "OpenCppCoverage.exe"
    assert tool.read_bytes() == b"occ"
    assert runner.calls[0]["args"] == [
        str(temp_dir / "innoextract" / "innoextract.exe"),
        "-e",
        "-m",
        "--output-dir",
        str(temp_dir / "OpenCppCoverage"),
        str(temp_dir / "OpenCppCoverageSetup-x64-0.9.9.0.exe"),
    ]
    assert (temp_dir / "innoextract" / "innoextract.exe").read_bytes() == b"ie"
    assert set(memory_cache.entries) == {"innoextract-11", "opencppcoverage-22"}


def test_opencppcoverage_cache_hit_skips_downloads(
    tmp_path: Path,
    downloader: FakeDownloader,
    memory_cache: MemoryCache,
) -> None:
    memory_cache.entries["opencppcoverage-22"] = []
    runner = RecordingRunner()
    catalog, provisioner = make_catalog(tmp_path, downloader, memory_cache, runner)

    provisioner.provision(catalog.opencppcoverage())

    assert downloader.urls == []
    assert runner.calls == []


def test_innoextract_requires_executable_in_archive(
    tmp_path: Path,
    downloader: FakeDownloader,
    memory_cache: MemoryCache,
) -> None:
    downloader.payloads["https://example.invalid/ie.zip"] = _zip_bytes({"README.txt": b"docs"})
    catalog, provisioner = make_catalog(tmp_path, downloader, memory_cache, RecordingRunner())
    spec = catalog.innoextract()

    with pytest.raises(ArtifactInstallError, match="does not contain innoextract.exe"):
        provisioner.provision(spec)

    assert not spec.install_dir.exists()


def test_innoextract_rejects_invalid_zip(tmp_path: Path, downloader: FakeDownloader, memory_cache: MemoryCache) -> None:
    downloader.payloads["https://example.invalid/ie.zip"] = b"not a zip"
    catalog, provisioner = make_catalog(tmp_path, downloader, memory_cache, RecordingRunner())

    with pytest.raises(ArtifactInstallError, match="not a valid zip archive"):
        provisioner.provision(catalog.innoextract())


def test_codacy_clang_tidy_downloads_jar(tmp_path: Path, downloader: FakeDownloader, memory_cache: MemoryCache) -> None:
    catalog, provisioner = make_catalog(tmp_path, downloader, memory_cache, RecordingRunner())

    spec = catalog.codacy_clang_tidy()
    tool = provisioner.provision(spec)

    assert spec.cache_key == "codacy-clang-tidy-33"
    assert tool == tmp_path / ".cicov" / "codacy-clang-tidy" / "codacy-clang-tidy-1.3.8.jar"
    assert tool.read_bytes() == b"jar"


def test_codacy_reporter_keys_cache_by_script_hash(
    tmp_path: Path,
    downloader: FakeDownloader,
    memory_cache: MemoryCache,
) -> None:
    catalog, _ = make_catalog(tmp_path, downloader, memory_cache, RecordingRunner())

    reporter = catalog.codacy_reporter(script_url="https://example.invalid/reporter.sh")

    digest = hashlib.sha256(b"#!/bin/sh\necho report\n").hexdigest()
    assert reporter.cache_key == f"{CODACY_REPORTER_KEY_PREFIX}{digest}"
    assert reporter.script == tmp_path / ".cicov" / ".codacy-coverage.sh"
    assert reporter.cache_dir == tmp_path / ".cicov" / ".codacy-coverage"
    assert not reporter.cache_hit
    assert memory_cache.restore_calls[0][2] == (CODACY_REPORTER_KEY_PREFIX,)


def test_codacy_reporter_accepts_older_cache_entry(
    tmp_path: Path,
    downloader: FakeDownloader,
    memory_cache: MemoryCache,
) -> None:
    memory_cache.entries["codacy-coverage-0ld"] = []
    catalog, _ = make_catalog(tmp_path, downloader, memory_cache, RecordingRunner())

    reporter = catalog.codacy_reporter(script_url="https://example.invalid/reporter.sh")

    assert reporter.cache_hit
    assert reporter.restored_key == "codacy-coverage-0ld"


def test_release_without_matching_asset_fails() -> None:
    release = Release.model_validate(RELEASES[("codacy", "codacy-clang-tidy")])

    with pytest.raises(ReleaseLookupError, match="1.3.8"):
        release.select_asset(r"\.exe$")
