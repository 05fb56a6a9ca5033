# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalogue of the external tools provisioned by the workflows."""

from __future__ import annotations

import shutil
import zipfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

from .constants import CODACY_COVERAGE_SCRIPT_URL
from .downloads import Downloader, sha256_file
from .errors import ArtifactInstallError
from .process_utils import CommandRunner, run_command
from .provisioning import ArtifactProvisioner, ArtifactSpec
from .releases import ReleaseClient

OPENCPPCOVERAGE_ASSET: Final[str] = r"-x64-.*\.exe$"
INNOEXTRACT_ASSET: Final[str] = r"-windows\.zip$"
CODACY_CLANG_TIDY_ASSET: Final[str] = r"\.jar$"
INNOEXTRACT_EXECUTABLE: Final[str] = "innoextract.exe"
CODACY_REPORTER_KEY_PREFIX: Final[str] = "codacy-coverage-"


@dataclass(frozen=True, slots=True)
class CodacyReporter:
    """Codacy coverage reporter script plus its download cache directory."""

    script: Path
    cache_dir: Path
    cache_key: str
    restored_key: str | None

    @property
    def cache_hit(self) -> bool:
        return self.restored_key is not None


class ToolCatalog:
    """Build :class:`ArtifactSpec` instances for the supported tools.

    Release metadata is queried when a spec is built because the cache key is
    derived from the immutable asset id.
    """

    def __init__(
        self,
        *,
        releases: ReleaseClient,
        downloader: Downloader,
        provisioner: ArtifactProvisioner,
        temp_dir: Path,
        runner: CommandRunner = run_command,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._releases = releases
        self._downloader = downloader
        self._provisioner = provisioner
        self._temp_dir = temp_dir
        self._runner = runner
        self._env = env

    def opencppcoverage(self) -> ArtifactSpec:
        """Return the :class:`ArtifactSpec` for OpenCppCoverage, unpacked with innoextract."""

        release = self._releases.latest_release("OpenCppCoverage", "OpenCppCoverage")
        asset = release.select_asset(OPENCPPCOVERAGE_ASSET)
        download_file = self._temp_dir / asset.name

        def install(spec: ArtifactSpec) -> None:
            innoextract = self._provisioner.provision(self.innoextract())
            self._downloader.download(spec.source_url, download_file)
            self._runner(
                [str(innoextract), "-e", "-m", "--output-dir", str(spec.install_dir), str(download_file)],
                env=self._env,
            )

        return ArtifactSpec(
            name=f"OpenCppCoverage {release.display_name}",
            cache_key=f"opencppcoverage-{asset.id}",
            source_url=asset.browser_download_url,
            install_dir=self._temp_dir / "OpenCppCoverage",
            executable="app/OpenCppCoverage.exe",
            installer=install,
        )

    def innoextract(self) -> ArtifactSpec:
        """Return the :class:`ArtifactSpec` for innoextract, taken from the Windows zip asset."""

        release = self._releases.latest_release("dscharrer", "innoextract")
        asset = release.select_asset(INNOEXTRACT_ASSET)
        download_file = self._temp_dir / asset.name

        def install(spec: ArtifactSpec) -> None:
            self._downloader.download(spec.source_url, download_file)
            _extract_member(download_file, INNOEXTRACT_EXECUTABLE, spec.tool_path)

        return ArtifactSpec(
            name=f"innoextract {release.display_name}",
            cache_key=f"innoextract-{asset.id}",
            source_url=asset.browser_download_url,
            install_dir=self._temp_dir / "innoextract",
            executable=INNOEXTRACT_EXECUTABLE,
            installer=install,
        )

    def codacy_clang_tidy(self) -> ArtifactSpec:
        """Return the :class:`ArtifactSpec` for the codacy-clang-tidy converter jar."""

        release = self._releases.latest_release("codacy", "codacy-clang-tidy")
        asset = release.select_asset(CODACY_CLANG_TIDY_ASSET)

        def install(spec: ArtifactSpec) -> None:
            self._downloader.download(spec.source_url, spec.tool_path)

        return ArtifactSpec(
            name=f"codacy-clang-tidy {release.tag_name}",
            cache_key=f"codacy-clang-tidy-{asset.id}",
            source_url=asset.browser_download_url,
            install_dir=self._temp_dir / "codacy-clang-tidy",
            executable=asset.name,
            installer=install,
        )

    def codacy_reporter(self, *, script_url: str = CODACY_COVERAGE_SCRIPT_URL) -> CodacyReporter:
        """Download the reporter script and restore its download cache.

        The script is fetched on every run; its content hash keys the cache of
        the ``.codacy-coverage`` directory the script populates, with older
        entries accepted through the key prefix.
        """

        script = self._downloader.download(script_url, self._temp_dir / ".codacy-coverage.sh")
        cache_key = f"{CODACY_REPORTER_KEY_PREFIX}{sha256_file(script)}"
        cache_dir = self._temp_dir / ".codacy-coverage"
        restored = self._provisioner.restore([cache_dir], cache_key, (CODACY_REPORTER_KEY_PREFIX,))
        return CodacyReporter(script=script, cache_dir=cache_dir, cache_key=cache_key, restored_key=restored)


def _extract_member(archive: Path, member_name: str, destination: Path) -> None:
    """Copy the first zip member named ``member_name`` to ``destination``.

    Raises:
        ArtifactInstallError: If the archive is invalid or lacks the member.
    """

    try:
        with zipfile.ZipFile(archive) as handle:
            for info in handle.infolist():
                if info.is_dir() or PurePosixPath(info.filename).name != member_name:
                    continue
                destination.parent.mkdir(parents=True, exist_ok=True)
                with handle.open(info) as source, destination.open("wb") as target:
                    shutil.copyfileobj(source, target)
                return
    except zipfile.BadZipFile as exc:
        raise ArtifactInstallError(f"{archive.name} is not a valid zip archive: {exc}") from exc
    raise ArtifactInstallError(f"{archive.name} does not contain {member_name}")


__all__ = [
    "CODACY_REPORTER_KEY_PREFIX",
    "CodacyReporter",
    "ToolCatalog",
]
