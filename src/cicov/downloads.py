# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""HTTP download helpers backed by ``requests``."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Final, Protocol

import requests

from .constants import DEFAULT_HTTP_TIMEOUT
from .errors import DownloadError

_CHUNK_SIZE: Final[int] = 64 * 1024


class Downloader(Protocol):
    """Fetch a URL into a file."""

    def download(self, url: str, destination: Path) -> Path:
        """Write the body of ``url`` to ``destination`` and return it."""
        ...


class HttpDownloader:
    """Download artifacts with a single HTTP attempt.

    The body is streamed into a sibling ``.partial`` file that is renamed into
    place only when the transfer completed, so a failed download never leaves
    a file that looks complete.
    """

    def __init__(self, *, session: requests.Session | None = None, timeout: float = DEFAULT_HTTP_TIMEOUT) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def download(self, url: str, destination: Path) -> Path:
        """Stream ``url`` to ``destination``, creating parent directories.

        Args:
            url: Source location of the artifact.
            destination: File that receives the body.

        Returns:
            Path: ``destination`` once the body has been written.

        Raises:
            DownloadError: If the request fails or returns an error status.
        """

        destination.parent.mkdir(parents=True, exist_ok=True)
        partial = destination.with_name(f"{destination.name}.partial")
        try:
            with self._session.get(url, timeout=self._timeout, stream=True, allow_redirects=True) as response:
                response.raise_for_status()
                with partial.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        handle.write(chunk)
            partial.replace(destination)
        except (requests.RequestException, OSError) as exc:
            partial.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {exc}") from exc
        return destination


def sha256_file(path: Path) -> str:
    """Return the hex SHA-256 digest of ``path``."""

    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


__all__ = ["Downloader", "HttpDownloader", "sha256_file"]
