# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Release metadata lookups against the GitHub REST API."""

from __future__ import annotations

import re
from typing import Protocol

import requests
from pydantic import BaseModel, ConfigDict, ValidationError

from .constants import DEFAULT_HTTP_TIMEOUT, GITHUB_API_URL
from .errors import ReleaseLookupError


class ReleaseAsset(BaseModel):
    """Downloadable file attached to a release."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    id: int
    browser_download_url: str


class Release(BaseModel):
    """Subset of the GitHub release payload used for provisioning."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    tag_name: str
    name: str | None = None
    assets: tuple[ReleaseAsset, ...] = ()

    @property
    def display_name(self) -> str:
        """Return the release title, falling back to the tag."""

        return self.name or self.tag_name

    def select_asset(self, pattern: str) -> ReleaseAsset:
        """Return the first asset whose name matches ``pattern``.

        Args:
            pattern: Regular expression searched within each asset name.

        Returns:
            ReleaseAsset: First matching asset in API order.

        Raises:
            ReleaseLookupError: If no asset matches.
        """

        compiled = re.compile(pattern)
        for asset in self.assets:
            if compiled.search(asset.name):
                return asset
        raise ReleaseLookupError(f"Release {self.display_name} has no asset matching {pattern!r}")


class ReleaseClient(Protocol):
    """Query the latest release of a repository."""

    def latest_release(self, owner: str, repo: str) -> Release:
        """Return metadata of the latest published release."""
        ...


class GitHubReleaseClient:
    """Fetch release metadata using an access token."""

    def __init__(
        self,
        token: str,
        *,
        session: requests.Session | None = None,
        api_url: str = GITHUB_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self._token = token
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def latest_release(self, owner: str, repo: str) -> Release:
        """Return the latest release of ``owner/repo``.

        Raises:
            ReleaseLookupError: If the request fails or the payload is invalid.
        """

        url = f"{self._api_url}/repos/{owner}/{repo}/releases/latest"
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self._token}",
        }
        try:
            response = self._session.get(url, headers=headers, timeout=self._timeout)
            response.raise_for_status()
            return Release.model_validate(response.json())
        except requests.RequestException as exc:
            raise ReleaseLookupError(f"Failed to get latest release for {owner}/{repo}: {exc}") from exc
        except (ValidationError, ValueError) as exc:
            raise ReleaseLookupError(f"Unexpected release payload for {owner}/{repo}: {exc}") from exc


__all__ = ["GitHubReleaseClient", "Release", "ReleaseAsset", "ReleaseClient"]
