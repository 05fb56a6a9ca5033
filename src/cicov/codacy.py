# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Minimal client for the Codacy remote analysis API."""

from __future__ import annotations

import requests

from .constants import CODACY_API_URL, DEFAULT_HTTP_TIMEOUT
from .errors import UploadError


class CodacyClient:
    """Send remote tool results for a commit to Codacy."""

    def __init__(
        self,
        project_token: str,
        *,
        session: requests.Session | None = None,
        api_url: str = CODACY_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self._project_token = project_token
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def send_issues(self, repository: str, sha: str, payload: str) -> None:
        """Upload converted clang-tidy issues for ``sha``."""

        self._post(f"{self._api_url}/{repository}/commit/{sha}/issuesRemoteResults", payload)

    def send_results_final(self, repository: str, sha: str) -> None:
        """Tell Codacy that all results for ``sha`` have been sent."""

        self._post(f"{self._api_url}/{repository}/commit/{sha}/resultsFinal", None)

    def _post(self, url: str, payload: str | None) -> None:
        headers = {"project-token": self._project_token, "Content-type": "application/json"}
        try:
            response = self._session.post(
                url,
                data=payload.encode("utf-8") if payload is not None else None,
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise UploadError(f"Codacy request to {url} failed: {exc}") from exc


__all__ = ["CodacyClient"]
