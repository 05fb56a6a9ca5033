# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the cicov workflows.

Values come from explicit CLI options first and from GitHub Actions inputs
(``INPUT_<NAME>`` environment variables) second. Every reader receives the
environment mapping explicitly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict

from .constants import TEMP_DIR_NAME, TRUE_VALUES
from .errors import ConfigError
from .paths import to_native

_INPUT_PREFIX: Final[str] = "INPUT_"


class ActionInputs:
    """Read action inputs from an environment mapping."""

    def __init__(self, env: Mapping[str, str]) -> None:
        self._env = env

    @staticmethod
    def variable_name(name: str) -> str:
        """Return the environment variable carrying input ``name``."""

        return f"{_INPUT_PREFIX}{name.replace(' ', '_').upper()}"

    def get(self, name: str, *, required: bool = False, override: str | None = None) -> str:
        """Return the trimmed value of input ``name``.

        Args:
            name: Input name as declared by the action, e.g. ``source-dir``.
            required: Raise when the input is missing or blank.
            override: Explicit value that takes precedence over the input.

        Returns:
            str: Trimmed value, empty when an optional input is unset.

        Raises:
            ConfigError: If a required input is not supplied.
        """

        if override is not None and override.strip():
            return override.strip()
        value = self._env.get(self.variable_name(name), "").strip()
        if required and not value:
            raise ConfigError(f"Input required and not supplied: {name}")
        return value

    def get_bool(self, name: str, *, required: bool = False, override: bool | None = None) -> bool:
        """Return ``True`` when input ``name`` is ``true``, ``True`` or ``TRUE``."""

        if override is not None:
            return override
        return self.get(name, required=required) in TRUE_VALUES


class CIEnvironment(BaseModel):
    """Describe the CI job the workflows run in."""

    model_config = ConfigDict(frozen=True)

    workspace: Path
    sha: str = ""
    repository: str = ""
    path_file: Path | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str], *, cwd: Path) -> CIEnvironment:
        """Build the CI description from ``GITHUB_*`` variables.

        Args:
            env: Environment mapping of the job.
            cwd: Directory used as workspace outside of GitHub Actions.

        Returns:
            CIEnvironment: Resolved job description.
        """

        raw_workspace = env.get("GITHUB_WORKSPACE", "").strip()
        workspace = Path(os.path.abspath(raw_workspace)) if raw_workspace else cwd
        raw_path_file = env.get("GITHUB_PATH", "").strip()
        return cls(
            workspace=workspace,
            sha=env.get("GITHUB_SHA", "").strip(),
            repository=env.get("GITHUB_REPOSITORY", "").strip(),
            path_file=Path(raw_path_file) if raw_path_file else None,
        )

    @property
    def repo_name(self) -> str:
        """Return the repository name without its owner."""

        if self.repository:
            return self.repository.rsplit("/", 1)[-1]
        return self.workspace.name

    @property
    def temp_dir(self) -> Path:
        """Return the scratch directory used for downloads and tools."""

        return self.workspace / TEMP_DIR_NAME

    def resolve(self, raw_path: str) -> Path:
        """Return ``raw_path`` made absolute against the workspace."""

        return Path(os.path.normpath(os.path.join(self.workspace, to_native(raw_path))))


class ReportMode(str, Enum):
    """Enumerate which parts of a codacy analysis are sent."""

    FULL = "full"
    PARTIAL = "partial"
    FINAL = "final"

    @property
    def sends_results(self) -> bool:
        return self in {ReportMode.FULL, ReportMode.PARTIAL}

    @property
    def sends_commit(self) -> bool:
        return self in {ReportMode.FULL, ReportMode.FINAL}

    @classmethod
    def parse(cls, raw: str) -> ReportMode:
        """Return the mode named ``raw``.

        Raises:
            ConfigError: If ``raw`` is not a known mode.
        """

        try:
            return cls(raw)
        except ValueError as exc:
            raise ConfigError(
                f"Unknown mode '{raw}', available options are 'full', 'partial' and 'final'"
            ) from exc


class CoverageSettings(BaseModel):
    """Inputs of the coverage workflow."""

    model_config = ConfigDict(frozen=True)

    command: str
    source_dir: Path
    binary_dir: Path
    github_token: str
    codecov: bool = False
    codacy_token: str = ""


class ReportSettings(BaseModel):
    """Inputs of the codacy analysis report workflow."""

    model_config = ConfigDict(frozen=True)

    mode: ReportMode
    codacy_token: str
    github_token: str = ""
    source_dir: Path | None = None
    binary_dir: Path | None = None


def load_coverage_settings(
    inputs: ActionInputs,
    ci: CIEnvironment,
    *,
    command: str | None = None,
    source_dir: str | None = None,
    binary_dir: str | None = None,
    codecov: bool | None = None,
    codacy_token: str | None = None,
    github_token: str | None = None,
) -> CoverageSettings:
    """Combine CLI overrides and action inputs into :class:`CoverageSettings`.

    Raises:
        ConfigError: If a required value is missing.
    """

    return CoverageSettings(
        command=inputs.get("command", required=True, override=command),
        source_dir=ci.resolve(inputs.get("source-dir", required=True, override=source_dir)),
        binary_dir=ci.resolve(inputs.get("binary-dir", required=True, override=binary_dir)),
        github_token=inputs.get("github-token", required=True, override=github_token),
        codecov=inputs.get_bool("codecov", override=codecov),
        codacy_token=inputs.get("codacy-token", override=codacy_token),
    )


def load_report_settings(
    inputs: ActionInputs,
    ci: CIEnvironment,
    *,
    mode: str | None = None,
    codacy_token: str | None = None,
    github_token: str | None = None,
    source_dir: str | None = None,
    binary_dir: str | None = None,
) -> ReportSettings:
    """Combine CLI overrides and action inputs into :class:`ReportSettings`.

    Directories and the GitHub token are only required when results are sent.

    Raises:
        ConfigError: If the mode is unknown or a required value is missing.
    """

    parsed_mode = ReportMode.parse(inputs.get("mode", required=True, override=mode))
    token = inputs.get("codacy-token", required=True, override=codacy_token)
    if not parsed_mode.sends_results:
        return ReportSettings(mode=parsed_mode, codacy_token=token)
    return ReportSettings(
        mode=parsed_mode,
        codacy_token=token,
        github_token=inputs.get("github-token", required=True, override=github_token),
        source_dir=ci.resolve(inputs.get("source-dir", required=True, override=source_dir)),
        binary_dir=ci.resolve(inputs.get("binary-dir", required=True, override=binary_dir)),
    )


__all__ = [
    "ActionInputs",
    "CIEnvironment",
    "CoverageSettings",
    "ReportMode",
    "ReportSettings",
    "load_coverage_settings",
    "load_report_settings",
]
