# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rewrite absolute paths in Cobertura reports into repository-relative paths.

OpenCppCoverage records module names as absolute paths below the binary
directory and file names relative to the volume it chose as ``<source>``.
The rewrite steps run in a fixed order: the literal prefix strips depend on
the original separator character, so the backslash conversion comes last.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import MalformedReportError
from .paths import with_trailing_separator

_SOURCE_RE: Final[re.Pattern[str]] = re.compile(r"(<source>)(.+?)(</source>)")
_LEADING_SEPARATOR_RE: Final[re.Pattern[str]] = re.compile(r"^[\\/]")


@dataclass(frozen=True, slots=True)
class PathPrefixSet:
    """Prefixes computed once per report before any substitution runs.

    Attributes:
        repo_root: Repository root written into ``<source>``.
        source_dir: Source directory the instrumentation was restricted to.
        binary_prefix: Binary directory plus separator, stripped from ``name``.
        filename_prefix: Repository path below the recorded source root plus
            separator, stripped from ``filename``.
    """

    repo_root: str
    source_dir: str
    binary_prefix: str
    filename_prefix: str

    @classmethod
    def from_report(
        cls,
        report_text: str,
        *,
        binary_dir: str,
        source_dir: str,
        repo_root: str,
        sep: str = os.sep,
    ) -> PathPrefixSet:
        """Compute the prefixes for ``report_text``.

        Raises:
            MalformedReportError: If the report has no ``<source>`` element.
        """

        recorded_root = extract_source_root(report_text)
        tail = _LEADING_SEPARATOR_RE.sub("", repo_root[len(recorded_root) :], count=1)
        return cls(
            repo_root=repo_root,
            source_dir=source_dir,
            binary_prefix=with_trailing_separator(binary_dir, sep),
            filename_prefix=with_trailing_separator(tail, sep),
        )


def extract_source_root(report_text: str) -> str:
    """Return the value of the first ``<source>`` element.

    Raises:
        MalformedReportError: If the element is missing or empty.
    """

    match = _SOURCE_RE.search(report_text)
    if match is None:
        raise MalformedReportError("Coverage report does not declare a <source> root")
    return match.group(2)


def _strip_attribute_prefix(text: str, attribute: str, prefix: str) -> str:
    pattern = re.compile(rf'( {attribute}="){re.escape(prefix)}')
    return pattern.sub(lambda match: match.group(1), text)


def apply_prefixes(report_text: str, prefixes: PathPrefixSet) -> str:
    """Return ``report_text`` rewritten with precomputed ``prefixes``."""

    text = _SOURCE_RE.sub(
        lambda match: f"{match.group(1)}{prefixes.repo_root}{match.group(3)}",
        report_text,
        count=1,
    )
    text = _strip_attribute_prefix(text, "name", prefixes.binary_prefix)
    text = _strip_attribute_prefix(text, "filename", prefixes.filename_prefix)
    return text.replace("\\", "/")


def rewrite(
    report_text: str,
    binary_dir: str,
    source_dir: str,
    repo_root: str,
    *,
    sep: str = os.sep,
) -> str:
    """Return ``report_text`` with portable, repository-relative paths.

    Prefixes are derived from the report itself. Feeding the output back in
    recomputes them against the rewritten ``<source>``, which leaves an empty
    tail, so the filename prefix shrinks to ``sep`` and absolute filenames
    lose their leading separator. Reuse :func:`apply_prefixes` with the
    original :class:`PathPrefixSet` for a pass that changes nothing.

    Args:
        report_text: Cobertura document produced by OpenCppCoverage.
        binary_dir: Absolute build output directory.
        source_dir: Absolute source directory passed to the instrumentation.
        repo_root: Repository root the paths become relative to.
        sep: Path separator used by the instrumentation tool.

    Returns:
        str: Rewritten document using forward slashes only.

    Raises:
        MalformedReportError: If the report has no ``<source>`` element.
    """

    prefixes = PathPrefixSet.from_report(
        report_text,
        binary_dir=binary_dir,
        source_dir=source_dir,
        repo_root=repo_root,
        sep=sep,
    )
    return apply_prefixes(report_text, prefixes)


def rewrite_report_file(
    path: Path,
    *,
    binary_dir: str,
    source_dir: str,
    repo_root: str,
    sep: str = os.sep,
) -> None:
    """Rewrite the report at ``path`` in place.

    The file is only written after the full in-memory transform succeeded.
    """

    original = path.read_text(encoding="utf-8")
    rewritten = rewrite(original, binary_dir, source_dir, repo_root, sep=sep)
    path.write_text(rewritten, encoding="utf-8")


__all__ = [
    "PathPrefixSet",
    "apply_prefixes",
    "extract_source_root",
    "rewrite",
    "rewrite_report_file",
]
