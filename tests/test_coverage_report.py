# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for Cobertura report path rewriting."""

from pathlib import Path

import pytest

from cicov.coverage_report import PathPrefixSet, apply_prefixes, extract_source_root, rewrite, rewrite_report_file
from cicov.errors import MalformedReportError

POSIX_REPORT = """<?xml version="1.0" encoding="utf-8"?>
<coverage line-rate="0.5">
  <sources>
    <source>/build/abs/repo</source>
  </sources>
  <packages>
    <package name="/build/abs/repo/bin/x.o" line-rate="0.5">
      <classes>
        <class name="main.cpp" filename="src/main.cpp" line-rate="0.5"/>
      </classes>
    </package>
  </packages>
</coverage>
"""

WINDOWS_REPORT = """<?xml version="1.0" encoding="utf-8"?>
<coverage line-rate="1">
  <sources>
    <source>D:</source>
  </sources>
  <packages>
    <package name="D:\\a\\repo\\build\\tests.exe" line-rate="1">
      <classes>
        <class name="main.cpp" filename="a\\repo\\src\\main.cpp" line-rate="1"/>
        <class name="util.h" filename="a\\repo\\include\\util.h" line-rate="1"/>
      </classes>
    </package>
  </packages>
</coverage>
"""


def test_rewrite_relativises_module_names() -> None:
    result = rewrite(
        POSIX_REPORT,
        binary_dir="/build/abs/repo/bin",
        source_dir="/build/abs/repo/src",
        repo_root="C:\\work\\repo",
        sep="/",
    )

    assert "<source>C:/work/repo</source>" in result
    assert 'name="x.o"' in result
    assert 'filename="src/main.cpp"' in result
    assert "\\" not in result


def test_rewrite_strips_volume_relative_filenames() -> None:
    result = rewrite(
        WINDOWS_REPORT,
        binary_dir="D:\\a\\repo\\build",
        source_dir="D:\\a\\repo\\src",
        repo_root="D:\\a\\repo",
        sep="\\",
    )

    assert "<source>D:/a/repo</source>" in result
    assert '<package name="tests.exe"' in result
    assert 'filename="src/main.cpp"' in result
    assert 'filename="include/util.h"' in result
    assert "\\" not in result


def test_prefixes_strip_one_leading_separator_from_tail() -> None:
    prefixes = PathPrefixSet.from_report(
        WINDOWS_REPORT,
        binary_dir="D:\\a\\repo\\build\\",
        source_dir="D:\\a\\repo\\src",
        repo_root="D:\\a\\repo",
        sep="\\",
    )

    assert prefixes.binary_prefix == "D:\\a\\repo\\build\\"
    assert prefixes.filename_prefix == "a\\repo\\"


@pytest.mark.parametrize(
    ("report", "binary_dir", "repo_root", "sep"),
    [
        (POSIX_REPORT, "/build/abs/repo/bin", "C:\\work\\repo", "/"),
        (WINDOWS_REPORT, "D:\\a\\repo\\build", "D:\\a\\repo", "\\"),
    ],
)
def test_rewrite_is_stable_on_second_pass(report: str, binary_dir: str, repo_root: str, sep: str) -> None:
    prefixes = PathPrefixSet.from_report(
        report,
        binary_dir=binary_dir,
        source_dir=repo_root,
        repo_root=repo_root,
        sep=sep,
    )
    once = apply_prefixes(report, prefixes)

    assert apply_prefixes(once, prefixes) == once


def test_rewrite_replacement_is_literal() -> None:
    report = '<source>/r</source> <x name="/r/b/\\1.o"/>'
    result = rewrite(report, binary_dir="/r/b", source_dir="/r", repo_root="C:\\g\\1", sep="/")

    assert result == '<source>C:/g/1</source> <x name="/1.o"/>'


def test_extract_source_root_requires_source_element() -> None:
    with pytest.raises(MalformedReportError):
        extract_source_root("<coverage><sources/></coverage>")


def test_rewrite_report_file_rewrites_in_place(tmp_path: Path) -> None:
    report = tmp_path / "coverage.xml"
    report.write_text(POSIX_REPORT, encoding="utf-8")

    rewrite_report_file(
        report,
        binary_dir="/build/abs/repo/bin",
        source_dir="/build/abs/repo/src",
        repo_root="/work/repo",
        sep="/",
    )

    content = report.read_text(encoding="utf-8")
    assert "<source>/work/repo</source>" in content
    assert 'name="x.o"' in content


def test_rewrite_report_file_leaves_malformed_report_untouched(tmp_path: Path) -> None:
    report = tmp_path / "coverage.xml"
    report.write_text("<coverage/>", encoding="utf-8")

    with pytest.raises(MalformedReportError):
        rewrite_report_file(report, binary_dir="/b", source_dir="/s", repo_root="/r", sep="/")

    assert report.read_text(encoding="utf-8") == "<coverage/>"


def test_second_rewrite_recomputes_prefixes_from_rewritten_source() -> None:
    report = '<source>D:</source> <class name="x.cpp" filename="/opt/include/x.h"/>'
    arguments = {"binary_dir": "D:\\a\\repo\\build", "source_dir": "D:\\a\\repo\\src", "repo_root": "D:\\a\\repo"}

    once = rewrite(report, **arguments, sep="/")
    twice = rewrite(once, **arguments, sep="/")

    assert 'filename="/opt/include/x.h"' in once
    assert 'filename="opt/include/x.h"' in twice
