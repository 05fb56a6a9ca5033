# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; commands are passed as argument
# lists and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import Protocol

from .errors import CicovError


class SubprocessExecutionError(CicovError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class CommandRunner(Protocol):
    """Callable compatible with :func:`run_command` used for injection in tests."""

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        check: bool = True,
        capture_output: bool = False,
        input_text: str | None = None,
        timeout: float | None = None,
    ) -> CompletedProcess[str]: ...


def _normalize_args(args: Sequence[str], env: Mapping[str, str] | None) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    search_path = env.get("PATH") if env is not None else None
    resolved = shutil.which(head, path=search_path)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
    capture_output: bool = False,
    input_text: str | None = None,
    timeout: float | None = None,
) -> CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Args:
        args: Executable followed by its arguments.
        cwd: Working directory for the child process.
        env: Complete environment for the child process. The executable is
            looked up on this environment's ``PATH`` when given.
        check: Raise :class:`SubprocessExecutionError` on a non-zero exit.
        capture_output: Capture stdout/stderr instead of inheriting them.
        input_text: Text written to the child's stdin.
        timeout: Optional timeout in seconds; unset by default.

    Returns:
        CompletedProcess[str]: Completed process information.
    """

    normalized = _normalize_args(args, env)
    try:
        # Bandit: argument lists come from cicov workflows, never a shell string.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=capture_output,
            text=True,
            input=input_text,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout.decode(errors="ignore") if isinstance(exc.stdout, bytes) else exc.stdout
        raise SubprocessExecutionError(
            normalized,
            124,
            stdout,
            f"Command timed out after {timeout:.1f}s",
        ) from exc

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


__all__ = ["CommandRunner", "SubprocessExecutionError", "run_command"]
