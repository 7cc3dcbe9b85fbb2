"""Running shell commands with secrets in their environment."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass


class ExecutionError(Exception):
    """Raised when a command cannot be started at all."""


@dataclass(frozen=True)
class ExecResult:
    """Exit code and redacted output of a finished command."""

    exit_code: int
    stdout: str
    stderr: str


def shell_command(command: str) -> tuple[str, list[str]]:
    """Return the shell program and arguments that run ``command``."""
    if os.name == "nt":
        return "cmd", ["/C", command]
    return "sh", ["-c", command]


def run(
    command: str,
    secrets: Mapping[str, str] | None = None,
    work_dir: str | os.PathLike[str] | None = None,
    redact: Callable[[str], str] | None = None,
) -> ExecResult:
    """Run ``command`` in a shell with ``secrets`` added to the environment.

    A non-zero exit is reported in the result; a command killed by a signal
    gets exit code -1. Output is passed through ``redact`` when given.
    """
    shell, args = shell_command(command)
    env = {**os.environ, **(secrets or {})}
    try:
        completed = subprocess.run(
            [shell, *args],
            env=env,
            cwd=work_dir or None,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise ExecutionError(f"executing command: {exc}") from exc

    clean = redact or (lambda text: text)
    exit_code = completed.returncode if completed.returncode >= 0 else -1
    return ExecResult(
        exit_code=exit_code,
        stdout=clean(completed.stdout.decode("utf-8", errors="replace")),
        stderr=clean(completed.stderr.decode("utf-8", errors="replace")),
    )