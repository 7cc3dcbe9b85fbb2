"""The secret backend interface and helpers for running provider CLIs."""

from __future__ import annotations

import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence


class BackendError(Exception):
    """Raised when an external secret provider cannot be reached or read."""


class SecretBackend(ABC):
    """An external provider of secrets."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The backend identifier, e.g. ``aws-secrets-manager``."""

    @abstractmethod
    def list(self) -> list[str]:
        """Return the names of the available secrets."""

    @abstractmethod
    def get(self, name: str) -> str:
        """Return the value of the secret called ``name``."""


def _require_cli(program: str, hint: str) -> None:
    """Raise BackendError unless ``program`` can be found on PATH."""
    if shutil.which(program) is None:
        raise BackendError(f"{program} CLI not found \u2014 {hint}")


def run_cli(
    program: str, args: Sequence[str], env: Mapping[str, str] | None = None
) -> str:
    """Run ``program`` with ``args`` and return its standard output.

    ``env`` holds extra variables laid over the current environment.
    A non-zero exit or a failure to start raises BackendError.
    """
    executable = shutil.which(program) or program
    full_env = {**os.environ, **env} if env else None
    try:
        completed = subprocess.run(
            [executable, *args],
            capture_output=True,
            env=full_env,
            check=False,
        )
    except OSError as exc:
        raise BackendError(f'exec: "{program}": {exc}') from exc
    if completed.returncode != 0:
        raise BackendError(f"exit status {completed.returncode}")
    return completed.stdout.decode("utf-8", errors="replace")