"""AWS Secrets Manager through the aws CLI."""

from __future__ import annotations

import json

from vaulty.backend.base import BackendError, SecretBackend, _require_cli, run_cli


class AWSBackend(SecretBackend):
    """Reads secrets from AWS Secrets Manager with the ``aws`` command."""

    name = "aws-secrets-manager"

    def __init__(self, region: str = "", profile: str = "", endpoint: str = "") -> None:
        _require_cli("aws", "install the AWS CLI and put it on PATH")
        self.region = region
        self.profile = profile
        self.endpoint = endpoint

    def list(self) -> list[str]:
        """Return the secret names."""
        try:
            out = run_cli("aws", self.cmd_args_list())
        except BackendError as exc:
            raise BackendError(f"aws secretsmanager list-secrets: {exc}") from exc
        try:
            names = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing aws list-secrets output: {exc}") from exc
        if names is None:
            return []
        if not isinstance(names, list):
            raise BackendError("parsing aws list-secrets output: expected a JSON array")
        return [str(item) for item in names]

    def get(self, name: str) -> str:
        """Return the secret string of ``name``."""
        try:
            out = run_cli("aws", self.cmd_args_get(name))
        except BackendError as exc:
            raise BackendError(f"aws secretsmanager get-secret-value: {exc}") from exc
        return out.strip()

    def cmd_args_get(self, name: str) -> list[str]:
        """Arguments passed to ``aws`` for get."""
        return self._with_flags(
            [
                "secretsmanager", "get-secret-value",
                "--secret-id", name,
                "--query", "SecretString", "--output", "text",
            ]
        )

    def cmd_args_list(self) -> list[str]:
        """Arguments passed to ``aws`` for list."""
        return self._with_flags(
            [
                "secretsmanager", "list-secrets",
                "--query", "SecretList[].Name", "--output", "json",
            ]
        )

    def _with_flags(self, args: list[str]) -> list[str]:
        if self.endpoint:
            args += ["--endpoint-url", self.endpoint]
        if self.region:
            args += ["--region", self.region]
        if self.profile:
            args += ["--profile", self.profile]
        return args