"""GCP Secret Manager through the gcloud CLI."""

from __future__ import annotations

import json

from vaulty.backend.base import BackendError, SecretBackend, _require_cli, run_cli


class GCPBackend(SecretBackend):
    """Reads secrets from GCP Secret Manager with the ``gcloud`` command."""

    name = "gcp-secret-manager"

    def __init__(self, project: str = "") -> None:
        _require_cli("gcloud", "install the Google Cloud SDK and put it on PATH")
        self.project = project

    def list(self) -> list[str]:
        """Return the short secret names (last segment of each resource path)."""
        try:
            out = run_cli("gcloud", self.cmd_args_list())
        except BackendError as exc:
            raise BackendError(f"gcloud secrets list: {exc}") from exc
        try:
            entries = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing gcloud secrets list output: {exc}") from exc
        if entries is None:
            return []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise BackendError("parsing gcloud secrets list output: expected an array of objects")
        return [str(entry.get("name", "")).split("/")[-1] for entry in entries]

    def get(self, name: str) -> str:
        """Return the latest version of ``name``, exactly as printed."""
        try:
            return run_cli("gcloud", self.cmd_args_get(name))
        except BackendError as exc:
            raise BackendError(f"gcloud secrets versions access: {exc}") from exc

    def cmd_args_list(self) -> list[str]:
        """Arguments passed to ``gcloud`` for list."""
        args = ["secrets", "list", "--format", "json"]
        if self.project:
            args += ["--project", self.project]
        return args

    def cmd_args_get(self, name: str) -> list[str]:
        """Arguments passed to ``gcloud`` for get."""
        args = ["secrets", "versions", "access", "latest", f"--secret={name}"]
        if self.project:
            args.append(f"--project={self.project}")
        return args