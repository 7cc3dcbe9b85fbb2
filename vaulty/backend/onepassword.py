"""1Password through the op CLI."""

from __future__ import annotations

import json

from vaulty.backend.base import BackendError, SecretBackend, _require_cli, run_cli


class OnePasswordBackend(SecretBackend):
    """Reads item passwords from a 1Password vault with the ``op`` command."""

    name = "1password"

    def __init__(self, op_vault: str = "") -> None:
        _require_cli("op", "install the 1Password CLI and put it on PATH")
        self.vault = op_vault

    def list(self) -> list[str]:
        """Return the item titles."""
        try:
            out = run_cli("op", self.cmd_args_list())
        except BackendError as exc:
            raise BackendError(f"op item list: {exc}") from exc
        try:
            items = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing op item list output: {exc}") from exc
        if items is None:
            return []
        if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
            raise BackendError("parsing op item list output: expected an array of objects")
        return [str(item.get("title", "")) for item in items]

    def get(self, name: str) -> str:
        """Read the item's password via ``op read``, falling back to ``op item get``."""
        try:
            return run_cli("op", self.cmd_args_get(name)).strip()
        except BackendError:
            pass

        try:
            out = run_cli("op", self.cmd_args_get_fallback(name))
        except BackendError as exc:
            raise BackendError(f"op read: {exc}") from exc
        try:
            field = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing op item get output: {exc}") from exc
        if field is None:
            return ""
        if not isinstance(field, dict):
            raise BackendError("parsing op item get output: expected a JSON object")
        value = field.get("value", "")
        return value if isinstance(value, str) else ""

    def cmd_args_list(self) -> list[str]:
        """Arguments passed to ``op`` for list."""
        args = ["item", "list", "--format", "json"]
        if self.vault:
            args += ["--vault", self.vault]
        return args

    def cmd_args_get(self, name: str) -> list[str]:
        """Arguments passed to ``op`` for the primary read."""
        return ["read", f"op://{self.vault}/{name}/password"]

    def cmd_args_get_fallback(self, name: str) -> list[str]:
        """Arguments passed to ``op`` when the primary read fails."""
        args = ["item", "get", name, "--fields", "password", "--format", "json"]
        if self.vault:
            args += ["--vault", self.vault]
        return args