"""HashiCorp Vault KV through the vault CLI."""

from __future__ import annotations

import json

from vaulty.backend.base import BackendError, SecretBackend, _require_cli, run_cli


class HashiCorpBackend(SecretBackend):
    """Reads secrets from a HashiCorp Vault KV mount with the ``vault`` command."""

    name = "hashicorp-vault"

    def __init__(self, addr: str = "", mount: str = "") -> None:
        _require_cli("vault", "install the Vault CLI and put it on PATH")
        self.addr = addr
        self.mount = mount or "secret"

    def _env(self) -> dict[str, str] | None:
        return {"VAULT_ADDR": self.addr} if self.addr else None

    def list(self) -> list[str]:
        """Return the keys stored under the mount."""
        try:
            out = run_cli("vault", self.cmd_args_list(), self._env())
        except BackendError as exc:
            raise BackendError(f"vault kv list: {exc}") from exc
        try:
            names = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing vault kv list output: {exc}") from exc
        if names is None:
            return []
        if not isinstance(names, list):
            raise BackendError("parsing vault kv list output: expected a JSON array")
        return [str(item) for item in names]

    def get(self, name: str) -> str:
        """Return the ``value`` field, or the whole data object as JSON when it has none."""
        try:
            return run_cli("vault", self.cmd_args_get_field(name), self._env()).strip()
        except BackendError:
            pass

        try:
            out = run_cli("vault", self.cmd_args_get_json(name), self._env())
        except BackendError as exc:
            raise BackendError(f"vault kv get: {exc}") from exc
        try:
            response = json.loads(out)
        except ValueError as exc:
            raise BackendError(f"parsing vault kv get output: {exc}") from exc
        if not isinstance(response, dict):
            raise BackendError("parsing vault kv get output: expected a JSON object")
        outer = response.get("data")
        if not isinstance(outer, dict) or "data" not in outer:
            return ""
        return json.dumps(outer["data"], separators=(",", ":"), ensure_ascii=False)

    def cmd_args_list(self) -> list[str]:
        """Arguments passed to ``vault`` for list."""
        return ["kv", "list", "-format=json", self.mount]

    def cmd_args_get_field(self, name: str) -> list[str]:
        """Arguments passed to ``vault`` to read the ``value`` field."""
        return ["kv", "get", "-field=value", f"-mount={self.mount}", name]

    def cmd_args_get_json(self, name: str) -> list[str]:
        """Arguments passed to ``vault`` to read the whole secret as JSON."""
        return ["kv", "get", "-format=json", f"-mount={self.mount}", name]