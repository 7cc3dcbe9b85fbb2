"""JSON messages exchanged between clients and the daemon."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Request:
    """A request to the daemon; ``action`` is ``proxy``, ``exec`` or ``list``."""

    action: str = ""
    method: str = ""
    url: str = ""
    secret: str = ""
    secrets: list[str] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    command: str = ""
    work_dir: str = ""
    vault: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty optional fields are left out."""
        data: dict[str, Any] = {"action": self.action}
        for key in ("method", "url", "secret"):
            if getattr(self, key):
                data[key] = getattr(self, key)
        if self.secrets:
            data["secrets"] = list(self.secrets)
        if self.headers:
            data["headers"] = dict(self.headers)
        for key in ("body", "command", "work_dir", "vault"):
            if getattr(self, key):
                data[key] = getattr(self, key)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Request:
        """Build a request from its JSON form, ignoring unknown keys."""
        return cls(
            action=data.get("action") or "",
            method=data.get("method") or "",
            url=data.get("url") or "",
            secret=data.get("secret") or "",
            secrets=list(data.get("secrets") or []),
            headers=dict(data.get("headers") or {}),
            body=data.get("body") or "",
            command=data.get("command") or "",
            work_dir=data.get("work_dir") or "",
            vault=data.get("vault") or "",
        )


@dataclass
class SecretInfo:
    """What may be told about a secret without revealing its value."""

    name: str = ""
    description: str = ""
    allowed_domains: list[str] = field(default_factory=list)
    allowed_commands: list[str] = field(default_factory=list)
    inject_as: str = ""
    vault: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty optional fields are left out."""
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.allowed_domains:
            data["allowed_domains"] = list(self.allowed_domains)
        if self.allowed_commands:
            data["allowed_commands"] = list(self.allowed_commands)
        if self.inject_as:
            data["inject_as"] = self.inject_as
        if self.vault:
            data["vault"] = self.vault
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SecretInfo:
        """Build the description from its JSON form."""
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            allowed_domains=list(data.get("allowed_domains") or []),
            allowed_commands=list(data.get("allowed_commands") or []),
            inject_as=data.get("inject_as") or "",
            vault=data.get("vault") or "",
        )


@dataclass
class Response:
    """The daemon's answer to a request."""

    ok: bool = False
    error: str = ""
    status: int = 0
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    secret_list: list[SecretInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty optional fields are left out."""
        data: dict[str, Any] = {"ok": self.ok}
        if self.error:
            data["error"] = self.error
        if self.status:
            data["status"] = self.status
        if self.headers:
            data["headers"] = dict(self.headers)
        if self.body:
            data["body"] = self.body
        if self.exit_code is not None:
            data["exit_code"] = self.exit_code
        if self.stdout:
            data["stdout"] = self.stdout
        if self.stderr:
            data["stderr"] = self.stderr
        if self.secret_list:
            data["secrets"] = [info.to_dict() for info in self.secret_list]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Response:
        """Build a response from its JSON form, ignoring unknown keys."""
        exit_code = data.get("exit_code")
        return cls(
            ok=bool(data.get("ok")),
            error=data.get("error") or "",
            status=int(data.get("status") or 0),
            headers=dict(data.get("headers") or {}),
            body=data.get("body") or "",
            exit_code=None if exit_code is None else int(exit_code),
            stdout=data.get("stdout") or "",
            stderr=data.get("stderr") or "",
            secret_list=[SecretInfo.from_dict(item) for item in data.get("secrets") or []],
        )