"""Append-only audit log of secret use, one JSON object per line."""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

_JSON_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass
class Entry:
    """A single audit record.

    ``action`` is one of ``proxy``, ``exec``, ``denied`` or ``approval``.
    """

    action: str = ""
    secret: str = ""
    target: str = ""
    method: str = ""
    status: int = 0
    command: str = ""
    exit_code: int | None = None
    reason: str = ""
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; empty optional fields are left out."""
        data: dict[str, Any] = {
            "ts": self.timestamp,
            "action": self.action,
            "secret": self.secret,
        }
        if self.target:
            data["target"] = self.target
        if self.method:
            data["method"] = self.method
        if self.status:
            data["status"] = self.status
        if self.command:
            data["command"] = self.command
        if self.exit_code is not None:
            data["exit_code"] = self.exit_code
        if self.reason:
            data["reason"] = self.reason
        return data


def _encode(entry: Entry) -> str:
    text = json.dumps(entry.to_dict(), ensure_ascii=False, separators=(",", ":"))
    for char, escaped in _JSON_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def expand_path(path: str) -> str:
    """Expand a leading ``~/`` to the user's home directory."""
    if path.startswith("~/"):
        try:
            home = Path.home()
        except RuntimeError:
            return path
        return str(home / path[2:])
    return path


class AuditLogger:
    """Writes audit entries to an append-only file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = expand_path(os.fspath(path))
        Path(self.path).parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o600)
        self._file = os.fdopen(fd, "a", encoding="utf-8", newline="")
        self._lock = threading.Lock()

    def __enter__(self) -> AuditLogger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def log(self, entry: Entry) -> None:
        """Stamp ``entry`` with the current UTC time and append it."""
        stamped = replace(
            entry, timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        )
        line = _encode(stamped) + "\n"
        with self._lock:
            self._file.write(line)
            self._file.flush()

    def log_proxy(self, secret: str, method: str, target: str, status: int) -> None:
        """Record a proxied HTTP request."""
        self.log(Entry(action="proxy", secret=secret, method=method, target=target, status=status))

    def log_exec(self, secret: str, command: str, exit_code: int) -> None:
        """Record a command execution."""
        self.log(Entry(action="exec", secret=secret, command=command, exit_code=exit_code))

    def log_denied(self, secret: str, target: str, reason: str) -> None:
        """Record a request refused by policy."""
        self.log(Entry(action="denied", secret=secret, target=target, reason=reason))

    def log_approval(self, secret: str, target: str, decision: str) -> None:
        """Record an approval decision."""
        self.log(Entry(action="approval", secret=secret, target=target, reason=decision))

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            self._file.close()