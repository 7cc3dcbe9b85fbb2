"""Docker Compose and Docker secrets export/import."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TextIO

import yaml

_GO_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    '"': '\\"',
    "\\": "\\\\",
}


class ComposeError(ValueError):
    """Raised when a docker-compose document cannot be parsed."""


def _quote(text: str) -> str:
    """Double-quote ``text`` with escapes that are also valid YAML."""
    parts = []
    for ch in text:
        if ch in _GO_ESCAPES:
            parts.append(_GO_ESCAPES[ch])
        elif ch.isprintable():
            parts.append(ch)
        else:
            code = ord(ch)
            if code < 0x20 or code == 0x7F:
                parts.append(f"\\x{code:02x}")
            elif code < 0x10000:
                parts.append(f"\\u{code:04x}")
            else:
                parts.append(f"\\U{code:08x}")
    return '"' + "".join(parts) + '"'


def write_compose_override(stream: TextIO, secrets: Mapping[str, str], service_name: str) -> None:
    """Write a docker-compose.override.yml with the secrets as environment variables."""
    stream.write("# Generated by vaulty export-docker\n")
    stream.write("services:\n")
    stream.write(f"  {service_name}:\n")
    stream.write("    environment:\n")
    for key in sorted(secrets):
        stream.write(f"      {key}: {_quote(secrets[key])}\n")


def write_secret_files(directory: str | os.PathLike[str], secrets: Mapping[str, str]) -> None:
    """Write each secret as its own file ``directory/<name>`` (Docker secrets layout)."""
    base = Path(directory)
    base.mkdir(mode=0o700, parents=True, exist_ok=True)
    for name, value in secrets.items():
        fd = os.open(base / name, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(value)


def _as_mapping(value: Any, what: str) -> dict:
    if value is None or value == "":
        return {}
    if not isinstance(value, dict):
        raise ComposeError(f"parsing docker-compose.yml: {what} must be a mapping")
    return value


def parse_compose_env(data: str | bytes) -> dict[str, str]:
    """Collect environment variables from every service of a compose file.

    Both mapping syntax (``KEY: value``) and list syntax (``- KEY=value``) are read.
    """
    try:
        document = yaml.load(data, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ComposeError(f"parsing docker-compose.yml: {exc}") from exc

    result: dict[str, str] = {}
    services = _as_mapping(_as_mapping(document, "document").get("services"), "services")
    for service in services.values():
        environment = _as_mapping(service, "service").get("environment")
        if isinstance(environment, dict):
            for key, value in environment.items():
                result[str(key)] = value if isinstance(value, str) else ""
        elif isinstance(environment, list):
            for item in environment:
                if not isinstance(item, str):
                    continue
                key, _, value = item.partition("=")
                if key:
                    result[key] = value
    return result