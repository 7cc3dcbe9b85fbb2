"""Building configured secret backends."""

from __future__ import annotations

import re
from dataclasses import dataclass

from vaulty.backend.aws import AWSBackend
from vaulty.backend.base import BackendError, SecretBackend
from vaulty.backend.cache import CachedBackend
from vaulty.backend.gcp import GCPBackend
from vaulty.backend.hashicorp import HashiCorpBackend
from vaulty.backend.onepassword import OnePasswordBackend

DEFAULT_TTL = 5 * 60.0

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "\u00b5s": 1e-6,
    "\u03bcs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_NUMBER_RE = re.compile(r"\d*(?:\.\d*)?")
_UNIT_RE = re.compile(r"[^\d.]*")


@dataclass
class BackendConfig:
    """Settings of one configured backend."""

    type: str = ""
    region: str = ""
    profile: str = ""
    endpoint: str = ""
    project: str = ""
    addr: str = ""
    mount: str = ""
    op_vault: str = ""
    ttl: str = ""


def parse_duration(text: str) -> float:
    """Parse a duration such as ``5m``, ``1h30m`` or ``1.5s`` into seconds."""
    quoted = f'"{text}"'
    rest = text
    sign = 1.0
    if rest[:1] in ("+", "-"):
        sign = -1.0 if rest[0] == "-" else 1.0
        rest = rest[1:]
    if rest == "0":
        return 0.0
    if not rest:
        raise ValueError(f"time: invalid duration {quoted}")

    total = 0.0
    while rest:
        number = _NUMBER_RE.match(rest).group(0)
        if not any(ch.isdigit() for ch in number):
            raise ValueError(f"time: invalid duration {quoted}")
        rest = rest[len(number):]
        unit = _UNIT_RE.match(rest).group(0)
        if not unit:
            raise ValueError(f"time: missing unit in duration {quoted}")
        if unit not in _UNITS:
            raise ValueError(f'time: unknown unit "{unit}" in duration {quoted}')
        rest = rest[len(unit):]
        total += float(number) * _UNITS[unit]
    return sign * total


def new_backend(cfg: BackendConfig) -> CachedBackend:
    """Create the backend described by ``cfg``, wrapped in a TTL cache."""
    inner: SecretBackend
    if cfg.type == "aws-secrets-manager":
        inner = AWSBackend(cfg.region, cfg.profile, cfg.endpoint)
    elif cfg.type == "gcp-secret-manager":
        inner = GCPBackend(cfg.project)
    elif cfg.type == "hashicorp-vault":
        inner = HashiCorpBackend(cfg.addr, cfg.mount)
    elif cfg.type == "1password":
        inner = OnePasswordBackend(cfg.op_vault)
    else:
        raise BackendError(
            f'unknown backend type "{cfg.type}" \u2014 supported: aws-secrets-manager, '
            "gcp-secret-manager, hashicorp-vault, 1password"
        )

    ttl = DEFAULT_TTL
    if cfg.ttl:
        try:
            ttl = parse_duration(cfg.ttl)
        except ValueError as exc:
            raise BackendError(f'invalid TTL "{cfg.ttl}": {exc}') from exc

    return CachedBackend(inner, ttl)