"""Reading and writing of ``.env`` files."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from typing import TextIO

REDACTED = "****"

_ESCAPES = {"n": "\n", "\\": "\\", '"': '"'}
_ESCAPE_RE = re.compile(r'\\([n\\"])')


class DotenvError(ValueError):
    """Raised when a .env document cannot be parsed."""


def parse_dotenv(stream: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=value`` lines from a text stream into a dict.

    Supports comments, blank lines, an ``export`` prefix, single-quoted
    (literal) values, double-quoted values with ``\\n``, ``\\\\`` and ``\\"``
    escapes, and unquoted values with trailing `` #`` comments.
    Multiline values are not supported.
    """
    result: dict[str, str] = {}
    for line_num, raw_line in enumerate(stream, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        if line.startswith("export "):
            line = line[len("export "):].strip()

        key, sep, raw = line.partition("=")
        if not sep:
            quoted = json.dumps(line, ensure_ascii=False)
            raise DotenvError(f"line {line_num}: missing '=' in {quoted}")

        key = key.strip()
        if not key:
            raise DotenvError(f"line {line_num}: empty key")

        try:
            result[key] = _parse_value(raw)
        except DotenvError as exc:
            raise DotenvError(f"line {line_num}: {exc}") from None
    return result


def _parse_value(raw: str) -> str:
    raw = raw.strip()
    if not raw:
        return ""

    if raw.startswith("'"):
        if len(raw) < 2 or not raw.endswith("'"):
            raise DotenvError("unterminated single quote")
        return raw[1:-1]

    if raw.startswith('"'):
        if len(raw) < 2 or not raw.endswith('"'):
            raise DotenvError("unterminated double quote")
        return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(1)], raw[1:-1])

    comment = raw.find(" #")
    if comment >= 0:
        raw = raw[:comment].strip()
    return raw


def write_dotenv(stream: TextIO, secrets: Mapping[str, str], reveal: bool = False) -> None:
    """Write secrets as sorted ``KEY=value`` lines; values are masked unless ``reveal``."""
    for key in sorted(secrets):
        value = secrets[key] if reveal else REDACTED
        stream.write(f"{key}={value}\n")