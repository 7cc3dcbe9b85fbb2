"""Rails credentials: decryption, flattening and nested YAML export."""

from __future__ import annotations

import base64
import binascii
import math
import os
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import yaml
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM


class RailsCredentialsError(ValueError):
    """Raised when Rails credentials cannot be read, parsed or decrypted."""


def _format_float(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    value = Decimal(repr(number)).normalize()
    sign, digits, exp = value.as_tuple()
    exponent = len(digits) + exp - 1
    prefix = "-" if sign else ""
    if -4 <= exponent < 21:
        return prefix + format(abs(value), "f")
    text = "".join(map(str, digits))
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    return f"{prefix}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent):02d}"


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, list):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = sorted((_format_value(k), _format_value(v)) for k, v in value.items())
        return "map[" + " ".join(f"{k}:{v}" for k, v in items) + "]"
    return str(value)


def parse_rails_credentials(data: str | bytes) -> dict[str, str]:
    """Parse credentials YAML and flatten nested keys to ``SECTION_KEY`` form."""
    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise RailsCredentialsError(f"parsing YAML credentials: {exc}") from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise RailsCredentialsError("parsing YAML credentials: document must be a mapping")
    return flatten_yaml("", document)


def flatten_yaml(prefix: str, data: Mapping[Any, Any]) -> dict[str, str]:
    """Flatten a nested mapping into upper-case, underscore-joined keys."""
    result: dict[str, str] = {}
    for key, value in data.items():
        full_key = _format_value(key).upper()
        if prefix:
            full_key = f"{prefix}_{full_key}"
        if isinstance(value, Mapping):
            result.update(flatten_yaml(full_key, value))
        else:
            result[full_key] = _format_value(value)
    return result


def _unflatten(secrets: Mapping[str, str]) -> dict[str, Any]:
    root: dict[str, Any] = {}
    for key in sorted(secrets):
        section, sep, leaf = key.lower().partition("_")
        value = secrets[key]
        if not sep:
            root[section] = value
            continue
        sub = root.get(section)
        if not isinstance(sub, dict):
            sub = root[section] = {}
        sub[leaf] = value
    return root


def write_rails_credentials(secrets: Mapping[str, str]) -> str:
    """Render flattened secrets as nested YAML: ``AWS_ACCESS_KEY_ID`` becomes ``aws.access_key_id``."""
    return yaml.safe_dump(
        _unflatten(secrets),
        default_flow_style=False,
        sort_keys=True,
        indent=4,
        allow_unicode=True,
        width=2**31 - 1,
    )


def decrypt_rails_credentials(
    enc_path: str | os.PathLike[str], key_path: str | os.PathLike[str]
) -> bytes:
    """Decrypt a Rails 7+ ``credentials.yml.enc`` file with its hex master key file."""
    try:
        with open(enc_path, "rb") as handle:
            enc_data = handle.read()
    except OSError as exc:
        raise RailsCredentialsError(f"reading encrypted credentials {enc_path}: {exc}") from exc

    try:
        with open(key_path, "rb") as handle:
            key_data = handle.read()
    except OSError as exc:
        raise RailsCredentialsError(f"reading master key {key_path}: {exc}") from exc

    try:
        master_key = binascii.unhexlify(key_data.strip())
    except (binascii.Error, ValueError) as exc:
        raise RailsCredentialsError(
            f"decoding master key hex: {exc} (is {key_path} a valid hex string?)"
        ) from exc

    if len(master_key) != 32:
        raise RailsCredentialsError(
            f"master key must be 32 bytes (got {len(master_key)}) \u2014 Rails 7+ uses AES-256-GCM"
        )

    return decrypt_rails_payload(enc_data.decode("utf-8", errors="replace").strip(), master_key)


def _b64(part: str, what: str) -> bytes:
    try:
        return base64.b64decode(part, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RailsCredentialsError(f"decoding {what}: {exc}") from exc


def decrypt_rails_payload(payload: str, key: bytes) -> bytes:
    """Decrypt ``base64(data)--base64(iv)--base64(auth_tag)`` with AES-GCM."""
    parts = payload.split("--")
    if len(parts) != 3:
        raise RailsCredentialsError(
            "invalid Rails credentials format: expected 3 parts separated by '--', "
            f"got {len(parts)}"
        )

    encrypted = _b64(parts[0], "encrypted data")
    nonce = _b64(parts[1], "IV")
    auth_tag = _b64(parts[2], "auth tag")

    try:
        cipher = AESGCM(key)
    except ValueError as exc:
        raise RailsCredentialsError(f"creating AES cipher: {exc}") from exc

    try:
        return cipher.decrypt(nonce, encrypted + auth_tag, None)
    except InvalidTag as exc:
        raise RailsCredentialsError(
            "decrypting Rails credentials: authentication failed (wrong master key?)"
        ) from exc
    except ValueError as exc:
        raise RailsCredentialsError(f"creating GCM: {exc}") from exc