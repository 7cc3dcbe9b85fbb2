"""Kubernetes Secret manifest export/import."""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from typing import TextIO

import yaml


class K8sSecretError(ValueError):
    """Raised when a Kubernetes Secret manifest cannot be read."""


def parse_k8s_secret(data: str | bytes) -> dict[str, str]:
    """Return the base64-decoded ``data`` entries of a Kubernetes Secret manifest."""
    try:
        manifest = yaml.load(data, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise K8sSecretError(f"parsing K8s Secret manifest: {exc}") from exc

    if manifest is None or manifest == "":
        manifest = {}
    if not isinstance(manifest, dict):
        raise K8sSecretError("parsing K8s Secret manifest: document must be a mapping")

    kind = manifest.get("kind", "")
    if kind != "Secret":
        shown = json.dumps(kind if isinstance(kind, str) else "", ensure_ascii=False)
        raise K8sSecretError(f"expected Kind: Secret, got {shown}")

    entries = manifest.get("data") or {}
    if not isinstance(entries, dict):
        raise K8sSecretError("parsing K8s Secret manifest: data must be a mapping")

    result: dict[str, str] = {}
    for key, encoded in entries.items():
        if not isinstance(encoded, str):
            raise K8sSecretError(f"decoding base64 for key {json.dumps(str(key))}: not a string")
        cleaned = encoded.replace("\r", "").replace("\n", "")
        try:
            decoded = base64.b64decode(cleaned, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise K8sSecretError(f"decoding base64 for key {json.dumps(str(key))}: {exc}") from exc
        result[str(key)] = decoded.decode("utf-8", errors="replace")
    return result


def write_k8s_secret(
    stream: TextIO, name: str, namespace: str, secrets: Mapping[str, str]
) -> None:
    """Write an Opaque Secret manifest with base64-encoded values in sorted key order."""
    stream.write("apiVersion: v1\n")
    stream.write("kind: Secret\n")
    stream.write("metadata:\n")
    stream.write(f"  name: {name}\n")
    if namespace:
        stream.write(f"  namespace: {namespace}\n")
    stream.write("type: Opaque\n")
    stream.write("data:\n")
    for key in sorted(secrets):
        encoded = base64.b64encode(secrets[key].encode("utf-8")).decode("ascii")
        stream.write(f"  {key}: {encoded}\n")