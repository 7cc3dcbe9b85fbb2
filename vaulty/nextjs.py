"""Next.js environment variable classification."""

from __future__ import annotations

from collections.abc import Mapping

PUBLIC_PREFIX = "NEXT_PUBLIC_"


def is_public_env_var(key: str) -> bool:
    """Return True if ``key`` is exposed to the browser by Next.js."""
    return key.startswith(PUBLIC_PREFIX)


def classify_nextjs_env(secrets: Mapping[str, str]) -> tuple[dict[str, str], dict[str, str]]:
    """Split secrets into (public, private) dicts by the ``NEXT_PUBLIC_`` prefix."""
    public: dict[str, str] = {}
    private: dict[str, str] = {}
    for key, value in secrets.items():
        (public if is_public_env_var(key) else private)[key] = value
    return public, private