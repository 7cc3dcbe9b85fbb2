"""Desktop notifications for denied secret access."""

from __future__ import annotations

import subprocess

SUMMARY = "Vaulty: access denied"


def format_body(secret_name: str, target: str, reason: str) -> str:
    """Return the notification text for a denied request."""
    return f"Secret: {secret_name}\nTarget: {target}\nReason: {reason}"


class Notifier:
    """Sends critical desktop notifications through ``notify-send`` when enabled."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def notify_denied(self, secret_name: str, target: str, reason: str) -> None:
        """Announce a denied request; silently does nothing if that is not possible."""
        if not self.enabled:
            return
        try:
            subprocess.run(
                [
                    "notify-send",
                    "--urgency=critical",
                    SUMMARY,
                    format_body(secret_name, target, reason),
                ],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            pass