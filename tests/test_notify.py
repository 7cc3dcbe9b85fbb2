from unittest import mock

from vaulty.daemon.notify import Notifier, format_body


def test_notifier_disabled_noop():
    with mock.patch("vaulty.daemon.notify.subprocess.run") as run:
        result = Notifier(False).notify_denied("API_KEY", "https://evil.com", "domain not in allowlist")
    assert (result, run.call_count) == (None, 0)


def test_notifier_enabled_missing_tool_does_not_raise():
    with mock.patch("vaulty.daemon.notify.subprocess.run", side_effect=FileNotFoundError) as run:
        result = Notifier(True).notify_denied("DB_URL", "curl http://evil.com", "command not in allowlist")
    assert (result, run.call_count) == (None, 1)


def test_notifier_enabled_command_line():
    with mock.patch("vaulty.daemon.notify.subprocess.run") as run:
        result = Notifier(True).notify_denied("DB_URL", "curl http://evil.com", "command not in allowlist")
    assert (result, run.call_args.args[0]) == (
        None,
        [
            "notify-send",
            "--urgency=critical",
            "Vaulty: access denied",
            "Secret: DB_URL\nTarget: curl http://evil.com\nReason: command not in allowlist",
        ],
    )


def test_format_body():
    body = format_body("API_KEY", "https://evil.com/steal", "domain not in allowlist")
    assert "Secret: API_KEY" in body
    assert "Target: https://evil.com/steal" in body
    assert "Reason: domain not in allowlist" in body


def test_format_body_structure():
    body = format_body("SECRET", "target", "reason")
    assert len(body.split("\n")) == 3
    assert body == "Secret: SECRET\nTarget: target\nReason: reason"