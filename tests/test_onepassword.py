import os

import pytest

from vaulty.backend.base import BackendError
from vaulty.backend.onepassword import OnePasswordBackend


def install_op(tmp_path, monkeypatch, body="exit 0"):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    log = tmp_path / "args.txt"
    script = bin_dir / "op"
    script.write_text(f'#!/bin/sh\nprintf "%s\\n" "$@" >> "{log}"\n{body}\n')
    script.chmod(0o755)
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return log


def test_missing_cli_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(BackendError, match="op CLI not found"):
        OnePasswordBackend()


def test_cmd_args_with_vault(tmp_path, monkeypatch):
    install_op(tmp_path, monkeypatch)
    backend = OnePasswordBackend("Work")
    assert backend.name == "1password"
    assert backend.cmd_args_list() == ["item", "list", "--format", "json", "--vault", "Work"]
    assert backend.cmd_args_get("db") == ["read", "op://Work/db/password"]
    assert backend.cmd_args_get_fallback("db") == [
        "item", "get", "db", "--fields", "password", "--format", "json", "--vault", "Work",
    ]


def test_cmd_args_without_vault(tmp_path, monkeypatch):
    install_op(tmp_path, monkeypatch)
    backend = OnePasswordBackend()
    assert backend.cmd_args_list() == ["item", "list", "--format", "json"]
    assert backend.cmd_args_get("db") == ["read", "op:///db/password"]
    assert "--vault" not in backend.cmd_args_get_fallback("db")


def test_list_titles(tmp_path, monkeypatch):
    log = install_op(tmp_path, monkeypatch, "printf '%s' '[{\"title\":\"alpha\"},{\"title\":\"beta\"}]'")
    backend = OnePasswordBackend("Work")
    assert backend.list() == ["alpha", "beta"]
    assert log.read_text().splitlines() == backend.cmd_args_list()


def test_get_primary_trims(tmp_path, monkeypatch):
    install_op(tmp_path, monkeypatch, "printf ' token \\n'")
    assert OnePasswordBackend("Work").get("db") == "token"


def test_get_fallback(tmp_path, monkeypatch):
    body = 'case "$1" in read) exit 1;; esac\nprintf \'%s\' \'{"value":"token"}\''
    log = install_op(tmp_path, monkeypatch, body)
    backend = OnePasswordBackend("Work")
    assert backend.get("db") == "token"
    assert log.read_text().splitlines() == (
        backend.cmd_args_get("db") + backend.cmd_args_get_fallback("db")
    )


def test_get_both_fail(tmp_path, monkeypatch):
    install_op(tmp_path, monkeypatch, "exit 1")
    with pytest.raises(BackendError, match="op read"):
        OnePasswordBackend().get("db")


def test_get_fallback_bad_json(tmp_path, monkeypatch):
    body = 'case "$1" in read) exit 1;; esac\nprintf "%s" "nope"'
    install_op(tmp_path, monkeypatch, body)
    with pytest.raises(BackendError, match="parsing op item get output"):
        OnePasswordBackend().get("db")