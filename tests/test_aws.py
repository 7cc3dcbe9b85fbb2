import os

import pytest

from vaulty.backend.aws import AWSBackend
from vaulty.backend.base import BackendError


def install_aws(tmp_path, monkeypatch, body="exit 0"):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    log = tmp_path / "args.txt"
    script = bin_dir / "aws"
    script.write_text(f'#!/bin/sh\nprintf "%s\\n" "$@" >> "{log}"\n{body}\n')
    script.chmod(0o755)
    monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
    return log


def logged_args(log):
    return log.read_text().splitlines()


def test_missing_cli_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    with pytest.raises(BackendError, match="aws CLI not found"):
        AWSBackend()


def test_cmd_args_without_flags(tmp_path, monkeypatch):
    install_aws(tmp_path, monkeypatch)
    backend = AWSBackend()
    assert backend.name == "aws-secrets-manager"
    assert backend.cmd_args_get("db") == [
        "secretsmanager", "get-secret-value", "--secret-id", "db",
        "--query", "SecretString", "--output", "text",
    ]
    assert backend.cmd_args_list() == [
        "secretsmanager", "list-secrets", "--query", "SecretList[].Name", "--output", "json",
    ]


def test_cmd_args_with_flags_in_order(tmp_path, monkeypatch):
    install_aws(tmp_path, monkeypatch)
    backend = AWSBackend("eu-west-1", "dev", "http://localhost:4566")
    assert backend.cmd_args_list()[-6:] == [
        "--endpoint-url", "http://localhost:4566",
        "--region", "eu-west-1",
        "--profile", "dev",
    ]
    assert backend.cmd_args_get("db")[:4] == ["secretsmanager", "get-secret-value", "--secret-id", "db"]


def test_list_parses_names(tmp_path, monkeypatch):
    log = install_aws(tmp_path, monkeypatch, "printf '%s' '[\"alpha\",\"beta\"]'")
    backend = AWSBackend(region="eu-west-1")
    assert backend.list() == ["alpha", "beta"]
    assert logged_args(log) == backend.cmd_args_list()


def test_list_null_is_empty(tmp_path, monkeypatch):
    install_aws(tmp_path, monkeypatch, "printf '%s' 'null'")
    assert AWSBackend().list() == []


def test_list_bad_json(tmp_path, monkeypatch):
    install_aws(tmp_path, monkeypatch, "printf '%s' 'not json'")
    with pytest.raises(BackendError, match="parsing aws list-secrets output"):
        AWSBackend().list()


def test_get_trims_output(tmp_path, monkeypatch):
    log = install_aws(tmp_path, monkeypatch, "printf '  token  \\n'")
    backend = AWSBackend(profile="dev")
    assert backend.get("api") == "token"
    assert logged_args(log) == backend.cmd_args_get("api")


def test_get_failure(tmp_path, monkeypatch):
    install_aws(tmp_path, monkeypatch, "exit 3")
    with pytest.raises(BackendError, match="aws secretsmanager get-secret-value"):
        AWSBackend().get("api")