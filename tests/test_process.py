import os
import signal
import subprocess
import sys
from pathlib import Path

import pytest

from vaulty.daemon.process import (
    is_process_alive,
    pid_file_path,
    socket_path,
    stop_process,
    write_pid,
)


def _finished_pid():
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait(timeout=30)
    return proc.pid


def test_current_process_alive():
    assert is_process_alive(os.getpid()) is True


def test_finished_process_not_alive():
    assert is_process_alive(_finished_pid()) is False


@pytest.mark.parametrize("pid", [0, -1])
def test_invalid_pid_not_alive(pid):
    assert is_process_alive(pid) is False


def test_stop_process_terminates_child():
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
    try:
        stop_process(proc.pid)
        assert proc.wait(timeout=20) == -signal.SIGTERM
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()


def test_stop_finished_process_raises():
    with pytest.raises(OSError):
        stop_process(_finished_pid())


def test_stop_invalid_pid_raises():
    with pytest.raises(ValueError):
        stop_process(0)


def test_pid_file_path_under_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert pid_file_path() == str(tmp_path / ".config" / "vaulty" / "vaulty.pid")


def test_socket_path():
    assert socket_path() == "/tmp/vaulty.sock"


def test_write_pid(tmp_path):
    target = tmp_path / "run" / "vaulty.pid"
    written = write_pid(target)
    assert written == str(target)
    assert target.read_text() == str(os.getpid())


def test_write_pid_default_location(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    written = Path(write_pid())
    assert written == tmp_path / ".config" / "vaulty" / "vaulty.pid"
    assert int(written.read_text()) == os.getpid()