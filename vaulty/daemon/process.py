"""The daemon's PID file and control of the daemon process."""

from __future__ import annotations

import os
import signal
import subprocess
from pathlib import Path

DEFAULT_SOCKET_PATH = "/tmp/vaulty.sock"


def pid_file_path() -> str:
    """Return the path of the daemon's PID file."""
    return str(Path.home() / ".config" / "vaulty" / "vaulty.pid")


def socket_path() -> str:
    """Return the default socket path."""
    return DEFAULT_SOCKET_PATH


def write_pid(path: str | os.PathLike[str] | None = None) -> str:
    """Write the current process id to ``path`` (the default PID file if omitted)."""
    target = Path(path) if path is not None else Path(pid_file_path())
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="ascii") as handle:
        handle.write(str(os.getpid()))
    return str(target)


def _windows_alive(pid: int) -> bool:
    try:
        completed = subprocess.run(
            ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
            capture_output=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        # Without tasklist there is no reliable check; assume it is still running.
        return True
    return str(pid).encode("ascii") in completed.stdout


def is_process_alive(pid: int) -> bool:
    """Return True if a process with ``pid`` exists and may be signalled."""
    if pid <= 0:
        return False
    if os.name == "nt":
        return _windows_alive(pid)
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


def stop_process(pid: int) -> None:
    """Ask the process ``pid`` to terminate; raises OSError if that fails."""
    if pid <= 0:
        raise ValueError(f"invalid pid {pid}")
    if os.name == "nt":
        try:
            completed = subprocess.run(
                ["taskkill", "/PID", str(pid)], capture_output=True, check=False
            )
        except OSError:
            completed = None
        if completed is not None and completed.returncode == 0:
            return
        os.kill(pid, signal.SIGTERM)
        return
    os.kill(pid, signal.SIGTERM)