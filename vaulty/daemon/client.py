"""Client for talking to a running daemon over a Unix socket or local HTTP."""

from __future__ import annotations

import http.client
import json
import socket

from vaulty.daemon.protocol import Request, Response

REQUEST_PATH = "/v1/request"
_DIAL_TIMEOUT = 5.0
_PROBE_TIMEOUT = 1.0
_REQUEST_TIMEOUT = 60.0


class DaemonError(Exception):
    """Raised when the daemon cannot be reached or answers with garbage."""


class _UnixHTTPConnection(http.client.HTTPConnection):
    def __init__(self, socket_path: str, timeout: float) -> None:
        super().__init__("vaulty", timeout=timeout)
        self._socket_path = socket_path

    def connect(self) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(_DIAL_TIMEOUT)
            sock.connect(self._socket_path)
        except OSError:
            sock.close()
            raise
        sock.settimeout(self.timeout)
        self.sock = sock


class DaemonClient:
    """Sends requests to the daemon, through ``socket_path`` if given, else to ``port``."""

    def __init__(
        self,
        *,
        socket_path: str | None = None,
        port: int = 0,
        timeout: float = _REQUEST_TIMEOUT,
    ) -> None:
        self.socket_path = socket_path or None
        self.port = port
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        if self.socket_path:
            return "http://vaulty"
        return f"http://127.0.0.1:{self.port}"

    def _connection(self) -> http.client.HTTPConnection:
        if self.socket_path:
            return _UnixHTTPConnection(self.socket_path, self.timeout)
        return http.client.HTTPConnection("127.0.0.1", self.port, timeout=self.timeout)

    def send(self, request: Request) -> Response:
        """Send ``request`` and return the daemon's response."""
        body = json.dumps(request.to_dict()).encode("utf-8")
        connection = self._connection()
        try:
            try:
                connection.request(
                    "POST",
                    REQUEST_PATH,
                    body=body,
                    headers={"Content-Type": "application/json"},
                )
                reply = connection.getresponse()
            except (OSError, http.client.HTTPException) as exc:
                raise DaemonError(f"daemon not running or unreachable: {exc}") from exc
            try:
                raw = reply.read()
            except (OSError, http.client.HTTPException) as exc:
                raise DaemonError(f"reading response: {exc}") from exc
        finally:
            connection.close()

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise DaemonError(f"parsing response: {exc}") from exc
        if not isinstance(data, dict):
            raise DaemonError("parsing response: expected a JSON object")
        return Response.from_dict(data)


def new_socket_client(socket_path: str) -> DaemonClient:
    """Return a client that connects through a Unix socket."""
    return DaemonClient(socket_path=socket_path)


def new_http_client(port: int) -> DaemonClient:
    """Return a client that connects to 127.0.0.1 on ``port``."""
    return DaemonClient(port=port)


def new_client(socket_path: str, http_port: int) -> DaemonClient:
    """Use the socket if it accepts a connection, otherwise fall back to HTTP."""
    if socket_path and hasattr(socket, "AF_UNIX"):
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as probe:
                probe.settimeout(_PROBE_TIMEOUT)
                probe.connect(socket_path)
        except OSError:
            pass
        else:
            return new_socket_client(socket_path)
    return new_http_client(http_port)