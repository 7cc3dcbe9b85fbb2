import json
import os
import shutil
import socket
import socketserver
import tempfile
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from vaulty.daemon.client import DaemonError, new_client, new_http_client
from vaulty.daemon.protocol import Request


class _Handler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers["Content-Length"])
        payload = json.loads(self.rfile.read(length))
        self.server.seen.append((self.path, self.headers["Content-Type"], payload))
        reply = self.server.reply
        self.send_response(self.server.status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(reply)))
        self.end_headers()
        self.wfile.write(reply)

    def log_message(self, *args):
        pass


class _UnixServer(socketserver.ThreadingMixIn, socketserver.UnixStreamServer):
    daemon_threads = True


def _serve(server):
    server.seen = []
    server.reply = b'{"ok":true}'
    server.status = 200
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server


@pytest.fixture
def http_server():
    server = _serve(ThreadingHTTPServer(("127.0.0.1", 0), _Handler))
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def unix_server():
    directory = tempfile.mkdtemp(prefix="vc")
    path = os.path.join(directory, "d.sock")
    server = _serve(_UnixServer(path, _Handler))
    yield server, path
    server.shutdown()
    server.server_close()
    shutil.rmtree(directory, ignore_errors=True)


def _free_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_send_over_http(http_server):
    http_server.reply = b'{"ok":true,"status":201,"body":"hi"}'
    client = new_http_client(http_server.server_address[1])

    response = client.send(Request(action="proxy", url="https://api.example.com", secret="token"))

    assert response.ok is True
    assert response.status == 201
    assert response.body == "hi"
    path, content_type, payload = http_server.seen[0]
    assert path == "/v1/request"
    assert content_type == "application/json"
    assert payload == {"action": "proxy", "url": "https://api.example.com", "secret": "token"}


def test_error_status_still_parsed(http_server):
    http_server.status = 400
    http_server.reply = b'{"ok":false,"error":"secret name required"}'
    response = new_http_client(http_server.server_address[1]).send(Request(action="proxy"))
    assert response.ok is False
    assert response.error == "secret name required"


def test_invalid_json_raises(http_server):
    http_server.reply = b"not json"
    with pytest.raises(DaemonError, match="parsing response"):
        new_http_client(http_server.server_address[1]).send(Request(action="list"))


def test_unreachable_daemon_raises():
    with pytest.raises(DaemonError, match="daemon not running or unreachable"):
        new_http_client(_free_port()).send(Request(action="list"))


def test_new_client_falls_back_to_http(tmp_path):
    client = new_client(str(tmp_path / "missing.sock"), 8123)
    assert client.socket_path is None
    assert client.base_url == "http://127.0.0.1:8123"


def test_new_client_without_socket_path():
    client = new_client("", 9000)
    assert client.port == 9000
    assert client.socket_path is None


def test_send_over_unix_socket(unix_server):
    server, path = unix_server
    server.reply = b'{"ok":true,"exit_code":0,"stdout":"done"}'

    client = new_client(path, 0)
    assert client.socket_path == path
    assert client.base_url == "http://vaulty"

    response = client.send(Request(action="exec", command="make", secrets=["A"]))
    assert response.exit_code == 0
    assert response.stdout == "done"
    assert server.seen[0][2] == {"action": "exec", "command": "make", "secrets": ["A"]}