import http.client
import socket
from concurrent.futures import ThreadPoolExecutor

import pytest
import uvicorn

from gigaheader.daemon import start, stop
from gigaheader.errors import BindError
from gigaheader.main import app

EXPECTED_BODY = (
    b"<html><body><h1>C to Header-Only Converter</h1><p>Server is working!</p></body></html>"
)


@pytest.fixture
def daemon():
    handle = start(0, app, host="127.0.0.1")
    yield handle
    stop(handle)


def fetch(port, method="GET", path="/", body=None):
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request(method, path, body=body)
        resp = conn.getresponse()
        return resp.status, resp.getheader("Content-Type"), resp.read()
    finally:
        conn.close()


def test_get_root(daemon):
    assert fetch(daemon.port) == (200, "text/html", EXPECTED_BODY)


def test_post_anything(daemon):
    status, content_type, body = fetch(
        daemon.port, "POST", "/anything/at/all", body=b"arbitrary \x00 payload"
    )
    assert (status, content_type, body) == (200, "text/html", EXPECTED_BODY)


def test_concurrent_requests(daemon):
    with ThreadPoolExecutor(max_workers=100) as pool:
        results = list(pool.map(lambda i: fetch(daemon.port, path=f"/r/{i}"), range(100)))
    assert results == [(200, "text/html", EXPECTED_BODY)] * 100


def test_second_daemon_on_same_port(daemon):
    with pytest.raises(BindError) as excinfo:
        start(daemon.port, app, host="127.0.0.1")
    assert excinfo.value.port == daemon.port
    assert str(daemon.port) in str(excinfo.value)

    assert fetch(daemon.port) == (200, "text/html", EXPECTED_BODY)


def test_stop_releases_port():
    handle = start(0, app, host="127.0.0.1")
    port = handle.port
    assert fetch(port)[0] == 200

    stop(handle)

    assert not handle.thread.is_alive()
    with pytest.raises(ConnectionRefusedError):
        socket.create_connection(("127.0.0.1", port), timeout=2)


@pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "MKCOL", "FOO"])
def test_uncommon_methods(daemon, method):
    assert fetch(daemon.port, method, "/x") == (200, "text/html", EXPECTED_BODY)


def test_failed_startup_releases_port(monkeypatch):
    monkeypatch.setattr(uvicorn.Server, "run", lambda self, sockets=None: None)
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as free:
        free.bind(("127.0.0.1", 0))
        port = free.getsockname()[1]

    with pytest.raises(BindError):
        start(port, app, host="127.0.0.1")

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", port))
