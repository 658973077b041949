from __future__ import annotations

import sys
import threading
from pathlib import Path
from urllib.error import URLError

import psutil
import pytest

from helpers.http_client import http_request, raw_exchange
from inspect_http.core.config import ServerConfig
from inspect_http.core.exceptions import NoAddressError, ServerStateError, WarmupFailedError
from inspect_http.core.network import SubnetFilter
from inspect_http.core.web_server import ServerInstance, ServerState
from inspect_http.core.web_server import instance as instance_module

pytestmark = pytest.mark.network


@pytest.fixture
def running(site_root: Path, loopback_config: ServerConfig):
    server = ServerInstance.start(str(site_root), config=loopback_config)
    yield server
    if server.state is ServerState.READY:
        server.close()
    server.wait_closed(timeout=5.0)


def test_start_binds_ephemeral_port_and_serves_files(running: ServerInstance) -> None:
    address = running.address

    assert running.state is ServerState.READY
    assert address.address == "127.0.0.1"
    assert address.family == "IPv4"
    assert 0 < address.port < 65536

    status, body = http_request(address.address, address.port, "/")
    assert status == 200
    assert b"<h1>preview</h1>" in body

    status, body = http_request(address.address, address.port, "/app.js")
    assert status == 200
    assert body == b"console.log('hi');"


def test_missing_file_is_404(running: ServerInstance) -> None:
    status, _ = http_request(running.address.address, running.address.port, "/nope.html")

    assert status == 404


def test_declared_body_over_limit_is_rejected(running: ServerInstance) -> None:
    status, body = http_request(
        running.address.address,
        running.address.port,
        "/",
        method="POST",
        headers={"Content-Length": "4096"},
    )

    assert status == 413
    assert body == b"Request Entity Too Large"


@pytest.mark.skipif(sys.platform != "linux", reason="needs the whole 127/8 routed to loopback")
def test_off_subnet_client_gets_403(running: ServerInstance) -> None:
    status, body = http_request(
        running.address.address,
        running.address.port,
        "/",
        source_address=("127.0.1.1", 0),
    )

    assert status == 403
    assert body == b"Forbidden"


@pytest.fixture
def foreign_subnet(site_root: Path, loopback_config: ServerConfig, monkeypatch: pytest.MonkeyPatch):
    # Bound on loopback but gated as if the host sat on 10.9.9.0/24.
    monkeypatch.setattr(instance_module, "SubnetFilter", lambda host: SubnetFilter("10.9.9.9"))
    server = ServerInstance.start(str(site_root), config=loopback_config)
    yield server
    server.close()
    server.wait_closed(timeout=5.0)


def test_off_subnet_expect_continue_gets_403_without_interim_response(foreign_subnet: ServerInstance) -> None:
    request = (
        b"POST / HTTP/1.1\r\n"
        b"Host: preview\r\n"
        b"Content-Length: 5\r\n"
        b"Expect: 100-continue\r\n"
        b"\r\n"
    )

    reply = raw_exchange(foreign_subnet.address.address, foreign_subnet.address.port, request)

    assert reply.startswith(b"HTTP/1.0 403")
    assert b"100 Continue" not in reply
    assert reply.endswith(b"Forbidden")


def test_off_subnet_malformed_request_line_gets_403_not_400(foreign_subnet: ServerInstance) -> None:
    reply = raw_exchange(
        foreign_subnet.address.address,
        foreign_subnet.address.port,
        b"THIS IS NOT HTTP AT ALL\r\n\r\n",
    )

    assert reply.startswith(b"HTTP/1.0 403")
    assert b"400" not in reply.split(b"\r\n", 1)[0]


def test_off_subnet_head_gets_403_without_body(foreign_subnet: ServerInstance) -> None:
    status, body = http_request(
        foreign_subnet.address.address,
        foreign_subnet.address.port,
        "/",
        method="HEAD",
    )

    assert status == 403
    assert body == b""


def test_close_releases_listener_in_background(running: ServerInstance) -> None:
    closed: list[ServerInstance] = []
    done = threading.Event()

    def _on_closed(inst: ServerInstance) -> None:
        closed.append(inst)
        done.set()

    running.close(_on_closed)

    assert running.state in (ServerState.CLOSING, ServerState.CLOSED)
    assert running.wait_closed(timeout=5.0)
    assert done.wait(timeout=5.0)
    assert closed == [running]
    assert running.state is ServerState.CLOSED

    with pytest.raises(OSError):
        http_request(running.address.address, running.address.port, "/")


def test_close_twice_is_a_state_error(running: ServerInstance) -> None:
    running.close()

    with pytest.raises(ServerStateError):
        running.close()


def test_failed_readiness_probe_releases_listener(
    site_root: Path,
    loopback_config: ServerConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    released: list[ServerInstance] = []
    original_release = ServerInstance._release

    def _spy_release(self: ServerInstance) -> None:
        released.append(self)
        original_release(self)

    def _refuse(url: str, *, timeout_seconds: float) -> None:
        raise URLError("connection refused")

    monkeypatch.setattr(ServerInstance, "_release", _spy_release)
    monkeypatch.setattr(instance_module, "_probe_root", _refuse)

    with pytest.raises(WarmupFailedError, match="Could not GET root after launching server") as excinfo:
        ServerInstance.start(str(site_root), config=loopback_config)

    assert excinfo.value.context["root_path"] == str(site_root)
    assert len(released) == 1
    assert released[0].state is ServerState.FAILED
    assert released[0].wait_closed(timeout=0)


def test_no_external_address_fails_before_binding(
    site_root: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(psutil, "net_if_addrs", lambda: {})
    config = ServerConfig(config={"inspect_server": {"probe_timeout_seconds": 1.0}})

    with pytest.raises(NoAddressError) as excinfo:
        ServerInstance.start(str(site_root), config=config)

    assert excinfo.value.context == {"root_path": str(site_root)}


def test_explicit_address_wins_over_config(site_root: Path) -> None:
    config = ServerConfig(config={"inspect_server": {"bind_address": "192.0.2.1"}})

    server = ServerInstance.start(str(site_root), address="127.0.0.1", config=config)
    try:
        assert server.address.address == "127.0.0.1"
    finally:
        server.close()
        server.wait_closed(timeout=5.0)
