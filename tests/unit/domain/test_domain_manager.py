from __future__ import annotations

from pathlib import Path

import psutil
import pytest

from helpers.http_client import http_request
from inspect_http.core.config import ServerConfig
from inspect_http.core.domain import DOMAIN_NAME, DomainManager, init
from inspect_http.core.web_server import ServerRegistry


@pytest.fixture
def manager(registry: ServerRegistry) -> DomainManager:
    dm = DomainManager()
    init(dm, registry)
    return dm


def test_init_registers_both_commands(manager: DomainManager) -> None:
    described = manager.describe()

    assert manager.has_domain(DOMAIN_NAME)
    assert described[DOMAIN_NAME]["version"] == {"major": 0, "minor": 1}
    assert set(described[DOMAIN_NAME]["commands"]) == {"getServer", "closeServer"}
    assert described[DOMAIN_NAME]["commands"]["closeServer"]["returns"][0]["type"] == "boolean"


def test_init_keeps_an_existing_domain_registration() -> None:
    dm = DomainManager()
    dm.register_domain(DOMAIN_NAME, {"major": 0, "minor": 1})
    dm.register_command(DOMAIN_NAME, "ping", lambda: "pong")

    init(dm, ServerRegistry())

    assert set(dm.describe()[DOMAIN_NAME]["commands"]) == {"ping", "getServer", "closeServer"}


@pytest.mark.network
def test_get_server_then_close_server(manager: DomainManager, site_root: Path) -> None:
    reply = manager.execute(DOMAIN_NAME, "getServer", [str(site_root)])
    address = reply["response"]

    assert address["address"] == "127.0.0.1"
    assert address["family"] == "IPv4"
    assert http_request(address["address"], address["port"], "/")[0] == 200

    again = manager.execute(DOMAIN_NAME, "getServer", {"path": str(site_root) + "/"})
    assert again == reply

    assert manager.execute(DOMAIN_NAME, "closeServer", [str(site_root)]) == {"response": True}
    assert manager.execute(DOMAIN_NAME, "closeServer", [str(site_root)]) == {"response": False}


def test_start_failure_is_reported_not_raised(site_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(psutil, "net_if_addrs", lambda: {})
    dm = DomainManager()
    init(dm, ServerRegistry(config=ServerConfig(config={})))

    reply = dm.execute(DOMAIN_NAME, "getServer", [str(site_root)])

    assert reply["error"]["code"] == "NoAddressError"
    assert reply["error"]["message"] == "Could not find an external IP address"
    assert reply["error"]["context"] == {"root_path": str(site_root)}


def test_unknown_command_is_an_error_payload(manager: DomainManager) -> None:
    reply = manager.execute(DOMAIN_NAME, "restartServer", ["/x"])

    assert reply["error"]["code"] == "UnknownCommandError"
    assert reply["error"]["context"] == {"domain": DOMAIN_NAME, "command": "restartServer"}

    assert manager.execute("otherDomain", "getServer", [])["error"]["code"] == "UnknownCommandError"


def test_unexpected_handler_fault_is_contained(manager: DomainManager) -> None:
    def _boom() -> None:
        raise KeyError("kaput")

    manager.register_command(DOMAIN_NAME, "explode", _boom)

    reply = manager.execute(DOMAIN_NAME, "explode")

    assert reply["error"]["code"] == "KeyError"


def test_bad_arguments_are_contained(manager: DomainManager) -> None:
    reply = manager.execute(DOMAIN_NAME, "closeServer", [])

    assert reply["error"]["code"] == "TypeError"
