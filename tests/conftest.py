"""
Test configuration and fixtures - a simulated device stands in for the switch
"""

from __future__ import annotations

import pytest

from tacacs_node.command_reference import CommandReference
from tacacs_node.node import Node
from tacacs_node.tacacs_server import TacacsServer
from tests.unit.fake_device import FakeNxosDevice


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep host environment and the shared node out of every test."""
    for var in (
        "TACACS_NODE_CONFIG",
        "TACACS_NODE_HOST",
        "TACACS_NODE_PORT",
        "TACACS_NODE_TRANSPORT",
        "TACACS_NODE_USERNAME",
        "TACACS_NODE_PASSWORD",
        "TACACS_NODE_TIMEOUT",
        "TACACS_NODE_CONNECT_TIMEOUT",
        "TACACS_NODE_VERIFY_TLS",
        "TACACS_NODE_RETRIES",
        "TACACS_NODE_COMMAND_REFERENCE_PATH",
        "TACACS_NODE_LOGGING_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    Node.set_instance(None)
    yield
    Node.set_instance(None)


@pytest.fixture(scope="session")
def reference() -> CommandReference:
    return CommandReference.from_file()


@pytest.fixture
def device() -> FakeNxosDevice:
    return FakeNxosDevice(feature_enabled=True)


@pytest.fixture
def node(device, reference) -> Node:
    return Node(device, reference)


@pytest.fixture
def server(node) -> TacacsServer:
    """Provider bound to an enabled simulated device.

    Example:
        def test_timeout(server, device):
            server.timeout = 10
            assert device.timeout == 10
    """
    return TacacsServer(instantiate=False, node=node)


@pytest.fixture
def config_file(tmp_path):
    """Factory fixture writing an INI config file and returning its path."""

    def _write(contents: str) -> str:
        path = tmp_path / "tacacs_node.conf"
        path.write_text(contents, encoding="utf-8")
        return str(path)

    return _write
