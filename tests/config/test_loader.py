import pytest

from tacacs_node.config.loader import load_config, load_node_config
from tacacs_node.exceptions import ConfigValidationError


def test_file_value_wins_over_environment(config_file, monkeypatch):
    """
    Verify intended precedence: config file > environment > defaults.

    If an env var is set for a key present in the file, the file value should take precedence
    and the environment variable should be skipped.
    """
    path = config_file("[node]\nhost = 10.0.0.1\nusername = netops\n")
    monkeypatch.setenv("TACACS_NODE_HOST", "10.9.9.9")

    cp = load_config(path)

    assert cp.get("node", "host") == "10.0.0.1"
    assert cp.get("node", "username") == "netops"


def test_environment_fills_keys_missing_from_file(config_file, monkeypatch):
    path = config_file("[node]\nusername = netops\n")
    monkeypatch.setenv("TACACS_NODE_HOST", "10.0.0.2")
    monkeypatch.setenv("TACACS_NODE_TRANSPORT", "https")

    cfg = load_node_config(path)

    assert cfg.node.host == "10.0.0.2"
    assert cfg.node.transport == "https"
    assert cfg.node.port == 443


def test_defaults_apply_without_file(tmp_path):
    cfg = load_node_config(str(tmp_path / "missing.conf"))
    assert cfg.node.host == "127.0.0.1"
    assert cfg.node.username == "admin"
    assert cfg.node.port == 80
    assert cfg.node.verify_tls is True
    assert cfg.node.retries == 2
    assert cfg.command_reference.path == ""
    assert cfg.log_level == "WARNING"


def test_password_only_from_environment(config_file, monkeypatch):
    """
    The device password must come from the environment; a value in the file is dropped.
    """
    path = config_file("[node]\nhost = 10.0.0.1\npassword = from-file\n")

    cfg = load_node_config(path)
    assert cfg.node.password == ""

    monkeypatch.setenv("TACACS_NODE_PASSWORD", "from-env")
    cfg = load_node_config(path)
    assert cfg.node.password == "from-env"


def test_password_not_in_repr(monkeypatch, tmp_path):
    monkeypatch.setenv("TACACS_NODE_PASSWORD", "hunter2")
    cfg = load_node_config(str(tmp_path / "none.conf"))
    assert "hunter2" not in repr(cfg)


def test_explicit_port_and_types(config_file):
    path = config_file(
        "[node]\nhost = sw1.example.net\nport = 8443\ntransport = HTTPS\n"
        "verify_tls = false\ntimeout = 5.5\nretries = 0\n"
        "[command_reference]\npath = /etc/tacacs_node/ref.ini\n"
        "[logging]\nlog_level = debug\n"
    )
    cfg = load_node_config(path)
    assert cfg.node.port == 8443
    assert cfg.node.transport == "https"
    assert cfg.node.verify_tls is False
    assert cfg.node.timeout == 5.5
    assert cfg.node.retries == 0
    assert cfg.node.base_url == "https://sw1.example.net:8443"
    assert cfg.command_reference.path == "/etc/tacacs_node/ref.ini"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    "section,field",
    [
        ("[node]\ntransport = telnet\n", "node.transport"),
        ("[node]\nport = 70000\n", "node.port"),
        ("[node]\nhost = bad host!\n", "node.host"),
        ("[node]\nretries = many\n", "node.retries"),
    ],
)
def test_invalid_values_raise_validation_error(config_file, section, field):
    path = config_file(section)
    with pytest.raises(ConfigValidationError) as exc_info:
        load_node_config(path)
    assert exc_info.value.field == field


def test_empty_username_rejected(config_file):
    path = config_file("[node]\nusername =\n")
    with pytest.raises(ConfigValidationError) as exc_info:
        load_node_config(path)
    assert exc_info.value.field == "node.username"


def test_ipv6_host_is_bracketed_in_base_url(config_file):
    path = config_file("[node]\nhost = 2001:db8::1\n")
    cfg = load_node_config(path)
    assert cfg.node.base_url == "http://[2001:db8::1]:80"

    path = config_file("[node]\nhost = [2001:db8::1]\ntransport = https\n")
    assert load_node_config(path).node.base_url == "https://[2001:db8::1]:443"


def test_connect_timeout_from_environment(config_file, monkeypatch):
    path = config_file("[node]\nhost = 10.0.0.1\n")
    monkeypatch.setenv("TACACS_NODE_CONNECT_TIMEOUT", "3")
    assert load_node_config(path).node.connect_timeout == 3.0
