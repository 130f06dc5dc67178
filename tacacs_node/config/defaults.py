"""Centralized default configuration values for node access."""

from __future__ import annotations

from typing import Any

from .constants import SECTION_COMMAND_REFERENCE, SECTION_LOGGING, SECTION_NODE

# Node access defaults
DEFAULT_NODE_HOST = "127.0.0.1"  # management address of the device
DEFAULT_NODE_TRANSPORT = "http"  # http|https
DEFAULT_NODE_HTTP_PORT = 80  # NX-API http port
DEFAULT_NODE_HTTPS_PORT = 443  # NX-API https port
DEFAULT_NODE_USERNAME = "admin"  # device login
DEFAULT_NODE_TIMEOUT = 30.0  # read timeout seconds
DEFAULT_NODE_CONNECT_TIMEOUT = 10.0  # connect timeout seconds
DEFAULT_NODE_VERIFY_TLS = True  # verify device certificate on https
DEFAULT_NODE_RETRIES = 2  # retries for transient HTTP failures

# Command reference defaults
DEFAULT_COMMAND_REFERENCE_PATH = ""  # empty means the packaged table

# Logging defaults
DEFAULT_LOG_LEVEL = "WARNING"

DEFAULTS: dict[str, dict[str, Any]] = {
    SECTION_NODE: {
        "host": DEFAULT_NODE_HOST,
        "transport": DEFAULT_NODE_TRANSPORT,
        "username": DEFAULT_NODE_USERNAME,
        "timeout": DEFAULT_NODE_TIMEOUT,
        "connect_timeout": DEFAULT_NODE_CONNECT_TIMEOUT,
        "verify_tls": DEFAULT_NODE_VERIFY_TLS,
        "retries": DEFAULT_NODE_RETRIES,
    },
    SECTION_COMMAND_REFERENCE: {
        "path": DEFAULT_COMMAND_REFERENCE_PATH,
    },
    SECTION_LOGGING: {
        "log_level": DEFAULT_LOG_LEVEL,
    },
}


def default_port(transport: str) -> int:
    return DEFAULT_NODE_HTTPS_PORT if transport == "https" else DEFAULT_NODE_HTTP_PORT


def populate_defaults(config) -> None:
    """Fill missing sections/keys of a ConfigParser with defaults."""
    for section, values in DEFAULTS.items():
        if not config.has_section(section):
            config.add_section(section)
        for key, value in values.items():
            if not config.has_option(section, key):
                config.set(section, key, str(value))
