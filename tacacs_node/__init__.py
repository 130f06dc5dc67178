"""TACACS+ client configuration for managed network devices."""

from .exceptions import CliError, TacacsNodeError
from .node import Node
from .tacacs_server import (
    TACACS_SERVER_ENC_CISCO_TYPE_7,
    TACACS_SERVER_ENC_NONE,
    TACACS_SERVER_ENC_UNKNOWN,
    TacacsServer,
)

__version__ = "0.1.0"

__all__ = [
    "CliError",
    "Node",
    "TACACS_SERVER_ENC_CISCO_TYPE_7",
    "TACACS_SERVER_ENC_NONE",
    "TACACS_SERVER_ENC_UNKNOWN",
    "TacacsNodeError",
    "TacacsServer",
]
