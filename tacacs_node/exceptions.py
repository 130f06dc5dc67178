# tacacs_node/exceptions.py
"""
Custom exceptions for TACACS+ node configuration.
"""

from typing import Any


class TacacsNodeError(Exception):
    """Base exception for all tacacs_node errors."""

    error_code = "node_error"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# Config exceptions
class ConfigError(TacacsNodeError):
    """Base exception for configuration-related errors."""

    error_code = "config_error"


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    error_code = "config_validation_error"

    def __init__(
        self, message: str, field: str | None = None, value: Any = None, **kwargs: Any
    ):
        details = {"field": field, "value": value, **kwargs}
        super().__init__(message, details)
        self.field = field
        self.value = value


class CommandReferenceError(TacacsNodeError):
    """Raised for unknown or malformed command reference entries."""

    error_code = "command_reference_error"


# Device communication exceptions
class NodeError(TacacsNodeError):
    """Base exception for errors reported by or about the managed device."""

    error_code = "node_error"


class CliError(NodeError):
    """Raised when the device rejects a CLI command.

    ``clierror`` holds the raw error text from the device, e.g.
    ``% Invalid command at '^' marker.`` or ``Syntax error while parsing``.
    """

    error_code = "cli_error"

    def __init__(
        self,
        command: str,
        clierror: str = "",
        msg: str = "",
        code: str | int | None = None,
    ):
        self.command = command
        self.clierror = clierror or ""
        self.msg = msg or ""
        self.code = code
        message = f"CLI command '{command}' rejected: {self.msg or self.clierror}".strip()
        super().__init__(
            message,
            {"command": command, "clierror": self.clierror, "msg": self.msg, "code": code},
        )


class NodeConnectionError(NodeError):
    """Raised when the device cannot be reached or answers garbage."""

    error_code = "node_connection_error"


class NodeAuthenticationError(NodeError):
    """Raised when the device refuses the configured credentials."""

    error_code = "node_authentication_error"
