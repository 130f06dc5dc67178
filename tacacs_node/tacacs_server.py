"""TacacsServer provider.

Exposes the device's global TACACS+ settings (timeout, deadtime,
directed-request, source interface and shared key) as Python attributes.
Reads and writes go through :class:`~tacacs_node.node.Node`.
"""

from __future__ import annotations

from typing import Any

from tacacs_node.exceptions import CliError
from tacacs_node.node import Node
from tacacs_node.utils.logger import get_logger

logger = get_logger(__name__)

FEATURE = "tacacs_server"

TACACS_SERVER_ENC_NONE = 0
TACACS_SERVER_ENC_CISCO_TYPE_7 = 7
TACACS_SERVER_ENC_UNKNOWN = 8


def _node(node: Node | None) -> Node:
    return node if node is not None else Node.instance()


class TacacsServer:
    """Global TACACS+ configuration of one device.

    Creating an instance enables ``feature tacacs+`` unless ``instantiate``
    is False.
    """

    def __init__(self, instantiate: bool = True, node: Node | None = None):
        self.node = _node(node)
        if instantiate and not TacacsServer.enabled(self.node):
            self.enable()

    # --------------------
    # Feature enablement
    # --------------------

    @classmethod
    def enabled(cls, node: Node | None = None) -> bool:
        try:
            feat = _node(node).config_get(FEATURE, "feature")
        except CliError as e:
            # show commands syntax-reject while the feature is off
            if "Syntax error" not in e.clierror:
                raise
            return False
        return bool(feat)

    def enable(self) -> None:
        self.node.config_set(FEATURE, "feature", "")
        logger.info("TACACS+ feature enabled", event="tacacs_node.tacacs_server.enabled")

    def destroy(self) -> None:
        self.node.config_set(FEATURE, "feature", "no")
        logger.info(
            "TACACS+ feature disabled", event="tacacs_node.tacacs_server.destroyed"
        )

    # --------------------
    # Getters and Setters
    # --------------------

    @property
    def timeout(self) -> int:
        match = self.node.config_get(FEATURE, "timeout")
        return TacacsServer.default_timeout(self.node) if match is None else int(match[0])

    @timeout.setter
    def timeout(self, timeout: int) -> None:
        # 'no tacacs-server timeout' is rejected, so always set the value
        self.node.config_set(FEATURE, "timeout", "", timeout)

    @classmethod
    def default_timeout(cls, node: Node | None = None) -> int:
        return _node(node).config_get_default(FEATURE, "timeout")

    @property
    def deadtime(self) -> int:
        match = self.node.config_get(FEATURE, "deadtime")
        return (
            TacacsServer.default_deadtime(self.node) if match is None else int(match[0])
        )

    @deadtime.setter
    def deadtime(self, deadtime: int) -> None:
        # 'no tacacs-server deadtime' is rejected, so always set the value
        self.node.config_set(FEATURE, "deadtime", "", deadtime)

    @classmethod
    def default_deadtime(cls, node: Node | None = None) -> int:
        return _node(node).config_get_default(FEATURE, "deadtime")

    @property
    def directed_request(self) -> bool:
        match = self.node.config_get(FEATURE, "directed_request")
        if match is None:
            return TacacsServer.default_directed_request(self.node)
        return not match[0].startswith("no")

    @directed_request.setter
    def directed_request(self, state: bool) -> None:
        if not isinstance(state, bool):
            raise TypeError(f"directed_request must be a bool, got {type(state).__name__}")
        if state == TacacsServer.default_directed_request(self.node):
            self.node.config_set(FEATURE, "directed_request", "no")
        else:
            self.node.config_set(FEATURE, "directed_request", "")

    @classmethod
    def default_directed_request(cls, node: Node | None = None) -> bool:
        return _node(node).config_get_default(FEATURE, "directed_request")

    @property
    def source_interface(self) -> str:
        # Sample output
        #   ip tacacs source-interface Ethernet1/1
        #   no ip tacacs source-interface
        match = self.node.config_get(FEATURE, "source_interface")
        if match is None:
            return TacacsServer.default_source_interface(self.node)
        # (None, "Ethernet1/1") or ("no", None)
        negated, name = match[0]
        if negated == "no" or not name:
            return TacacsServer.default_source_interface(self.node)
        return name

    @source_interface.setter
    def source_interface(self, name: str) -> None:
        if not isinstance(name, str):
            raise TypeError(f"source_interface must be a str, got {type(name).__name__}")
        if name == "":
            self.node.config_set(FEATURE, "source_interface", "no", "")
        else:
            self.node.config_set(FEATURE, "source_interface", "", name)

    @classmethod
    def default_source_interface(cls, node: Node | None = None) -> str:
        return _node(node).config_get_default(FEATURE, "source_interface")

    # --------------------
    # Shared key
    # --------------------

    @property
    def encryption_type(self) -> int:
        match = self.node.config_get(FEATURE, "encryption_type")
        return TACACS_SERVER_ENC_UNKNOWN if match is None else int(match[0][0])

    @classmethod
    def default_encryption_type(cls, node: Node | None = None) -> int:
        return _node(node).config_get_default(FEATURE, "encryption_type")

    @property
    def encryption_password(self) -> str:
        match = self.node.config_get(FEATURE, "encryption_password")
        if match is None:
            return TacacsServer.default_encryption_password(self.node)
        return match[0][1]

    @classmethod
    def default_encryption_password(cls, node: Node | None = None) -> str:
        return _node(node).config_get_default(FEATURE, "encryption_password")

    def encryption_key_set(self, enctype: int, password: str) -> None:
        """Set the shared key, or remove it when ``enctype`` is TACACS_SERVER_ENC_UNKNOWN."""
        if enctype == TACACS_SERVER_ENC_UNKNOWN:
            current = self.encryption_type
            # nothing to remove when no key is configured
            if current != TACACS_SERVER_ENC_UNKNOWN:
                self.node.config_set(
                    FEATURE, "encryption", "no", current, self.encryption_password
                )
        else:
            self.node.config_set(FEATURE, "encryption", "", enctype, password)

    def to_dict(self) -> dict[str, Any]:
        """Current settings, with the key password left out."""
        return {
            "timeout": self.timeout,
            "deadtime": self.deadtime,
            "directed_request": self.directed_request,
            "source_interface": self.source_interface,
            "encryption_type": self.encryption_type,
        }
