"""Node facade.

Resolves ``(feature, attribute)`` pairs through the command reference and runs
the resulting CLI on the device through a client exposing ``show`` and
``config``.
"""

from __future__ import annotations

import os
import re
import threading
from collections.abc import Iterable
from typing import Any, Protocol

from tacacs_node.client import NxapiClient
from tacacs_node.command_reference import CommandReference
from tacacs_node.config.constants import ENV_CONFIG_PATH
from tacacs_node.config.loader import load_node_config
from tacacs_node.exceptions import CommandReferenceError
from tacacs_node.utils.logger import get_logger
from tacacs_node.utils.security import redact_command, sanitize_mapping

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "config/tacacs_node.conf"


class CliClient(Protocol):
    def show(self, command: str) -> str: ...

    def config(self, commands: str | Iterable[str]) -> None: ...


class Node:
    """Generic accessor for device configuration."""

    _instance: Node | None = None
    _instance_lock = threading.Lock()

    def __init__(self, client: CliClient, reference: CommandReference | None = None):
        self.client = client
        self.reference = reference if reference is not None else CommandReference.from_file()

    # ------------------------------------------------------------------
    # Process-wide instance
    # ------------------------------------------------------------------

    @classmethod
    def instance(cls) -> Node:
        """Return the shared node, building it from configuration on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls.from_config()
            return cls._instance

    @classmethod
    def set_instance(cls, node: Node | None) -> None:
        with cls._instance_lock:
            cls._instance = node

    @classmethod
    def from_config(cls, source: str | None = None) -> Node:
        source = source or os.environ.get(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH)
        cfg = load_node_config(source)
        reference = CommandReference.from_file(cfg.command_reference.path or None)
        logger.info(
            "Connecting node",
            event="tacacs_node.node.created",
            node_config=sanitize_mapping(cfg.node.model_dump()),
        )
        return cls(NxapiClient(cfg.node), reference)

    # ------------------------------------------------------------------
    # Raw access
    # ------------------------------------------------------------------

    def show(self, command: str) -> str:
        return self.client.show(command)

    def config(self, commands: str | Iterable[str]) -> None:
        self.client.config(commands)

    # ------------------------------------------------------------------
    # Command reference driven access
    # ------------------------------------------------------------------

    def config_get(self, feature: str, name: str) -> list[Any] | None:
        """Return parsed matches for ``feature.name`` or None when nothing matches.

        Each match is the whole match (no groups), the single group, or a tuple
        of groups; groups that did not participate are None.
        """
        ref = self.reference.lookup(feature, name)
        if not ref.config_get:
            raise CommandReferenceError(
                f"{ref.key} has no config_get command", {"feature": feature, "name": name}
            )
        output = self.show(ref.config_get)
        regex = ref.token_regex
        if regex is None:
            return [output] if output.strip() else None
        matches = [_match_value(m) for m in regex.finditer(_normalize(output))]
        logger.debug(
            "config_get",
            event="tacacs_node.node.config_get",
            feature=feature,
            attribute=name,
            matched=len(matches),
        )
        return matches or None

    def config_set(self, feature: str, name: str, *args: Any) -> None:
        """Render ``feature.name``'s config_set template with ``args`` and apply it."""
        ref = self.reference.lookup(feature, name)
        if not ref.config_set:
            raise CommandReferenceError(
                f"{ref.key} has no config_set template", {"feature": feature, "name": name}
            )
        try:
            rendered = ref.config_set % args
        except TypeError as exc:
            raise TypeError(f"Cannot render {ref.key} with {len(args)} args: {exc}") from exc
        command = " ".join(rendered.split())
        logger.info(
            "config_set",
            event="tacacs_node.node.config_set",
            feature=feature,
            attribute=name,
            command=redact_command(command),
        )
        self.config(command)

    def config_get_default(self, feature: str, name: str) -> Any:
        return self.reference.lookup(feature, name).default_value


def _normalize(output: str) -> str:
    return "\n".join(line.rstrip() for line in output.splitlines())


def _match_value(match: re.Match[str]) -> Any:
    groups = match.groups()
    if not groups:
        return match.group(0)
    if len(groups) == 1:
        return groups[0]
    return groups
