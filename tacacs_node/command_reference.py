"""Command reference table.

Maps ``(feature, attribute)`` to the CLI needed to read and write it on the
device. Rows come from an INI file (``data/command_reference.ini`` by default)
whose sections are named ``<feature>.<attribute>``.
"""

from __future__ import annotations

import configparser
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tacacs_node.exceptions import CommandReferenceError
from tacacs_node.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).resolve().parent / "data" / "command_reference.ini"


def parse_default_value(raw: str | None) -> Any:
    """Decode a ``default_value`` literal: int, true/false, or (quoted) string."""
    if raw is None:
        return None
    value = raw.strip()
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if re.fullmatch(r"-?\d+", value):
        return int(value)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class CommandRef(BaseModel):
    """One row of the command reference table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    feature: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    config_get: str | None = None
    config_get_token: str | None = None
    config_set: str | None = None
    default_value: Any = None

    @field_validator("config_get_token")
    @classmethod
    def _validate_token(cls, v: str | None) -> str | None:
        if v is None:
            return v
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid config_get_token regex: {exc}") from exc
        return v

    @property
    def key(self) -> str:
        return f"{self.feature}.{self.name}"

    @property
    def token_regex(self) -> re.Pattern[str] | None:
        if self.config_get_token is None:
            return None
        return re.compile(self.config_get_token, re.MULTILINE)


class CommandReference:
    """Lookup table of :class:`CommandRef` rows."""

    def __init__(self, refs: dict[tuple[str, str], CommandRef] | None = None):
        self._refs: dict[tuple[str, str], CommandRef] = dict(refs or {})

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> CommandReference:
        path = Path(path) if path else DEFAULT_REFERENCE_PATH
        if not path.exists():
            raise CommandReferenceError(
                f"Command reference file not found: {path}", {"path": str(path)}
            )
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error as exc:
            raise CommandReferenceError(
                f"Cannot parse command reference {path}: {exc}", {"path": str(path)}
            ) from exc
        reference = cls.from_parser(parser)
        logger.debug(
            "Loaded command reference",
            event="tacacs_node.command_reference.loaded",
            path=str(path),
            entries=len(reference),
        )
        return reference

    @classmethod
    def from_parser(cls, parser: configparser.ConfigParser) -> CommandReference:
        refs: dict[tuple[str, str], CommandRef] = {}
        for section in parser.sections():
            feature, sep, name = section.partition(".")
            if not sep:
                raise CommandReferenceError(
                    f"Section '{section}' must be named <feature>.<attribute>",
                    {"section": section},
                )
            values = dict(parser.items(section))
            if "default_value" in values:
                values["default_value"] = parse_default_value(values["default_value"])
            try:
                refs[(feature, name)] = CommandRef(feature=feature, name=name, **values)
            except ValidationError as exc:
                raise CommandReferenceError(
                    f"Invalid command reference entry '{section}': {exc}",
                    {"section": section},
                ) from exc
        return cls(refs)

    def lookup(self, feature: str, name: str) -> CommandRef:
        try:
            return self._refs[(feature, name)]
        except KeyError:
            raise CommandReferenceError(
                f"No command reference entry for {feature}.{name}",
                {"feature": feature, "name": name},
            ) from None

    def features(self) -> list[str]:
        return sorted({feature for feature, _ in self._refs})

    def attributes(self, feature: str) -> list[str]:
        return sorted(name for feat, name in self._refs if feat == feature)

    def __contains__(self, key: object) -> bool:
        return key in self._refs

    def __len__(self) -> int:
        return len(self._refs)
