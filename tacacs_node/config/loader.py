"""Configuration loading for device access.

Load order: config file → environment variables → defaults
Exception: the device password is only taken from the environment.
"""

from __future__ import annotations

import configparser
import os

from pydantic import ValidationError

from tacacs_node.exceptions import ConfigError, ConfigValidationError
from tacacs_node.utils.logger import get_logger

from .constants import (
    ENV_NODE_PASSWORD,
    ENV_PREFIX,
    SECTION_COMMAND_REFERENCE,
    SECTION_LOGGING,
    SECTION_NODE,
)
from .defaults import DEFAULT_LOG_LEVEL, DEFAULTS, populate_defaults
from .schema import TacacsNodeConfigSchema, validate_config

logger = get_logger(__name__)

_SECRET_KEYS = {(SECTION_NODE, "password")}


def apply_env_overrides(
    config: configparser.ConfigParser,
    section: str,
    key: str,
    env_var: str | None = None,
) -> None:
    """Apply environment variable override to a config value.

    The variable defaults to ``TACACS_NODE_<KEY>`` for the ``node`` section and
    ``TACACS_NODE_<SECTION>_<KEY>`` otherwise. The override only fills keys
    the config file left unset.
    """
    if env_var is None:
        if section == SECTION_NODE:
            env_var = f"{ENV_PREFIX}_{key.upper()}"
        else:
            env_var = f"{ENV_PREFIX}_{section.upper()}_{key.upper()}"

    value = os.environ.get(env_var)
    if value is None:
        return
    if not config.has_section(section):
        config.add_section(section)
    if not config.has_option(section, key):
        config.set(section, key, value)
        logger.debug(
            "Applied environment override for config key",
            event="tacacs_node.config.loader.env_override_applied",
            section=section,
            key=key,
            env_var=env_var,
        )
    else:
        logger.debug(
            "Skipping environment override because config already defines the value",
            event="tacacs_node.config.loader.env_override_skipped",
            section=section,
            key=key,
        )


def apply_all_env_overrides(config: configparser.ConfigParser) -> None:
    for section, values in DEFAULTS.items():
        for key in values:
            apply_env_overrides(config, section, key)
    # port has no static default, it follows the transport
    apply_env_overrides(config, SECTION_NODE, "port")

    # Secrets: environment only, file values are discarded
    for section, key in _SECRET_KEYS:
        if config.has_option(section, key):
            logger.warning(
                "Ignoring secret found in config file; use the environment instead",
                event="tacacs_node.config.loader.file_secret_ignored",
                section=section,
                key=key,
            )
            config.remove_option(section, key)
    password = os.environ.get(ENV_NODE_PASSWORD)
    if password is not None:
        if not config.has_section(SECTION_NODE):
            config.add_section(SECTION_NODE)
        config.set(SECTION_NODE, "password", password)


def load_config(source: str | None = None) -> configparser.ConfigParser:
    """Load configuration from ``source``, the environment and defaults.

    A missing file is not an error: environment and defaults still apply.
    """
    config = configparser.ConfigParser(interpolation=None)
    if source:
        if os.path.exists(source):
            try:
                config.read(source, encoding="utf-8")
            except configparser.Error as exc:
                raise ConfigError(
                    f"Cannot parse configuration file {source}: {exc}",
                    {"source": source},
                ) from exc
            logger.debug(
                "Loaded configuration file",
                event="tacacs_node.config.loader.file_loaded",
                source=source,
            )
        else:
            logger.info(
                "Configuration file not found; using environment and defaults",
                event="tacacs_node.config.loader.file_missing",
                source=source,
            )

    apply_all_env_overrides(config)
    populate_defaults(config)
    return config


def to_payload(config: configparser.ConfigParser) -> dict:
    node = dict(config.items(SECTION_NODE))
    return {
        "node": node,
        "command_reference": dict(config.items(SECTION_COMMAND_REFERENCE)),
        "log_level": config.get(SECTION_LOGGING, "log_level", fallback=DEFAULT_LOG_LEVEL),
    }


def load_node_config(source: str | None = None) -> TacacsNodeConfigSchema:
    """Load and validate configuration, raising ConfigValidationError on bad input."""
    config = load_config(source)
    try:
        return validate_config(to_payload(config))
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ()))
        value = first.get("input")
        if field.endswith("password"):
            value = None
        raise ConfigValidationError(
            f"Invalid configuration: {first.get('msg', exc)}",
            field=field or None,
            value=value,
            source=source,
        ) from exc
