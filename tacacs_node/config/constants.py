"""Constant section names and environment variable keys."""

SECTION_NODE = "node"
SECTION_COMMAND_REFERENCE = "command_reference"
SECTION_LOGGING = "logging"

ENV_CONFIG_PATH = "TACACS_NODE_CONFIG"
ENV_PREFIX = "TACACS_NODE"

# Secrets are never read from the config file
ENV_NODE_PASSWORD = "TACACS_NODE_PASSWORD"  # nosec

TRANSPORTS = ("http", "https")
