"""Configuration for device access."""

from .loader import load_config, load_node_config
from .schema import NodeConfigSchema, TacacsNodeConfigSchema

__all__ = [
    "load_config",
    "load_node_config",
    "NodeConfigSchema",
    "TacacsNodeConfigSchema",
]
