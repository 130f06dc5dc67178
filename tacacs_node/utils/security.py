"""
Redaction helpers for CLI commands and config values that carry secrets
"""

import re
from typing import Any

# "tacacs-server key 7 <secret>", "no tacacs-server key 0 <secret>"
_KEY_COMMAND_RE = re.compile(r"(\btacacs-server\s+key\s+(?:\d+\s+)?)(\S+)", re.IGNORECASE)

_SENSITIVE_KEYWORDS = ("pass", "pwd", "secret", "token", "key")


def redact_command(command: str) -> str:
    """Mask the shared secret in a CLI command before it is logged."""
    return _KEY_COMMAND_RE.sub(r"\1***", command)


def mask_value(value: Any) -> str:
    if value is None:
        return "[redacted]"
    if isinstance(value, str):
        if not value:
            return ""
        return f"[redacted len={len(value)}]"
    return "[redacted]"


def is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS)


def sanitize_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with values under sensitive keys masked."""
    return {
        k: mask_value(v) if is_sensitive_key(str(k)) else v for k, v in data.items()
    }
