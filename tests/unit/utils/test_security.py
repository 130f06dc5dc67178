import pytest

from tacacs_node.utils.security import redact_command, sanitize_mapping


@pytest.mark.parametrize(
    "command,expected",
    [
        ("tacacs-server key 7 abc123", "tacacs-server key 7 ***"),
        ("no tacacs-server key 0 plain", "no tacacs-server key 0 ***"),
        ("tacacs-server key secret", "tacacs-server key ***"),
        ("tacacs-server timeout 5", "tacacs-server timeout 5"),
    ],
)
def test_redact_command(command, expected):
    assert redact_command(command) == expected


def test_sanitize_mapping_masks_sensitive_keys():
    data = {"host": "sw1", "password": "hunter2", "api_token": None}
    assert sanitize_mapping(data) == {
        "host": "sw1",
        "password": "[redacted len=7]",
        "api_token": "[redacted]",
    }
