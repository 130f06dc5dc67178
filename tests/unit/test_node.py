"""Tests for the Node facade: command reference lookups, parsing and rendering."""

import configparser

import pytest

from tacacs_node.command_reference import CommandReference
from tacacs_node.exceptions import CommandReferenceError
from tacacs_node.node import Node


class ScriptedClient:
    """Client returning canned show output and recording config commands."""

    def __init__(self, outputs: dict[str, str] | None = None):
        self.outputs = outputs or {}
        self.configs: list[str] = []

    def show(self, command: str) -> str:
        return self.outputs.get(command, "")

    def config(self, commands):
        if isinstance(commands, str):
            commands = [commands]
        self.configs.extend(commands)


def _reference(text: str) -> CommandReference:
    parser = configparser.ConfigParser(interpolation=None)
    parser.read_string(text)
    return CommandReference.from_parser(parser)


REFERENCE = """
[demo.plain]
config_get = show demo
config_get_token = ^demo enabled$

[demo.single]
config_get = show demo
config_get_token = ^demo value (\\d+)

[demo.pair]
config_get = show demo
config_get_token = ^(no)? ?demo name ?(\\S+)?$
config_set = %s demo name %s
default_value = "none"

[demo.raw]
config_get = show demo

[demo.write_only]
config_set = %s demo write %d
"""


@pytest.fixture
def client():
    return ScriptedClient(
        {
            "show demo": "demo enabled\r\ndemo value 7\r\ndemo value 9\r\nno demo name\r\n",
        }
    )


@pytest.fixture
def demo_node(client):
    return Node(client, _reference(REFERENCE))


def test_no_group_returns_whole_match(demo_node):
    assert demo_node.config_get("demo", "plain") == ["demo enabled"]


def test_single_group_returns_captures_in_order(demo_node):
    assert demo_node.config_get("demo", "single") == ["7", "9"]


def test_multiple_groups_return_tuples_with_none(demo_node):
    assert demo_node.config_get("demo", "pair") == [("no", None)]


def test_no_match_returns_none(demo_node, client):
    client.outputs["show demo"] = "something else\n"
    assert demo_node.config_get("demo", "single") is None


def test_missing_token_returns_whole_output(demo_node, client):
    assert demo_node.config_get("demo", "raw") == [client.outputs["show demo"]]
    client.outputs["show demo"] = "  \n"
    assert demo_node.config_get("demo", "raw") is None


def test_config_get_without_command_raises(demo_node):
    with pytest.raises(CommandReferenceError):
        demo_node.config_get("demo", "write_only")


def test_unknown_attribute_raises(demo_node):
    with pytest.raises(CommandReferenceError) as exc_info:
        demo_node.config_get("demo", "missing")
    assert exc_info.value.details == {"feature": "demo", "name": "missing"}


def test_config_set_renders_and_collapses_whitespace(demo_node, client):
    demo_node.config_set("demo", "pair", "", "eth1")
    demo_node.config_set("demo", "pair", "no", "")
    assert client.configs == ["demo name eth1", "no demo name"]


def test_config_set_wrong_args_is_type_error(demo_node, client):
    with pytest.raises(TypeError):
        demo_node.config_set("demo", "write_only", "", "abc")
    with pytest.raises(TypeError):
        demo_node.config_set("demo", "write_only", "")
    assert client.configs == []


def test_config_set_without_template_raises(demo_node):
    with pytest.raises(CommandReferenceError):
        demo_node.config_set("demo", "plain", "")


def test_config_get_default(demo_node):
    assert demo_node.config_get_default("demo", "pair") == "none"
    assert demo_node.config_get_default("demo", "plain") is None


def test_raw_show_and_config_pass_through(demo_node, client):
    assert demo_node.show("show demo").startswith("demo enabled")
    demo_node.config(["a", "b"])
    assert client.configs == ["a", "b"]


def test_instance_is_built_once_from_config(monkeypatch, config_file):
    path = config_file("[node]\nhost = 192.0.2.10\nusername = netops\n")
    monkeypatch.setenv("TACACS_NODE_CONFIG", path)

    first = Node.instance()
    assert Node.instance() is first
    assert first.client.url == "http://192.0.2.10:80/ins"
    assert ("tacacs_server", "timeout") in first.reference


def test_set_instance_replaces_shared_node(node):
    Node.set_instance(node)
    assert Node.instance() is node


def test_empty_reference_is_kept(client):
    node = Node(client, CommandReference())
    assert len(node.reference) == 0
    with pytest.raises(CommandReferenceError):
        node.config_get("tacacs_server", "timeout")
