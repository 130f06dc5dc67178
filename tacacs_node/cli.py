"""Command line interface for TACACS+ settings on a device."""

from __future__ import annotations

import argparse
import getpass
import json
import os
import sys
from typing import Protocol, cast

from tacacs_node.config.constants import ENV_CONFIG_PATH, SECTION_LOGGING
from tacacs_node.config.loader import load_config
from tacacs_node.exceptions import TacacsNodeError
from tacacs_node.node import DEFAULT_CONFIG_PATH, Node
from tacacs_node.tacacs_server import (
    TACACS_SERVER_ENC_UNKNOWN,
    TacacsServer,
)
from tacacs_node.utils.logger import configure, get_logger, logging_context

logger = get_logger(__name__)


def _node(args: argparse.Namespace) -> Node:
    return Node.from_config(args.config)


def cmd_show(args: argparse.Namespace) -> int:
    node = _node(args)
    enabled = TacacsServer.enabled(node)
    data: dict = {"enabled": enabled}
    if enabled:
        data.update(TacacsServer(instantiate=False, node=node).to_dict())
    print(json.dumps(data, indent=2))
    return 0


def cmd_enable(args: argparse.Namespace) -> int:
    TacacsServer(instantiate=True, node=_node(args))
    print("TACACS+ feature enabled")
    return 0


def cmd_disable(args: argparse.Namespace) -> int:
    TacacsServer(instantiate=False, node=_node(args)).destroy()
    print("TACACS+ feature disabled")
    return 0


def cmd_set(args: argparse.Namespace) -> int:
    if (
        args.timeout is None
        and args.deadtime is None
        and args.directed_request is None
        and args.source_interface is None
    ):
        print("Nothing to set", file=sys.stderr)
        return 1
    server = TacacsServer(instantiate=True, node=_node(args))
    if args.timeout is not None:
        server.timeout = args.timeout
    if args.deadtime is not None:
        server.deadtime = args.deadtime
    if args.directed_request is not None:
        server.directed_request = args.directed_request
    if args.source_interface is not None:
        server.source_interface = args.source_interface
    print("TACACS+ settings applied")
    return 0


def cmd_key_set(args: argparse.Namespace) -> int:
    password = args.password
    if not password:
        if args.stdin:
            password = sys.stdin.readline().rstrip("\n")
        else:
            password = getpass.getpass("Enter key: ")
            confirm = getpass.getpass("Confirm key: ")
            if password != confirm:
                print("Keys do not match", file=sys.stderr)
                return 1
    if not password:
        print("Key must not be empty", file=sys.stderr)
        return 1
    server = TacacsServer(instantiate=True, node=_node(args))
    server.encryption_key_set(args.type, password)
    print("TACACS+ key configured")
    return 0


def cmd_key_remove(args: argparse.Namespace) -> int:
    server = TacacsServer(instantiate=False, node=_node(args))
    server.encryption_key_set(TACACS_SERVER_ENC_UNKNOWN, "")
    print("TACACS+ key removed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tacacs-node", description="Manage TACACS+ settings on a network device"
    )
    p.add_argument(
        "--config",
        "-c",
        default=os.environ.get(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH),
        help="Path to config file",
    )
    p.add_argument(
        "--log-level", default=None, help="Logging level (default: from config file)"
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("show", help="Print current TACACS+ settings as JSON").set_defaults(
        func=cmd_show
    )
    sub.add_parser("enable", help="Enable the TACACS+ feature").set_defaults(
        func=cmd_enable
    )
    sub.add_parser("disable", help="Disable the TACACS+ feature").set_defaults(
        func=cmd_disable
    )

    sub_set = sub.add_parser("set", help="Change global TACACS+ settings")
    sub_set.add_argument("--timeout", type=int, help="Server response timeout (s)")
    sub_set.add_argument("--deadtime", type=int, help="Dead server interval (min)")
    sub_set.add_argument(
        "--directed-request",
        dest="directed_request",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Allow user@server directed requests",
    )
    sub_set.add_argument(
        "--source-interface",
        help="Source interface for TACACS+ packets ('' removes it)",
    )
    sub_set.set_defaults(func=cmd_set)

    sub_key = sub.add_parser("key", help="Manage the global shared key")
    key_sub = sub_key.add_subparsers(dest="key_cmd", required=True)
    key_set = key_sub.add_parser("set", help="Configure the shared key")
    key_set.add_argument(
        "--type", type=int, default=0, choices=(0, 7), help="0 clear text, 7 encrypted"
    )
    key_set.add_argument("--password", help="Key (use stdin or prompt if omitted)")
    key_set.add_argument(
        "--stdin", action="store_true", help="Read key from stdin (single line)"
    )
    key_set.set_defaults(func=cmd_key_set)
    key_sub.add_parser("remove", help="Remove the shared key").set_defaults(
        func=cmd_key_remove
    )

    return p


class _Cmd(Protocol):
    def __call__(self, args: argparse.Namespace) -> int: ...


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    func = cast(_Cmd, getattr(args, "func"))
    try:
        level = args.log_level or load_config(args.config).get(SECTION_LOGGING, "log_level")
        configure(level=level)
        with logging_context(command=args.cmd):
            return func(args)
    except TacacsNodeError as exc:
        logger.error(
            "Command failed",
            event="tacacs_node.cli.failed",
            error_code=exc.error_code,
            error=exc.message,
        )
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
