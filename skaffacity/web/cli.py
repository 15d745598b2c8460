"""Command line for the web module: update and query the web configuration."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from skaffacity.sdk import SdkError
from skaffacity.web.config import DEFAULT_FEATURES, MODULE_NAME, WebConfig, default_web_config
from skaffacity.web.messages import MsgUpdateWebConfig

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_UINT32_MAX = 2**32 - 1
_UPDATE_ARGS = ("enabled", "port", "host", "api_endpoint", "ws_endpoint", "theme")


def parse_bool(text: str) -> bool:
    """Parse a boolean in the accepted spellings (1, t, true, 0, f, false, ...)."""
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f'parsing "{text}": invalid syntax')


def _parse_port(text: str) -> int:
    if not text or not (text.isascii() and text.isdigit()):
        raise ValueError(f'parsing "{text}": invalid syntax')
    value = int(text)
    if value > _UINT32_MAX:
        raise ValueError(f'parsing "{text}": value out of range')
    return value


def build_update_config_msg(args: Sequence[str], creator: str) -> MsgUpdateWebConfig:
    """Build and validate an update-config message from its six arguments.

    Raises ValueError for a wrong argument count or unparsable values and
    SdkError when the resulting message fails basic validation.
    """
    if len(args) != len(_UPDATE_ARGS):
        raise ValueError(f"accepts {len(_UPDATE_ARGS)} arg(s), received {len(args)}")
    enabled_text, port_text, host, api_endpoint, ws_endpoint, theme = args
    config = WebConfig(
        enabled=parse_bool(enabled_text),
        port=_parse_port(port_text),
        host=host,
        api_endpoint=api_endpoint,
        websocket_endpoint=ws_endpoint,
        theme=theme,
        features=list(DEFAULT_FEATURES),
    )
    msg = MsgUpdateWebConfig(creator=creator, config=config)
    msg.validate_basic()
    return msg


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=MODULE_NAME, description=f"{MODULE_NAME} module commands")
    commands = parser.add_subparsers(dest="command", required=True)

    tx = commands.add_parser("tx", help=f"{MODULE_NAME} transactions subcommands")
    tx_commands = tx.add_subparsers(dest="tx_command", required=True)
    update = tx_commands.add_parser("update-config", help="Update web configuration")
    for name in _UPDATE_ARGS:
        update.add_argument(name)
    update.add_argument("--from", dest="from_address", required=True, help="signer address")

    query = commands.add_parser("query", help=f"Querying commands for the {MODULE_NAME} module")
    query_commands = query.add_subparsers(dest="query_command", required=True)
    query_commands.add_parser("config", help="Query web configuration")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    ns = _build_parser().parse_args(argv)
    try:
        if ns.command == "tx":
            msg = build_update_config_msg(
                [getattr(ns, name) for name in _UPDATE_ARGS], ns.from_address
            )
            print(msg.get_sign_bytes().decode())
        else:
            print(json.dumps({"web_config": default_web_config().to_dict()}, indent=2))
    except (ValueError, SdkError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0