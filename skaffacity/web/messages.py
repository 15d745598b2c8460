"""Transaction messages of the web module."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from skaffacity.sdk import ERR_INVALID_ADDRESS, ERR_INVALID_REQUEST, acc_address_from_bech32
from skaffacity.web.config import ROUTER_KEY, WebConfig

TYPE_MSG_UPDATE_WEB_CONFIG = "update_web_config"
TYPE_MSG_SET_DEVELOPER_ADDRESS = "set_developer_address"
TYPE_MSG_ENABLE_FEE_DISTRIBUTION = "enable_fee_distribution"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _sorted_json(obj: Any) -> bytes:
    """Encode compact JSON with sorted keys and HTML-safe escaping."""
    text = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text.encode()


def _check_address(address: str, label: str) -> None:
    try:
        acc_address_from_bech32(address)
    except ValueError as exc:
        raise ERR_INVALID_ADDRESS.wrap(f"invalid {label} address ({exc})") from exc


@dataclass
class MsgUpdateWebConfig:
    """Replace the web interface configuration."""

    creator: str = ""
    config: WebConfig = field(default_factory=WebConfig)

    def __str__(self) -> str:
        return f"MsgUpdateWebConfig{{Creator: {self.creator}, Config: {self.config}}}"

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_UPDATE_WEB_CONFIG

    def get_signers(self) -> list[bytes]:
        """Return the creator's address; raise ValueError if it is malformed."""
        return [acc_address_from_bech32(self.creator)]

    def get_sign_bytes(self) -> bytes:
        return _sorted_json({"creator": self.creator, "config": self.config.to_dict()})

    def validate_basic(self) -> None:
        """Raise SdkError if the creator, port or host is invalid."""
        _check_address(self.creator, "creator")
        if self.config.port == 0:
            raise ERR_INVALID_REQUEST.wrap("port cannot be zero")
        if self.config.host == "":
            raise ERR_INVALID_REQUEST.wrap("host cannot be empty")


@dataclass
class MsgSetDeveloperAddress:
    """Set the address that receives the developer's share of fees."""

    creator: str = ""
    developer_address: str = ""

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_SET_DEVELOPER_ADDRESS

    def get_signers(self) -> list[bytes]:
        """Return the creator's address; raise ValueError if it is malformed."""
        return [acc_address_from_bech32(self.creator)]

    def get_sign_bytes(self) -> bytes:
        return _sorted_json(
            {"creator": self.creator, "developer_address": self.developer_address}
        )

    def validate_basic(self) -> None:
        """Raise SdkError if either address is invalid."""
        _check_address(self.creator, "creator")
        _check_address(self.developer_address, "developer")


@dataclass
class MsgEnableFeeDistribution:
    """Turn fee distribution on or off."""

    creator: str = ""
    enabled: bool = False

    def route(self) -> str:
        return ROUTER_KEY

    def type(self) -> str:
        return TYPE_MSG_ENABLE_FEE_DISTRIBUTION

    def get_signers(self) -> list[bytes]:
        """Return the creator's address; raise ValueError if it is malformed."""
        return [acc_address_from_bech32(self.creator)]

    def get_sign_bytes(self) -> bytes:
        return _sorted_json({"creator": self.creator, "enabled": self.enabled})

    def validate_basic(self) -> None:
        """Raise SdkError if the creator address is invalid."""
        _check_address(self.creator, "creator")