"""Web interface configuration, fee distribution settings and store keys."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from skaffacity.sdk import (
    ERR_INVALID_ADDRESS,
    ERR_INVALID_REQUEST,
    Coin,
    Coins,
    acc_address_from_bech32,
)

MODULE_NAME = "web"
STORE_KEY = MODULE_NAME
ROUTER_KEY = MODULE_NAME
QUERIER_ROUTE = MODULE_NAME
MEM_STORE_KEY = "mem_web"

WEB_CONFIG_KEY = "WebConfig-value-"

BASIS_POINTS_TOTAL = 10000

DEFAULT_FEATURES = ("tokenfactory", "nft", "marketplace", "governance", "staking")

_UINT32_MAX = 2**32 - 1
_UINT64_MAX = 2**64 - 1


def key_prefix(p: str) -> bytes:
    """Return the store key bytes for a key name."""
    return p.encode()


def _to_uint(value: Any, maximum: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an unsigned integer, got {value!r}")
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _to_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a boolean, got {value!r}")
    return value


def _to_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


@dataclass
class FeeDistribution:
    """How transaction fees are split between the developer and validators.

    Percentages are in basis points: 1000 is 10%.
    """

    developer_address: str = ""
    developer_fee_percentage: int = 0
    validator_fee_percentage: int = 0
    enabled: bool = False

    def validate(self) -> None:
        """Raise SdkError if an enabled configuration is inconsistent."""
        if not self.enabled:
            return
        if not self.developer_address:
            raise ERR_INVALID_ADDRESS.wrap(
                "developer address cannot be empty when fee distribution is enabled"
            )
        try:
            acc_address_from_bech32(self.developer_address)
        except ValueError as exc:
            raise ERR_INVALID_ADDRESS.wrap(f"invalid developer address: {exc}") from exc
        total = (self.developer_fee_percentage + self.validator_fee_percentage) & _UINT64_MAX
        if total != BASIS_POINTS_TOTAL:
            raise ERR_INVALID_REQUEST.wrap(
                f"fee percentages must add up to {BASIS_POINTS_TOTAL} (100%), got {total}"
            )

    def calculate_fees(self, total_fees: Coins) -> tuple[Coins, Coins]:
        """Split fees into (developer share, validator share), truncating the developer share."""
        if not self.enabled or total_fees.is_zero():
            return Coins(), total_fees
        developer: list[Coin] = []
        validator: list[Coin] = []
        for coin in total_fees:
            dev_amount = coin.amount * self.developer_fee_percentage // BASIS_POINTS_TOTAL
            val_amount = coin.amount - dev_amount
            if dev_amount > 0:
                developer.append(Coin(coin.denom, dev_amount))
            if val_amount > 0:
                validator.append(Coin(coin.denom, val_amount))
        return Coins(developer), Coins(validator)

    def to_dict(self) -> dict[str, Any]:
        return {
            "developer_address": self.developer_address,
            "developer_fee_percentage": self.developer_fee_percentage,
            "validator_fee_percentage": self.validator_fee_percentage,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeeDistribution":
        return cls(
            developer_address=_to_str(data.get("developer_address", ""), "developer_address"),
            developer_fee_percentage=_to_uint(
                data.get("developer_fee_percentage", 0), _UINT64_MAX, "developer_fee_percentage"
            ),
            validator_fee_percentage=_to_uint(
                data.get("validator_fee_percentage", 0), _UINT64_MAX, "validator_fee_percentage"
            ),
            enabled=_to_bool(data.get("enabled", False), "enabled"),
        )

    def __str__(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def default_fee_distribution() -> FeeDistribution:
    """Return the default split: 10% to the developer, 90% to validators."""
    return FeeDistribution(
        developer_address="",
        developer_fee_percentage=1000,
        validator_fee_percentage=9000,
        enabled=True,
    )


@dataclass
class WebConfig:
    """Settings for the chain's web interface."""

    enabled: bool = False
    port: int = 0
    host: str = ""
    api_endpoint: str = ""
    websocket_endpoint: str = ""
    theme: str = ""
    features: list[str] = field(default_factory=list)
    fee_distribution: FeeDistribution = field(default_factory=FeeDistribution)

    def __str__(self) -> str:
        return (
            f"WebConfig{{Enabled: {'true' if self.enabled else 'false'}, Port: {self.port}, "
            f"Host: {self.host}, ApiEndpoint: {self.api_endpoint}, "
            f"WebsocketEndpoint: {self.websocket_endpoint}, Theme: {self.theme}, "
            f"Features: [{' '.join(self.features)}]}}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "port": self.port,
            "host": self.host,
            "api_endpoint": self.api_endpoint,
            "websocket_endpoint": self.websocket_endpoint,
            "theme": self.theme,
            "features": list(self.features),
            "fee_distribution": self.fee_distribution.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WebConfig":
        features = data.get("features") or []
        if not isinstance(features, list):
            raise ValueError(f"features must be a list, got {features!r}")
        fee_data = data.get("fee_distribution") or {}
        if not isinstance(fee_data, dict):
            raise ValueError(f"fee_distribution must be an object, got {fee_data!r}")
        return cls(
            enabled=_to_bool(data.get("enabled", False), "enabled"),
            port=_to_uint(data.get("port", 0), _UINT32_MAX, "port"),
            host=_to_str(data.get("host", ""), "host"),
            api_endpoint=_to_str(data.get("api_endpoint", ""), "api_endpoint"),
            websocket_endpoint=_to_str(data.get("websocket_endpoint", ""), "websocket_endpoint"),
            theme=_to_str(data.get("theme", ""), "theme"),
            features=[_to_str(f, "feature") for f in features],
            fee_distribution=FeeDistribution.from_dict(fee_data),
        )


def default_web_config() -> WebConfig:
    """Return the default web interface configuration."""
    return WebConfig(
        enabled=True,
        port=8090,
        host="0.0.0.0",
        api_endpoint="http://localhost:1317",
        websocket_endpoint="ws://localhost:26657/websocket",
        theme="default",
        features=list(DEFAULT_FEATURES),
        fee_distribution=default_fee_distribution(),
    )