"""Genesis state of the web module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from skaffacity.sdk import Context
from skaffacity.web.config import WebConfig, default_web_config
from skaffacity.web.keeper import Keeper


@dataclass
class GenesisState:
    """The web module's state at chain start."""

    web_config: WebConfig = field(default_factory=WebConfig)

    def validate(self) -> None:
        """Raise ValueError if the configured port or host is missing."""
        if self.web_config.port == 0:
            raise ValueError("web config port cannot be zero")
        if self.web_config.host == "":
            raise ValueError("web config host cannot be empty")

    def __str__(self) -> str:
        return f"GenesisState{{WebConfig: {self.web_config}}}"

    def to_dict(self) -> dict[str, Any]:
        return {"web_config": self.web_config.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GenesisState":
        config = data.get("web_config") or {}
        if not isinstance(config, dict):
            raise ValueError(f"web_config must be an object, got {config!r}")
        return cls(web_config=WebConfig.from_dict(config))


def default_genesis() -> GenesisState:
    return GenesisState(web_config=default_web_config())


def init_genesis(ctx: Context, keeper: Keeper, gen_state: GenesisState) -> None:
    keeper.set_web_config(ctx, gen_state.web_config)


def export_genesis(ctx: Context, keeper: Keeper) -> GenesisState:
    return GenesisState(web_config=keeper.get_web_config(ctx))