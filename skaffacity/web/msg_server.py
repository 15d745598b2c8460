"""Message handling for the web module."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable

from skaffacity.sdk import ERR_UNKNOWN_REQUEST, Context, Event, EventManager
from skaffacity.web.config import MODULE_NAME
from skaffacity.web.keeper import Keeper
from skaffacity.web.messages import (
    MsgEnableFeeDistribution,
    MsgSetDeveloperAddress,
    MsgUpdateWebConfig,
)


@dataclass
class MsgServer:
    """Applies web module messages to the keeper's state."""

    keeper: Keeper

    def update_web_config(self, ctx: Context, msg: MsgUpdateWebConfig) -> None:
        self.keeper.set_web_config(ctx, msg.config)

    def set_developer_address(self, ctx: Context, msg: MsgSetDeveloperAddress) -> None:
        """Set the developer address; raise SdkError if it is invalid."""
        self.keeper.set_developer_address(ctx, msg.developer_address)
        ctx.event_manager.emit_event(
            Event(
                "developer_address_set",
                [("creator", msg.creator), ("developer_address", msg.developer_address)],
            )
        )

    def enable_fee_distribution(self, ctx: Context, msg: MsgEnableFeeDistribution) -> None:
        """Turn fee distribution on or off; raise SdkError if enabling is invalid."""
        self.keeper.enable_fee_distribution(ctx, msg.enabled)
        ctx.event_manager.emit_event(
            Event(
                "fee_distribution_enabled",
                [("creator", msg.creator), ("enabled", "true" if msg.enabled else "false")],
            )
        )


def new_handler(keeper: Keeper) -> Callable[[Context, Any], list[Event]]:
    """Return a handler that routes a message and returns the events it emitted."""
    server = MsgServer(keeper)

    def handler(ctx: Context, msg: Any) -> list[Event]:
        ctx = dataclasses.replace(ctx, event_manager=EventManager())
        if isinstance(msg, MsgUpdateWebConfig):
            server.update_web_config(ctx, msg)
            return list(ctx.event_manager.events)
        raise ERR_UNKNOWN_REQUEST.wrap(
            f"unrecognized {MODULE_NAME} message type: {type(msg).__name__}"
        )

    return handler