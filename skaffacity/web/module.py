"""The web module as seen by the application: genesis, block hooks and routes."""

from __future__ import annotations

import json
from typing import Any

from skaffacity.sdk import Context
from skaffacity.web.config import MODULE_NAME, QUERIER_ROUTE
from skaffacity.web.genesis import (
    GenesisState,
    default_genesis,
    export_genesis,
    init_genesis,
)
from skaffacity.web.keeper import Keeper

FEE_COLLECTOR = "fee_collector"
CONSENSUS_VERSION = 2


def _decode_genesis(raw: bytes | str) -> GenesisState:
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("genesis state must be a JSON object")
        return GenesisState.from_dict(data)
    except (ValueError, TypeError, AttributeError) as exc:
        raise ValueError(f"failed to unmarshal {MODULE_NAME} genesis state: {exc}") from exc


def _encode_genesis(state: GenesisState) -> bytes:
    return json.dumps(state.to_dict()).encode()


class AppModule:
    """Wires the web keeper into block processing and genesis handling."""

    def __init__(self, keeper: Keeper, account_keeper: Any, bank_keeper: Any) -> None:
        self.keeper = keeper
        self.account_keeper = account_keeper
        self.bank_keeper = bank_keeper

    def name(self) -> str:
        return MODULE_NAME

    def querier_route(self) -> str:
        return QUERIER_ROUTE

    def default_genesis(self) -> bytes:
        return _encode_genesis(default_genesis())

    def validate_genesis(self, raw: bytes | str) -> None:
        """Raise ValueError if the raw genesis cannot be decoded or is invalid."""
        _decode_genesis(raw).validate()

    def init_genesis(self, ctx: Context, raw: bytes | str) -> list:
        """Store the decoded genesis state; returns no validator updates."""
        init_genesis(ctx, self.keeper, _decode_genesis(raw))
        return []

    def export_genesis(self, ctx: Context) -> bytes:
        return _encode_genesis(export_genesis(ctx, self.keeper))

    def consensus_version(self) -> int:
        return CONSENSUS_VERSION

    def begin_block(self, ctx: Context) -> None:
        """Distribute whatever the fee collector holds at the start of the block."""
        fee_collector_addr = self.account_keeper.get_module_address(FEE_COLLECTOR)
        if fee_collector_addr is None:
            return
        balance = self.bank_keeper.get_all_balances(ctx, fee_collector_addr)
        if balance.is_zero():
            return
        ctx.logger.info(
            "Fee collector has balance for distribution: balance=%s fee_collector=%s",
            balance,
            fee_collector_addr.hex(),
        )
        try:
            self.keeper.distribute_fees(ctx, FEE_COLLECTOR, balance)
        except Exception as exc:  # a failed distribution must not halt the block
            ctx.logger.error("Failed to distribute fees in BeginBlock: %s", exc)

    def end_block(self, ctx: Context) -> list:
        return []