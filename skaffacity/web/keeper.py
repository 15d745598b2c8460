"""State access for the web module: configuration, fee distribution and queries."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from skaffacity.sdk import Coins, Context, Event, SdkError, ERR_INVALID_ADDRESS, acc_address_from_bech32
from skaffacity.web.config import (
    MEM_STORE_KEY,
    STORE_KEY,
    WEB_CONFIG_KEY,
    FeeDistribution,
    WebConfig,
    default_web_config,
    key_prefix,
)

DEFAULT_PAGE_LIMIT = 100


@dataclass
class PageRequest:
    """Selects one page of a listing, either by start key or by offset."""

    key: bytes = b""
    offset: int = 0
    limit: int = 0
    count_total: bool = False
    reverse: bool = False


@dataclass
class PageResponse:
    """Where the next page starts and, when asked for, the total count."""

    next_key: bytes = b""
    total: int = 0


def _paginate(
    entries: list[tuple[bytes, bytes]], page: PageRequest | None
) -> tuple[list[tuple[bytes, bytes]], PageResponse]:
    page = page or PageRequest()
    if page.key and page.offset:
        raise ValueError("invalid request, either offset or key is expected, got both")
    limit = page.limit
    count_total = page.count_total
    if page.reverse:
        entries = entries[::-1]

    if page.key:
        if limit == 0:
            limit = DEFAULT_PAGE_LIMIT
        if page.reverse:
            selected = [entry for entry in entries if entry[0] <= page.key]
        else:
            selected = [entry for entry in entries if entry[0] >= page.key]
        next_key = selected[limit][0] if len(selected) > limit else b""
        return selected[:limit], PageResponse(next_key=next_key)

    if limit == 0:
        limit = DEFAULT_PAGE_LIMIT
        count_total = True
    end = page.offset + limit
    next_key = entries[end][0] if len(entries) > end else b""
    total = len(entries) if count_total else 0
    return entries[page.offset : end], PageResponse(next_key=next_key, total=total)


def _encode_config(config: WebConfig) -> bytes:
    return json.dumps(config.to_dict(), sort_keys=True).encode()


def _decode_config(raw: bytes) -> WebConfig:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("stored web config must be a JSON object")
    return WebConfig.from_dict(data)


@dataclass
class FeeHandler:
    """Sends the developer's share of collected fees out of the fee collector."""

    bank_keeper: Any = None
    auth_keeper: Any = None

    def distribute_fees(
        self, ctx: Context, web_keeper: "Keeper", fee_collector: str, total_fees: Coins
    ) -> None:
        """Split fees per the stored configuration; validators keep the remainder.

        Raises LookupError if the fee collector account does not exist. Invalid
        configuration and failed transfers are logged, not raised.
        """
        if total_fees.is_zero():
            return

        fee_distribution: FeeDistribution = web_keeper.get_web_config(ctx).fee_distribution
        if not fee_distribution.enabled:
            return

        try:
            fee_distribution.validate()
        except SdkError as exc:
            ctx.logger.error("Invalid fee distribution configuration: %s", exc)
            return

        developer_fee, validator_fee = fee_distribution.calculate_fees(total_fees)
        ctx.logger.info(
            "Distributing transaction fees: total_fees=%s developer_fee=%s "
            "validator_fee=%s developer_address=%s",
            total_fees,
            developer_fee,
            validator_fee,
            fee_distribution.developer_address,
        )

        if self.auth_keeper.get_module_address(fee_collector) is None:
            raise LookupError(f"fee collector account not found: {fee_collector}")

        if not developer_fee.is_zero():
            self._send_developer_fee(ctx, fee_collector, fee_distribution, developer_fee)

        ctx.event_manager.emit_event(
            Event(
                "fee_distribution",
                [
                    ("total_fees", str(total_fees)),
                    ("developer_fee", str(developer_fee)),
                    ("validator_fee", str(validator_fee)),
                    ("developer_percentage", str(fee_distribution.developer_fee_percentage)),
                    ("validator_percentage", str(fee_distribution.validator_fee_percentage)),
                ],
            )
        )

    def _send_developer_fee(
        self,
        ctx: Context,
        fee_collector: str,
        fee_distribution: FeeDistribution,
        developer_fee: Coins,
    ) -> None:
        address = fee_distribution.developer_address
        try:
            developer_addr = acc_address_from_bech32(address)
        except ValueError as exc:
            ctx.logger.error("Invalid developer address %s: %s", address, exc)
            return
        try:
            self.bank_keeper.send_coins_from_module_to_account(
                ctx, fee_collector, developer_addr, developer_fee
            )
        except Exception as exc:  # a failed transfer must not abort the block
            ctx.logger.error("Failed to send developer fee: %s", exc)
            return
        ctx.logger.info("Developer fee sent successfully: amount=%s recipient=%s", developer_fee, address)
        ctx.event_manager.emit_event(
            Event(
                "developer_fee_distribution",
                [
                    ("developer_address", address),
                    ("amount", str(developer_fee)),
                    ("percentage", str(fee_distribution.developer_fee_percentage)),
                ],
            )
        )


@dataclass
class Keeper:
    """Reads and writes the web module's configuration."""

    store_key: str = STORE_KEY
    mem_key: str = MEM_STORE_KEY
    bank_keeper: Any = None
    auth_keeper: Any = None
    fee_handler: FeeHandler = field(init=False)

    def __post_init__(self) -> None:
        self.fee_handler = FeeHandler(self.bank_keeper, self.auth_keeper)

    def set_web_config(self, ctx: Context, web_config: WebConfig) -> None:
        ctx.kv_store(self.store_key).set(key_prefix(WEB_CONFIG_KEY), _encode_config(web_config))

    def remove_web_config(self, ctx: Context) -> None:
        ctx.kv_store(self.store_key).delete(key_prefix(WEB_CONFIG_KEY))

    def get_web_config(self, ctx: Context) -> WebConfig:
        """Return the stored configuration, or the default if none is stored."""
        raw = ctx.kv_store(self.store_key).get(key_prefix(WEB_CONFIG_KEY))
        if raw is None:
            return default_web_config()
        return _decode_config(raw)

    def distribute_fees(self, ctx: Context, fee_collector: str, total_fees: Coins) -> None:
        self.fee_handler.distribute_fees(ctx, self, fee_collector, total_fees)

    def get_fee_distribution_config(self, ctx: Context) -> FeeDistribution:
        return self.get_web_config(ctx).fee_distribution

    def set_developer_address(self, ctx: Context, address: str) -> None:
        """Store a new developer address; raise SdkError if it or the result is invalid."""
        try:
            acc_address_from_bech32(address)
        except ValueError as exc:
            raise ERR_INVALID_ADDRESS.wrap(f"invalid developer address: {exc}") from exc

        web_config = self.get_web_config(ctx)
        web_config.fee_distribution.developer_address = address
        web_config.fee_distribution.validate()
        self.set_web_config(ctx, web_config)

        ctx.logger.info("Developer address updated: new_address=%s", address)
        ctx.event_manager.emit_event(
            Event("developer_address_updated", [("new_address", address)])
        )

    def enable_fee_distribution(self, ctx: Context, enabled: bool) -> None:
        """Turn fee distribution on or off; enabling validates the configuration."""
        web_config = self.get_web_config(ctx)
        web_config.fee_distribution.enabled = enabled
        if enabled:
            web_config.fee_distribution.validate()
        self.set_web_config(ctx, web_config)

        flag = "true" if enabled else "false"
        ctx.logger.info("Fee distribution status updated: enabled=%s", flag)
        ctx.event_manager.emit_event(
            Event("fee_distribution_status_updated", [("enabled", flag)])
        )

    def web_config_query(self, ctx: Context) -> WebConfig:
        """Answer a query for the current configuration."""
        return self.get_web_config(ctx)

    def web_config_all(
        self, ctx: Context, pagination: PageRequest | None = None
    ) -> tuple[list[WebConfig], PageResponse]:
        """List stored configurations one page at a time."""
        prefix = key_prefix(WEB_CONFIG_KEY)
        entries = [
            (key[len(prefix) :], value)
            for key, value in ctx.kv_store(self.store_key).iterate_prefix(prefix)
        ]
        page_entries, page_response = _paginate(entries, pagination)
        configs = []
        for _, value in page_entries:
            try:
                configs.append(_decode_config(value))
            except (ValueError, TypeError) as exc:
                raise ValueError(f"failed to decode web config: {exc}") from exc
        return configs, page_response