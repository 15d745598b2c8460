"""Core ledger primitives: errors, coins, addresses, stores, events and context."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Protocol

_DENOM_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9/:._-]{2,127}")

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_MAX_ADDRESS_LENGTH = 255


# ---------------------------------------------------------------- errors


@dataclass(frozen=True)
class ErrorCode:
    """A registered error kind, identified by codespace and code."""

    codespace: str
    code: int
    description: str

    def wrap(self, message: str) -> "SdkError":
        """Return an exception of this kind carrying extra context."""
        return SdkError(self, message)


class SdkError(Exception):
    """An error of a registered kind, optionally wrapped with a message."""

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        self.code = code
        self.message = message
        text = f"{message}: {code.description}" if message else code.description
        super().__init__(text)


ERR_UNKNOWN_REQUEST = ErrorCode("sdk", 6, "unknown request")
ERR_INVALID_ADDRESS = ErrorCode("sdk", 7, "invalid address")
ERR_INVALID_REQUEST = ErrorCode("sdk", 18, "invalid request")


# ----------------------------------------------------------------- coins


def validate_denom(denom: str) -> None:
    """Raise ValueError unless ``denom`` is a valid coin denomination."""
    if not isinstance(denom, str) or not _DENOM_RE.fullmatch(denom):
        raise ValueError(f"invalid denom: {denom}")


@dataclass(frozen=True)
class Coin:
    """An amount of a single denomination."""

    denom: str
    amount: int

    def __post_init__(self) -> None:
        validate_denom(self.denom)
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"coin amount must be an integer, got {type(self.amount).__name__}")
        if self.amount < 0:
            raise ValueError(f"negative coin amount: {self.amount}")

    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


class Coins:
    """A sorted set of non-zero coins with distinct denominations."""

    __slots__ = ("_coins",)

    def __init__(self, coins: Iterable[Coin] = ()) -> None:
        kept = sorted((c for c in coins if not c.is_zero()), key=lambda c: c.denom)
        for previous, current in zip(kept, kept[1:]):
            if previous.denom == current.denom:
                raise ValueError(f"duplicate denomination {current.denom}")
        self._coins: tuple[Coin, ...] = tuple(kept)

    def is_zero(self) -> bool:
        return all(c.is_zero() for c in self._coins)

    def empty(self) -> bool:
        return not self._coins

    def __iter__(self) -> Iterator[Coin]:
        return iter(self._coins)

    def __len__(self) -> int:
        return len(self._coins)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Coins):
            return NotImplemented
        return self._coins == other._coins

    def __hash__(self) -> int:
        return hash(self._coins)

    def __str__(self) -> str:
        return ",".join(str(c) for c in self._coins)

    def __repr__(self) -> str:
        return f"Coins({list(self._coins)!r})"


# ------------------------------------------------------------- addresses


def _polymod(values: Iterable[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for shift, generator in enumerate(_GENERATORS):
            if (top >> shift) & 1:
                chk ^= generator
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _create_checksum(hrp: str, data: list[int]) -> list[int]:
    polymod = _polymod(_hrp_expand(hrp) + data + [0] * 6) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _convert_bits(data: Iterable[int], from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out: list[int] = []
    max_value = (1 << to_bits) - 1
    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError("invalid data range")
        acc = (acc << from_bits) | value
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & max_value)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (acc << (to_bits - bits)) & max_value:
        raise ValueError("invalid padding")
    return out


def _bech32_decode(text: str) -> tuple[str, list[int]]:
    if text.lower() != text and text.upper() != text:
        raise ValueError("decoding bech32 failed: string not all lowercase or all uppercase")
    text = text.lower()
    pos = text.rfind("1")
    if pos < 1 or pos + 7 > len(text):
        raise ValueError("decoding bech32 failed: invalid separator index")
    hrp, data_part = text[:pos], text[pos + 1 :]
    for char in hrp:
        if not 33 <= ord(char) <= 126:
            raise ValueError(f"decoding bech32 failed: invalid character in prefix: {char!r}")
    data = []
    for char in data_part:
        index = _CHARSET.find(char)
        if index < 0:
            raise ValueError(f"decoding bech32 failed: invalid character not part of charset: {char!r}")
        data.append(index)
    if _polymod(_hrp_expand(hrp) + data) != 1:
        raise ValueError("decoding bech32 failed: invalid checksum")
    return hrp, data[:-6]


def _verify_address_format(data: bytes) -> None:
    if not data:
        raise ValueError("addresses cannot be empty")
    if len(data) > _MAX_ADDRESS_LENGTH:
        raise ValueError(f"address max length is {_MAX_ADDRESS_LENGTH}, got {len(data)}")


def acc_address_from_bech32(address: str, prefix: str | None = None) -> bytes:
    """Decode a bech32 account address, checking its prefix when one is given."""
    if not address or not address.strip():
        raise ValueError("empty address string is not allowed")
    hrp, data = _bech32_decode(address)
    if prefix is not None and hrp != prefix:
        raise ValueError(f"invalid Bech32 prefix; expected {prefix}, got {hrp}")
    raw = bytes(_convert_bits(data, 5, 8, False))
    _verify_address_format(raw)
    return raw


def acc_address_to_bech32(data: bytes, prefix: str) -> str:
    """Encode raw address bytes as a bech32 string with the given prefix."""
    _verify_address_format(data)
    if not prefix:
        raise ValueError("bech32 prefix cannot be empty")
    five_bit = _convert_bits(data, 8, 5, True)
    hrp = prefix.lower()
    checksum = _create_checksum(hrp, five_bit)
    return hrp + "1" + "".join(_CHARSET[d] for d in five_bit + checksum)


# ---------------------------------------------------------------- stores


class KVStore:
    """An ordered byte-keyed key/value store."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}

    def get(self, key: bytes) -> bytes | None:
        return self._data.get(bytes(key))

    def set(self, key: bytes, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("store values must be bytes")
        self._data[bytes(key)] = bytes(value)

    def has(self, key: bytes) -> bool:
        return bytes(key) in self._data

    def delete(self, key: bytes) -> None:
        self._data.pop(bytes(key), None)

    def iterate_prefix(self, prefix: bytes) -> Iterator[tuple[bytes, bytes]]:
        """Yield (key, value) pairs whose key starts with ``prefix``, in key order."""
        prefix = bytes(prefix)
        for key in sorted(k for k in self._data if k.startswith(prefix)):
            yield key, self._data[key]


# ---------------------------------------------------------------- events


@dataclass
class Event:
    """A typed event with ordered key/value attributes."""

    type: str
    attributes: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class EventManager:
    """Collects events emitted while processing a block or message."""

    events: list[Event] = field(default_factory=list)

    def emit_event(self, event: Event) -> None:
        self.events.append(event)


# --------------------------------------------------------------- context


@dataclass
class Context:
    """Execution context: named stores, an event manager and a logger."""

    stores: dict[str, KVStore] = field(default_factory=dict)
    event_manager: EventManager = field(default_factory=EventManager)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("skaffacity"))
    block_height: int = 0

    def kv_store(self, key: str) -> KVStore:
        """Return the store named ``key``, creating it on first use."""
        return self.stores.setdefault(key, KVStore())


# ------------------------------------------------------ expected keepers


class BankKeeper(Protocol):
    """What modules expect from the bank."""

    def spendable_coins(self, ctx: Context, addr: bytes) -> Coins: ...

    def send_coins(self, ctx: Context, from_addr: bytes, to_addr: bytes, amt: Coins) -> None: ...

    def send_coins_from_module_to_account(
        self, ctx: Context, sender_module: str, recipient_addr: bytes, amt: Coins
    ) -> None: ...

    def send_coins_from_account_to_module(
        self, ctx: Context, sender_addr: bytes, recipient_module: str, amt: Coins
    ) -> None: ...

    def send_coins_from_module_to_module(
        self, ctx: Context, sender_module: str, recipient_module: str, amt: Coins
    ) -> None: ...

    def mint_coins(self, ctx: Context, name: str, amt: Coins) -> None: ...

    def get_supply(self, ctx: Context, denom: str) -> Coin: ...

    def get_all_balances(self, ctx: Context, addr: bytes) -> Coins: ...

    def get_balance(self, ctx: Context, addr: bytes, denom: str) -> Coin: ...


class AccountKeeper(Protocol):
    """What modules expect from the account registry."""

    def get_account(self, ctx: Context, addr: bytes) -> Any: ...

    def get_module_address(self, name: str) -> bytes | None: ...

    def get_module_account(self, ctx: Context, name: str) -> Any: ...