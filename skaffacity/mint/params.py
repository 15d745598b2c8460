"""Minting parameters, their validation and their parameter-store subspace."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

import yaml

from skaffacity.sdk import Context, validate_denom

MODULE_NAME = "mint"
STORE_KEY = MODULE_NAME
ROUTER_KEY = MODULE_NAME
QUERIER_ROUTE = MODULE_NAME

MINTER_KEY = b"\x00"
PARAMS_KEY = b"\x01"

EVENT_TYPE_MINT = MODULE_NAME
ATTRIBUTE_KEY_BONDED_RATIO = "bonded_ratio"
ATTRIBUTE_KEY_INFLATION = "inflation"
ATTRIBUTE_KEY_ANNUAL_PROVISIONS = "annual_provisions"
ATTRIBUTE_KEY_AMOUNT = "amount"

KEY_MINT_DENOM = b"MintDenom"
KEY_INFLATION_RATE_CHANGE = b"InflationRateChange"
KEY_INFLATION_MAX = b"InflationMax"
KEY_INFLATION_MIN = b"InflationMin"
KEY_GOAL_BONDED = b"GoalBonded"
KEY_BLOCKS_PER_YEAR = b"BlocksPerYear"

DEC_PRECISION = 18
_DEC_QUANTUM = Decimal(1).scaleb(-DEC_PRECISION)
_UINT64_MAX = 2**64 - 1
_ONE = Decimal(1)

_FIELD_BY_KEY = {
    KEY_MINT_DENOM: "mint_denom",
    KEY_INFLATION_RATE_CHANGE: "inflation_rate_change",
    KEY_INFLATION_MAX: "inflation_max",
    KEY_INFLATION_MIN: "inflation_min",
    KEY_GOAL_BONDED: "goal_bonded",
    KEY_BLOCKS_PER_YEAR: "blocks_per_year",
}


def _to_dec(value: Any) -> Decimal:
    """Parse a fixed-point decimal from a string, int or Decimal."""
    if isinstance(value, bool):
        raise ValueError(f"invalid decimal: {value!r}")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, (int, str)):
        try:
            dec = Decimal(value)
        except InvalidOperation as exc:
            raise ValueError(f"invalid decimal: {value!r}") from exc
    else:
        raise ValueError(f"invalid decimal: {value!r}")
    if not dec.is_finite():
        raise ValueError(f"invalid decimal: {value!r}")
    return dec


def _format_dec(value: Decimal) -> str:
    """Render a decimal with the fixed 18-digit fractional part."""
    return format(value.quantize(_DEC_QUANTUM), "f")


def _to_uint64(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid unsigned integer: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid unsigned integer: {value!r}") from exc
    if not 0 <= number <= _UINT64_MAX:
        raise ValueError(f"unsigned integer out of range: {number}")
    return number


def _check_dec(value: Any) -> Decimal:
    if not isinstance(value, Decimal):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    return value


def validate_mint_denom(value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if not value.strip():
        raise ValueError("mint denom cannot be blank")
    validate_denom(value)


def validate_inflation_rate_change(value: Any) -> None:
    v = _check_dec(value)
    if v < 0:
        raise ValueError(f"inflation rate change cannot be negative: {_format_dec(v)}")
    if v > _ONE:
        raise ValueError(f"inflation rate change too large: {_format_dec(v)}")


def validate_inflation_max(value: Any) -> None:
    v = _check_dec(value)
    if v < 0:
        raise ValueError(f"max inflation cannot be negative: {_format_dec(v)}")
    if v > _ONE:
        raise ValueError(f"max inflation too large: {_format_dec(v)}")


def validate_inflation_min(value: Any) -> None:
    v = _check_dec(value)
    if v < 0:
        raise ValueError(f"min inflation cannot be negative: {_format_dec(v)}")
    if v > _ONE:
        raise ValueError(f"min inflation too large: {_format_dec(v)}")


def validate_goal_bonded(value: Any) -> None:
    v = _check_dec(value)
    if v <= 0:
        raise ValueError(f"goal bonded must be positive: {_format_dec(v)}")
    if v > _ONE:
        raise ValueError(f"goal bonded too large: {_format_dec(v)}")


def validate_blocks_per_year(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _UINT64_MAX:
        raise TypeError(f"invalid parameter type: {type(value).__name__}")
    if value == 0:
        raise ValueError(f"blocks per year must be positive: {value}")


@dataclass(frozen=True)
class ParamSetPair:
    """A parameter key, its current value and the function that validates it."""

    key: bytes
    value: Any
    validator_fn: Callable[[Any], None]


@dataclass
class Params:
    """Parameters that govern minting."""

    mint_denom: str = ""
    inflation_rate_change: Decimal = Decimal(0)
    inflation_max: Decimal = Decimal(0)
    inflation_min: Decimal = Decimal(0)
    goal_bonded: Decimal = Decimal(0)
    blocks_per_year: int = 0

    def validate(self) -> None:
        """Raise if any parameter is out of range."""
        for pair in self.param_set_pairs():
            pair.validator_fn(pair.value)
        if self.inflation_max < self.inflation_min:
            raise ValueError(
                f"max inflation ({_format_dec(self.inflation_max)}) must be greater than "
                f"or equal to min inflation ({_format_dec(self.inflation_min)})"
            )

    def param_set_pairs(self) -> list[ParamSetPair]:
        return [
            ParamSetPair(KEY_MINT_DENOM, self.mint_denom, validate_mint_denom),
            ParamSetPair(KEY_INFLATION_RATE_CHANGE, self.inflation_rate_change, validate_inflation_rate_change),
            ParamSetPair(KEY_INFLATION_MAX, self.inflation_max, validate_inflation_max),
            ParamSetPair(KEY_INFLATION_MIN, self.inflation_min, validate_inflation_min),
            ParamSetPair(KEY_GOAL_BONDED, self.goal_bonded, validate_goal_bonded),
            ParamSetPair(KEY_BLOCKS_PER_YEAR, self.blocks_per_year, validate_blocks_per_year),
        ]

    def to_dict(self) -> dict[str, str]:
        return {
            "mint_denom": self.mint_denom,
            "inflation_rate_change": _format_dec(self.inflation_rate_change),
            "inflation_max": _format_dec(self.inflation_max),
            "inflation_min": _format_dec(self.inflation_min),
            "goal_bonded": _format_dec(self.goal_bonded),
            "blocks_per_year": str(self.blocks_per_year),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Params":
        return cls(
            mint_denom=str(data.get("mint_denom", "")),
            inflation_rate_change=_to_dec(data.get("inflation_rate_change", "0")),
            inflation_max=_to_dec(data.get("inflation_max", "0")),
            inflation_min=_to_dec(data.get("inflation_min", "0")),
            goal_bonded=_to_dec(data.get("goal_bonded", "0")),
            blocks_per_year=_to_uint64(data.get("blocks_per_year", 0)),
        )

    def __str__(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False)


def default_params() -> Params:
    """Return the chain's default minting parameters."""
    return Params(
        mint_denom="skaf",
        inflation_rate_change=Decimal("0.005"),
        inflation_max=Decimal("0.005"),
        inflation_min=Decimal("0.005"),
        goal_bonded=Decimal("0.67"),
        blocks_per_year=int(60 * 60 * 24 * 365.25 / 6),
    )


def _encode_value(value: Any) -> str:
    if isinstance(value, Decimal):
        return _format_dec(value)
    return str(value)


@dataclass
class ParamSubspace:
    """A named section of the parameter store holding one module's params."""

    name: str = MODULE_NAME
    store_key: str = "params"

    def _key(self, key: bytes) -> bytes:
        return self.name.encode() + b"/" + key

    def get_param_set(self, ctx: Context) -> Params:
        """Load every parameter; raise LookupError if one was never set."""
        store = ctx.kv_store(self.store_key)
        values: dict[str, Any] = {}
        for key, field_name in _FIELD_BY_KEY.items():
            raw = store.get(self._key(key))
            if raw is None:
                raise LookupError(f"parameter {key.decode()} not set in subspace {self.name}")
            values[field_name] = json.loads(raw)
        return Params.from_dict(values)

    def set_param_set(self, ctx: Context, params: Params) -> None:
        """Validate and store each parameter in turn."""
        store = ctx.kv_store(self.store_key)
        for pair in params.param_set_pairs():
            pair.validator_fn(pair.value)
            store.set(self._key(pair.key), json.dumps(_encode_value(pair.value)).encode())