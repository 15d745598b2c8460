# skaffacity

Application-level state for a small gaming chain, usable as an ordinary
Python library. Everything works against in-memory key/value stores held
by a `Context`, so the chain's rules can be exercised and tested without
any node software.

## What is inside

### `skaffacity.sdk`

The shared building blocks:

- `Coin` (one denomination and a non-negative integer amount) and `Coins`
  (a sorted set of non-zero coins with distinct denominations, with
  `is_zero()` and `empty()`).
- `validate_denom(denom)`, raising `ValueError` for an invalid
  denomination.
- Bech32 account addresses: `acc_address_from_bech32(address, prefix=None)`
  decodes and checks an address (and its prefix, when given);
  `acc_address_to_bech32(data, prefix)` encodes raw bytes.
- `KVStore` with `get`, `set`, `has`, `delete` and `iterate_prefix`.
- `Event` and `EventManager.emit_event`.
- `Context`, which holds named stores (`kv_store(key)` creates one on
  first use), an event manager and a logger.
- `ErrorCode` and `SdkError`: `ErrorCode.wrap(message)` returns an
  `SdkError` of that kind.
- `BankKeeper` and `AccountKeeper`: the protocols that the modules expect
  a bank and an account registry to satisfy.

### `skaffacity.mint.params`

Minting parameters:

- `Params` with `validate()`, `param_set_pairs()`, `to_dict()`,
  `from_dict()`; decimals are rendered with 18 fractional digits and
  `str(params)` is YAML.
- `default_params()`: denomination `skaf`, 0.5 % inflation rate change,
  maximum and minimum, 67 % bonded goal, 5,259,600 blocks per year
  (six-second blocks).
- The individual validators `validate_mint_denom`,
  `validate_inflation_rate_change`, `validate_inflation_max`,
  `validate_inflation_min`, `validate_goal_bonded` and
  `validate_blocks_per_year`.
- `ParamSubspace`, which stores a `Params` in a `Context`
  (`set_param_set` validates each value; `get_param_set` raises
  `LookupError` if a value was never set).

### `skaffacity.web`

The web-interface configuration and developer fee sharing:

- `config`: `WebConfig`, `default_web_config()` (port 8090 on `0.0.0.0`),
  `FeeDistribution` with `validate()` and `calculate_fees()`, and
  `default_fee_distribution()` (1000 / 9000 basis points, i.e. 10 % to the
  developer and 90 % to validators, enabled, no developer address yet).
- `messages`: `MsgUpdateWebConfig`, `MsgSetDeveloperAddress` and
  `MsgEnableFeeDistribution`, each with `route()`, `type()`,
  `get_signers()`, `validate_basic()` and `get_sign_bytes()` (compact
  JSON with sorted keys).
- `keeper`: `Keeper` stores the configuration (returning the default when
  none is stored), sets the developer address, turns fee distribution on
  or off and answers `web_config_query` and paged `web_config_all`
  queries with `PageRequest` / `PageResponse`. `FeeHandler` sends the
  developer share of collected fees from the fee collector through the
  bank keeper and emits `fee_distribution` events; validators keep the
  rest.
- `msg_server`: `MsgServer` applies the three messages; `new_handler()`
  returns a function that routes a `MsgUpdateWebConfig` and returns the
  events it emitted, raising `SdkError` for any other message.
- `genesis`: `GenesisState` (which requires a non-zero port and a host),
  `default_genesis()`, `init_genesis()` and `export_genesis()`.
- `module`: `AppModule`, which encodes and validates genesis as JSON and,
  in `begin_block`, distributes whatever the `fee_collector` account
  holds.
- `cli`: the `skaffacity-web` command.

## Examples

```python
from skaffacity.mint.params import default_params

params = default_params()
params.validate()                 # raises on an invalid parameter set
print(params.to_dict()["inflation_max"])   # 0.005000000000000000
```

```python
from skaffacity.sdk import Coin, Coins
from skaffacity.web.config import default_fee_distribution

split = default_fee_distribution()
developer, validators = split.calculate_fees(Coins([Coin("skaf", 1005)]))
print(developer, validators)      # 100skaf 905skaf
```

```python
from skaffacity.sdk import Context
from skaffacity.web.keeper import Keeper

ctx = Context()
keeper = Keeper()
config = keeper.get_web_config(ctx)   # the default until one is stored
config.port = 9000
keeper.set_web_config(ctx, config)
print(keeper.web_config_query(ctx).port)   # 9000
```

## Command line

```
skaffacity-web tx update-config ENABLED PORT HOST API_ENDPOINT WS_ENDPOINT THEME --from ADDRESS
skaffacity-web query config
```

`tx update-config` parses the six values, builds a `MsgUpdateWebConfig`
signed by the bech32 address given with `--from`, validates it and prints
its sign bytes. `query config` prints the default web configuration as
JSON. Errors are printed to standard error and the exit status is 1.

## What this package does not do

- It does not run a node, connect to a network or broadcast transactions:
  `skaffacity-web tx` only prints the message it would sign, and
  `skaffacity-web query config` shows the default configuration rather
  than a chain's stored one.
- It has no bank of its own; fee distribution calls whatever object you
  pass as the bank and account keepers.
- The mint package holds parameters only: there is no block-reward
  minter, mint keeper or mint genesis here.
- The `skaffacity.nft` and `skaffacity.staking` packages are empty: NFT
  minting and transfer, and staking, are not provided.

## Requirements

Python 3.10 or later and PyYAML.