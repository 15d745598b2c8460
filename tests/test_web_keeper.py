import pytest

from skaffacity.sdk import (
    ERR_INVALID_ADDRESS,
    Coin,
    Coins,
    Context,
    SdkError,
    acc_address_from_bech32,
    acc_address_to_bech32,
)
from skaffacity.web.config import WEB_CONFIG_KEY, default_web_config, key_prefix
from skaffacity.web.keeper import Keeper, PageRequest

DEV = acc_address_to_bech32(bytes(range(20)), "cosmos")
COLLECTOR_ADDR = bytes(range(20, 40))


class FakeBank:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send_coins_from_module_to_account(self, ctx, module, addr, amt):
        if self.fail:
            raise RuntimeError("insufficient funds")
        self.sent.append((module, addr, amt))


class FakeAuth:
    def __init__(self, addresses):
        self.addresses = addresses

    def get_module_address(self, name):
        return self.addresses.get(name)


def make_keeper(fail=False, collector=True):
    bank = FakeBank(fail)
    auth = FakeAuth({"fee_collector": COLLECTOR_ADDR} if collector else {})
    return Keeper(bank_keeper=bank, auth_keeper=auth), bank


def test_default_when_missing():
    keeper, _ = make_keeper()
    assert keeper.get_web_config(Context()) == default_web_config()


def test_set_get_round_trip():
    keeper, _ = make_keeper()
    ctx = Context()
    config = default_web_config()
    config.port = 9000
    config.host = "example.com"
    keeper.set_web_config(ctx, config)
    assert keeper.get_web_config(ctx) == config
    assert ctx.kv_store("web").has(key_prefix(WEB_CONFIG_KEY))


def test_remove_restores_default():
    keeper, _ = make_keeper()
    ctx = Context()
    config = default_web_config()
    config.theme = "dark"
    keeper.set_web_config(ctx, config)
    keeper.remove_web_config(ctx)
    assert keeper.get_web_config(ctx) == default_web_config()


def test_fee_distribution_config():
    keeper, _ = make_keeper()
    ctx = Context()
    assert keeper.get_fee_distribution_config(ctx) == default_web_config().fee_distribution


def test_set_developer_address_invalid():
    keeper, _ = make_keeper()
    ctx = Context()
    with pytest.raises(SdkError) as info:
        keeper.set_developer_address(ctx, "not-an-address")
    assert info.value.code == ERR_INVALID_ADDRESS
    assert ctx.event_manager.events == []


def test_set_developer_address_valid():
    keeper, _ = make_keeper()
    ctx = Context()
    keeper.set_developer_address(ctx, DEV)
    assert keeper.get_fee_distribution_config(ctx).developer_address == DEV
    event = ctx.event_manager.events[-1]
    assert event.type == "developer_address_updated"
    assert event.attributes == [("new_address", DEV)]


def test_enable_without_address_fails():
    keeper, _ = make_keeper()
    ctx = Context()
    with pytest.raises(SdkError) as info:
        keeper.enable_fee_distribution(ctx, True)
    assert info.value.code == ERR_INVALID_ADDRESS
    assert not ctx.kv_store("web").has(key_prefix(WEB_CONFIG_KEY))


def test_disable_fee_distribution():
    keeper, _ = make_keeper()
    ctx = Context()
    keeper.enable_fee_distribution(ctx, False)
    assert keeper.get_fee_distribution_config(ctx).enabled is False
    event = ctx.event_manager.events[-1]
    assert event.type == "fee_distribution_status_updated"
    assert event.attributes == [("enabled", "false")]


def test_distribute_zero_fees_does_nothing():
    keeper, bank = make_keeper()
    ctx = Context()
    keeper.set_developer_address(ctx, DEV)
    ctx.event_manager.events.clear()
    keeper.distribute_fees(ctx, "fee_collector", Coins())
    assert bank.sent == []
    assert ctx.event_manager.events == []


def test_distribute_disabled_does_nothing():
    keeper, bank = make_keeper()
    ctx = Context()
    keeper.enable_fee_distribution(ctx, False)
    ctx.event_manager.events.clear()
    keeper.distribute_fees(ctx, "fee_collector", Coins([Coin("skaf", 1000)]))
    assert bank.sent == []
    assert ctx.event_manager.events == []


def test_distribute_invalid_config_is_skipped():
    keeper, bank = make_keeper()
    ctx = Context()
    keeper.distribute_fees(ctx, "fee_collector", Coins([Coin("skaf", 1000)]))
    assert bank.sent == []
    assert ctx.event_manager.events == []


def test_distribute_sends_developer_share():
    keeper, bank = make_keeper()
    ctx = Context()
    keeper.set_developer_address(ctx, DEV)
    ctx.event_manager.events.clear()
    fees = Coins([Coin("skaf", 1000), Coin("uatom", 57)])
    keeper.distribute_fees(ctx, "fee_collector", fees)
    expected_dev, _ = keeper.get_fee_distribution_config(ctx).calculate_fees(fees)
    assert bank.sent == [("fee_collector", acc_address_from_bech32(DEV), expected_dev)]
    assert [e.type for e in ctx.event_manager.events] == [
        "developer_fee_distribution",
        "fee_distribution",
    ]


def test_distribute_missing_collector_raises():
    keeper, bank = make_keeper(collector=False)
    ctx = Context()
    keeper.set_developer_address(ctx, DEV)
    with pytest.raises(LookupError):
        keeper.distribute_fees(ctx, "fee_collector", Coins([Coin("skaf", 1000)]))
    assert bank.sent == []


def test_distribute_bank_failure_is_logged():
    keeper, bank = make_keeper(fail=True)
    ctx = Context()
    keeper.set_developer_address(ctx, DEV)
    ctx.event_manager.events.clear()
    keeper.distribute_fees(ctx, "fee_collector", Coins([Coin("skaf", 1000)]))
    assert [e.type for e in ctx.event_manager.events] == ["fee_distribution"]


def test_web_config_query():
    keeper, _ = make_keeper()
    assert keeper.web_config_query(Context()) == default_web_config()


def test_web_config_all_empty():
    keeper, _ = make_keeper()
    configs, page = keeper.web_config_all(Context())
    assert configs == []
    assert page.total == 0


def test_web_config_all_with_stored():
    keeper, _ = make_keeper()
    ctx = Context()
    config = default_web_config()
    config.port = 7000
    keeper.set_web_config(ctx, config)
    configs, page = keeper.web_config_all(ctx, PageRequest(count_total=True))
    assert configs == [config]
    assert page.total == 1
    assert page.next_key == b""


def test_web_config_all_key_and_offset_rejected():
    keeper, _ = make_keeper()
    with pytest.raises(ValueError):
        keeper.web_config_all(Context(), PageRequest(key=b"a", offset=1))