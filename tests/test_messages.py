import json

import pytest

from skaffacity.sdk import (
    ERR_INVALID_ADDRESS,
    ERR_INVALID_REQUEST,
    SdkError,
    acc_address_to_bech32,
)
from skaffacity.web.config import WebConfig, default_web_config
from skaffacity.web.messages import (
    MsgEnableFeeDistribution,
    MsgSetDeveloperAddress,
    MsgUpdateWebConfig,
)

CREATOR_BYTES = bytes(range(20))
DEVELOPER_BYTES = bytes(range(20, 40))
CREATOR = acc_address_to_bech32(CREATOR_BYTES, "skaf")
DEVELOPER = acc_address_to_bech32(DEVELOPER_BYTES, "skaf")


def test_update_route_and_type():
    msg = MsgUpdateWebConfig(CREATOR, default_web_config())
    assert msg.route() == "web"
    assert msg.type() == "update_web_config"


def test_update_signers_round_trip():
    msg = MsgUpdateWebConfig(CREATOR, default_web_config())
    assert msg.get_signers() == [CREATOR_BYTES]


def test_update_signers_invalid_creator():
    with pytest.raises(ValueError):
        MsgUpdateWebConfig("bogus", default_web_config()).get_signers()


def test_update_validate_basic_ok_and_invalid_creator():
    assert MsgUpdateWebConfig(CREATOR, default_web_config()).validate_basic() is None
    with pytest.raises(SdkError) as info:
        MsgUpdateWebConfig("bogus", default_web_config()).validate_basic()
    assert info.value.code == ERR_INVALID_ADDRESS
    assert "invalid creator address" in str(info.value)


def test_update_validate_basic_zero_port():
    config = default_web_config()
    config.port = 0
    with pytest.raises(SdkError) as info:
        MsgUpdateWebConfig(CREATOR, config).validate_basic()
    assert info.value.code == ERR_INVALID_REQUEST
    assert "port cannot be zero" in str(info.value)


def test_update_validate_basic_empty_host():
    config = default_web_config()
    config.host = ""
    with pytest.raises(SdkError) as info:
        MsgUpdateWebConfig(CREATOR, config).validate_basic()
    assert info.value.code == ERR_INVALID_REQUEST
    assert "host cannot be empty" in str(info.value)


def test_update_sign_bytes_round_trip():
    config = default_web_config()
    raw = MsgUpdateWebConfig(CREATOR, config).get_sign_bytes()
    decoded = json.loads(raw)
    assert decoded["creator"] == CREATOR
    assert WebConfig.from_dict(decoded["config"]) == config
    assert raw.startswith(b'{"config":{')
    assert b" " not in raw.replace(b"0.0.0.0", b"")


def test_update_sign_bytes_escape_html():
    config = default_web_config()
    config.theme = "<a&b>"
    raw = MsgUpdateWebConfig(CREATOR, config).get_sign_bytes()
    assert b"\\u003ca\\u0026b\\u003e" in raw
    assert json.loads(raw)["config"]["theme"] == "<a&b>"


def test_update_str():
    msg = MsgUpdateWebConfig(CREATOR, default_web_config())
    assert str(msg) == f"MsgUpdateWebConfig{{Creator: {CREATOR}, Config: {default_web_config()}}}"


def test_set_developer_address_basics():
    msg = MsgSetDeveloperAddress(CREATOR, DEVELOPER)
    assert msg.route() == "web"
    assert msg.type() == "set_developer_address"
    assert msg.get_signers() == [CREATOR_BYTES]


def test_set_developer_address_sign_bytes():
    msg = MsgSetDeveloperAddress(CREATOR, DEVELOPER)
    expected = f'{{"creator":"{CREATOR}","developer_address":"{DEVELOPER}"}}'.encode()
    assert msg.get_sign_bytes() == expected


def test_set_developer_address_validate_basic():
    assert MsgSetDeveloperAddress(CREATOR, DEVELOPER).validate_basic() is None
    with pytest.raises(SdkError) as info:
        MsgSetDeveloperAddress(CREATOR, "bogus").validate_basic()
    assert info.value.code == ERR_INVALID_ADDRESS
    assert "invalid developer address" in str(info.value)


def test_set_developer_address_invalid_creator():
    with pytest.raises(SdkError) as info:
        MsgSetDeveloperAddress("", DEVELOPER).validate_basic()
    assert "invalid creator address" in str(info.value)


def test_enable_fee_distribution_basics():
    msg = MsgEnableFeeDistribution(CREATOR, True)
    assert msg.route() == "web"
    assert msg.type() == "enable_fee_distribution"
    assert msg.get_signers() == [CREATOR_BYTES]


@pytest.mark.parametrize("enabled,literal", [(True, "true"), (False, "false")])
def test_enable_fee_distribution_sign_bytes(enabled, literal):
    msg = MsgEnableFeeDistribution(CREATOR, enabled)
    assert msg.get_sign_bytes() == f'{{"creator":"{CREATOR}","enabled":{literal}}}'.encode()


def test_enable_fee_distribution_validate_basic():
    assert MsgEnableFeeDistribution(CREATOR, False).validate_basic() is None
    with pytest.raises(SdkError) as info:
        MsgEnableFeeDistribution("bogus", True).validate_basic()
    assert info.value.code == ERR_INVALID_ADDRESS


def test_enable_fee_distribution_signers_invalid():
    with pytest.raises(ValueError):
        MsgEnableFeeDistribution("", True).get_signers()