import json

import pytest

from ethrpc_types.primitives import H160, H256, Bytes, DecodeError
from ethrpc_types.transaction import AccessListItem
from ethrpc_types.transaction_request import (
    CallRequest,
    CallRequestBuilder,
    ConditionKind,
    TransactionCondition,
    TransactionRequest,
    TransactionRequestBuilder,
)

CALL_JSON = """{
  "to": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203"
}"""

TX_JSON = """{
  "from": "0x0000000000000000000000000000000000000005",
  "gas": "0x5208",
  "value": "0x4c4b40",
  "data": "0x010203",
  "condition": {
    "block": 5
  }
}"""


def _call_request():
    return CallRequest(
        to=H160.from_low_u64_be(5),
        gas=21_000,
        value=5_000_000,
        data=Bytes(b"\x01\x02\x03"),
    )


def _tx_request():
    return TransactionRequest(
        sender=H160.from_low_u64_be(5),
        gas=21_000,
        value=5_000_000,
        data=Bytes(b"\x01\x02\x03"),
        condition=TransactionCondition(ConditionKind.BLOCK, 5),
    )


def test_should_serialize_call_request():
    assert json.dumps(_call_request().to_json(), indent=2) == CALL_JSON


def test_should_deserialize_call_request():
    request = CallRequest.from_json(json.loads(CALL_JSON))
    assert request.sender is None
    assert request.to == H160.from_low_u64_be(5)
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == Bytes(b"\x01\x02\x03")


def test_should_serialize_transaction_request():
    assert json.dumps(_tx_request().to_json(), indent=2) == TX_JSON


def test_should_deserialize_transaction_request():
    request = TransactionRequest.from_json(json.loads(TX_JSON))
    assert request.sender == H160.from_low_u64_be(5)
    assert request.to is None
    assert request.gas == 21_000
    assert request.gas_price is None
    assert request.value == 5_000_000
    assert request.data == Bytes(b"\x01\x02\x03")
    assert request.nonce is None
    assert request.condition == TransactionCondition(ConditionKind.BLOCK, 5)


def test_should_build_default_call_request():
    assert CallRequestBuilder().build() == CallRequest()
    assert CallRequest.builder().build() == CallRequest()


def test_should_build_call_request():
    built = (
        CallRequestBuilder()
        .to(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(b"\x01\x02\x03"))
        .build()
    )
    assert built == _call_request()


def test_should_build_default_transaction_request():
    assert TransactionRequestBuilder().build() == TransactionRequest()
    assert TransactionRequest.builder().build() == TransactionRequest()


def test_should_build_transaction_request():
    builder = (
        TransactionRequestBuilder()
        .sender(H160.from_low_u64_be(5))
        .gas(21_000)
        .value(5_000_000)
        .data(Bytes(b"\x01\x02\x03"))
        .condition(TransactionCondition(ConditionKind.BLOCK, 5))
    )
    assert builder.build() == _tx_request()


def test_builder_methods_return_new_builders():
    base = CallRequestBuilder()
    changed = base.gas(1)
    assert base.build().gas is None
    assert changed.build().gas == 1


def test_default_transaction_request_has_zero_sender():
    assert TransactionRequest().to_json() == {
        "from": "0x0000000000000000000000000000000000000000"
    }


def test_transaction_request_requires_from():
    with pytest.raises(DecodeError, match="from"):
        TransactionRequest.from_json({"gas": "0x1"})


def test_time_condition_round_trip():
    condition = TransactionCondition.from_json({"time": 1700000000})
    assert condition == TransactionCondition(ConditionKind.TIME, 1700000000)
    assert condition.to_json() == {"time": 1700000000}


@pytest.mark.parametrize(
    "data",
    [{"block": 1, "time": 2}, {"height": 1}, {"block": "0x1"}, {"block": -1}, {}],
)
def test_invalid_condition(data):
    with pytest.raises(DecodeError):
        TransactionCondition.from_json(data)


def test_call_request_with_access_list_round_trip():
    item = AccessListItem(H160.from_low_u64_be(7), [H256.from_low_u64_be(1)])
    request = (
        CallRequest.builder()
        .sender(H160.from_low_u64_be(2))
        .gas_price(10)
        .transaction_type(1)
        .access_list([item])
        .build()
    )
    encoded = request.to_json()
    assert encoded["type"] == "0x1"
    assert encoded["gasPrice"] == "0xa"
    assert encoded["accessList"][0]["address"] == "0x0000000000000000000000000000000000000007"
    assert CallRequest.from_json(encoded) == request


def test_transaction_request_round_trip_with_nonce_and_to():
    request = (
        TransactionRequest.builder()
        .sender(H160.from_low_u64_be(1))
        .to(H160.from_low_u64_be(2))
        .nonce(3)
        .transaction_type(2)
        .build()
    )
    encoded = request.to_json()
    assert encoded["nonce"] == "0x3"
    assert TransactionRequest.from_json(encoded) == request