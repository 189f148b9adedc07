import pytest

from ethrpc_types.parity_pending_transaction import (
    Comparison,
    FilterCondition,
    ParityPendingTransactionFilter,
    ParityPendingTransactionFilterBuilder,
    ToFilter,
)
from ethrpc_types.primitives import H160


def test_empty_filter():
    assert ParityPendingTransactionFilter.builder().build().to_json() == {}


def test_sender_is_equal_condition():
    addr = H160.from_low_u64_be(5)
    built = ParityPendingTransactionFilter.builder().sender(addr).build()
    assert built.sender == FilterCondition(Comparison.EQUAL, addr)
    assert built.to_json() == {"from": {"eq": addr.to_hex()}}


def test_to_action():
    assert ToFilter.action().to_json() == {"action": "contract_creation"}


def test_to_address():
    addr = H160.from_low_u64_be(7)
    built = ParityPendingTransactionFilterBuilder().to(ToFilter.address(addr)).build()
    assert built.to_json() == {"to": {"eq": addr.to_hex()}}


def test_plain_value_becomes_equal():
    built = ParityPendingTransactionFilterBuilder().gas(21000).build()
    assert built.gas == FilterCondition(Comparison.EQUAL, 21000)


def test_comparison_keys_and_gas_price_name():
    built = (
        ParityPendingTransactionFilterBuilder()
        .gas_price(FilterCondition(Comparison.GREATER_THAN, 1))
        .value(FilterCondition(Comparison.LOWER_THAN, 2))
        .build()
    )
    json_out = built.to_json()
    assert set(json_out) == {"gas_price", "value"}
    assert list(json_out["gas_price"]) == ["gt"]
    assert list(json_out["value"]) == ["lt"]


def test_gas_out_of_range():
    with pytest.raises(ValueError):
        ParityPendingTransactionFilterBuilder().gas(1 << 64)


def test_nonce_allows_256_bits():
    big = (1 << 256) - 1
    built = ParityPendingTransactionFilterBuilder().nonce(big).build()
    assert built.nonce.value == big


def test_builder_is_immutable():
    base = ParityPendingTransactionFilterBuilder()
    base.gas(1)
    assert base.build().gas is None


def test_to_requires_to_filter():
    with pytest.raises(TypeError):
        ParityPendingTransactionFilterBuilder().to(H160.from_low_u64_be(1))