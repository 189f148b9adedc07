"""Call requests (``eth_call``, ``eth_estimateGas``) and transaction requests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

from .primitives import H160, Bytes, DecodeError, decode_quantity, encode_quantity
from .transaction import AccessListItem, decode_access_list, encode_access_list

_U64_MAX = (1 << 64) - 1


def _mapping(data, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise DecodeError(f"invalid type: expected a {what} object, got {type(data).__name__}")
    return data


def _required(data: Mapping, key: str, decode):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return decode(data[key])


def _optional(data: Mapping, key: str, decode):
    value = data.get(key)
    return None if value is None else decode(value)


def _u64(value) -> int:
    return decode_quantity(value, 64)


def _u256(value) -> int:
    return decode_quantity(value, 256)


def _with_optional(out: dict, entries: dict) -> dict:
    out.update({key: value for key, value in entries.items() if value is not None})
    return out


def _quantity_or_none(value):
    return None if value is None else encode_quantity(value)


def _hex_or_none(value):
    return None if value is None else value.to_hex()


def _access_list_or_none(items):
    return None if items is None else encode_access_list(items)


class ConditionKind(Enum):
    """What a transaction condition is measured in."""

    BLOCK = "block"
    TIME = "time"


@dataclass(frozen=True)
class TransactionCondition:
    """Minimum block number or unix time from which a transaction is valid."""

    kind: ConditionKind
    value: int

    def __post_init__(self):
        if not isinstance(self.kind, ConditionKind):
            raise TypeError("kind must be a ConditionKind")
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("condition value must be an integer")
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError("condition value does not fit in 64 unsigned bits")

    @classmethod
    def from_json(cls, data):
        """Decode an object with exactly one key, ``block`` or ``time``."""
        data = _mapping(data, "transaction condition")
        if len(data) != 1:
            raise DecodeError("invalid transaction condition: expected exactly one key")
        ((key, value),) = data.items()
        try:
            kind = ConditionKind(key)
        except ValueError:
            raise DecodeError(
                f"unknown variant `{key}`, expected `block` or `time`"
            ) from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"invalid type: expected u64, got {type(value).__name__}")
        if not 0 <= value <= _U64_MAX:
            raise DecodeError(f"invalid value: {value} does not fit in u64")
        return cls(kind, value)

    def to_json(self) -> dict:
        return {self.kind.value: self.value}


@dataclass
class CallRequest:
    """A contract call request; every field is optional, ``to`` is needed for eth_call."""

    sender: H160 | None = None
    to: H160 | None = None
    gas: int | None = None
    gas_price: int | None = None
    value: int | None = None
    data: Bytes | None = None
    transaction_type: int | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None

    @classmethod
    def builder(cls):
        return CallRequestBuilder()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "call request")
        return cls(
            sender=_optional(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            gas=_optional(data, "gas", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            value=_optional(data, "value", _u256),
            data=_optional(data, "data", Bytes.from_hex),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", decode_access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )

    def to_json(self) -> dict:
        """Encode the request, leaving unset fields out."""
        return _with_optional(
            {},
            {
                "from": _hex_or_none(self.sender),
                "to": _hex_or_none(self.to),
                "gas": _quantity_or_none(self.gas),
                "gasPrice": _quantity_or_none(self.gas_price),
                "value": _quantity_or_none(self.value),
                "data": _hex_or_none(self.data),
                "type": _quantity_or_none(self.transaction_type),
                "accessList": _access_list_or_none(self.access_list),
                "maxFeePerGas": _quantity_or_none(self.max_fee_per_gas),
                "maxPriorityFeePerGas": _quantity_or_none(self.max_priority_fee_per_gas),
            },
        )


@dataclass(frozen=True)
class CallRequestBuilder:
    """Builds a CallRequest; every method returns a new builder."""

    current: CallRequest = field(default_factory=CallRequest)

    def _with(self, **changes) -> CallRequestBuilder:
        return CallRequestBuilder(replace(self.current, **changes))

    def sender(self, address) -> CallRequestBuilder:
        return self._with(sender=address)

    def to(self, address) -> CallRequestBuilder:
        return self._with(to=address)

    def gas(self, gas) -> CallRequestBuilder:
        return self._with(gas=gas)

    def gas_price(self, gas_price) -> CallRequestBuilder:
        return self._with(gas_price=gas_price)

    def value(self, value) -> CallRequestBuilder:
        return self._with(value=value)

    def data(self, data) -> CallRequestBuilder:
        return self._with(data=data)

    def transaction_type(self, transaction_type) -> CallRequestBuilder:
        return self._with(transaction_type=transaction_type)

    def access_list(self, access_list) -> CallRequestBuilder:
        return self._with(access_list=list(access_list))

    def build(self) -> CallRequest:
        return replace(self.current)


@dataclass
class TransactionRequest:
    """Parameters for sending a transaction."""

    sender: H160 = H160()
    to: H160 | None = None
    gas: int | None = None
    gas_price: int | None = None
    value: int | None = None
    data: Bytes | None = None
    nonce: int | None = None
    condition: TransactionCondition | None = None
    transaction_type: int | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None

    @classmethod
    def builder(cls):
        return TransactionRequestBuilder()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "transaction request")
        return cls(
            sender=_required(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            gas=_optional(data, "gas", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            value=_optional(data, "value", _u256),
            data=_optional(data, "data", Bytes.from_hex),
            nonce=_optional(data, "nonce", _u256),
            condition=_optional(data, "condition", TransactionCondition.from_json),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", decode_access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )

    def to_json(self) -> dict:
        """Encode the request; ``from`` is always present, unset fields are left out."""
        return _with_optional(
            {"from": self.sender.to_hex()},
            {
                "to": _hex_or_none(self.to),
                "gas": _quantity_or_none(self.gas),
                "gasPrice": _quantity_or_none(self.gas_price),
                "value": _quantity_or_none(self.value),
                "data": _hex_or_none(self.data),
                "nonce": _quantity_or_none(self.nonce),
                "condition": None if self.condition is None else self.condition.to_json(),
                "type": _quantity_or_none(self.transaction_type),
                "accessList": _access_list_or_none(self.access_list),
                "maxFeePerGas": _quantity_or_none(self.max_fee_per_gas),
                "maxPriorityFeePerGas": _quantity_or_none(self.max_priority_fee_per_gas),
            },
        )


@dataclass(frozen=True)
class TransactionRequestBuilder:
    """Builds a TransactionRequest; every method returns a new builder."""

    current: TransactionRequest = field(default_factory=TransactionRequest)

    def _with(self, **changes) -> TransactionRequestBuilder:
        return TransactionRequestBuilder(replace(self.current, **changes))

    def sender(self, address) -> TransactionRequestBuilder:
        return self._with(sender=address)

    def to(self, address) -> TransactionRequestBuilder:
        return self._with(to=address)

    def gas(self, gas) -> TransactionRequestBuilder:
        return self._with(gas=gas)

    def value(self, value) -> TransactionRequestBuilder:
        return self._with(value=value)

    def data(self, data) -> TransactionRequestBuilder:
        return self._with(data=data)

    def nonce(self, nonce) -> TransactionRequestBuilder:
        return self._with(nonce=nonce)

    def condition(self, condition) -> TransactionRequestBuilder:
        if not isinstance(condition, TransactionCondition):
            raise TypeError("expected a TransactionCondition")
        return self._with(condition=condition)

    def transaction_type(self, transaction_type) -> TransactionRequestBuilder:
        return self._with(transaction_type=transaction_type)

    def access_list(self, access_list) -> TransactionRequestBuilder:
        return self._with(access_list=list(access_list))

    def build(self) -> TransactionRequest:
        return replace(self.current)