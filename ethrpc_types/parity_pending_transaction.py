"""Filters for pending transactions (OpenEthereum/Parity only)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .primitives import H160, FixedHash, encode_quantity


class Comparison(Enum):
    """How a filter value is compared."""

    LOWER_THAN = "lt"
    EQUAL = "eq"
    GREATER_THAN = "gt"


def _encode_value(value) -> str:
    if isinstance(value, FixedHash):
        return value.to_hex()
    return encode_quantity(value)


@dataclass(frozen=True)
class FilterCondition:
    """A comparison against a value."""

    comparison: Comparison
    value: Any

    def to_json(self) -> dict:
        return {self.comparison.value: _encode_value(self.value)}


def _condition(value, bits: int) -> FilterCondition:
    condition = value if isinstance(value, FilterCondition) else FilterCondition(Comparison.EQUAL, value)
    number = condition.value
    if isinstance(number, bool) or not isinstance(number, int):
        raise TypeError("filter value must be an integer")
    if number < 0 or number.bit_length() > bits:
        raise ValueError(f"filter value does not fit in {bits} unsigned bits")
    return condition


@dataclass(frozen=True)
class ToFilter:
    """Match a recipient address, or contract creation when ``target`` is None."""

    target: H160 | None = None

    @classmethod
    def address(cls, address):
        if not isinstance(address, H160):
            raise TypeError("address must be an H160")
        return cls(address)

    @classmethod
    def action(cls):
        return cls(None)

    def to_json(self) -> dict:
        if self.target is None:
            return {"action": "contract_creation"}
        return {"eq": self.target.to_hex()}


@dataclass(frozen=True)
class ParityPendingTransactionFilter:
    """Conditions a pending transaction must meet; unset conditions are left out."""

    sender: FilterCondition | None = None
    to: ToFilter | None = None
    gas: FilterCondition | None = None
    gas_price: FilterCondition | None = None
    value: FilterCondition | None = None
    nonce: FilterCondition | None = None

    @classmethod
    def builder(cls):
        return ParityPendingTransactionFilterBuilder()

    def to_json(self) -> dict:
        entries = {
            "from": self.sender,
            "to": self.to,
            "gas": self.gas,
            "gas_price": self.gas_price,
            "value": self.value,
            "nonce": self.nonce,
        }
        return {key: item.to_json() for key, item in entries.items() if item is not None}


@dataclass(frozen=True)
class ParityPendingTransactionFilterBuilder:
    """Builds a pending transaction filter; every method returns a new builder."""

    current: ParityPendingTransactionFilter = field(default_factory=ParityPendingTransactionFilter)

    def _with(self, **changes) -> ParityPendingTransactionFilterBuilder:
        return ParityPendingTransactionFilterBuilder(replace(self.current, **changes))

    def sender(self, address):
        """Match transactions sent from exactly this address."""
        if not isinstance(address, H160):
            raise TypeError("address must be an H160")
        return self._with(sender=FilterCondition(Comparison.EQUAL, address))

    def to(self, to_or_action):
        if not isinstance(to_or_action, ToFilter):
            raise TypeError("expected a ToFilter")
        return self._with(to=to_or_action)

    def gas(self, gas):
        return self._with(gas=_condition(gas, 64))

    def gas_price(self, gas_price):
        return self._with(gas_price=_condition(gas_price, 64))

    def value(self, value):
        return self._with(value=_condition(value, 256))

    def nonce(self, nonce):
        return self._with(nonce=_condition(nonce, 256))

    def build(self) -> ParityPendingTransactionFilter:
        return self.current