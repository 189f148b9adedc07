"""Signed data, signed transactions and the parameters for signing one."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .primitives import H160, H256, Bytes, DecodeError
from .transaction import AccessListItem
from .transaction_request import CallRequest

TRANSACTION_DEFAULT_GAS = 100_000


def _required(data: Mapping, key: str, decode):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return decode(data[key])


def _u8(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"invalid type: expected u8, got {type(value).__name__}")
    if not 0 <= value <= 0xFF:
        raise DecodeError(f"invalid value: {value} does not fit in u8")
    return value


def _byte_list(value) -> bytes:
    if not isinstance(value, list):
        raise DecodeError("invalid type: expected a list of bytes")
    return bytes(_u8(item) for item in value)


@dataclass
class SignedData:
    """Signed data: the message, its hash and the signature parts."""

    message: bytes
    message_hash: H256
    v: int
    r: H256
    s: H256
    signature: Bytes

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, Mapping):
            raise DecodeError("invalid type: expected a signed data object")
        return cls(
            message=_required(data, "message", _byte_list),
            message_hash=_required(data, "messageHash", H256.from_hex),
            v=_required(data, "v", _u8),
            r=_required(data, "r", H256.from_hex),
            s=_required(data, "s", H256.from_hex),
            signature=_required(data, "signature", Bytes.from_hex),
        )

    def to_json(self) -> dict:
        return {
            "message": list(self.message),
            "messageHash": self.message_hash.to_hex(),
            "v": self.v,
            "r": self.r.to_hex(),
            "s": self.s.to_hex(),
            "signature": self.signature.to_hex(),
        }


@dataclass
class TransactionParameters:
    """Transaction data for signing; unset optional fields are filled in by the signer."""

    nonce: int | None = None
    to: H160 | None = None
    gas: int = TRANSACTION_DEFAULT_GAS
    gas_price: int | None = None
    value: int = 0
    data: Bytes = Bytes()
    chain_id: int | None = None
    transaction_type: int | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None

    @classmethod
    def from_call_request(cls, call):
        """Parameters from a call request, with defaults for missing gas, value and data."""
        return cls(
            nonce=None,
            to=call.to,
            gas=TRANSACTION_DEFAULT_GAS if call.gas is None else call.gas,
            gas_price=call.gas_price,
            value=0 if call.value is None else call.value,
            data=Bytes() if call.data is None else call.data,
            chain_id=None,
            transaction_type=call.transaction_type,
            access_list=call.access_list,
            max_fee_per_gas=call.max_fee_per_gas,
            max_priority_fee_per_gas=call.max_priority_fee_per_gas,
        )

    def to_call_request(self) -> CallRequest:
        """The equivalent call request; nonce and chain id have no place in it."""
        return CallRequest(
            sender=None,
            to=self.to,
            gas=self.gas,
            gas_price=self.gas_price,
            value=self.value,
            data=self.data,
            transaction_type=self.transaction_type,
            access_list=self.access_list,
            max_fee_per_gas=self.max_fee_per_gas,
            max_priority_fee_per_gas=self.max_priority_fee_per_gas,
        )


@dataclass
class SignedTransaction:
    """An offline signed transaction ready to be sent raw."""

    message_hash: H256
    v: int
    r: H256
    s: H256
    raw_transaction: Bytes = field(default_factory=Bytes)
    transaction_hash: H256 = H256()