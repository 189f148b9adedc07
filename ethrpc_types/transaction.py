"""Transactions, receipts and access lists."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .log import Log
from .primitives import (
    H160,
    H256,
    H2048,
    Bytes,
    DecodeError,
    decode_quantity,
    encode_quantity,
)


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


def _list_of(decode, key: str):
    def parse(value):
        if not isinstance(value, list):
            raise DecodeError(f"invalid type for `{key}`: expected a list")
        return [decode(item) for item in value]

    return parse


def _u64(value) -> int:
    return decode_quantity(value, 64)


def _u256(value) -> int:
    return decode_quantity(value, 256)


def _hex_or_none(value):
    return None if value is None else value.to_hex()


def _quantity_or_none(value):
    return None if value is None else encode_quantity(value)


@dataclass
class AccessListItem:
    """An address and the storage keys a transaction accesses in it."""

    address: H160 = H160()
    storage_keys: list[H256] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "access list item")
        return cls(
            address=_required(data, "address", H160.from_hex),
            storage_keys=_required(data, "storageKeys", _list_of(H256.from_hex, "storageKeys")),
        )

    def to_json(self) -> dict:
        return {
            "address": self.address.to_hex(),
            "storageKeys": [key.to_hex() for key in self.storage_keys],
        }


def decode_access_list(data) -> list[AccessListItem]:
    """Decode a JSON access list."""
    return _list_of(AccessListItem.from_json, "accessList")(data)


def encode_access_list(items) -> list[dict]:
    """Encode an access list for JSON."""
    return [item.to_json() for item in items]


@dataclass
class Transaction:
    """A transaction, pending or in the chain."""

    hash: H256 = H256()
    nonce: int = 0
    block_hash: H256 | None = None
    block_number: int | None = None
    transaction_index: int | None = None
    sender: H160 | None = None
    to: H160 | None = None
    value: int = 0
    gas_price: int | None = None
    gas: int = 0
    input: Bytes = Bytes()
    v: int | None = None
    r: int | None = None
    s: int | None = None
    raw: Bytes | None = None
    transaction_type: int | None = None
    access_list: list[AccessListItem] | None = None
    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "transaction")
        return cls(
            hash=_required(data, "hash", H256.from_hex),
            nonce=_required(data, "nonce", _u256),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", _u64),
            transaction_index=_optional(data, "transactionIndex", _u64),
            sender=_optional(data, "from", H160.from_hex),
            to=_optional(data, "to", H160.from_hex),
            value=_required(data, "value", _u256),
            gas_price=_optional(data, "gasPrice", _u256),
            gas=_required(data, "gas", _u256),
            input=_required(data, "input", Bytes.from_hex),
            v=_optional(data, "v", _u64),
            r=_optional(data, "r", _u256),
            s=_optional(data, "s", _u256),
            raw=_optional(data, "raw", Bytes.from_hex),
            transaction_type=_optional(data, "type", _u64),
            access_list=_optional(data, "accessList", decode_access_list),
            max_fee_per_gas=_optional(data, "maxFeePerGas", _u256),
            max_priority_fee_per_gas=_optional(data, "maxPriorityFeePerGas", _u256),
        )

    def to_json(self) -> dict:
        out: dict = {
            "hash": self.hash.to_hex(),
            "nonce": encode_quantity(self.nonce),
            "blockHash": _hex_or_none(self.block_hash),
            "blockNumber": _quantity_or_none(self.block_number),
            "transactionIndex": _quantity_or_none(self.transaction_index),
        }
        if self.sender is not None:
            out["from"] = self.sender.to_hex()
        out.update(
            {
                "to": _hex_or_none(self.to),
                "value": encode_quantity(self.value),
                "gasPrice": _quantity_or_none(self.gas_price),
                "gas": encode_quantity(self.gas),
                "input": self.input.to_hex(),
            }
        )
        optional = {
            "v": _quantity_or_none(self.v),
            "r": _quantity_or_none(self.r),
            "s": _quantity_or_none(self.s),
            "raw": _hex_or_none(self.raw),
            "type": _quantity_or_none(self.transaction_type),
            "accessList": None
            if self.access_list is None
            else encode_access_list(self.access_list),
            "maxFeePerGas": _quantity_or_none(self.max_fee_per_gas),
            "maxPriorityFeePerGas": _quantity_or_none(self.max_priority_fee_per_gas),
        }
        out.update({key: value for key, value in optional.items() if value is not None})
        return out


@dataclass
class Receipt:
    """Details of the execution of a transaction."""

    transaction_hash: H256 = H256()
    transaction_index: int = 0
    block_hash: H256 | None = None
    block_number: int | None = None
    sender: H160 = H160()
    to: H160 | None = None
    cumulative_gas_used: int = 0
    gas_used: int | None = None
    contract_address: H160 | None = None
    logs: list[Log] = field(default_factory=list)
    status: int | None = None
    root: H256 | None = None
    logs_bloom: H2048 = H2048()
    transaction_type: int | None = None
    effective_gas_price: int | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "receipt")
        # A missing sender is read as the zero address, as older clients omit it.
        sender = H160.from_hex(data["from"]) if "from" in data else H160()
        return cls(
            transaction_hash=_required(data, "transactionHash", H256.from_hex),
            transaction_index=_required(data, "transactionIndex", _u64),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", _u64),
            sender=sender,
            to=_optional(data, "to", H160.from_hex),
            cumulative_gas_used=_required(data, "cumulativeGasUsed", _u256),
            gas_used=_optional(data, "gasUsed", _u256),
            contract_address=_optional(data, "contractAddress", H160.from_hex),
            logs=_required(data, "logs", _list_of(Log.from_json, "logs")),
            status=_optional(data, "status", _u64),
            root=_optional(data, "root", H256.from_hex),
            logs_bloom=_required(data, "logsBloom", H2048.from_hex),
            transaction_type=_optional(data, "type", _u64),
            effective_gas_price=_optional(data, "effectiveGasPrice", _u256),
        )

    def to_json(self) -> dict:
        out = {
            "transactionHash": self.transaction_hash.to_hex(),
            "transactionIndex": encode_quantity(self.transaction_index),
            "blockHash": _hex_or_none(self.block_hash),
            "blockNumber": _quantity_or_none(self.block_number),
            "from": self.sender.to_hex(),
            "to": _hex_or_none(self.to),
            "cumulativeGasUsed": encode_quantity(self.cumulative_gas_used),
            "gasUsed": _quantity_or_none(self.gas_used),
            "contractAddress": _hex_or_none(self.contract_address),
            "logs": [log.to_json() for log in self.logs],
            "status": _quantity_or_none(self.status),
            "root": _hex_or_none(self.root),
            "logsBloom": self.logs_bloom.to_hex(),
        }
        if self.transaction_type is not None:
            out["type"] = encode_quantity(self.transaction_type)
        out["effectiveGasPrice"] = _quantity_or_none(self.effective_gas_price)
        return out


@dataclass
class RawTransaction:
    """A signed but not yet sent transaction, with its raw bytes."""

    raw: Bytes = Bytes()
    tx: Transaction = field(default_factory=Transaction)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "raw transaction")
        return cls(
            raw=_required(data, "raw", Bytes.from_hex),
            tx=_required(data, "tx", Transaction.from_json),
        )

    def to_json(self) -> dict:
        return {"raw": self.raw.to_hex(), "tx": self.tx.to_json()}