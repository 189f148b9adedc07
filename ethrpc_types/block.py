"""Blocks, block headers and block identifiers."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .primitives import (
    H64,
    H160,
    H256,
    H2048,
    Bytes,
    DecodeError,
    decode_quantity,
    encode_quantity,
)

_U64_MAX = (1 << 64) - 1
_HEX = re.compile(r"[0-9a-fA-F]+")


class BlockTag(Enum):
    """Named block positions."""

    LATEST = "latest"
    EARLIEST = "earliest"
    PENDING = "pending"


BlockNumber = Union[BlockTag, int]
BlockId = Union[H256, BlockTag, int]


def encode_block_number(value: BlockNumber) -> str:
    """Encode a tag or a block number for JSON-RPC."""
    if isinstance(value, BlockTag):
        return value.value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected a BlockTag or an integer, got {type(value).__name__}")
    if value > _U64_MAX:
        raise ValueError("block number does not fit in 64 bits")
    return encode_quantity(value)


def decode_block_number(value) -> BlockNumber:
    """Decode a block tag or a 0x-prefixed hex block number."""
    if not isinstance(value, str):
        raise DecodeError(
            f"invalid type: expected a block number string, got {type(value).__name__}"
        )
    try:
        return BlockTag(value)
    except ValueError:
        pass
    if not value.startswith("0x"):
        raise DecodeError("invalid block number: missing 0x prefix")
    digits = value[2:]
    if not digits:
        raise DecodeError("invalid block number: cannot parse integer from empty string")
    if not _HEX.fullmatch(digits):
        raise DecodeError("invalid block number: invalid digit found in string")
    number = int(digits, 16)
    if number > _U64_MAX:
        raise DecodeError("invalid block number: number too large to fit in target type")
    return number


def encode_block_id(value: BlockId):
    """Encode a block hash (as an EIP-1898 object) or a block number."""
    if isinstance(value, H256):
        return {"blockHash": value.to_hex()}
    return encode_block_number(value)


def _mapping(data, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise DecodeError(f"invalid type: expected a {what} object, got {type(data).__name__}")
    return data


def _required(data: Mapping, key: str, decode: Callable[[Any], Any]):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return decode(data[key])


def _optional(data: Mapping, key: str, decode: Callable[[Any], Any]):
    value = data.get(key)
    return None if value is None else decode(value)


def _list_of(decode: Callable[[Any], Any] | None, key: str) -> Callable[[Any], list]:
    """Build a list decoder; with no ``decode`` the items are kept as they are."""

    def parse(value):
        if not isinstance(value, list):
            raise DecodeError(f"invalid type for `{key}`: expected a list")
        if decode is None:
            return list(value)
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


def _common_fields(data: Mapping) -> dict:
    author = _optional(data, "miner", H160.from_hex)
    return {
        "hash": _optional(data, "hash", H256.from_hex),
        "parent_hash": _required(data, "parentHash", H256.from_hex),
        "uncles_hash": _required(data, "sha3Uncles", H256.from_hex),
        "author": H160() if author is None else author,
        "state_root": _required(data, "stateRoot", H256.from_hex),
        "transactions_root": _required(data, "transactionsRoot", H256.from_hex),
        "receipts_root": _required(data, "receiptsRoot", H256.from_hex),
        "number": _optional(data, "number", _u64),
        "gas_used": _required(data, "gasUsed", _u256),
        "gas_limit": _required(data, "gasLimit", _u256),
        "base_fee_per_gas": _optional(data, "baseFeePerGas", _u256),
        "extra_data": _required(data, "extraData", Bytes.from_hex),
        "timestamp": _required(data, "timestamp", _u256),
        "difficulty": _required(data, "difficulty", _u256),
        "mix_hash": _optional(data, "mixHash", H256.from_hex),
        "nonce": _optional(data, "nonce", H64.from_hex),
    }


def _head_json(block) -> dict:
    out = {
        "hash": _hex_or_none(block.hash),
        "parentHash": block.parent_hash.to_hex(),
        "sha3Uncles": block.uncles_hash.to_hex(),
        "miner": block.author.to_hex(),
        "stateRoot": block.state_root.to_hex(),
        "transactionsRoot": block.transactions_root.to_hex(),
        "receiptsRoot": block.receipts_root.to_hex(),
        "number": _quantity_or_none(block.number),
        "gasUsed": encode_quantity(block.gas_used),
        "gasLimit": encode_quantity(block.gas_limit),
    }
    if block.base_fee_per_gas is not None:
        out["baseFeePerGas"] = encode_quantity(block.base_fee_per_gas)
    out["extraData"] = block.extra_data.to_hex()
    return out


@dataclass
class BlockHeader:
    """A block header as returned by JSON-RPC calls."""

    hash: H256 | None
    parent_hash: H256
    uncles_hash: H256
    author: H160
    state_root: H256
    transactions_root: H256
    receipts_root: H256
    number: int | None
    gas_used: int
    gas_limit: int
    base_fee_per_gas: int | None
    extra_data: Bytes
    logs_bloom: H2048
    timestamp: int
    difficulty: int
    mix_hash: H256 | None
    nonce: H64 | None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "block header")
        return cls(
            **_common_fields(data),
            logs_bloom=_required(data, "logsBloom", H2048.from_hex),
        )

    def to_json(self) -> dict:
        out = _head_json(self)
        out.update(
            {
                "logsBloom": self.logs_bloom.to_hex(),
                "timestamp": encode_quantity(self.timestamp),
                "difficulty": encode_quantity(self.difficulty),
                "mixHash": _hex_or_none(self.mix_hash),
                "nonce": _hex_or_none(self.nonce),
            }
        )
        return out


@dataclass
class Block:
    """A block as returned by JSON-RPC calls; transactions are of any type."""

    hash: H256 | None = None
    parent_hash: H256 = H256()
    uncles_hash: H256 = H256()
    author: H160 = H160()
    state_root: H256 = H256()
    transactions_root: H256 = H256()
    receipts_root: H256 = H256()
    number: int | None = None
    gas_used: int = 0
    gas_limit: int = 0
    base_fee_per_gas: int | None = None
    extra_data: Bytes = Bytes()
    logs_bloom: H2048 | None = None
    timestamp: int = 0
    difficulty: int = 0
    total_difficulty: int | None = None
    seal_fields: list[Bytes] = field(default_factory=list)
    uncles: list[H256] = field(default_factory=list)
    transactions: list[Any] = field(default_factory=list)
    size: int | None = None
    mix_hash: H256 | None = None
    nonce: H64 | None = None

    @classmethod
    def from_json(cls, data, parse_transaction=None):
        """Decode a block; each transaction goes through ``parse_transaction`` if given."""
        data = _mapping(data, "block")
        return cls(
            **_common_fields(data),
            logs_bloom=_optional(data, "logsBloom", H2048.from_hex),
            total_difficulty=_optional(data, "totalDifficulty", _u256),
            seal_fields=_list_of(Bytes.from_hex, "sealFields")(data.get("sealFields", [])),
            uncles=_required(data, "uncles", _list_of(H256.from_hex, "uncles")),
            transactions=_required(
                data, "transactions", _list_of(parse_transaction, "transactions")
            ),
            size=_optional(data, "size", _u256),
        )

    def to_json(self, dump_transaction=None) -> dict:
        """Encode the block; each transaction goes through ``dump_transaction`` if given."""
        if dump_transaction is None:
            transactions = list(self.transactions)
        else:
            transactions = [dump_transaction(tx) for tx in self.transactions]
        out = _head_json(self)
        out.update(
            {
                "logsBloom": _hex_or_none(self.logs_bloom),
                "timestamp": encode_quantity(self.timestamp),
                "difficulty": encode_quantity(self.difficulty),
                "totalDifficulty": _quantity_or_none(self.total_difficulty),
                "sealFields": [seal.to_hex() for seal in self.seal_fields],
                "uncles": [uncle.to_hex() for uncle in self.uncles],
                "transactions": transactions,
                "size": _quantity_or_none(self.size),
                "mixHash": _hex_or_none(self.mix_hash),
                "nonce": _hex_or_none(self.nonce),
            }
        )
        return out