"""Event logs and log filters."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Union

from .block import BlockNumber, encode_block_number
from .primitives import H160, H256, Bytes, DecodeError, FixedHash, decode_quantity, encode_quantity

Topic = Union[None, H256, Sequence[H256]]


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


def _hashes(value) -> list[H256]:
    if not isinstance(value, list):
        raise DecodeError("invalid type for `topics`: expected a list")
    return [H256.from_hex(item) for item in value]


def _bool(value) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"invalid type: expected a boolean, got {type(value).__name__}")
    return value


def _text(value) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"invalid type: expected a string, got {type(value).__name__}")
    return value


def _u64(value) -> int:
    return decode_quantity(value, 64)


def _u256(value) -> int:
    return decode_quantity(value, 256)


def _hex_or_none(value):
    return None if value is None else value.to_hex()


def _quantity_or_none(value):
    return None if value is None else encode_quantity(value)


@dataclass
class Log:
    """A log produced by a transaction."""

    address: H160
    topics: list[H256]
    data: Bytes
    block_hash: H256 | None = None
    block_number: int | None = None
    transaction_hash: H256 | None = None
    transaction_index: int | None = None
    log_index: int | None = None
    transaction_log_index: int | None = None
    log_type: str | None = None
    removed: bool | None = None

    def is_removed(self) -> bool:
        """True if the log has been removed from the chain."""
        if self.removed is not None:
            return self.removed
        return self.log_type == "removed"

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "log")
        return cls(
            address=_required(data, "address", H160.from_hex),
            topics=_required(data, "topics", _hashes),
            data=_required(data, "data", Bytes.from_hex),
            block_hash=_optional(data, "blockHash", H256.from_hex),
            block_number=_optional(data, "blockNumber", _u64),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
            transaction_index=_optional(data, "transactionIndex", _u64),
            log_index=_optional(data, "logIndex", _u256),
            transaction_log_index=_optional(data, "transactionLogIndex", _u256),
            log_type=_optional(data, "logType", _text),
            removed=_optional(data, "removed", _bool),
        )

    def to_json(self) -> dict:
        return {
            "address": self.address.to_hex(),
            "topics": [topic.to_hex() for topic in self.topics],
            "data": self.data.to_hex(),
            "blockHash": _hex_or_none(self.block_hash),
            "blockNumber": _quantity_or_none(self.block_number),
            "transactionHash": _hex_or_none(self.transaction_hash),
            "transactionIndex": _quantity_or_none(self.transaction_index),
            "logIndex": _quantity_or_none(self.log_index),
            "transactionLogIndex": _quantity_or_none(self.transaction_log_index),
            "logType": self.log_type,
            "removed": self.removed,
        }


@dataclass(frozen=True)
class TopicFilter:
    """Topic constraints: None matches any, a hash matches itself, a list matches any of it."""

    topic0: Topic = None
    topic1: Topic = None
    topic2: Topic = None
    topic3: Topic = None


def _topic_option(topic: Topic):
    if topic is None:
        return None
    if isinstance(topic, FixedHash):
        return [topic]
    return list(topic)


def _value_or_array(items):
    if not items:
        return None
    if len(items) == 1:
        return items[0].to_hex()
    return [item.to_hex() for item in items]


@dataclass(frozen=True)
class Filter:
    """A log filter for ``eth_getLogs`` and ``eth_newFilter``."""

    from_block: BlockNumber | None = None
    to_block: BlockNumber | None = None
    block_hash: H256 | None = None
    address: tuple[H160, ...] | None = None
    topics: tuple[tuple[H256, ...] | None, ...] | None = None
    limit: int | None = None

    def to_json(self) -> dict:
        out: dict = {}
        if self.from_block is not None:
            out["fromBlock"] = encode_block_number(self.from_block)
        if self.to_block is not None:
            out["toBlock"] = encode_block_number(self.to_block)
        if self.block_hash is not None:
            out["blockHash"] = self.block_hash.to_hex()
        if self.address is not None:
            out["address"] = _value_or_array(self.address)
        if self.topics is not None:
            out["topics"] = [
                None if topic is None else _value_or_array(topic) for topic in self.topics
            ]
        if self.limit is not None:
            out["limit"] = self.limit
        return out


@dataclass(frozen=True)
class FilterBuilder:
    """Builds a Filter; every method returns a new builder."""

    current: Filter = field(default_factory=Filter)

    def _with(self, **changes) -> FilterBuilder:
        return FilterBuilder(replace(self.current, **changes))

    def from_block(self, block) -> FilterBuilder:
        """Set the first block; clears a block hash set before."""
        return self._with(block_hash=None, from_block=block)

    def to_block(self, block) -> FilterBuilder:
        """Set the last block; clears a block hash set before."""
        return self._with(block_hash=None, to_block=block)

    def block_hash(self, block_hash) -> FilterBuilder:
        """Set the block hash; clears the block range set before."""
        return self._with(from_block=None, to_block=None, block_hash=block_hash)

    def address(self, addresses) -> FilterBuilder:
        return self._with(address=tuple(addresses))

    def topics(self, topic1, topic2, topic3, topic4) -> FilterBuilder:
        """Set up to four topic lists; trailing unset topics are dropped."""
        items = [None if topic is None else tuple(topic) for topic in (topic1, topic2, topic3, topic4)]
        while items and items[-1] is None:
            items.pop()
        return self._with(topics=tuple(items))

    def topic_filter(self, topic_filter) -> FilterBuilder:
        """Set the topics from a TopicFilter."""
        return self.topics(
            _topic_option(topic_filter.topic0),
            _topic_option(topic_filter.topic1),
            _topic_option(topic_filter.topic2),
            _topic_option(topic_filter.topic3),
        )

    def limit(self, limit) -> FilterBuilder:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValueError("limit must be a non-negative integer")
        return self._with(limit=limit)

    def build(self) -> Filter:
        return self.current