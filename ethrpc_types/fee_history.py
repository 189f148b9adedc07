"""Result of the ``eth_feeHistory`` call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .block import BlockNumber, decode_block_number, encode_block_number
from .primitives import DecodeError, decode_quantity, encode_quantity


def _field(data: Mapping, key: str):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return data[key]


def _list(value, key: str) -> list:
    if not isinstance(value, list):
        raise DecodeError(f"invalid type for `{key}`: expected a list")
    return value


def _ratio(value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"invalid type: expected a number, got {type(value).__name__}")
    return float(value)


@dataclass
class FeeHistory:
    """Base fees, gas used ratios and optional rewards for a block range."""

    oldest_block: BlockNumber
    base_fee_per_gas: list[int]
    gas_used_ratio: list[float]
    reward: list[list[int]] | None = None

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, Mapping):
            raise DecodeError("invalid type: expected a fee history object")
        reward = data.get("reward")
        return cls(
            oldest_block=decode_block_number(_field(data, "oldestBlock")),
            base_fee_per_gas=[
                decode_quantity(item)
                for item in _list(_field(data, "baseFeePerGas"), "baseFeePerGas")
            ],
            gas_used_ratio=[
                _ratio(item) for item in _list(_field(data, "gasUsedRatio"), "gasUsedRatio")
            ],
            reward=None
            if reward is None
            else [
                [decode_quantity(item) for item in _list(row, "reward")]
                for row in _list(reward, "reward")
            ],
        )

    def to_json(self) -> dict:
        return {
            "oldestBlock": encode_block_number(self.oldest_block),
            "baseFeePerGas": [encode_quantity(fee) for fee in self.base_fee_per_gas],
            "gasUsedRatio": [float(ratio) for ratio in self.gas_used_ratio],
            "reward": None
            if self.reward is None
            else [[encode_quantity(item) for item in row] for row in self.reward],
        }