"""Miner work packages."""

from __future__ import annotations

from dataclasses import dataclass

from .primitives import H256, DecodeError, encode_quantity

_U64_MAX = (1 << 64) - 1


def _u64_number(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"invalid type: expected u64, got {type(value).__name__}")
    if not 0 <= value <= _U64_MAX:
        raise DecodeError(f"invalid value: {value} does not fit in u64")
    return value


@dataclass(frozen=True)
class Work:
    """Proof-of-work hash, seed hash, target and an optional block number."""

    pow_hash: H256
    seed_hash: H256
    target: H256
    number: int | None = None

    @classmethod
    def from_json(cls, data):
        """Decode a JSON array of three hashes, optionally followed by a number."""
        try:
            if not isinstance(data, list):
                raise DecodeError(f"invalid type: expected an array, got {type(data).__name__}")
            if len(data) not in (3, 4):
                raise DecodeError(f"invalid length {len(data)}, expected 3 or 4 elements")
            pow_hash, seed_hash, target = (H256.from_hex(item) for item in data[:3])
            number = _u64_number(data[3]) if len(data) == 4 else None
        except DecodeError as exc:
            raise DecodeError(f"Cannot deserialize Work: {exc}") from None
        return cls(pow_hash, seed_hash, target, number)

    def to_json(self) -> list:
        out = [self.pow_hash.to_hex(), self.seed_hash.to_hex(), self.target.to_hex()]
        if self.number is not None:
            out.append(encode_quantity(self.number))
        return out