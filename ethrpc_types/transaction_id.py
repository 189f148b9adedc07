"""Identifiers of a transaction: by hash, or by block and index."""

from __future__ import annotations

from dataclasses import dataclass

from .block import BlockId, BlockTag
from .primitives import H256

_U64_MAX = (1 << 64) - 1


def _check_u64(value, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an integer")
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"{what} does not fit in 64 bits")


@dataclass(frozen=True)
class TransactionId:
    """Either a transaction hash, or a block identifier with an index in it."""

    hash: H256 | None = None
    block: BlockId | None = None
    index: int | None = None

    def __post_init__(self):
        if self.hash is not None:
            if not isinstance(self.hash, H256):
                raise TypeError("hash must be an H256")
            if self.block is not None or self.index is not None:
                raise ValueError("give either a hash or a block and an index, not both")
            return
        if self.block is None or self.index is None:
            raise ValueError("a transaction id needs a hash, or a block and an index")
        if not isinstance(self.block, (H256, BlockTag)):
            _check_u64(self.block, "block number")
        _check_u64(self.index, "index")

    @classmethod
    def from_hash(cls, tx_hash):
        return cls(hash=tx_hash)

    @classmethod
    def from_block(cls, block, index):
        return cls(block=block, index=index)