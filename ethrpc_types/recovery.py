"""Data for recovering the public address that signed a message."""

from __future__ import annotations

from dataclasses import dataclass

from .primitives import H256

_U64_MAX = (1 << 64) - 1
_SIGNATURE_LENGTH = 65


class ParseSignatureError(ValueError):
    """Raised when a raw signature does not have exactly 65 bytes."""

    def __init__(self):
        super().__init__("error parsing raw signature: wrong number of bytes, expected 65")


@dataclass(frozen=True)
class RecoveryMessage:
    """Either message bytes, hashed per EIP-191 before recovery, or a precomputed hash."""

    data: bytes | None = None
    hash: H256 | None = None

    def __post_init__(self):
        if (self.data is None) == (self.hash is None):
            raise ValueError("a recovery message holds either data or a hash")
        if self.hash is not None and not isinstance(self.hash, H256):
            raise TypeError("hash must be an H256")
        if self.data is not None:
            object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def of(cls, value):
        """Build a message: an H256 is a hash, text and other bytes are message data."""
        if isinstance(value, RecoveryMessage):
            return value
        if isinstance(value, H256):
            return cls(hash=value)
        if isinstance(value, str):
            return cls(data=value.encode("utf-8"))
        if isinstance(value, (bytes, bytearray, memoryview, list, tuple)):
            return cls(data=bytes(value))
        raise TypeError(f"cannot build a recovery message from {type(value).__name__}")


@dataclass
class Recovery:
    """A message with the v, r and s values of its signature.

    ``v`` is in Electrum notation and may carry replay protection:
    27, 28, or 35 + chain_id * 2 and 36 + chain_id * 2.
    """

    message: RecoveryMessage
    v: int
    r: H256
    s: H256

    def __post_init__(self):
        self.message = RecoveryMessage.of(self.message)
        if isinstance(self.v, bool) or not isinstance(self.v, int):
            raise TypeError("v must be an integer")
        if not 0 <= self.v <= _U64_MAX:
            raise ValueError("v does not fit in 64 unsigned bits")
        if not isinstance(self.r, H256) or not isinstance(self.s, H256):
            raise TypeError("r and s must be H256 values")

    @classmethod
    def from_raw_signature(cls, message, raw_signature):
        """Split a 65-byte signature into r (32 bytes), s (32 bytes) and v (1 byte)."""
        raw = bytes(raw_signature)
        if len(raw) != _SIGNATURE_LENGTH:
            raise ParseSignatureError()
        return cls(message, raw[64], H256(raw[0:32]), H256(raw[32:64]))

    @classmethod
    def from_signed_data(cls, signed):
        """Recovery data for signed data, keyed by its message hash."""
        return cls(signed.message_hash, signed.v, signed.r, signed.s)

    @classmethod
    def from_signed_transaction(cls, tx):
        """Recovery data for an offline signed transaction."""
        return cls(tx.message_hash, tx.v, tx.r, tx.s)

    def recovery_id(self) -> int | None:
        """The standard recovery id (0 or 1), or None when ``v`` is invalid."""
        if self.v == 27:
            return 0
        if self.v == 28:
            return 1
        if self.v >= 35:
            return (self.v - 1) % 2
        return None

    def as_signature(self) -> tuple[bytes, int] | None:
        """The 64-byte compact signature r || s with the recovery id, or None."""
        recovery_id = self.recovery_id()
        if recovery_id is None:
            return None
        return bytes(self.r) + bytes(self.s), recovery_id