"""Fixed-size hashes, raw byte strings and hex-encoded quantities."""

from __future__ import annotations

import re
import secrets
from typing import ClassVar

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")
_DEC_DIGITS = re.compile(r"[0-9]+")


class DecodeError(ValueError):
    """Raised when a JSON value cannot be decoded into the expected type."""


def _strip_prefix(text: object, what: str) -> str:
    if not isinstance(text, str):
        raise DecodeError(
            f"invalid type: expected a 0x-prefixed hex string for {what}, "
            f"got {type(text).__name__}"
        )
    if not text.startswith("0x"):
        raise DecodeError(f"invalid value: string {text!r}, expected 0x prefix")
    return text[2:]


def _decode_hex(digits: str) -> bytes:
    if not _HEX_DIGITS.fullmatch(digits):
        raise DecodeError(f"Invalid hex: invalid character in {digits!r}")
    if len(digits) % 2:
        raise DecodeError("Invalid hex: odd number of digits")
    return bytes.fromhex(digits)


class FixedHash(bytes):
    """Immutable byte string of a fixed size, written as 0x-prefixed hex."""

    SIZE: ClassVar[int] = 0

    def __new__(cls, data=None):
        if cls.SIZE == 0:
            raise TypeError("FixedHash has no size; use a subclass such as H256")
        if data is None:
            raw = bytes(cls.SIZE)
        elif isinstance(data, int):
            raise TypeError(f"use {cls.__name__}.from_uint to build a hash from an integer")
        else:
            raw = bytes(data)
        if len(raw) != cls.SIZE:
            raise ValueError(f"{cls.__name__} needs {cls.SIZE} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed hex string of exactly SIZE bytes."""
        raw = _decode_hex(_strip_prefix(text, cls.__name__))
        if len(raw) != cls.SIZE:
            raise DecodeError(
                f"invalid length {len(raw)}, expected {cls.SIZE} bytes for {cls.__name__}"
            )
        return cls(raw)

    @classmethod
    def from_low_u64_be(cls, value):
        """Hash whose last eight bytes hold ``value`` big-endian, the rest zero."""
        if not 0 <= value < 1 << 64:
            raise ValueError(f"{value} does not fit in 64 unsigned bits")
        return cls(value.to_bytes(8, "big").rjust(cls.SIZE, b"\0"))

    @classmethod
    def from_uint(cls, value):
        """Hash holding the big-endian encoding of an unsigned integer."""
        if value < 0:
            raise ValueError("a hash cannot hold a negative number")
        try:
            return cls(value.to_bytes(cls.SIZE, "big"))
        except OverflowError:
            raise ValueError(f"{value} does not fit in {cls.__name__}") from None

    @classmethod
    def zero(cls):
        """The all-zero hash."""
        return cls()

    @classmethod
    def random(cls):
        """A hash filled with random bytes."""
        return cls(secrets.token_bytes(cls.SIZE))

    def to_hex(self) -> str:
        """Full 0x-prefixed lowercase hex."""
        return "0x" + self.hex()

    def to_uint(self) -> int:
        """The hash read as a big-endian unsigned integer."""
        return int.from_bytes(self, "big")

    def __str__(self) -> str:
        return f"0x{self[:2].hex()}\u2026{self[-2:].hex()}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_hex()!r})"

    def __format__(self, spec: str) -> str:
        if spec == "x":
            return self.hex()
        if spec == "#x":
            return self.to_hex()
        return format(str(self), spec)


class H64(FixedHash):
    """8-byte hash."""

    SIZE = 8


class H128(FixedHash):
    """16-byte hash."""

    SIZE = 16


class H160(FixedHash):
    """20-byte hash, used for addresses."""

    SIZE = 20


class H256(FixedHash):
    """32-byte hash."""

    SIZE = 32


class H512(FixedHash):
    """64-byte hash."""

    SIZE = 64


class H520(FixedHash):
    """65-byte hash."""

    SIZE = 65


class H2048(FixedHash):
    """256-byte logs bloom."""

    SIZE = 256


class Bytes(bytes):
    """Raw bytes, written as a 0x-prefixed hex string."""

    @classmethod
    def from_hex(cls, text):
        """Parse a 0x-prefixed hex string."""
        return cls(_decode_hex(_strip_prefix(text, "bytes")))

    def to_hex(self) -> str:
        return "0x" + self.hex()

    def __repr__(self) -> str:
        return f"Bytes({self.to_hex()!r})"


class BytesArray(bytes):
    """An array of bytes, written in JSON as a list of small integers."""

    def __repr__(self) -> str:
        return f"BytesArray({list(self)!r})"


def encode_quantity(value: int) -> str:
    """Encode an unsigned integer as 0x-prefixed hex without leading zeros."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer quantity, got {type(value).__name__}")
    if value < 0:
        raise ValueError("a quantity cannot be negative")
    return f"0x{value:x}"


def decode_quantity(value, bits: int = 256) -> int:
    """Decode a 0x-prefixed hex or plain decimal string into an unsigned integer."""
    if not isinstance(value, str):
        raise DecodeError(
            f"invalid type: expected a quantity string, got {type(value).__name__}"
        )
    if value.startswith("0x"):
        digits = value[2:]
        if not digits:
            raise DecodeError("invalid quantity: empty hex string")
        if not _HEX_DIGITS.fullmatch(digits):
            raise DecodeError(f"invalid quantity: {value!r} is not valid hex")
        number = int(digits, 16)
    else:
        if not _DEC_DIGITS.fullmatch(value):
            raise DecodeError(f"invalid quantity: {value!r} is neither hex nor decimal")
        number = int(value, 10)
    if number.bit_length() > bits:
        raise DecodeError(f"invalid quantity: {value!r} does not fit in {bits} bits")
    return number


def uint_from_bytes(data, bits: int = 256) -> int:
    """Read big-endian bytes as an unsigned integer of at most ``bits`` bits."""
    raw = bytes(data)
    if len(raw) * 8 > bits:
        raise ValueError(f"{len(raw)} bytes do not fit in {bits} bits")
    return int.from_bytes(raw, "big")