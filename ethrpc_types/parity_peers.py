"""Peer information reported by OpenEthereum (Parity) nodes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .primitives import DecodeError, decode_quantity, encode_quantity


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


def _text(value) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"invalid type: expected a string, got {type(value).__name__}")
    return value


def _uint(bits: int):
    def parse(value) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"invalid type: expected an integer, got {type(value).__name__}")
        if value < 0 or value.bit_length() > bits:
            raise DecodeError(f"invalid value: {value} does not fit in u{bits}")
        return value

    return parse


def _texts(value) -> list[str]:
    if not isinstance(value, list):
        raise DecodeError("invalid type: expected a list of strings")
    return [_text(item) for item in value]


_u32 = _uint(32)
_usize = _uint(64)


@dataclass
class PeerNetworkInfo:
    """Remote and local address of a peer connection."""

    remote_address: str
    local_address: str

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "peer network")
        return cls(
            remote_address=_required(data, "remoteAddress", _text),
            local_address=_required(data, "localAddress", _text),
        )

    def to_json(self) -> dict:
        return {"remoteAddress": self.remote_address, "localAddress": self.local_address}


@dataclass
class EthProtocolInfo:
    """Eth protocol version, difficulty and chain head."""

    version: int
    difficulty: int | None
    head: str

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "eth protocol")
        return cls(
            version=_required(data, "version", _u32),
            difficulty=_optional(data, "difficulty", decode_quantity),
            head=_required(data, "head", _text),
        )

    def to_json(self) -> dict:
        return {
            "version": self.version,
            "difficulty": None if self.difficulty is None else encode_quantity(self.difficulty),
            "head": self.head,
        }


@dataclass
class PipProtocolInfo:
    """Pip protocol version, difficulty and chain head."""

    version: int
    difficulty: int
    head: str

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "pip protocol")
        return cls(
            version=_required(data, "version", _u32),
            difficulty=_required(data, "difficulty", decode_quantity),
            head=_required(data, "head", _text),
        )

    def to_json(self) -> dict:
        return {
            "version": self.version,
            "difficulty": encode_quantity(self.difficulty),
            "head": self.head,
        }


@dataclass
class PeerProtocolsInfo:
    """Protocols spoken with a peer."""

    eth: EthProtocolInfo | None = None
    pip: PipProtocolInfo | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "peer protocols")
        return cls(
            eth=_optional(data, "eth", EthProtocolInfo.from_json),
            pip=_optional(data, "pip", PipProtocolInfo.from_json),
        )

    def to_json(self) -> dict:
        return {
            "eth": None if self.eth is None else self.eth.to_json(),
            "pip": None if self.pip is None else self.pip.to_json(),
        }


@dataclass
class ParityPeerInfo:
    """Details of one peer."""

    id: str | None
    name: str
    caps: list[str]
    network: PeerNetworkInfo
    protocols: PeerProtocolsInfo

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "peer")
        return cls(
            id=_optional(data, "id", _text),
            name=_required(data, "name", _text),
            caps=_required(data, "caps", _texts),
            network=_required(data, "network", PeerNetworkInfo.from_json),
            protocols=_required(data, "protocols", PeerProtocolsInfo.from_json),
        )

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "caps": list(self.caps),
            "network": self.network.to_json(),
            "protocols": self.protocols.to_json(),
        }


@dataclass
class ParityPeerType:
    """Active, connected and maximum peer counts with the list of peers."""

    active: int
    connected: int
    max: int
    peers: list[ParityPeerInfo] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "peers")

        def peers(value):
            if not isinstance(value, list):
                raise DecodeError("invalid type for `peers`: expected a list")
            return [ParityPeerInfo.from_json(item) for item in value]

        return cls(
            active=_required(data, "active", _usize),
            connected=_required(data, "connected", _usize),
            max=_required(data, "max", _u32),
            peers=_required(data, "peers", peers),
        )

    def to_json(self) -> dict:
        return {
            "active": self.active,
            "connected": self.connected,
            "max": self.max,
            "peers": [peer.to_json() for peer in self.peers],
        }