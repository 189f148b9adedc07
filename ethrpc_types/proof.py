"""Account and storage proofs returned by ``eth_getProof``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .primitives import H256, Bytes, DecodeError, decode_quantity, encode_quantity


def _mapping(data, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise DecodeError(f"invalid type: expected a {what} object, got {type(data).__name__}")
    return data


def _required(data: Mapping, key: str, decode):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return decode(data[key])


def _list_of(decode):
    def parse(value):
        if not isinstance(value, list):
            raise DecodeError("invalid type: expected a list")
        return [decode(item) for item in value]

    return parse


@dataclass
class StorageProof:
    """A storage key, its value and the proof for it."""

    key: int = 0
    value: int = 0
    proof: list[Bytes] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "storage proof")
        return cls(
            key=_required(data, "key", decode_quantity),
            value=_required(data, "value", decode_quantity),
            proof=_required(data, "proof", _list_of(Bytes.from_hex)),
        )

    def to_json(self) -> dict:
        return {
            "key": encode_quantity(self.key),
            "value": encode_quantity(self.value),
            "proof": [node.to_hex() for node in self.proof],
        }


@dataclass
class Proof:
    """An account proof (EIP-1186)."""

    balance: int = 0
    code_hash: H256 = H256()
    nonce: int = 0
    storage_hash: H256 = H256()
    account_proof: list[Bytes] = field(default_factory=list)
    storage_proof: list[StorageProof] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "proof")
        return cls(
            balance=_required(data, "balance", decode_quantity),
            code_hash=_required(data, "codeHash", H256.from_hex),
            nonce=_required(data, "nonce", decode_quantity),
            storage_hash=_required(data, "storageHash", H256.from_hex),
            account_proof=_required(data, "accountProof", _list_of(Bytes.from_hex)),
            storage_proof=_required(data, "storageProof", _list_of(StorageProof.from_json)),
        )

    def to_json(self) -> dict:
        return {
            "balance": encode_quantity(self.balance),
            "codeHash": self.code_hash.to_hex(),
            "nonce": encode_quantity(self.nonce),
            "storageHash": self.storage_hash.to_hex(),
            "accountProof": [node.to_hex() for node in self.account_proof],
            "storageProof": [entry.to_json() for entry in self.storage_proof],
        }