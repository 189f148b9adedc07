"""Blockchain syncing state, as reported by ``eth_syncing`` and subscriptions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .primitives import DecodeError, decode_quantity, encode_quantity


def _required(data: Mapping, key: str):
    if key not in data:
        raise DecodeError(f"missing field `{key}`")
    return decode_quantity(data[key])


@dataclass(frozen=True)
class SyncInfo:
    """Starting, current and highest block of a sync in progress."""

    starting_block: int
    current_block: int
    highest_block: int

    @classmethod
    def from_json(cls, data):
        if not isinstance(data, Mapping):
            raise DecodeError("invalid type: expected a sync info object")
        return cls(
            starting_block=_required(data, "startingBlock"),
            current_block=_required(data, "currentBlock"),
            highest_block=_required(data, "highestBlock"),
        )

    def to_json(self) -> dict:
        return {
            "startingBlock": encode_quantity(self.starting_block),
            "currentBlock": encode_quantity(self.current_block),
            "highestBlock": encode_quantity(self.highest_block),
        }


def _subscription_info(data) -> SyncInfo:
    if not isinstance(data, Mapping):
        raise DecodeError("invalid type: expected a sync status object")
    return SyncInfo(
        starting_block=_required(data, "StartingBlock"),
        current_block=_required(data, "CurrentBlock"),
        highest_block=_required(data, "HighestBlock"),
    )


def _subscription_state(data) -> tuple[bool, SyncInfo | None]:
    if not isinstance(data, Mapping):
        raise DecodeError("invalid type: expected a subscription sync object")
    if "syncing" not in data:
        raise DecodeError("missing field `syncing`")
    syncing = data["syncing"]
    if not isinstance(syncing, bool):
        raise DecodeError("invalid type: `syncing` must be a boolean")
    status = data.get("status")
    return syncing, None if status is None else _subscription_info(status)


def parse_sync_state(data) -> SyncInfo | None:
    """Decode a sync state: the SyncInfo while syncing, None when not syncing."""
    try:
        return SyncInfo.from_json(data)
    except DecodeError:
        pass
    try:
        syncing, status = _subscription_state(data)
    except DecodeError:
        pass
    else:
        if not syncing and status is None:
            return None
        if syncing and status is not None:
            return status
        raise DecodeError("expected object or `syncing = false`, got `syncing = true`")
    if isinstance(data, bool):
        if not data:
            return None
        raise DecodeError("expected object or `false`, got `true`")
    raise DecodeError("data did not match any variant of untagged enum SyncStateVariants")


def dump_sync_state(state: SyncInfo | None):
    """Encode a sync state: the info object while syncing, ``False`` otherwise."""
    if state is None:
        return False
    return state.to_json()