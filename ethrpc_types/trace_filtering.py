"""Types for the transaction-trace filtering API (OpenEthereum/Parity)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union

from .block import encode_block_number
from .primitives import H160, H256, Bytes, DecodeError, decode_quantity, encode_quantity

_U64_MAX = (1 << 64) - 1


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


def _uint(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"invalid type: expected an integer, got {type(value).__name__}")
    if not 0 <= value <= _U64_MAX:
        raise DecodeError(f"invalid value: {value} does not fit in u64")
    return value


def _uints(value) -> list[int]:
    if not isinstance(value, list):
        raise DecodeError("invalid type: expected a list of integers")
    return [_uint(item) for item in value]


def _text(value) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"invalid type: expected a string, got {type(value).__name__}")
    return value


def _enum(enum_cls):
    def parse(value):
        try:
            return enum_cls(value)
        except ValueError:
            expected = ", ".join(f"`{member.value}`" for member in enum_cls)
            raise DecodeError(f"unknown variant `{value}`, expected one of {expected}") from None

    return parse


def _count(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{what} must be a non-negative integer")
    return value


@dataclass(frozen=True)
class TraceFilter:
    """Filter for ``trace_filter``; unset fields are left out of the JSON."""

    from_block: object = None
    to_block: object = None
    from_address: tuple[H160, ...] | None = None
    to_address: tuple[H160, ...] | None = None
    after: int | None = None
    count: int | None = None

    def to_json(self) -> dict:
        out: dict = {}
        if self.from_block is not None:
            out["fromBlock"] = encode_block_number(self.from_block)
        if self.to_block is not None:
            out["toBlock"] = encode_block_number(self.to_block)
        if self.from_address is not None:
            out["fromAddress"] = [address.to_hex() for address in self.from_address]
        if self.to_address is not None:
            out["toAddress"] = [address.to_hex() for address in self.to_address]
        if self.after is not None:
            out["after"] = self.after
        if self.count is not None:
            out["count"] = self.count
        return out


@dataclass(frozen=True)
class TraceFilterBuilder:
    """Builds a TraceFilter; every method returns a new builder."""

    current: TraceFilter = field(default_factory=TraceFilter)

    def _with(self, **changes) -> TraceFilterBuilder:
        return TraceFilterBuilder(replace(self.current, **changes))

    def from_block(self, block) -> TraceFilterBuilder:
        return self._with(from_block=block)

    def to_block(self, block) -> TraceFilterBuilder:
        return self._with(to_block=block)

    def to_address(self, addresses) -> TraceFilterBuilder:
        return self._with(to_address=tuple(addresses))

    def from_address(self, addresses) -> TraceFilterBuilder:
        return self._with(from_address=tuple(addresses))

    def after(self, after) -> TraceFilterBuilder:
        """Skip this many traces of the output."""
        return self._with(after=_count(after, "after"))

    def count(self, count) -> TraceFilterBuilder:
        """Return at most this many traces."""
        return self._with(count=_count(count, "count"))

    def build(self) -> TraceFilter:
        return self.current


class ActionType(Enum):
    """The kind of an external action."""

    CALL = "call"
    CREATE = "create"
    SUICIDE = "suicide"
    REWARD = "reward"


class CallType(Enum):
    """The kind of a call."""

    NONE = "none"
    CALL = "call"
    CALL_CODE = "callcode"
    DELEGATE_CALL = "delegatecall"
    STATIC_CALL = "staticcall"


class RewardType(Enum):
    """The kind of a reward."""

    BLOCK = "block"
    UNCLE = "uncle"
    EMPTY_STEP = "emptyStep"
    EXTERNAL = "external"


@dataclass
class Call:
    """A call action."""

    sender: H160 = H160()
    to: H160 = H160()
    value: int = 0
    gas: int = 0
    input: Bytes = Bytes()
    call_type: CallType = CallType.NONE

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "call")
        return cls(
            sender=_required(data, "from", H160.from_hex),
            to=_required(data, "to", H160.from_hex),
            value=_required(data, "value", decode_quantity),
            gas=_required(data, "gas", decode_quantity),
            input=_required(data, "input", Bytes.from_hex),
            call_type=_required(data, "callType", _enum(CallType)),
        )

    def to_json(self) -> dict:
        return {
            "from": self.sender.to_hex(),
            "to": self.to.to_hex(),
            "value": encode_quantity(self.value),
            "gas": encode_quantity(self.gas),
            "input": self.input.to_hex(),
            "callType": self.call_type.value,
        }


@dataclass
class Create:
    """A contract creation action."""

    sender: H160 = H160()
    value: int = 0
    gas: int = 0
    init: Bytes = Bytes()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "create")
        return cls(
            sender=_required(data, "from", H160.from_hex),
            value=_required(data, "value", decode_quantity),
            gas=_required(data, "gas", decode_quantity),
            init=_required(data, "init", Bytes.from_hex),
        )

    def to_json(self) -> dict:
        return {
            "from": self.sender.to_hex(),
            "value": encode_quantity(self.value),
            "gas": encode_quantity(self.gas),
            "init": self.init.to_hex(),
        }


@dataclass
class Suicide:
    """A contract self-destruct action."""

    address: H160 = H160()
    refund_address: H160 = H160()
    balance: int = 0

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "suicide")
        return cls(
            address=_required(data, "address", H160.from_hex),
            refund_address=_required(data, "refundAddress", H160.from_hex),
            balance=_required(data, "balance", decode_quantity),
        )

    def to_json(self) -> dict:
        return {
            "address": self.address.to_hex(),
            "refundAddress": self.refund_address.to_hex(),
            "balance": encode_quantity(self.balance),
        }


@dataclass
class Reward:
    """A reward action."""

    author: H160
    value: int
    reward_type: RewardType

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "reward")
        return cls(
            author=_required(data, "author", H160.from_hex),
            value=_required(data, "value", decode_quantity),
            reward_type=_required(data, "rewardType", _enum(RewardType)),
        )

    def to_json(self) -> dict:
        return {
            "author": self.author.to_hex(),
            "value": encode_quantity(self.value),
            "rewardType": self.reward_type.value,
        }


@dataclass
class CallResult:
    """The result of a call."""

    gas_used: int = 0
    output: Bytes = Bytes()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "call result")
        return cls(
            gas_used=_required(data, "gasUsed", decode_quantity),
            output=_required(data, "output", Bytes.from_hex),
        )

    def to_json(self) -> dict:
        return {"gasUsed": encode_quantity(self.gas_used), "output": self.output.to_hex()}


@dataclass
class CreateResult:
    """The result of a contract creation."""

    gas_used: int = 0
    code: Bytes = Bytes()
    address: H160 = H160()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "create result")
        return cls(
            gas_used=_required(data, "gasUsed", decode_quantity),
            code=_required(data, "code", Bytes.from_hex),
            address=_required(data, "address", H160.from_hex),
        )

    def to_json(self) -> dict:
        return {
            "gasUsed": encode_quantity(self.gas_used),
            "code": self.code.to_hex(),
            "address": self.address.to_hex(),
        }


Action = Union[Call, Create, Suicide, Reward]
Res = Union[CallResult, CreateResult, None]


def parse_action(data) -> Action:
    """Decode an action, trying call, create, suicide and reward in turn."""
    for kind in (Call, Create, Suicide, Reward):
        try:
            return kind.from_json(data)
        except DecodeError:
            continue
    raise DecodeError("data did not match any variant of untagged enum Action")


def parse_result(data) -> Res:
    """Decode a result: a call result, a create result, or None for null."""
    if data is None:
        return None
    for kind in (CallResult, CreateResult):
        try:
            return kind.from_json(data)
        except DecodeError:
            continue
    raise DecodeError("data did not match any variant of untagged enum Res")


def dump_result(result: Res):
    """Encode a result; None becomes null."""
    return None if result is None else result.to_json()


@dataclass
class Trace:
    """A trace as returned by the trace filtering API."""

    action: Action
    result: Res
    trace_address: list[int]
    subtraces: int
    transaction_position: int | None
    transaction_hash: H256 | None
    block_number: int
    block_hash: H256
    action_type: ActionType
    error: str | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "trace")
        return cls(
            action=_required(data, "action", parse_action),
            result=parse_result(data.get("result")),
            trace_address=_required(data, "traceAddress", _uints),
            subtraces=_required(data, "subtraces", _uint),
            transaction_position=_optional(data, "transactionPosition", _uint),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
            block_number=_required(data, "blockNumber", _uint),
            block_hash=_required(data, "blockHash", H256.from_hex),
            action_type=_required(data, "type", _enum(ActionType)),
            error=_optional(data, "error", _text),
        )

    def to_json(self) -> dict:
        return {
            "action": self.action.to_json(),
            "result": dump_result(self.result),
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "transactionPosition": self.transaction_position,
            "transactionHash": None
            if self.transaction_hash is None
            else self.transaction_hash.to_hex(),
            "blockNumber": self.block_number,
            "blockHash": self.block_hash.to_hex(),
            "type": self.action_type.value,
            "error": self.error,
        }