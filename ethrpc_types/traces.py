"""Types for the ad-hoc trace API (OpenEthereum/Parity): traces, VM traces and state diffs."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .primitives import H160, H256, Bytes, DecodeError, decode_quantity, encode_quantity
from .trace_filtering import (
    Action,
    ActionType,
    Res,
    dump_result,
    parse_action,
    parse_result,
)

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


def _list_of(decode, key: str):
    def parse(value):
        if not isinstance(value, list):
            raise DecodeError(f"invalid type for `{key}`: expected a list")
        return [decode(item) for item in value]

    return parse


def _text(value) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"invalid type: expected a string, got {type(value).__name__}")
    return value


def _u256(value) -> int:
    return decode_quantity(value, 256)


def _to_hex(value) -> str:
    return value.to_hex()


class TraceType(str, Enum):
    """The kind of trace to make."""

    TRACE = "trace"
    VM_TRACE = "vmTrace"
    STATE_DIFF = "stateDiff"


class DiffKind(Enum):
    """How a value changed."""

    SAME = "="
    BORN = "+"
    DIED = "-"
    CHANGED = "*"


@dataclass(frozen=True)
class Diff:
    """A change of one value.

    ``before`` holds the removed or previous value, ``after`` the new or current one.
    """

    kind: DiffKind
    before: object = None
    after: object = None

    def __post_init__(self):
        if not isinstance(self.kind, DiffKind):
            raise TypeError("kind must be a DiffKind")
        has_before = self.before is not None
        has_after = self.after is not None
        expected = {
            DiffKind.SAME: (False, False),
            DiffKind.BORN: (False, True),
            DiffKind.DIED: (True, False),
            DiffKind.CHANGED: (True, True),
        }[self.kind]
        if (has_before, has_after) != expected:
            raise ValueError(f"values do not match a diff of kind {self.kind.name}")

    @classmethod
    def from_json(cls, data, decode):
        """Decode ``"="`` or a one-key object ``+``, ``-`` or ``*``, values read by ``decode``."""
        if data == DiffKind.SAME.value:
            return cls(DiffKind.SAME)
        data = _mapping(data, "diff")
        if len(data) != 1:
            raise DecodeError("invalid diff: expected exactly one key")
        ((key, value),) = data.items()
        try:
            kind = DiffKind(key)
        except ValueError:
            raise DecodeError(
                f"unknown variant `{key}`, expected one of `=`, `+`, `-`, `*`"
            ) from None
        if kind is DiffKind.SAME:
            return cls(DiffKind.SAME)
        if kind is DiffKind.BORN:
            return cls(kind, after=decode(value))
        if kind is DiffKind.DIED:
            return cls(kind, before=decode(value))
        change = _mapping(value, "changed value")
        return cls(
            kind,
            before=_required(change, "from", decode),
            after=_required(change, "to", decode),
        )

    def to_json(self, encode):
        """Encode the diff, values written by ``encode``."""
        if self.kind is DiffKind.SAME:
            return DiffKind.SAME.value
        if self.kind is DiffKind.BORN:
            return {self.kind.value: encode(self.after)}
        if self.kind is DiffKind.DIED:
            return {self.kind.value: encode(self.before)}
        return {self.kind.value: {"from": encode(self.before), "to": encode(self.after)}}


def _diff_of(decode: Callable):
    return lambda value: Diff.from_json(value, decode)


def _storage(value) -> dict:
    value = _mapping(value, "storage")
    return {H256.from_hex(key): Diff.from_json(item, H256.from_hex) for key, item in value.items()}


@dataclass
class AccountDiff:
    """Changes to one account's balance, nonce, code and storage."""

    balance: Diff
    nonce: Diff
    code: Diff
    storage: dict[H256, Diff] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "account diff")
        return cls(
            balance=_required(data, "balance", _diff_of(_u256)),
            nonce=_required(data, "nonce", _diff_of(_u256)),
            code=_required(data, "code", _diff_of(Bytes.from_hex)),
            storage=_required(data, "storage", _storage),
        )

    def to_json(self) -> dict:
        return {
            "balance": self.balance.to_json(encode_quantity),
            "nonce": self.nonce.to_json(encode_quantity),
            "code": self.code.to_json(_to_hex),
            "storage": {
                key.to_hex(): self.storage[key].to_json(_to_hex)
                for key in sorted(self.storage, key=_to_hex)
            },
        }


@dataclass
class StateDiff:
    """Account diffs keyed by address."""

    accounts: dict[H160, AccountDiff] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "state diff")
        return cls({H160.from_hex(key): AccountDiff.from_json(value) for key, value in data.items()})

    def to_json(self) -> dict:
        """Encode the diff with addresses in ascending order."""
        return {
            address.to_hex(): self.accounts[address].to_json()
            for address in sorted(self.accounts, key=_to_hex)
        }


@dataclass
class TransactionTrace:
    """One trace of a transaction."""

    trace_address: list[int]
    subtraces: int
    action: Action
    action_type: ActionType
    result: Res = None
    error: str | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "transaction trace")
        return cls(
            trace_address=_required(data, "traceAddress", _list_of(_uint, "traceAddress")),
            subtraces=_required(data, "subtraces", _uint),
            action=_required(data, "action", parse_action),
            action_type=_required(data, "type", _action_type),
            result=parse_result(data.get("result")),
            error=_optional(data, "error", _text),
        )

    def to_json(self) -> dict:
        return {
            "traceAddress": list(self.trace_address),
            "subtraces": self.subtraces,
            "action": self.action.to_json(),
            "type": self.action_type.value,
            "result": dump_result(self.result),
            "error": self.error,
        }


def _action_type(value) -> ActionType:
    try:
        return ActionType(value)
    except ValueError:
        raise DecodeError(f"unknown variant `{value}` for action type") from None


@dataclass
class MemoryDiff:
    """A changed chunk of memory."""

    off: int = 0
    data: Bytes = Bytes()

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "memory diff")
        return cls(
            off=_required(data, "off", _uint),
            data=_required(data, "data", Bytes.from_hex),
        )

    def to_json(self) -> dict:
        return {"off": self.off, "data": self.data.to_hex()}


@dataclass
class StorageDiff:
    """A changed storage value."""

    key: int = 0
    val: int = 0

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "storage diff")
        return cls(
            key=_required(data, "key", _u256),
            val=_required(data, "val", _u256),
        )

    def to_json(self) -> dict:
        return {"key": encode_quantity(self.key), "val": encode_quantity(self.val)}


@dataclass
class VMExecutedOperation:
    """The effects of one executed VM operation."""

    used: int = 0
    push: list[int] = field(default_factory=list)
    mem: MemoryDiff | None = None
    store: StorageDiff | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "executed operation")
        return cls(
            used=_required(data, "used", _uint),
            push=_required(data, "push", _list_of(_u256, "push")),
            mem=_optional(data, "mem", MemoryDiff.from_json),
            store=_optional(data, "store", StorageDiff.from_json),
        )

    def to_json(self) -> dict:
        return {
            "used": self.used,
            "push": [encode_quantity(item) for item in self.push],
            "mem": None if self.mem is None else self.mem.to_json(),
            "store": None if self.store is None else self.store.to_json(),
        }


@dataclass
class VMOperation:
    """One executed VM operation, with the trace of a nested CALL/CREATE if any."""

    pc: int = 0
    cost: int = 0
    ex: VMExecutedOperation | None = None
    sub: VMTrace | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "VM operation")
        return cls(
            pc=_required(data, "pc", _uint),
            cost=_required(data, "cost", _uint),
            ex=_optional(data, "ex", VMExecutedOperation.from_json),
            sub=_optional(data, "sub", VMTrace.from_json),
        )

    def to_json(self) -> dict:
        return {
            "pc": self.pc,
            "cost": self.cost,
            "ex": None if self.ex is None else self.ex.to_json(),
            "sub": None if self.sub is None else self.sub.to_json(),
        }


@dataclass
class VMTrace:
    """A full VM trace of a CALL/CREATE: the code and the operations executed."""

    code: Bytes = Bytes()
    ops: list[VMOperation] = field(default_factory=list)

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "VM trace")
        return cls(
            code=_required(data, "code", Bytes.from_hex),
            ops=_required(data, "ops", _list_of(VMOperation.from_json, "ops")),
        )

    def to_json(self) -> dict:
        return {"code": self.code.to_hex(), "ops": [op.to_json() for op in self.ops]}


@dataclass
class BlockTrace:
    """The result of an ad-hoc trace call."""

    output: Bytes
    trace: list[TransactionTrace] | None = None
    vm_trace: VMTrace | None = None
    state_diff: StateDiff | None = None
    transaction_hash: H256 | None = None

    @classmethod
    def from_json(cls, data):
        data = _mapping(data, "block trace")
        return cls(
            output=_required(data, "output", Bytes.from_hex),
            trace=_optional(data, "trace", _list_of(TransactionTrace.from_json, "trace")),
            vm_trace=_optional(data, "vmTrace", VMTrace.from_json),
            state_diff=_optional(data, "stateDiff", StateDiff.from_json),
            transaction_hash=_optional(data, "transactionHash", H256.from_hex),
        )

    def to_json(self) -> dict:
        return {
            "output": self.output.to_hex(),
            "trace": None if self.trace is None else [item.to_json() for item in self.trace],
            "vmTrace": None if self.vm_trace is None else self.vm_trace.to_json(),
            "stateDiff": None if self.state_diff is None else self.state_diff.to_json(),
            "transactionHash": None
            if self.transaction_hash is None
            else self.transaction_hash.to_hex(),
        }