import json

import pytest

from ethrpc_types.primitives import H160, Bytes, DecodeError
from ethrpc_types.trace_filtering import (
    ActionType,
    Call,
    CallResult,
    CallType,
    Create,
    CreateResult,
    Reward,
    RewardType,
    Suicide,
    Trace,
    TraceFilterBuilder,
    dump_result,
    parse_action,
    parse_result,
)

INPUT = (
    "0xb9f256cd000000000000000000000000fb6916095ca1df60bb79ce92ce3ea74c37c5d359"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000080"
    "00000000000000000000000000000000000000000000000000000000000001a0"
    "00000000000000000000000000000000000000000000000000000000000000e8"
    "5468697320697320746865206f6666696369616c20457468657265756d20466f"
    "756e646174696f6e20546970204a61722e20466f722065766572792061626f76"
    "652061206365727461696e2076616c756520646f6e6174696f6e207765276c6c"
    "2063726561746520616e642073656e6420746f20796f752061206272616e6420"
    "6e657720556e69636f726e20546f6b656e2028f09fa684292e20436865636b20"
    "74686520756e69636f726e2070726963652062656c6f77202831206574686572"
    "203d20313030302066696e6e6579292e205468616e6b7320666f722074686520"
    "737570706f72742100000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "0000000000000000000000000000000000000000000000000000000000000000"
    "00000000000000"
)

_COMMON = {
    "blockHash": "0x6474a53a9ebf72d306a1406ec12ded12e210b6c3141b4373bfb3a3cea987dfb8",
    "blockNumber": 988775,
    "result": {
        "gasUsed": "0x4b419",
        "output": "0x0000000000000000000000000000000000000000000000000000000000000000",
    },
    "subtraces": 1,
    "traceAddress": [],
    "transactionHash": "0x342c284238149db221f9d87db87f90ffad7ac0aac57c0c480142f4c21b63f652",
    "transactionPosition": 1,
}

EXAMPLE_TRACE_CALL = json.dumps(
    {
        "action": {
            "callType": "call",
            "from": "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb",
            "gas": "0x63ab9",
            "input": INPUT,
            "to": "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359",
            "value": "0x0",
        },
        **_COMMON,
        "type": "call",
    }
)

EXAMPLE_TRACE_CREATE = json.dumps(
    {
        "action": {
            "from": "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb",
            "gas": "0x63ab9",
            "init": INPUT,
            "value": "0x0",
        },
        **_COMMON,
        "type": "create",
    }
)

EXAMPLE_TRACE_SUICIDE = json.dumps(
    {
        "action": {
            "address": "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb",
            "refundAddress": "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359",
            "balance": "0x0",
        },
        **_COMMON,
        "type": "suicide",
    }
)

EXAMPLE_TRACE_REWARD = json.dumps(
    {
        "action": {
            "author": "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb",
            "value": "0x0",
            "rewardType": "block",
        },
        **_COMMON,
        "type": "reward",
    }
)

SENDER = H160.from_hex("0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb")
TARGET = H160.from_hex("0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359")


def test_deserialize_call_trace():
    trace = Trace.from_json(json.loads(EXAMPLE_TRACE_CALL))
    assert isinstance(trace.action, Call)
    assert trace.action.sender == SENDER
    assert trace.action.to == TARGET
    assert trace.action.gas == 0x63AB9
    assert trace.action.call_type is CallType.CALL
    assert trace.action.input == Bytes.from_hex(INPUT)
    assert trace.action_type is ActionType.CALL
    assert trace.block_number == 988775
    assert trace.transaction_position == 1
    assert trace.result == CallResult(gas_used=0x4B419, output=Bytes(bytes(32)))
    assert trace.error is None


def test_deserialize_create_trace():
    trace = Trace.from_json(json.loads(EXAMPLE_TRACE_CREATE))
    assert isinstance(trace.action, Create)
    assert trace.action.init == Bytes.from_hex(INPUT)
    assert trace.action_type is ActionType.CREATE


def test_deserialize_suicide_trace():
    trace = Trace.from_json(json.loads(EXAMPLE_TRACE_SUICIDE))
    assert trace.action == Suicide(address=SENDER, refund_address=TARGET, balance=0)
    assert trace.action_type is ActionType.SUICIDE


def test_deserialize_reward_trace():
    trace = Trace.from_json(json.loads(EXAMPLE_TRACE_REWARD))
    assert trace.action == Reward(author=SENDER, value=0, reward_type=RewardType.BLOCK)
    assert trace.action_type is ActionType.REWARD


@pytest.mark.parametrize(
    "text",
    [EXAMPLE_TRACE_CALL, EXAMPLE_TRACE_CREATE, EXAMPLE_TRACE_SUICIDE, EXAMPLE_TRACE_REWARD],
)
def test_trace_round_trip(text):
    trace = Trace.from_json(json.loads(text))
    assert Trace.from_json(trace.to_json()) == trace


def test_trace_to_json_fields():
    data = Trace.from_json(json.loads(EXAMPLE_TRACE_SUICIDE)).to_json()
    assert data["type"] == "suicide"
    assert data["blockNumber"] == 988775
    assert data["action"] == {
        "address": "0xd1220a0cf47c7b9be7a2e6ba89f429762e7b9adb",
        "refundAddress": "0xfb6916095ca1df60bb79ce92ce3ea74c37c5d359",
        "balance": "0x0",
    }
    assert data["error"] is None


def test_unknown_action_type_rejected():
    data = json.loads(EXAMPLE_TRACE_CALL)
    data["type"] = "bogus"
    with pytest.raises(DecodeError):
        Trace.from_json(data)


def test_parse_action_no_variant():
    with pytest.raises(DecodeError):
        parse_action({"foo": "0x1"})


def test_parse_result_variants():
    assert parse_result(None) is None
    created = parse_result(
        {"gasUsed": "0x1", "code": "0x60", "address": "0x0000000000000000000000000000000000000005"}
    )
    assert created == CreateResult(gas_used=1, code=Bytes(b"\x60"), address=H160.from_low_u64_be(5))
    assert dump_result(None) is None
    assert dump_result(CallResult(gas_used=16, output=Bytes(b""))) == {
        "gasUsed": "0x10",
        "output": "0x",
    }


def test_parse_result_invalid():
    with pytest.raises(DecodeError):
        parse_result({"gasUsed": "0x1"})


def test_call_type_values():
    assert CallType("delegatecall") is CallType.DELEGATE_CALL
    assert RewardType("emptyStep") is RewardType.EMPTY_STEP


def test_trace_filter_builder_json():
    address = H160.from_low_u64_be(5)
    trace_filter = (
        TraceFilterBuilder()
        .from_block(1)
        .to_block(100)
        .to_address([address])
        .after(2)
        .count(10)
        .build()
    )
    assert trace_filter.to_json() == {
        "fromBlock": "0x1",
        "toBlock": "0x64",
        "toAddress": ["0x0000000000000000000000000000000000000005"],
        "after": 2,
        "count": 10,
    }


def test_trace_filter_empty_json():
    assert TraceFilterBuilder().build().to_json() == {}


def test_trace_filter_builder_is_immutable():
    base = TraceFilterBuilder()
    changed = base.count(3)
    assert base.build().count is None
    assert changed.build().count == 3


def test_trace_filter_rejects_negative_count():
    with pytest.raises(ValueError):
        TraceFilterBuilder().count(-1)