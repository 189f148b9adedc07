import pytest

from ethrpc_types.block import (
    Block,
    BlockHeader,
    BlockTag,
    decode_block_number,
    encode_block_id,
    encode_block_number,
)
from ethrpc_types.primitives import H160, H256, DecodeError

BLOOM = "0x" + "0e670ec64341771606e55d6b4ca35a1a6b75ee3d5145a99d05921026d1527331" * 8


def _block_json():
    return {
        "miner": "0x0000000000000000000000000000000000000001",
        "number": "0x1b4",
        "hash": "0x0e670ec64341771606e55d6b4ca35a1a6b75ee3d5145a99d05921026d1527331",
        "parentHash": "0x9646252be9520f6e71339a8df9c55e4d7619deeb018d2a3f2d21fc165dde5eb5",
        "mixHash": "0x1010101010101010101010101010101010101010101010101010101010101010",
        "nonce": "0x0000000000000000",
        "sealFields": [
            "0xe04d296d2460cfb8472af2c5fd05b5a214109c25688d3704aed5484f9a7792f2",
            "0x0123456789abcdef",
        ],
        "sha3Uncles": "0x1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347",
        "logsBloom": BLOOM,
        "transactionsRoot": "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421",
        "receiptsRoot": "0x56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421",
        "stateRoot": "0xd5855eb08b3387c0af375e9cdb6acfc05eb8f519e419b874b6ff2ffda7ed1dff",
        "difficulty": "0x27f07",
        "totalDifficulty": "0x27f07",
        "extraData": "0x0000000000000000000000000000000000000000000000000000000000000000",
        "size": "0x27f07",
        "gasLimit": "0x9f759",
        "minGasPrice": "0x9f759",
        "gasUsed": "0x9f759",
        "timestamp": "0x54e34e8e",
        "transactions": [],
        "uncles": [],
    }


def test_block_miner():
    data = _block_json()
    block = Block.from_json(data)
    assert block.author == H160.from_low_u64_be(1)
    assert block.base_fee_per_gas is None

    data["miner"] = None
    block = Block.from_json(data)
    assert block.author == H160.zero()

    del data["miner"]
    block = Block.from_json(data)
    assert block.author == H160.zero()


def test_post_london_block():
    data = _block_json()
    data["baseFeePerGas"] = "0x7"
    block = Block.from_json(data)
    assert block.base_fee_per_gas == 7
    assert block.to_json()["baseFeePerGas"] == "0x7"


def test_block_fields_decoded():
    block = Block.from_json(_block_json())
    assert block.number == 0x1B4
    assert block.difficulty == 0x27F07
    assert block.gas_limit == 0x9F759
    assert block.timestamp == 0x54E34E8E
    assert len(block.seal_fields) == 2
    assert block.seal_fields[1] == bytes.fromhex("0123456789abcdef")
    assert block.logs_bloom.to_hex() == BLOOM


def test_block_round_trip():
    block = Block.from_json(_block_json())
    encoded = block.to_json()
    assert "baseFeePerGas" not in encoded
    assert encoded["miner"] == "0x0000000000000000000000000000000000000001"
    assert encoded["number"] == "0x1b4"
    assert Block.from_json(encoded) == block


def test_block_transaction_hooks():
    data = _block_json()
    tx_hash = "0x" + "ab" * 32
    data["transactions"] = [tx_hash]
    block = Block.from_json(data, parse_transaction=H256.from_hex)
    assert block.transactions == [H256(bytes([0xAB]) * 32)]
    encoded = block.to_json(dump_transaction=lambda h: h.to_hex())
    assert encoded["transactions"] == [tx_hash]


def test_block_missing_field():
    data = _block_json()
    del data["uncles"]
    with pytest.raises(DecodeError, match="uncles"):
        Block.from_json(data)


def test_block_header_parse_and_round_trip():
    data = _block_json()
    header = BlockHeader.from_json(data)
    assert header.number == 0x1B4
    assert header.author == H160.from_low_u64_be(1)
    assert BlockHeader.from_json(header.to_json()) == header
    del data["logsBloom"]
    with pytest.raises(DecodeError, match="logsBloom"):
        BlockHeader.from_json(data)


def test_serialize_deserialize_block_number():
    assert encode_block_number(BlockTag.LATEST) == "latest"
    assert decode_block_number("latest") is BlockTag.LATEST
    assert encode_block_number(BlockTag.EARLIEST) == "earliest"
    assert decode_block_number("earliest") is BlockTag.EARLIEST
    assert encode_block_number(BlockTag.PENDING) == "pending"
    assert decode_block_number("pending") is BlockTag.PENDING
    assert encode_block_number(100) == "0x64"
    assert decode_block_number("0x64") == 100
    with pytest.raises(DecodeError) as excinfo:
        decode_block_number("64")
    assert str(excinfo.value) == "invalid block number: missing 0x prefix"


def test_block_number_invalid_hex():
    with pytest.raises(DecodeError, match="invalid block number"):
        decode_block_number("0x")
    with pytest.raises(DecodeError, match="invalid block number"):
        decode_block_number("0x1" + "0" * 16)


def test_encode_block_id():
    block_hash = H256.from_low_u64_be(1)
    assert encode_block_id(block_hash) == {"blockHash": "0x" + "00" * 31 + "01"}
    assert encode_block_id(5) == "0x5"
    assert encode_block_id(BlockTag.LATEST) == "latest"