import pytest

from ethrpc_types.primitives import H256, Bytes
from ethrpc_types.recovery import ParseSignatureError, Recovery, RecoveryMessage
from ethrpc_types.signed import SignedData, SignedTransaction

R_HEX = "b91467e570a6466aa9e9876cbcd013baba02900b8979d43fe208a4a4f339f5fd"
S_HEX = "6007e74cd82e037b800186422fc2da167c747ef045e5d18a5f5d4300f8e1a029"
HASH_HEX = "1da44b586eb0729ff70a73c326926f6ed5a25f5b056e7f47fbc6e58d86871655"
MESSAGE = "Some data"
V = 0x1C


def _signed() -> SignedData:
    return SignedData(
        message=MESSAGE.encode(),
        message_hash=H256(bytes.fromhex(HASH_HEX)),
        v=V,
        r=H256(bytes.fromhex(R_HEX)),
        s=H256(bytes.fromhex(S_HEX)),
        signature=Bytes(bytes.fromhex(R_HEX + S_HEX + "1c")),
    )


EXPECTED = (bytes.fromhex(R_HEX + S_HEX), 1)


def test_recovery_signature_from_signed_data():
    assert Recovery.from_signed_data(_signed()).as_signature() == EXPECTED


def test_recovery_signature_from_parts():
    signed = _signed()
    assert Recovery(MESSAGE, V, signed.r, signed.s).as_signature() == EXPECTED


def test_recovery_signature_from_raw():
    signed = _signed()
    recovery = Recovery.from_raw_signature(MESSAGE, signed.signature)
    assert recovery.as_signature() == EXPECTED
    assert recovery.v == 28
    assert recovery.message == RecoveryMessage(data=b"Some data")


def test_signed_data_message_is_hash():
    recovery = Recovery.from_signed_data(_signed())
    assert recovery.message.hash == H256(bytes.fromhex(HASH_HEX))
    assert recovery.message.data is None


def test_from_signed_transaction():
    signed = _signed()
    tx = SignedTransaction(
        message_hash=signed.message_hash, v=37, r=signed.r, s=signed.s
    )
    recovery = Recovery.from_signed_transaction(tx)
    assert recovery.v == 37
    assert recovery.recovery_id() == 0


@pytest.mark.parametrize("length", [0, 64, 66])
def test_raw_signature_wrong_length(length):
    with pytest.raises(ParseSignatureError) as info:
        Recovery.from_raw_signature(MESSAGE, bytes(length))
    assert str(info.value) == (
        "error parsing raw signature: wrong number of bytes, expected 65"
    )


@pytest.mark.parametrize(
    "v, expected",
    [(27, 0), (28, 1), (35, 0), (36, 1), (37, 0), (38, 1), (0, None), (29, None), (34, None)],
)
def test_recovery_id(v, expected):
    assert Recovery(MESSAGE, v, H256(), H256()).recovery_id() == expected


def test_as_signature_invalid_v():
    assert Recovery(MESSAGE, 1, H256(), H256()).as_signature() is None


def test_recovery_message_of():
    assert RecoveryMessage.of("abc") == RecoveryMessage(data=b"abc")
    assert RecoveryMessage.of(b"\x01\x02") == RecoveryMessage(data=b"\x01\x02")
    digest = H256.from_low_u64_be(7)
    assert RecoveryMessage.of(digest) == RecoveryMessage(hash=digest)


def test_recovery_message_needs_exactly_one_part():
    with pytest.raises(ValueError):
        RecoveryMessage()
    with pytest.raises(ValueError):
        RecoveryMessage(data=b"x", hash=H256())


def test_recovery_rejects_bad_v():
    with pytest.raises(ValueError):
        Recovery(MESSAGE, -1, H256(), H256())