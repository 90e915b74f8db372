import base64

import pytest

from stellarxdr.models import CryptoKeyType, Ed25519SignedPayload, MuxedAccount
from stellarxdr.strkey import (
    EncodingError,
    VersionByte,
    base64_encode,
    crc16,
    encode_ed25519_public_key,
    encode_ed25519_signed_payload,
    encode_hash_x_key,
    encode_key,
    encode_muxed_account,
    encode_pre_auth_tx_key,
)

KEY = bytes(range(32))


def _decode(text):
    raw = base64.b32decode(text + "=" * (-len(text) % 8))
    body, checksum = raw[:-2], raw[-2:]
    assert crc16(body) == int.from_bytes(checksum, "little")
    return body


def test_crc16_check_value():
    assert crc16(b"123456789") == 0x31C3


def test_crc16_of_empty_is_zero():
    assert crc16(b"") == 0


def test_zero_public_key():
    assert (
        encode_ed25519_public_key(bytes(32))
        == "GAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAWHF"
    )


@pytest.mark.parametrize(
    "encoder, version",
    [
        (encode_ed25519_public_key, VersionByte.ED25519_PUBLIC_KEY),
        (encode_hash_x_key, VersionByte.HASH_X),
        (encode_pre_auth_tx_key, VersionByte.PRE_AUTH_TX),
    ],
)
def test_key_round_trip(encoder, version):
    text = encoder(KEY)
    assert len(text) == 56
    assert _decode(text) == bytes([version]) + KEY
    assert text == encode_key(version, KEY)


def test_encode_key_rejects_short_key():
    with pytest.raises(EncodingError):
        encode_key(VersionByte.ED25519_PUBLIC_KEY, KEY[:20])


def test_plain_muxed_account_matches_public_key():
    account = MuxedAccount.from_ed25519(KEY)
    assert encode_muxed_account(account) == encode_ed25519_public_key(KEY)


def test_muxed_account_round_trip():
    account = MuxedAccount(CryptoKeyType.MUXED_ED25519, KEY, 1234)
    text = encode_muxed_account(account)
    assert len(text) == 69
    body = _decode(text)
    assert body[0] == VersionByte.MUXED_ACCOUNT
    assert body[1:33] == KEY
    assert int.from_bytes(body[33:41], "big") == 1234


def test_muxed_account_rejects_oversized_id():
    account = MuxedAccount(CryptoKeyType.MUXED_ED25519, KEY, 1 << 64)
    with pytest.raises(EncodingError):
        encode_muxed_account(account)


def test_signed_payload_round_trip_with_padding():
    payload = b"\x01\x02\x03\x04\x05"
    text = encode_ed25519_signed_payload(Ed25519SignedPayload(KEY, payload))
    body = _decode(text)
    assert body[0] == VersionByte.ED25519_SIGNED_PAYLOAD
    assert body[1:33] == KEY
    assert int.from_bytes(body[33:37], "big") == len(payload)
    assert body[37:] == payload + b"\x00" * 3


@pytest.mark.parametrize("payload", [b"", bytes(65)])
def test_signed_payload_rejects_bad_length(payload):
    with pytest.raises(EncodingError):
        encode_ed25519_signed_payload(Ed25519SignedPayload(KEY, payload))


def test_base64_encode_pads():
    assert base64_encode(b"hello") == "aGVsbG8="


def test_base64_round_trip():
    data = bytes(range(256))
    assert base64.b64decode(base64_encode(data)) == data