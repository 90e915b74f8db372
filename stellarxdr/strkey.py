"""StrKey encoding of keys and accounts, plus base64 helpers."""

from __future__ import annotations

import base64
from enum import IntEnum

from stellarxdr.models import CryptoKeyType, Ed25519SignedPayload, MuxedAccount

RAW_KEY_SIZE = 32
MAX_SIGNED_PAYLOAD_SIZE = 64


class VersionByte(IntEnum):
    """Leading byte of an encoded key, selecting its first character."""

    ED25519_PUBLIC_KEY = 6 << 3
    ED25519_SIGNED_PAYLOAD = 15 << 3
    MUXED_ACCOUNT = 12 << 3
    PRE_AUTH_TX = 19 << 3
    HASH_X = 23 << 3


class EncodingError(ValueError):
    """Raised when a value cannot be encoded."""


def crc16(data: bytes) -> int:
    """CRC-16/XMODEM checksum (polynomial 0x1021, initial value 0)."""
    crc = 0
    for byte in data:
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc


def _strkey(body: bytes) -> str:
    checksum = crc16(body).to_bytes(2, "little")
    return base64.b32encode(body + checksum).decode("ascii").rstrip("=")


def _check_raw_key(key: bytes) -> bytes:
    key = bytes(key)
    if len(key) != RAW_KEY_SIZE:
        raise EncodingError(f"key must be {RAW_KEY_SIZE} bytes, got {len(key)}")
    return key


def encode_key(version_byte: int, payload: bytes) -> str:
    """Encode a 32-byte key under the given version byte."""
    return _strkey(bytes([version_byte]) + _check_raw_key(payload))


def encode_ed25519_public_key(key: bytes) -> str:
    return encode_key(VersionByte.ED25519_PUBLIC_KEY, key)


def encode_hash_x_key(key: bytes) -> str:
    return encode_key(VersionByte.HASH_X, key)


def encode_pre_auth_tx_key(key: bytes) -> str:
    return encode_key(VersionByte.PRE_AUTH_TX, key)


def encode_ed25519_signed_payload(signed_payload: Ed25519SignedPayload) -> str:
    """Encode a signed payload signer; the payload must be 1 to 64 bytes."""
    key = _check_raw_key(signed_payload.ed25519)
    payload = bytes(signed_payload.payload)
    if not 1 <= len(payload) <= MAX_SIGNED_PAYLOAD_SIZE:
        raise EncodingError(
            f"payload must be 1 to {MAX_SIGNED_PAYLOAD_SIZE} bytes, got {len(payload)}"
        )
    padding = b"\x00" * ((4 - len(payload) % 4) % 4)
    body = (
        bytes([VersionByte.ED25519_SIGNED_PAYLOAD])
        + key
        + len(payload).to_bytes(4, "big")
        + payload
        + padding
    )
    return _strkey(body)


def encode_muxed_account(account: MuxedAccount) -> str:
    """Encode an account as a G... key, or as an M... key when it carries an id."""
    if account.type == CryptoKeyType.ED25519:
        return encode_ed25519_public_key(account.ed25519)
    if account.id is None or not 0 <= account.id < 1 << 64:
        raise EncodingError(f"muxed id out of range: {account.id!r}")
    body = (
        bytes([VersionByte.MUXED_ACCOUNT])
        + _check_raw_key(account.ed25519)
        + account.id.to_bytes(8, "big")
    )
    return _strkey(body)


def base64_encode(data: bytes) -> str:
    """Standard padded base64 text of ``data``."""
    return base64.b64encode(bytes(data)).decode("ascii")