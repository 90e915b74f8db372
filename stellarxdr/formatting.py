"""Human-readable rendering of transaction values for review screens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from stellarxdr.models import (
    Asset,
    AssetType,
    ClaimableBalanceId,
    Ed25519SignedPayload,
    MuxedAccount,
    NetworkType,
)
from stellarxdr.strkey import (
    EncodingError,
    encode_ed25519_public_key,
    encode_ed25519_signed_payload,
    encode_hash_x_key,
    encode_muxed_account,
    encode_pre_auth_tx_key,
)

BINARY_MAX_SIZE = 36
MAX_TIMESTAMP = 253402300799  # 9999-12-31 23:59:59 UTC
STROOPS_PER_UNIT = 10_000_000
MAX_AMOUNT = 10**19  # anything larger overflows the display buffer
UINT64_LIMIT = 1 << 64
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

AUTHORIZED_FLAG = 1
AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG = 2
TRUSTLINE_CLAWBACK_ENABLED_FLAG = 4

_ACCOUNT_FLAGS = (
    (0x01, "AUTH_REQUIRED"),
    (0x02, "AUTH_REVOCABLE"),
    (0x04, "AUTH_IMMUTABLE"),
    (0x08, "AUTH_CLAWBACK_ENABLED"),
)

_TRUST_LINE_FLAGS = (
    (AUTHORIZED_FLAG, "AUTHORIZED"),
    (AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG, "AUTHORIZED_TO_MAINTAIN_LIABILITIES"),
    (TRUSTLINE_CLAWBACK_ENABLED_FLAG, "TRUSTLINE_CLAWBACK_ENABLED"),
)


class FormatError(ValueError):
    """Raised when a value cannot be rendered for display."""


def _encoded(encode: Callable[..., str], value: object) -> str:
    try:
        return encode(value)
    except EncodingError as exc:
        raise FormatError(str(exc)) from exc


def _check_counts(num_chars_l: int, num_chars_r: int) -> None:
    if num_chars_l < 0 or num_chars_r < 0:
        raise FormatError("character counts must not be negative")


def format_summary(text: str, num_chars_l: int, num_chars_r: int) -> str:
    """Shorten ``text`` to its first and last characters joined by ``..``."""
    _check_counts(num_chars_l, num_chars_r)
    if len(text) > num_chars_l + num_chars_r + 2:
        return text[:num_chars_l] + ".." + text[len(text) - num_chars_r:]
    return text


def _maybe_summary(text: str, num_chars_l: int, num_chars_r: int) -> str:
    _check_counts(num_chars_l, num_chars_r)
    if num_chars_l > 0:
        return format_summary(text, num_chars_l, num_chars_r)
    return text


def format_binary(data: bytes, num_chars_l: int, num_chars_r: int) -> str:
    """Hex text of ``data``, summarised when ``num_chars_l`` is positive."""
    data = bytes(data)
    _check_counts(num_chars_l, num_chars_r)
    if num_chars_l > 0 and len(data) > BINARY_MAX_SIZE:
        raise FormatError(f"cannot summarise more than {BINARY_MAX_SIZE} bytes")
    return _maybe_summary(data.hex(), num_chars_l, num_chars_r)


def format_account_id(account_id: bytes, num_chars_l: int, num_chars_r: int) -> str:
    return _maybe_summary(
        _encoded(encode_ed25519_public_key, account_id), num_chars_l, num_chars_r
    )


def format_hash_x_key(key: bytes, num_chars_l: int, num_chars_r: int) -> str:
    return _maybe_summary(_encoded(encode_hash_x_key, key), num_chars_l, num_chars_r)


def format_pre_auth_tx_key(key: bytes, num_chars_l: int, num_chars_r: int) -> str:
    return _maybe_summary(_encoded(encode_pre_auth_tx_key, key), num_chars_l, num_chars_r)


def format_ed25519_signed_payload(
    signed_payload: Ed25519SignedPayload, num_chars_l: int, num_chars_r: int
) -> str:
    """Encoded signed payload signer, always summarised."""
    encoded = _encoded(encode_ed25519_signed_payload, signed_payload)
    return format_summary(encoded, num_chars_l, num_chars_r)


def format_muxed_account(account: MuxedAccount, num_chars_l: int, num_chars_r: int) -> str:
    return _maybe_summary(_encoded(encode_muxed_account, account), num_chars_l, num_chars_r)


def format_claimable_balance_id(
    balance_id: ClaimableBalanceId, num_chars_l: int, num_chars_r: int
) -> str:
    """Hex of the XDR form of a claimable balance id (4-byte type, 32-byte hash)."""
    if not 0 <= balance_id.type <= 0xFF:
        raise FormatError(f"claimable balance id type out of range: {balance_id.type}")
    v0 = bytes(balance_id.v0)
    if len(v0) != 32:
        raise FormatError(f"claimable balance id must be 32 bytes, got {len(v0)}")
    data = b"\x00\x00\x00" + bytes([balance_id.type]) + v0
    return format_binary(data, num_chars_l, num_chars_r)


def format_uint(num: int) -> str:
    if not 0 <= num < UINT64_LIMIT:
        raise FormatError(f"not an unsigned 64-bit value: {num}")
    return str(num)


def format_int(num: int) -> str:
    if not INT64_MIN <= num <= INT64_MAX:
        raise FormatError(f"not a signed 64-bit value: {num}")
    return str(num)


def format_time(seconds: int) -> str:
    """UTC date and time as ``YYYY-MM-DD HH:MM:SS``."""
    if not 0 <= seconds <= MAX_TIMESTAMP:
        raise FormatError(f"timestamp out of range: {seconds}")
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def _asset_code(code: bytes, width: int) -> str:
    return bytes(code)[:width].split(b"\x00", 1)[0].decode("latin-1")


def format_asset_name(asset: Asset, network: NetworkType) -> str:
    if asset.type == AssetType.NATIVE:
        return "native" if network == NetworkType.UNKNOWN else "XLM"
    if asset.type == AssetType.CREDIT_ALPHANUM4:
        return _asset_code(asset.code, 4)
    if asset.type == AssetType.CREDIT_ALPHANUM12:
        return _asset_code(asset.code, 12)
    raise FormatError(f"cannot name asset of type {asset.type!r}")


def format_asset(asset: Asset, network: NetworkType) -> str:
    """Asset name, qualified with a shortened issuer for credit assets."""
    name = format_asset_name(asset, network)
    if asset.type == AssetType.NATIVE:
        return name
    if asset.issuer is None:
        raise FormatError("credit asset has no issuer")
    return f"{name}@{format_account_id(asset.issuer, 3, 4)}"


def _join_flags(flags: int, table: tuple[tuple[int, str], ...]) -> str:
    return ", ".join(name for bit, name in table if flags & bit)


def format_account_flags(flags: int) -> str:
    return _join_flags(flags, _ACCOUNT_FLAGS)


def format_trust_line_flags(flags: int) -> str:
    return _join_flags(flags, _TRUST_LINE_FLAGS)


def format_allow_trust_flags(flag: int) -> str:
    if flag & AUTHORIZED_FLAG:
        return "AUTHORIZED"
    if flag & AUTHORIZED_TO_MAINTAIN_LIABILITIES_FLAG:
        return "AUTHORIZED_TO_MAINTAIN_LIABILITIES"
    return "UNAUTHORIZED"


def format_amount(
    amount: int,
    asset: Asset | None = None,
    network: NetworkType = NetworkType.UNKNOWN,
) -> str:
    """Amount in stroops as a decimal with thousands separators, optionally with its asset."""
    if not 0 <= amount < MAX_AMOUNT:
        raise FormatError(f"amount out of displayable range: {amount}")
    whole, fraction = divmod(amount, STROOPS_PER_UNIT)
    text = f"{whole:,}"
    fraction_text = f"{fraction:07d}".rstrip("0")
    if fraction_text:
        text += "." + fraction_text
    if asset is not None:
        text += " " + format_asset(asset, network)
    return text


def is_printable_binary(data: bytes) -> bool:
    """True when every byte is printable ASCII."""
    return all(0x20 <= byte <= 0x7E for byte in bytes(data))