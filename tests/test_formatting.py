import pytest

from stellarxdr.formatting import (
    FormatError,
    format_account_flags,
    format_account_id,
    format_allow_trust_flags,
    format_amount,
    format_asset,
    format_asset_name,
    format_binary,
    format_claimable_balance_id,
    format_ed25519_signed_payload,
    format_hash_x_key,
    format_int,
    format_muxed_account,
    format_pre_auth_tx_key,
    format_summary,
    format_time,
    format_trust_line_flags,
    format_uint,
    is_printable_binary,
)
from stellarxdr.models import (
    Asset,
    AssetType,
    ClaimableBalanceId,
    CryptoKeyType,
    Ed25519SignedPayload,
    MuxedAccount,
    NetworkType,
)
from stellarxdr.strkey import (
    encode_ed25519_public_key,
    encode_ed25519_signed_payload,
    encode_hash_x_key,
    encode_muxed_account,
    encode_pre_auth_tx_key,
)

KEY = bytes(range(32))


def test_summary_shortens_long_text():
    text = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    result = format_summary(text, 3, 4)
    assert len(result) == 9
    assert result.startswith(text[:3] + "..")
    assert result.endswith(text[-4:])


def test_summary_keeps_short_text():
    assert format_summary("short", 3, 4) == "short"
    assert format_summary("ABCDEFGHI", 3, 4) == "ABCDEFGHI"


def test_summary_zero_right():
    text = "ABCDEFGHIJ"
    assert format_summary(text, 2, 0) == text[:2] + ".."


def test_account_id_full_and_summary():
    full = encode_ed25519_public_key(KEY)
    assert format_account_id(KEY, 0, 0) == full
    assert format_account_id(KEY, 3, 4) == full[:3] + ".." + full[-4:]


def test_hash_x_and_pre_auth_keys():
    assert format_hash_x_key(KEY, 0, 0) == encode_hash_x_key(KEY)
    pre_auth = encode_pre_auth_tx_key(KEY)
    assert format_pre_auth_tx_key(KEY, 5, 5) == pre_auth[:5] + ".." + pre_auth[-5:]


def test_bad_key_length_raises():
    with pytest.raises(FormatError):
        format_account_id(b"\x01" * 31, 0, 0)


def test_signed_payload_is_always_summarised():
    payload = Ed25519SignedPayload(KEY, b"\x01\x02\x03")
    encoded = encode_ed25519_signed_payload(payload)
    assert format_ed25519_signed_payload(payload, 6, 6) == encoded[:6] + ".." + encoded[-6:]


def test_signed_payload_empty_raises():
    with pytest.raises(FormatError):
        format_ed25519_signed_payload(Ed25519SignedPayload(KEY, b""), 6, 6)


def test_muxed_account():
    account = MuxedAccount(CryptoKeyType.MUXED_ED25519, KEY, 42)
    encoded = encode_muxed_account(account)
    assert format_muxed_account(account, 0, 0) == encoded
    assert format_muxed_account(account, 4, 4) == encoded[:4] + ".." + encoded[-4:]


def test_binary_hex():
    assert format_binary(b"\x01\xab", 0, 0) == "01ab"
    data = bytes(range(20))
    assert format_binary(data, 0, 0) == data.hex()


def test_binary_summary_too_long_raises():
    with pytest.raises(FormatError):
        format_binary(bytes(37), 3, 3)


def test_claimable_balance_id():
    v0 = bytes([0xAA]) * 32
    result = format_claimable_balance_id(ClaimableBalanceId(0, v0), 0, 0)
    assert result == "00000000" + v0.hex()
    short = format_claimable_balance_id(ClaimableBalanceId(0, v0), 4, 4)
    assert short == result[:4] + ".." + result[-4:]


def test_uint_and_int():
    assert format_uint(0) == "0"
    assert format_uint((1 << 64) - 1) == "18446744073709551615"
    assert format_int(-(1 << 63)) == "-9223372036854775808"
    assert format_int(-5) == "-5"


@pytest.mark.parametrize("value", [-1, 1 << 64])
def test_uint_out_of_range(value):
    with pytest.raises(FormatError):
        format_uint(value)


def test_int_out_of_range():
    with pytest.raises(FormatError):
        format_int(1 << 63)


def test_time_bounds_of_range():
    assert format_time(0) == "1970-01-01 00:00:00"
    assert format_time(253402300799) == "9999-12-31 23:59:59"
    with pytest.raises(FormatError):
        format_time(253402300800)


def test_asset_names():
    assert format_asset_name(Asset.native(), NetworkType.UNKNOWN) == "native"
    assert format_asset_name(Asset.native(), NetworkType.PUBLIC) == "XLM"
    usd = Asset(AssetType.CREDIT_ALPHANUM4, b"USD\x00", KEY)
    assert format_asset_name(usd, NetworkType.PUBLIC) == "USD"
    long_code = Asset(AssetType.CREDIT_ALPHANUM12, b"ABCDEFGHIJKL", KEY)
    assert format_asset_name(long_code, NetworkType.TEST) == "ABCDEFGHIJKL"


def test_pool_share_asset_name_raises():
    with pytest.raises(FormatError):
        format_asset_name(Asset(AssetType.POOL_SHARE), NetworkType.PUBLIC)


def test_credit_asset_has_issuer():
    usd = Asset(AssetType.CREDIT_ALPHANUM4, b"USD\x00", KEY)
    result = format_asset(usd, NetworkType.PUBLIC)
    assert result == "USD@" + format_account_id(KEY, 3, 4)
    assert len(result.split("@")[1]) == 9


def test_native_asset_plain():
    assert format_asset(Asset.native(), NetworkType.TEST) == "XLM"


def test_account_flags():
    assert format_account_flags(0x0F) == (
        "AUTH_REQUIRED, AUTH_REVOCABLE, AUTH_IMMUTABLE, AUTH_CLAWBACK_ENABLED"
    )
    assert format_account_flags(0x04) == "AUTH_IMMUTABLE"
    assert format_account_flags(0) == ""


def test_trust_line_flags():
    assert format_trust_line_flags(7) == (
        "AUTHORIZED, AUTHORIZED_TO_MAINTAIN_LIABILITIES, TRUSTLINE_CLAWBACK_ENABLED"
    )
    assert format_trust_line_flags(0) == ""


@pytest.mark.parametrize(
    "flag, expected",
    [
        (0, "UNAUTHORIZED"),
        (1, "AUTHORIZED"),
        (2, "AUTHORIZED_TO_MAINTAIN_LIABILITIES"),
        (3, "AUTHORIZED"),
    ],
)
def test_allow_trust_flags(flag, expected):
    assert format_allow_trust_flags(flag) == expected


def test_amount_values():
    assert format_amount(0) == "0"
    assert format_amount(10_000_000) == "1"
    assert format_amount(9223372036854775807) == "922,337,203,685.4775807"


def test_amount_strips_trailing_zeros_only_in_fraction():
    result = format_amount(1_000_000_000)
    assert "." not in result
    assert result.startswith("100")


def test_amount_with_asset():
    assert format_amount(10_000_000, Asset.native(), NetworkType.UNKNOWN) == "1 native"
    assert format_amount(10_000_000, Asset.native(), NetworkType.PUBLIC) == "1 XLM"


def test_amount_too_large_raises():
    with pytest.raises(FormatError):
        format_amount(10**19)
    with pytest.raises(FormatError):
        format_amount(-1)


def test_is_printable_binary():
    assert is_printable_binary(b"hello world~")
    assert not is_printable_binary(b"tab\there")
    assert not is_printable_binary(b"\x7f")
    assert is_printable_binary(b"")