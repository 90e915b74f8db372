"""Reading of XDR-encoded values and the shared transaction building blocks."""

from __future__ import annotations

import struct
from collections.abc import Callable
from enum import IntEnum
from typing import TypeVar

from stellarxdr.models import (
    ED25519_KEY_SIZE,
    HASH_SIZE,
    Asset,
    AssetType,
    Claimant,
    ClaimableBalanceId,
    ClaimPredicateType,
    CryptoKeyType,
    Ed25519SignedPayload,
    LedgerBounds,
    LedgerEntryType,
    LedgerKey,
    LiquidityPoolParameters,
    Memo,
    MemoType,
    MuxedAccount,
    Preconditions,
    PreconditionType,
    Price,
    Signer,
    SignerKey,
    SignerKeyType,
    TimeBounds,
)

MEMO_TEXT_MAX_SIZE = 28
DATA_NAME_MAX_SIZE = 64
LIQUIDITY_POOL_ID_SIZE = 32
CLAIMABLE_BALANCE_ID_SIZE = 32
MAX_SIGNED_PAYLOAD_SIZE = 64
MAX_EXTRA_SIGNERS = 2
LIQUIDITY_POOL_CONSTANT_PRODUCT = 0
CLAIMABLE_BALANCE_ID_TYPE_V0 = 0
CLAIMANT_TYPE_V0 = 0

T = TypeVar("T")
E = TypeVar("E", bound=IntEnum)


class XdrError(ValueError):
    """Raised when the input is not a well-formed XDR value."""


def _padded_size(size: int) -> int:
    return size + (-size % 4)


def _enum(cls: type[E], value: int) -> E:
    try:
        return cls(value)
    except ValueError:
        raise XdrError(f"unknown {cls.__name__} value {value}") from None


class XdrReader:
    """Sequential big-endian reader over a byte string."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self.data = bytes(data)
        if not 0 <= offset <= len(self.data):
            raise XdrError(f"offset {offset} outside of {len(self.data)} bytes")
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _take(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise XdrError(
                f"need {size} bytes at offset {self.offset}, {self.remaining} left"
            )
        chunk = self.data[self.offset:self.offset + size]
        self.offset += size
        return chunk

    def _unpack(self, fmt: str) -> int:
        return struct.unpack(fmt, self._take(struct.calcsize(fmt)))[0]

    def read_uint32(self) -> int:
        return self._unpack(">I")

    def read_uint64(self) -> int:
        return self._unpack(">Q")

    def read_int32(self) -> int:
        return self._unpack(">i")

    def read_int64(self) -> int:
        return self._unpack(">q")

    def read_bool(self) -> bool:
        value = self.read_uint32()
        if value not in (0, 1):
            raise XdrError(f"invalid boolean value {value}")
        return value == 1

    def read_fixed(self, size: int) -> bytes:
        """Exactly ``size`` raw bytes."""
        return self._take(size)

    def read_padded(self, size: int) -> bytes:
        """``size`` bytes followed by zero padding up to a multiple of four."""
        padded = _padded_size(size)
        if padded > self.remaining:
            raise XdrError(f"need {padded} bytes at offset {self.offset}")
        chunk = self.data[self.offset:self.offset + padded]
        if any(chunk[size:]):
            raise XdrError(f"non-zero padding at offset {self.offset + size}")
        self.offset += padded
        return chunk[:size]

    def read_string(self, max_length: int) -> bytes:
        """Length-prefixed opaque data of at most ``max_length`` bytes."""
        size = self.read_uint32()
        if size > max_length:
            raise XdrError(f"length {size} exceeds maximum {max_length}")
        return self.read_padded(size)

    def read_optional(self, parse: Callable[[XdrReader], T]) -> T | None:
        """Value parsed by ``parse`` when the presence flag is set, else ``None``."""
        if self.read_bool():
            return parse(self)
        return None


def parse_signer_key(reader: XdrReader) -> SignerKey:
    key_type = _enum(SignerKeyType, reader.read_uint32())
    key = reader.read_fixed(ED25519_KEY_SIZE)
    if key_type != SignerKeyType.ED25519_SIGNED_PAYLOAD:
        return SignerKey(key_type, key)
    length = reader.read_uint32()
    if not 1 <= length <= MAX_SIGNED_PAYLOAD_SIZE:
        raise XdrError(f"signed payload length {length} not in 1..{MAX_SIGNED_PAYLOAD_SIZE}")
    payload = reader.read_fixed(_padded_size(length))[:length]
    return SignerKey(key_type, key, Ed25519SignedPayload(key, payload))


def parse_account_id(reader: XdrReader) -> bytes:
    """Raw public key of an account id; the key type word is read but not enforced."""
    reader.read_uint32()
    return reader.read_fixed(ED25519_KEY_SIZE)


def parse_muxed_account(reader: XdrReader) -> MuxedAccount:
    key_type = _enum(CryptoKeyType, reader.read_uint32())
    if key_type == CryptoKeyType.ED25519:
        return MuxedAccount(key_type, reader.read_fixed(ED25519_KEY_SIZE))
    muxed_id = reader.read_uint64()
    return MuxedAccount(key_type, reader.read_fixed(ED25519_KEY_SIZE), muxed_id)


def parse_time_bounds(reader: XdrReader) -> TimeBounds:
    min_time = reader.read_uint64()
    return TimeBounds(min_time, reader.read_uint64())


def parse_ledger_bounds(reader: XdrReader) -> LedgerBounds:
    min_ledger = reader.read_uint32()
    return LedgerBounds(min_ledger, reader.read_uint32())


def parse_extra_signers(reader: XdrReader) -> tuple[SignerKey, ...]:
    count = reader.read_uint32()
    if count > MAX_EXTRA_SIGNERS:
        raise XdrError(f"{count} extra signers, at most {MAX_EXTRA_SIGNERS} allowed")
    return tuple(parse_signer_key(reader) for _ in range(count))


def parse_preconditions(reader: XdrReader) -> Preconditions:
    kind = _enum(PreconditionType, reader.read_uint32())
    if kind == PreconditionType.NONE:
        return Preconditions()
    if kind == PreconditionType.TIME:
        return Preconditions(time_bounds=parse_time_bounds(reader))
    time_bounds = reader.read_optional(parse_time_bounds)
    ledger_bounds = reader.read_optional(parse_ledger_bounds)
    min_seq_num = reader.read_optional(XdrReader.read_int64)
    min_seq_age = reader.read_uint64()
    min_seq_ledger_gap = reader.read_uint32()
    parse_extra_signers(reader)
    return Preconditions(
        time_bounds=time_bounds,
        ledger_bounds=ledger_bounds,
        min_seq_num=min_seq_num,
        min_seq_age=min_seq_age,
        min_seq_ledger_gap=min_seq_ledger_gap,
    )


def parse_memo(reader: XdrReader) -> Memo:
    kind = _enum(MemoType, reader.read_uint32())
    if kind == MemoType.NONE:
        return Memo(kind)
    if kind == MemoType.ID:
        return Memo(kind, id=reader.read_uint64())
    if kind == MemoType.TEXT:
        return Memo(kind, text=reader.read_string(MEMO_TEXT_MAX_SIZE))
    return Memo(kind, hash=reader.read_fixed(HASH_SIZE))


def _parse_credit_asset(reader: XdrReader, kind: AssetType) -> Asset:
    width = 4 if kind == AssetType.CREDIT_ALPHANUM4 else 12
    code = reader.read_fixed(width)
    return Asset(kind, code=code, issuer=parse_account_id(reader))


def parse_asset(reader: XdrReader) -> Asset:
    kind = _enum(AssetType, reader.read_uint32())
    if kind == AssetType.NATIVE:
        return Asset.native()
    if kind in (AssetType.CREDIT_ALPHANUM4, AssetType.CREDIT_ALPHANUM12):
        return _parse_credit_asset(reader, kind)
    raise XdrError(f"asset type {kind.name} not allowed here")


def parse_trust_line_asset(reader: XdrReader) -> Asset:
    kind = _enum(AssetType, reader.read_uint32())
    if kind == AssetType.NATIVE:
        return Asset.native()
    if kind == AssetType.POOL_SHARE:
        return Asset(kind, liquidity_pool_id=reader.read_fixed(LIQUIDITY_POOL_ID_SIZE))
    return _parse_credit_asset(reader, kind)


def parse_liquidity_pool_parameters(reader: XdrReader) -> LiquidityPoolParameters:
    pool_type = reader.read_uint32()
    if pool_type != LIQUIDITY_POOL_CONSTANT_PRODUCT:
        raise XdrError(f"unknown liquidity pool type {pool_type}")
    asset_a = parse_asset(reader)
    asset_b = parse_asset(reader)
    return LiquidityPoolParameters(asset_a, asset_b, reader.read_int32())


def parse_change_trust_asset(reader: XdrReader) -> Asset:
    kind = _enum(AssetType, reader.read_uint32())
    if kind == AssetType.NATIVE:
        return Asset.native()
    if kind == AssetType.POOL_SHARE:
        return Asset(kind, liquidity_pool=parse_liquidity_pool_parameters(reader))
    return _parse_credit_asset(reader, kind)


def parse_price(reader: XdrReader) -> Price:
    numerator = reader.read_int32()
    denominator = reader.read_int32()
    if denominator == 0:
        raise XdrError("price denominator is zero")
    return Price(numerator, denominator)


def parse_signer(reader: XdrReader) -> Signer:
    key = parse_signer_key(reader)
    return Signer(key, reader.read_uint32())


def parse_claimant_predicate(reader: XdrReader) -> None:
    """Validate a claim predicate; its contents are not kept."""
    kind = _enum(ClaimPredicateType, reader.read_uint32())
    if kind in (ClaimPredicateType.AND, ClaimPredicateType.OR):
        count = reader.read_uint32()
        if count != 2:
            raise XdrError(f"{kind.name} predicate needs 2 operands, got {count}")
        parse_claimant_predicate(reader)
        parse_claimant_predicate(reader)
    elif kind == ClaimPredicateType.NOT:
        reader.read_optional(parse_claimant_predicate)
    elif kind in (
        ClaimPredicateType.BEFORE_ABSOLUTE_TIME,
        ClaimPredicateType.BEFORE_RELATIVE_TIME,
    ):
        reader.read_int64()


def parse_claimant(reader: XdrReader) -> Claimant:
    claimant_type = reader.read_uint32()
    if claimant_type != CLAIMANT_TYPE_V0:
        raise XdrError(f"unknown claimant type {claimant_type}")
    destination = parse_account_id(reader)
    parse_claimant_predicate(reader)
    return Claimant(destination, claimant_type)


def parse_claimable_balance_id(reader: XdrReader) -> ClaimableBalanceId:
    id_type = reader.read_uint32()
    if id_type != CLAIMABLE_BALANCE_ID_TYPE_V0:
        raise XdrError(f"unknown claimable balance id type {id_type}")
    return ClaimableBalanceId(id_type, reader.read_fixed(CLAIMABLE_BALANCE_ID_SIZE))


def parse_ledger_key(reader: XdrReader) -> LedgerKey:
    kind = _enum(LedgerEntryType, reader.read_uint32())
    if kind == LedgerEntryType.ACCOUNT:
        return LedgerKey(kind, account_id=parse_account_id(reader))
    if kind == LedgerEntryType.TRUSTLINE:
        account_id = parse_account_id(reader)
        return LedgerKey(kind, account_id=account_id, asset=parse_trust_line_asset(reader))
    if kind == LedgerEntryType.OFFER:
        seller = parse_account_id(reader)
        return LedgerKey(kind, account_id=seller, offer_id=reader.read_int64())
    if kind == LedgerEntryType.DATA:
        account_id = parse_account_id(reader)
        return LedgerKey(
            kind, account_id=account_id, data_name=reader.read_string(DATA_NAME_MAX_SIZE)
        )
    if kind == LedgerEntryType.CLAIMABLE_BALANCE:
        return LedgerKey(kind, balance_id=parse_claimable_balance_id(reader))
    return LedgerKey(kind, liquidity_pool_id=reader.read_fixed(LIQUIDITY_POOL_ID_SIZE))