"""Transaction operations and their XDR parser."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from stellarxdr.models import (
    Asset,
    Claimant,
    ClaimableBalanceId,
    LedgerKey,
    MuxedAccount,
    Price,
    RevokeSponsorshipType,
    Signer,
    SignerKey,
)
from stellarxdr.xdr import (
    DATA_NAME_MAX_SIZE,
    LIQUIDITY_POOL_ID_SIZE,
    XdrError,
    XdrReader,
    parse_account_id,
    parse_asset,
    parse_change_trust_asset,
    parse_claimable_balance_id,
    parse_claimant,
    parse_ledger_key,
    parse_muxed_account,
    parse_price,
    parse_signer,
    parse_signer_key,
)

PATH_PAYMENT_MAX_PATH_LENGTH = 5
CLAIMANTS_MAX_LENGTH = 10
HOME_DOMAIN_MAX_SIZE = 32
DATA_VALUE_MAX_SIZE = 64


class OperationType(IntEnum):
    CREATE_ACCOUNT = 0
    PAYMENT = 1
    PATH_PAYMENT_STRICT_RECEIVE = 2
    MANAGE_SELL_OFFER = 3
    CREATE_PASSIVE_SELL_OFFER = 4
    SET_OPTIONS = 5
    CHANGE_TRUST = 6
    ALLOW_TRUST = 7
    ACCOUNT_MERGE = 8
    INFLATION = 9
    MANAGE_DATA = 10
    BUMP_SEQUENCE = 11
    MANAGE_BUY_OFFER = 12
    PATH_PAYMENT_STRICT_SEND = 13
    CREATE_CLAIMABLE_BALANCE = 14
    CLAIM_CLAIMABLE_BALANCE = 15
    BEGIN_SPONSORING_FUTURE_RESERVES = 16
    END_SPONSORING_FUTURE_RESERVES = 17
    REVOKE_SPONSORSHIP = 18
    CLAWBACK = 19
    CLAWBACK_CLAIMABLE_BALANCE = 20
    SET_TRUST_LINE_FLAGS = 21
    LIQUIDITY_POOL_DEPOSIT = 22
    LIQUIDITY_POOL_WITHDRAW = 23


@dataclass(frozen=True)
class CreateAccountOp:
    destination: bytes
    starting_balance: int


@dataclass(frozen=True)
class PaymentOp:
    destination: MuxedAccount
    asset: Asset
    amount: int


@dataclass(frozen=True)
class PathPaymentStrictReceiveOp:
    send_asset: Asset
    send_max: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_amount: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class PathPaymentStrictSendOp:
    send_asset: Asset
    send_amount: int
    destination: MuxedAccount
    dest_asset: Asset
    dest_min: int
    path: tuple[Asset, ...] = ()


@dataclass(frozen=True)
class ManageSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class ManageBuyOfferOp:
    selling: Asset
    buying: Asset
    buy_amount: int
    price: Price
    offer_id: int


@dataclass(frozen=True)
class CreatePassiveSellOfferOp:
    selling: Asset
    buying: Asset
    amount: int
    price: Price


@dataclass(frozen=True)
class SetOptionsOp:
    """Account option changes; fields left out of the operation are ``None``."""

    inflation_destination: bytes | None = None
    clear_flags: int | None = None
    set_flags: int | None = None
    master_weight: int | None = None
    low_threshold: int | None = None
    medium_threshold: int | None = None
    high_threshold: int | None = None
    home_domain: bytes | None = None
    signer: Signer | None = None


@dataclass(frozen=True)
class ChangeTrustOp:
    line: Asset
    limit: int


@dataclass(frozen=True)
class AllowTrustOp:
    trustor: bytes
    asset_code: bytes
    authorize: int


@dataclass(frozen=True)
class AccountMergeOp:
    destination: MuxedAccount


@dataclass(frozen=True)
class ManageDataOp:
    data_name: bytes
    data_value: bytes | None = None


@dataclass(frozen=True)
class BumpSequenceOp:
    bump_to: int


@dataclass(frozen=True)
class CreateClaimableBalanceOp:
    asset: Asset
    amount: int
    claimants: tuple[Claimant, ...]


@dataclass(frozen=True)
class ClaimClaimableBalanceOp:
    balance_id: ClaimableBalanceId


@dataclass(frozen=True)
class BeginSponsoringFutureReservesOp:
    sponsored_id: bytes


@dataclass(frozen=True)
class RevokeSponsorshipOp:
    """Either ``ledger_key`` or ``account_id`` and ``signer_key`` are set, following ``type``."""

    type: RevokeSponsorshipType
    ledger_key: LedgerKey | None = None
    account_id: bytes | None = None
    signer_key: SignerKey | None = None


@dataclass(frozen=True)
class ClawbackOp:
    asset: Asset
    from_account: MuxedAccount
    amount: int


@dataclass(frozen=True)
class ClawbackClaimableBalanceOp:
    balance_id: ClaimableBalanceId


@dataclass(frozen=True)
class SetTrustLineFlagsOp:
    trustor: bytes
    asset: Asset
    clear_flags: int
    set_flags: int


@dataclass(frozen=True)
class LiquidityPoolDepositOp:
    liquidity_pool_id: bytes
    max_amount_a: int
    max_amount_b: int
    min_price: Price
    max_price: Price


@dataclass(frozen=True)
class LiquidityPoolWithdrawOp:
    liquidity_pool_id: bytes
    amount: int
    min_amount_a: int
    min_amount_b: int


OperationBody = Union[
    CreateAccountOp,
    PaymentOp,
    PathPaymentStrictReceiveOp,
    PathPaymentStrictSendOp,
    ManageSellOfferOp,
    ManageBuyOfferOp,
    CreatePassiveSellOfferOp,
    SetOptionsOp,
    ChangeTrustOp,
    AllowTrustOp,
    AccountMergeOp,
    ManageDataOp,
    BumpSequenceOp,
    CreateClaimableBalanceOp,
    ClaimClaimableBalanceOp,
    BeginSponsoringFutureReservesOp,
    RevokeSponsorshipOp,
    ClawbackOp,
    ClawbackClaimableBalanceOp,
    SetTrustLineFlagsOp,
    LiquidityPoolDepositOp,
    LiquidityPoolWithdrawOp,
]


@dataclass(frozen=True)
class Operation:
    """One operation; ``body`` is ``None`` for operations that carry no data."""

    type: OperationType
    body: OperationBody | None = None
    source_account: MuxedAccount | None = None


def _parse_path(reader: XdrReader) -> tuple[Asset, ...]:
    length = reader.read_uint32()
    if length > PATH_PAYMENT_MAX_PATH_LENGTH:
        raise XdrError(f"path of {length} assets, at most {PATH_PAYMENT_MAX_PATH_LENGTH}")
    return tuple(parse_asset(reader) for _ in range(length))


def _parse_create_account(reader: XdrReader) -> CreateAccountOp:
    destination = parse_account_id(reader)
    return CreateAccountOp(destination, reader.read_int64())


def _parse_payment(reader: XdrReader) -> PaymentOp:
    destination = parse_muxed_account(reader)
    asset = parse_asset(reader)
    return PaymentOp(destination, asset, reader.read_int64())


def _parse_path_payment_strict_receive(reader: XdrReader) -> PathPaymentStrictReceiveOp:
    send_asset = parse_asset(reader)
    send_max = reader.read_int64()
    destination = parse_muxed_account(reader)
    dest_asset = parse_asset(reader)
    dest_amount = reader.read_int64()
    path = _parse_path(reader)
    return PathPaymentStrictReceiveOp(
        send_asset, send_max, destination, dest_asset, dest_amount, path
    )


def _parse_path_payment_strict_send(reader: XdrReader) -> PathPaymentStrictSendOp:
    send_asset = parse_asset(reader)
    send_amount = reader.read_int64()
    destination = parse_muxed_account(reader)
    dest_asset = parse_asset(reader)
    dest_min = reader.read_int64()
    path = _parse_path(reader)
    return PathPaymentStrictSendOp(send_asset, send_amount, destination, dest_asset, dest_min, path)


def _parse_manage_sell_offer(reader: XdrReader) -> ManageSellOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    amount = reader.read_int64()
    price = parse_price(reader)
    return ManageSellOfferOp(selling, buying, amount, price, reader.read_int64())


def _parse_manage_buy_offer(reader: XdrReader) -> ManageBuyOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    buy_amount = reader.read_int64()
    price = parse_price(reader)
    return ManageBuyOfferOp(selling, buying, buy_amount, price, reader.read_int64())


def _parse_create_passive_sell_offer(reader: XdrReader) -> CreatePassiveSellOfferOp:
    selling = parse_asset(reader)
    buying = parse_asset(reader)
    amount = reader.read_int64()
    return CreatePassiveSellOfferOp(selling, buying, amount, parse_price(reader))


def _parse_home_domain(reader: XdrReader) -> bytes | None:
    if not reader.read_uint32():
        return None
    size = reader.read_uint32()
    if size > HOME_DOMAIN_MAX_SIZE:
        raise XdrError(f"home domain of {size} bytes, at most {HOME_DOMAIN_MAX_SIZE}")
    return reader.read_padded(size)


def _parse_set_options(reader: XdrReader) -> SetOptionsOp:
    inflation_destination = reader.read_optional(parse_account_id)
    clear_flags = reader.read_optional(XdrReader.read_uint32)
    set_flags = reader.read_optional(XdrReader.read_uint32)
    master_weight = reader.read_optional(XdrReader.read_uint32)
    low_threshold = reader.read_optional(XdrReader.read_uint32)
    medium_threshold = reader.read_optional(XdrReader.read_uint32)
    high_threshold = reader.read_optional(XdrReader.read_uint32)
    home_domain = _parse_home_domain(reader)
    signer = reader.read_optional(parse_signer)
    return SetOptionsOp(
        inflation_destination=inflation_destination,
        clear_flags=clear_flags,
        set_flags=set_flags,
        master_weight=master_weight,
        low_threshold=low_threshold,
        medium_threshold=medium_threshold,
        high_threshold=high_threshold,
        home_domain=home_domain,
        signer=signer,
    )


def _parse_change_trust(reader: XdrReader) -> ChangeTrustOp:
    line = parse_change_trust_asset(reader)
    return ChangeTrustOp(line, reader.read_uint64())


def _parse_allow_trust(reader: XdrReader) -> AllowTrustOp:
    trustor = parse_account_id(reader)
    asset_type = reader.read_uint32()
    widths = {1: 4, 2: 12}
    if asset_type not in widths:
        raise XdrError(f"asset type {asset_type} not allowed in allow trust")
    asset_code = reader.read_fixed(widths[asset_type])
    return AllowTrustOp(trustor, asset_code, reader.read_uint32())


def _parse_account_merge(reader: XdrReader) -> AccountMergeOp:
    return AccountMergeOp(parse_muxed_account(reader))


def _parse_manage_data(reader: XdrReader) -> ManageDataOp:
    name = reader.read_string(DATA_NAME_MAX_SIZE)
    value = reader.read_optional(lambda r: r.read_string(DATA_VALUE_MAX_SIZE))
    return ManageDataOp(name, value)


def _parse_bump_sequence(reader: XdrReader) -> BumpSequenceOp:
    return BumpSequenceOp(reader.read_int64())


def _parse_create_claimable_balance(reader: XdrReader) -> CreateClaimableBalanceOp:
    asset = parse_asset(reader)
    amount = reader.read_int64()
    count = reader.read_uint32()
    if count > CLAIMANTS_MAX_LENGTH:
        raise XdrError(f"{count} claimants, at most {CLAIMANTS_MAX_LENGTH}")
    claimants = tuple(parse_claimant(reader) for _ in range(count))
    return CreateClaimableBalanceOp(asset, amount, claimants)


def _parse_claim_claimable_balance(reader: XdrReader) -> ClaimClaimableBalanceOp:
    return ClaimClaimableBalanceOp(parse_claimable_balance_id(reader))


def _parse_begin_sponsoring(reader: XdrReader) -> BeginSponsoringFutureReservesOp:
    return BeginSponsoringFutureReservesOp(parse_account_id(reader))


def _parse_revoke_sponsorship(reader: XdrReader) -> RevokeSponsorshipOp:
    raw_type = reader.read_uint32()
    try:
        kind = RevokeSponsorshipType(raw_type)
    except ValueError:
        raise XdrError(f"unknown revoke sponsorship type {raw_type}") from None
    if kind == RevokeSponsorshipType.LEDGER_ENTRY:
        return RevokeSponsorshipOp(kind, ledger_key=parse_ledger_key(reader))
    account_id = parse_account_id(reader)
    return RevokeSponsorshipOp(kind, account_id=account_id, signer_key=parse_signer_key(reader))


def _parse_clawback(reader: XdrReader) -> ClawbackOp:
    asset = parse_asset(reader)
    from_account = parse_muxed_account(reader)
    return ClawbackOp(asset, from_account, reader.read_int64())


def _parse_clawback_claimable_balance(reader: XdrReader) -> ClawbackClaimableBalanceOp:
    return ClawbackClaimableBalanceOp(parse_claimable_balance_id(reader))


def _parse_set_trust_line_flags(reader: XdrReader) -> SetTrustLineFlagsOp:
    trustor = parse_account_id(reader)
    asset = parse_asset(reader)
    clear_flags = reader.read_uint32()
    return SetTrustLineFlagsOp(trustor, asset, clear_flags, reader.read_uint32())


def _parse_liquidity_pool_deposit(reader: XdrReader) -> LiquidityPoolDepositOp:
    pool_id = reader.read_fixed(LIQUIDITY_POOL_ID_SIZE)
    max_amount_a = reader.read_int64()
    max_amount_b = reader.read_int64()
    min_price = parse_price(reader)
    max_price = parse_price(reader)
    return LiquidityPoolDepositOp(pool_id, max_amount_a, max_amount_b, min_price, max_price)


def _parse_liquidity_pool_withdraw(reader: XdrReader) -> LiquidityPoolWithdrawOp:
    pool_id = reader.read_fixed(LIQUIDITY_POOL_ID_SIZE)
    amount = reader.read_int64()
    min_amount_a = reader.read_int64()
    return LiquidityPoolWithdrawOp(pool_id, amount, min_amount_a, reader.read_int64())


_BODY_PARSERS: dict[OperationType, Callable[[XdrReader], OperationBody] | None] = {
    OperationType.CREATE_ACCOUNT: _parse_create_account,
    OperationType.PAYMENT: _parse_payment,
    OperationType.PATH_PAYMENT_STRICT_RECEIVE: _parse_path_payment_strict_receive,
    OperationType.MANAGE_SELL_OFFER: _parse_manage_sell_offer,
    OperationType.CREATE_PASSIVE_SELL_OFFER: _parse_create_passive_sell_offer,
    OperationType.SET_OPTIONS: _parse_set_options,
    OperationType.CHANGE_TRUST: _parse_change_trust,
    OperationType.ALLOW_TRUST: _parse_allow_trust,
    OperationType.ACCOUNT_MERGE: _parse_account_merge,
    OperationType.INFLATION: None,
    OperationType.MANAGE_DATA: _parse_manage_data,
    OperationType.BUMP_SEQUENCE: _parse_bump_sequence,
    OperationType.MANAGE_BUY_OFFER: _parse_manage_buy_offer,
    OperationType.PATH_PAYMENT_STRICT_SEND: _parse_path_payment_strict_send,
    OperationType.CREATE_CLAIMABLE_BALANCE: _parse_create_claimable_balance,
    OperationType.CLAIM_CLAIMABLE_BALANCE: _parse_claim_claimable_balance,
    OperationType.BEGIN_SPONSORING_FUTURE_RESERVES: _parse_begin_sponsoring,
    OperationType.END_SPONSORING_FUTURE_RESERVES: None,
    OperationType.REVOKE_SPONSORSHIP: _parse_revoke_sponsorship,
    OperationType.CLAWBACK: _parse_clawback,
    OperationType.CLAWBACK_CLAIMABLE_BALANCE: _parse_clawback_claimable_balance,
    OperationType.SET_TRUST_LINE_FLAGS: _parse_set_trust_line_flags,
    OperationType.LIQUIDITY_POOL_DEPOSIT: _parse_liquidity_pool_deposit,
    OperationType.LIQUIDITY_POOL_WITHDRAW: _parse_liquidity_pool_withdraw,
}


def parse_operation(reader: XdrReader) -> Operation:
    """Read one operation: optional source account, type and body."""
    source_account = reader.read_optional(parse_muxed_account)
    raw_type = reader.read_uint32()
    try:
        op_type = OperationType(raw_type)
    except ValueError:
        raise XdrError(f"unknown operation type {raw_type}") from None
    parser = _BODY_PARSERS[op_type]
    body = parser(reader) if parser is not None else None
    return Operation(op_type, body, source_account)