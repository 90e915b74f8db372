"""Transaction envelopes: header parsing and operation-by-operation walking."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

from stellarxdr.models import HASH_SIZE, Memo, MuxedAccount, NetworkType, Preconditions
from stellarxdr.operations import Operation, parse_operation
from stellarxdr.xdr import (
    XdrError,
    XdrReader,
    parse_memo,
    parse_muxed_account,
    parse_preconditions,
)

MAX_OPS = 20

# SHA256("Public Global Stellar Network ; September 2015")
NETWORK_ID_PUBLIC_HASH = bytes.fromhex(
    "7ac33997544e3175d266bd022439b22cdb16508c01163f26e5cb2a3e1045a979"
)
# SHA256("Test SDF Network ; September 2015")
NETWORK_ID_TEST_HASH = bytes.fromhex(
    "cee0302d59844d32bdca915c8203dd44b33fbb7edc19051ea37abedf28ecd472"
)


class EnvelopeType(IntEnum):
    TX = 2
    TX_FEE_BUMP = 5


@dataclass(frozen=True)
class TransactionDetails:
    source_account: MuxedAccount
    fee: int
    sequence_number: int
    cond: Preconditions
    memo: Memo
    operations_count: int


@dataclass(frozen=True)
class FeeBumpTransactionDetails:
    fee_source: MuxedAccount
    fee: int


@dataclass
class TxContext:
    """Progress through a signature payload, one operation at a time."""

    offset: int = 0
    network: NetworkType | None = None
    envelope_type: EnvelopeType | None = None
    tx_details: TransactionDetails | None = None
    fee_bump_tx_details: FeeBumpTransactionDetails | None = None
    operation_index: int = 0
    operation: Operation | None = None

    def parse_next(self, data: bytes) -> Operation:
        """Parse the next operation, reading the header first when at the start."""
        return parse_tx_xdr(data, self)

    def iter_operations(self, data: bytes) -> Iterator[Operation]:
        """Restart from the beginning and yield every operation in order."""
        self.offset = 0
        while True:
            yield self.parse_next(data)
            assert self.tx_details is not None
            if self.operation_index >= self.tx_details.operations_count:
                return


def identify_network(network_hash: bytes) -> NetworkType:
    """Network whose passphrase hashes to ``network_hash``."""
    network_hash = bytes(network_hash)
    if network_hash == NETWORK_ID_PUBLIC_HASH:
        return NetworkType.PUBLIC
    if network_hash == NETWORK_ID_TEST_HASH:
        return NetworkType.TEST
    return NetworkType.UNKNOWN


def parse_transaction_details(reader: XdrReader) -> TransactionDetails:
    """Read a transaction header up to and including the operation count."""
    source_account = parse_muxed_account(reader)
    fee = reader.read_uint32()
    sequence_number = reader.read_int64()
    cond = parse_preconditions(reader)
    memo = parse_memo(reader)
    count = reader.read_uint32()
    if count > MAX_OPS:
        raise XdrError(f"{count} operations, at most {MAX_OPS}")
    return TransactionDetails(source_account, fee, sequence_number, cond, memo, count)


def parse_fee_bump_transaction_details(reader: XdrReader) -> FeeBumpTransactionDetails:
    fee_source = parse_muxed_account(reader)
    return FeeBumpTransactionDetails(fee_source, reader.read_int64())


def _envelope_type(value: int) -> EnvelopeType:
    try:
        return EnvelopeType(value)
    except ValueError:
        raise XdrError(f"unknown envelope type {value}") from None


def parse_tx_xdr(data: bytes, context: TxContext) -> Operation:
    """Parse the operation at ``context.offset``, updating ``context`` on success.

    At offset zero the network id and transaction header are read first.
    On failure ``context`` is left untouched.
    """
    reader = XdrReader(data, context.offset)
    if context.offset == 0:
        network = identify_network(reader.read_fixed(HASH_SIZE))
        envelope_type = _envelope_type(reader.read_uint32())
        fee_bump = None
        if envelope_type == EnvelopeType.TX_FEE_BUMP:
            fee_bump = parse_fee_bump_transaction_details(reader)
            inner = reader.read_uint32()
            if inner != EnvelopeType.TX:
                raise XdrError(f"inner envelope type {inner} is not a transaction")
        details = parse_transaction_details(reader)
        operation_index = 0
    else:
        if context.tx_details is None:
            raise XdrError("transaction header has not been parsed")
        network = context.network
        envelope_type = context.envelope_type
        fee_bump = context.fee_bump_tx_details
        details = context.tx_details
        operation_index = context.operation_index

    operation = parse_operation(reader)

    context.network = network
    context.envelope_type = envelope_type
    context.fee_bump_tx_details = fee_bump
    context.tx_details = details
    context.operation = operation
    context.operation_index = operation_index + 1
    context.offset = reader.offset
    return operation