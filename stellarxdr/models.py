"""Value types shared by the transaction parser and the display formatters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ED25519_KEY_SIZE = 32
HASH_SIZE = 32


class NetworkType(IntEnum):
    """Network a transaction is bound to, derived from the network passphrase hash."""

    PUBLIC = 0
    TEST = 1
    UNKNOWN = 2


class AssetType(IntEnum):
    NATIVE = 0
    CREDIT_ALPHANUM4 = 1
    CREDIT_ALPHANUM12 = 2
    POOL_SHARE = 3


class CryptoKeyType(IntEnum):
    ED25519 = 0
    MUXED_ED25519 = 0x100


class SignerKeyType(IntEnum):
    ED25519 = 0
    PRE_AUTH_TX = 1
    HASH_X = 2
    ED25519_SIGNED_PAYLOAD = 3


class MemoType(IntEnum):
    NONE = 0
    TEXT = 1
    ID = 2
    HASH = 3
    RETURN = 4


class PreconditionType(IntEnum):
    NONE = 0
    TIME = 1
    V2 = 2


class ClaimPredicateType(IntEnum):
    UNCONDITIONAL = 0
    AND = 1
    OR = 2
    NOT = 3
    BEFORE_ABSOLUTE_TIME = 4
    BEFORE_RELATIVE_TIME = 5


class LedgerEntryType(IntEnum):
    ACCOUNT = 0
    TRUSTLINE = 1
    OFFER = 2
    DATA = 3
    CLAIMABLE_BALANCE = 4
    LIQUIDITY_POOL = 5


class RevokeSponsorshipType(IntEnum):
    LEDGER_ENTRY = 0
    SIGNER = 1


def _check_key(key: bytes, what: str) -> None:
    if len(key) != ED25519_KEY_SIZE:
        raise ValueError(f"{what} must be {ED25519_KEY_SIZE} bytes, got {len(key)}")


@dataclass(frozen=True)
class MuxedAccount:
    """An account, optionally multiplexed with a 64-bit id."""

    type: CryptoKeyType
    ed25519: bytes
    id: int | None = None

    def __post_init__(self) -> None:
        _check_key(self.ed25519, "ed25519 key")
        if self.type == CryptoKeyType.MUXED_ED25519 and self.id is None:
            raise ValueError("a muxed account needs an id")

    @classmethod
    def from_ed25519(cls, key: bytes) -> MuxedAccount:
        """Plain (non-muxed) account for a raw public key."""
        return cls(CryptoKeyType.ED25519, bytes(key))


@dataclass(frozen=True)
class Asset:
    """Asset, trust line asset or change trust asset.

    ``code`` holds the raw, zero-padded asset code for credit assets;
    ``liquidity_pool_id`` is set for pool-share trust line assets and
    ``liquidity_pool`` for pool-share change trust assets.
    """

    type: AssetType
    code: bytes = b""
    issuer: bytes | None = None
    liquidity_pool_id: bytes | None = None
    liquidity_pool: LiquidityPoolParameters | None = None

    @classmethod
    def native(cls) -> Asset:
        """The network's native asset."""
        return cls(AssetType.NATIVE)


@dataclass(frozen=True)
class Ed25519SignedPayload:
    ed25519: bytes
    payload: bytes


@dataclass(frozen=True)
class SignerKey:
    """A signer key; ``key`` is the raw 32 bytes, ``signed_payload`` is set for signed payloads."""

    type: SignerKeyType
    key: bytes
    signed_payload: Ed25519SignedPayload | None = None


@dataclass(frozen=True)
class ClaimableBalanceId:
    type: int
    v0: bytes


@dataclass(frozen=True)
class TimeBounds:
    min_time: int
    max_time: int


@dataclass(frozen=True)
class LedgerBounds:
    min_ledger: int
    max_ledger: int


@dataclass(frozen=True)
class Preconditions:
    """Validity conditions; absent optional conditions are ``None``."""

    time_bounds: TimeBounds | None = None
    ledger_bounds: LedgerBounds | None = None
    min_seq_num: int | None = None
    min_seq_age: int = 0
    min_seq_ledger_gap: int = 0


@dataclass(frozen=True)
class Memo:
    type: MemoType
    id: int | None = None
    text: bytes | None = None
    hash: bytes | None = None


@dataclass(frozen=True)
class Price:
    n: int
    d: int


@dataclass(frozen=True)
class Signer:
    key: SignerKey
    weight: int


@dataclass(frozen=True)
class Claimant:
    destination: bytes
    type: int = 0


@dataclass(frozen=True)
class LiquidityPoolParameters:
    asset_a: Asset
    asset_b: Asset
    fee: int


@dataclass(frozen=True)
class LedgerKey:
    """Key of a ledger entry; only the fields relevant to ``type`` are set."""

    type: LedgerEntryType
    account_id: bytes | None = None
    asset: Asset | None = None
    offer_id: int | None = None
    data_name: bytes | None = None
    balance_id: ClaimableBalanceId | None = None
    liquidity_pool_id: bytes | None = None