"""
Bet domain model and encrypted value types.
"""

from dataclasses import dataclass
from enum import IntEnum

# Encrypted type tags understood by the gateway
EBOOL = "ebool"
EUINT8 = "euint8"
EUINT64 = "euint64"

ENCRYPTED_TYPE_BITS = {EBOOL: 1, EUINT8: 8, EUINT64: 64}


class BetState(IntEnum):
    """Lifecycle state of a bet. NONE is the implicit state of unknown ids."""

    NONE = 0
    SETTLED = 1


@dataclass(frozen=True)
class EncryptedHandle:
    """
    Opaque reference to a ciphertext held by the encrypted-value gateway.

    Handles carry no plaintext and define no arithmetic; every operation
    on the underlying value goes through the gateway.
    """

    handle_id: str
    type_tag: str

    def __post_init__(self):
        if self.type_tag not in ENCRYPTED_TYPE_BITS:
            raise ValueError(f"Unknown encrypted type: {self.type_tag}")

    def __repr__(self) -> str:
        return f"EncryptedHandle({self.type_tag}:{self.handle_id[:12]})"


@dataclass(frozen=True)
class EncryptedInput:
    """Externally encoded ciphertext together with its validity proof."""

    handle: bytes
    proof: bytes


@dataclass(frozen=True)
class EncryptedFields:
    """The four confidential fields of a bet."""

    wager: EncryptedHandle
    guess: EncryptedHandle
    outcome: EncryptedHandle
    payout: EncryptedHandle

    def handles(self) -> tuple[EncryptedHandle, ...]:
        return (self.wager, self.guess, self.outcome, self.payout)


@dataclass
class Bet:
    """
    A settled confidential bet.

    Encrypted fields are write-once; only the viewer set grows after creation.
    """

    bet_id: int
    player: str
    fields: EncryptedFields
    created_at: int
    state: BetState = BetState.NONE

    @property
    def wager(self) -> EncryptedHandle:
        return self.fields.wager

    @property
    def guess(self) -> EncryptedHandle:
        return self.fields.guess

    @property
    def outcome(self) -> EncryptedHandle:
        return self.fields.outcome

    @property
    def payout(self) -> EncryptedHandle:
        return self.fields.payout

    @property
    def exists(self) -> bool:
        return self.state == BetState.SETTLED


@dataclass(frozen=True)
class BetSummary:
    """Plaintext metadata of a bet; safe to expose without authorization."""

    player: str | None
    created_at: int
    state: BetState


@dataclass(frozen=True)
class LedgerStats:
    """
    Aggregate plaintext metrics over the ledger.

    total_volume is None: encrypted wagers cannot be summed without decryption.
    """

    total_bets: int
    settled_bets: int
    unique_players: int
    total_volume: int | None = None
