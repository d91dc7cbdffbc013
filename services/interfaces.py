"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for the services in the
ledger, plus the capability interface consumed from the encrypted-value
gateway. Concrete services inherit from their interface.

Usage:
    class MyService(IMyService):
        def my_method(self, param: str) -> Result[dict]:
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models.bet import (
        Bet,
        BetSummary,
        EncryptedFields,
        EncryptedHandle,
        LedgerStats,
    )
    from services.result import Result


class IEncryptedValueGateway(ABC):
    """
    Capability interface over the homomorphic-encryption library.

    The ledger only ever holds EncryptedHandle values; every arithmetic,
    comparison, randomness and permission operation goes through here.
    """

    @abstractmethod
    def decode(self, external_handle: bytes, proof: bytes, type_tag: str) -> "EncryptedHandle":
        """Convert an external ciphertext into an internal handle (raises InvalidProofError)."""
        ...

    @abstractmethod
    def add(self, a: "EncryptedHandle", b: "EncryptedHandle | int") -> "EncryptedHandle":
        """Encrypted addition; integers are trivially encrypted to a's type."""
        ...

    @abstractmethod
    def multiply(self, a: "EncryptedHandle", b: "EncryptedHandle | int") -> "EncryptedHandle":
        """Encrypted multiplication; integers are trivially encrypted to a's type."""
        ...

    @abstractmethod
    def equal(self, a: "EncryptedHandle", b: "EncryptedHandle") -> "EncryptedHandle":
        """Encrypted equality; returns an ebool handle."""
        ...

    @abstractmethod
    def cast(self, handle: "EncryptedHandle", type_tag: str) -> "EncryptedHandle":
        """Cast a handle to another encrypted type (ebool -> 0/1 integer)."""
        ...

    @abstractmethod
    def draw_uniform(self, type_tag: str, bound: int) -> "EncryptedHandle":
        """Draw a fresh encrypted value uniformly from [0, bound)."""
        ...

    @abstractmethod
    def grant(self, handle: "EncryptedHandle", identity: str) -> None:
        """Allow identity to decrypt or operate on handle."""
        ...

    @abstractmethod
    def is_allowed(self, handle: "EncryptedHandle", identity: str) -> bool:
        """Check whether identity holds a grant on handle."""
        ...


class ISettlementService(ABC):
    """Interface for creating and settling confidential bets."""

    @abstractmethod
    def settle(
        self,
        wager_input: bytes,
        wager_proof: bytes,
        guess_input: bytes,
        guess_proof: bytes,
        submitter: str,
    ) -> "Result[int]":
        """Settle a single bet and return its id."""
        ...

    @abstractmethod
    def settle_batch(
        self,
        wager_inputs: list[bytes],
        guess_inputs: list[bytes],
        wager_proofs: list[bytes],
        guess_proofs: list[bytes],
        submitter: str,
    ) -> "Result[list[int]]":
        """Settle up to the batch limit of bets in one indivisible call."""
        ...

    @abstractmethod
    def fetch(self, bet_id: int) -> "Result[Bet]":
        """Look up a bet, failing when it does not exist."""
        ...

    @abstractmethod
    def summary(self, bet_id: int) -> "BetSummary":
        """Get plaintext metadata for a bet."""
        ...

    @abstractmethod
    def owner(self, bet_id: int) -> "Result[str]":
        """Get the player who placed a bet."""
        ...

    @abstractmethod
    def bet_count(self) -> int:
        """Number of bets ever settled."""
        ...


class IViewerService(ABC):
    """Interface for the per-bet viewer allow-list."""

    @abstractmethod
    def is_viewer(self, bet_id: int, identity: str) -> bool:
        """Check whether identity may read the bet's encrypted fields."""
        ...

    @abstractmethod
    def grant_auditor(self, bet_id: int, auditor: str, requester: str) -> "Result[None]":
        """Delegate viewer access to a new identity."""
        ...

    @abstractmethod
    def read_encrypted_fields(self, bet_id: int, requester: str) -> "Result[EncryptedFields]":
        """Return the four encrypted handles of a bet to a viewer."""
        ...


class ILedgerStatsService(ABC):
    """Interface for plaintext ledger statistics."""

    @abstractmethod
    def stats(self) -> "LedgerStats":
        """Aggregate counts over all bets."""
        ...
