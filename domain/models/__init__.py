"""
Domain models - pure data structures representing ledger entities.
"""

from domain.models.bet import (
    Bet,
    BetState,
    BetSummary,
    EncryptedFields,
    EncryptedHandle,
    EncryptedInput,
    LedgerStats,
)

__all__ = [
    "Bet",
    "BetState",
    "BetSummary",
    "EncryptedFields",
    "EncryptedHandle",
    "EncryptedInput",
    "LedgerStats",
]
