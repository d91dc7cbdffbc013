"""
Service for plaintext ledger statistics.
"""

from typing import TYPE_CHECKING

from domain.models.bet import BetState, LedgerStats
from services.interfaces import ILedgerStatsService

if TYPE_CHECKING:
    from repositories.bet_repository import BetRepository


class LedgerStatsService(ILedgerStatsService):
    """
    Read-only aggregation over bet metadata.

    Never touches ciphertext. Wagered volume stays unavailable because
    encrypted wagers cannot be summed without decryption.
    """

    def __init__(self, bet_repo: "BetRepository"):
        self.bet_repo = bet_repo

    def stats(self) -> LedgerStats:
        total_bets = self.bet_repo.get_bet_count()
        if total_bets == 0:
            return LedgerStats(total_bets=0, settled_bets=0, unique_players=0)

        return LedgerStats(
            total_bets=total_bets,
            settled_bets=self.bet_repo.count_by_state(BetState.SETTLED),
            unique_players=len(set(self.bet_repo.get_players())),
            total_volume=None,
        )

    def player_bet_counts(self) -> dict[str, int]:
        """Number of bets per player."""
        counts: dict[str, int] = {}
        for player in self.bet_repo.get_players():
            counts[player] = counts.get(player, 0) + 1
        return counts
