"""
Repository for confidential bet records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from domain.errors import BetNotFoundError
from domain.models.bet import (
    Bet,
    BetState,
    BetSummary,
    EncryptedFields,
    EncryptedHandle,
)
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository

logger = logging.getLogger("wager_ledger.repositories.bets")

EVENT_BET_CREATED = "BetCreated"
EVENT_BET_SETTLED = "BetSettled"


class BetRepository(BaseRepository, IBetRepository):
    """
    Handles creation and lookup against the bets table.

    Bets are append-only: rows are inserted already settled and never
    updated or deleted.
    """

    _BET_COLUMNS = """
        bet_id, player, created_at, state,
        wager_handle, wager_type, guess_handle, guess_type,
        outcome_handle, outcome_type, payout_handle, payout_type
    """

    def insert_settled_bets_atomic(
        self,
        *,
        player: str,
        entries: list[EncryptedFields],
        created_at: int,
        initial_viewers: list[str],
        before_commit: Callable[[list[tuple[int, EncryptedFields]]], None] | None = None,
    ) -> list[int]:
        """
        Atomically persist one or more settled bets.

        For each entry, in order:
        - insert the bet row with state SETTLED
        - seed the viewer set with initial_viewers
        - append BetCreated then BetSettled to the event log

        Once every entry is written, before_commit is called with the
        (bet_id, fields) pairs, e.g. to issue gateway grants.

        Any exception (including from before_commit) rolls back every row
        written by this call.

        Returns:
            The new bet ids, in entry order
        """
        if not entries:
            raise ValueError("No bets to persist.")

        bet_ids: list[int] = []
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            for fields in entries:
                cursor.execute(
                    """
                    INSERT INTO bets (
                        player, created_at, state,
                        wager_handle, wager_type, guess_handle, guess_type,
                        outcome_handle, outcome_type, payout_handle, payout_type
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        player,
                        created_at,
                        int(BetState.SETTLED),
                        fields.wager.handle_id,
                        fields.wager.type_tag,
                        fields.guess.handle_id,
                        fields.guess.type_tag,
                        fields.outcome.handle_id,
                        fields.outcome.type_tag,
                        fields.payout.handle_id,
                        fields.payout.type_tag,
                    ),
                )
                bet_id = cursor.lastrowid

                for seq, identity in enumerate(dict.fromkeys(initial_viewers)):
                    cursor.execute(
                        """
                        INSERT INTO bet_viewers (bet_id, identity, granted_by, granted_at, seq)
                        VALUES (?, ?, NULL, ?, ?)
                        """,
                        (bet_id, identity, created_at, seq),
                    )

                for event_type in (EVENT_BET_CREATED, EVENT_BET_SETTLED):
                    cursor.execute(
                        """
                        INSERT INTO bet_events (bet_id, event_type, player, emitted_at)
                        VALUES (?, ?, ?, ?)
                        """,
                        (bet_id, event_type, player, created_at),
                    )

                bet_ids.append(bet_id)

            if before_commit is not None:
                before_commit(list(zip(bet_ids, entries)))

        return bet_ids

    def get_bet(self, bet_id: int) -> Bet | None:
        """Get a bet by id, or None if it was never allocated."""
        if not self.is_valid_row_id(bet_id):
            return None
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {self._BET_COLUMNS} FROM bets WHERE bet_id = ?",
                (bet_id,),
            )
            row = cursor.fetchone()
            return self._row_to_bet(row) if row else None

    def fetch(self, bet_id: int) -> Bet:
        """
        Get a bet that must exist.

        Raises:
            BetNotFoundError: If the id is outside the allocated range
        """
        bet = self.get_bet(bet_id)
        if bet is None or not bet.exists:
            raise BetNotFoundError(bet_id)
        return bet

    def get_summary(self, bet_id: int) -> BetSummary:
        """
        Get plaintext metadata for a bet.

        Unknown ids read as the zero value: no player, created_at 0, state NONE.
        """
        if not self.is_valid_row_id(bet_id):
            return BetSummary(player=None, created_at=0, state=BetState.NONE)
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT player, created_at, state FROM bets WHERE bet_id = ?",
                (bet_id,),
            )
            row = cursor.fetchone()
            if not row:
                return BetSummary(player=None, created_at=0, state=BetState.NONE)
            return BetSummary(
                player=row["player"],
                created_at=row["created_at"],
                state=BetState(row["state"]),
            )

    def get_bet_count(self) -> int:
        """Number of bets ever allocated (ids are dense from 1)."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM bets")
            return cursor.fetchone()[0]

    def get_bet_ids_by_player(self, player: str) -> list[int]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT bet_id FROM bets WHERE player = ? ORDER BY bet_id ASC",
                (player,),
            )
            return [row["bet_id"] for row in cursor.fetchall()]

    def get_players(self) -> list[str]:
        """Player of every bet, in id order (duplicates included)."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT player FROM bets ORDER BY bet_id ASC")
            return [row["player"] for row in cursor.fetchall()]

    def count_by_state(self, state: BetState) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM bets WHERE state = ?", (int(state),))
            return cursor.fetchone()[0]

    def get_events(self, bet_id: int | None = None) -> list[dict]:
        """
        Get the notification log in emission order.

        Args:
            bet_id: Restrict to one bet (None for the whole ledger)

        Returns:
            List of dicts with event_id, bet_id, event_type, player, emitted_at
        """
        if bet_id is not None and not self.is_valid_row_id(bet_id):
            return []
        with self.connection() as conn:
            cursor = conn.cursor()
            if bet_id is not None:
                cursor.execute(
                    """
                    SELECT event_id, bet_id, event_type, player, emitted_at
                    FROM bet_events
                    WHERE bet_id = ?
                    ORDER BY event_id ASC
                    """,
                    (bet_id,),
                )
            else:
                cursor.execute(
                    """
                    SELECT event_id, bet_id, event_type, player, emitted_at
                    FROM bet_events
                    ORDER BY event_id ASC
                    """
                )
            return [dict(row) for row in cursor.fetchall()]

    @staticmethod
    def _row_to_bet(row) -> Bet:
        fields = EncryptedFields(
            wager=EncryptedHandle(row["wager_handle"], row["wager_type"]),
            guess=EncryptedHandle(row["guess_handle"], row["guess_type"]),
            outcome=EncryptedHandle(row["outcome_handle"], row["outcome_type"]),
            payout=EncryptedHandle(row["payout_handle"], row["payout_type"]),
        )
        return Bet(
            bet_id=row["bet_id"],
            player=row["player"],
            fields=fields,
            created_at=row["created_at"],
            state=BetState(row["state"]),
        )
