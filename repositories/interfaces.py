"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from domain.models.bet import Bet, BetState, BetSummary, EncryptedFields


class IBetRepository(ABC):
    @abstractmethod
    def insert_settled_bets_atomic(
        self,
        *,
        player: str,
        entries: list[EncryptedFields],
        created_at: int,
        initial_viewers: list[str],
        before_commit: Callable[[list[tuple[int, EncryptedFields]]], None] | None = None,
    ) -> list[int]: ...

    @abstractmethod
    def get_bet(self, bet_id: int) -> Bet | None: ...

    @abstractmethod
    def fetch(self, bet_id: int) -> Bet: ...

    @abstractmethod
    def get_summary(self, bet_id: int) -> BetSummary: ...

    @abstractmethod
    def get_bet_count(self) -> int: ...

    @abstractmethod
    def get_bet_ids_by_player(self, player: str) -> list[int]: ...

    @abstractmethod
    def get_players(self) -> list[str]: ...

    @abstractmethod
    def count_by_state(self, state: BetState) -> int: ...

    @abstractmethod
    def get_events(self, bet_id: int | None = None) -> list[dict]:
        """Get the BetCreated/BetSettled notification log in emission order."""
        ...


class IViewerRepository(ABC):
    @abstractmethod
    def is_viewer(self, bet_id: int, identity: str) -> bool: ...

    @abstractmethod
    def add_viewer_atomic(
        self,
        *,
        bet_id: int,
        identity: str,
        granted_by: str,
        granted_at: int,
        before_commit: Callable[[], None] | None = None,
    ) -> bool: ...

    @abstractmethod
    def get_viewers(self, bet_id: int) -> list[str]: ...

    @abstractmethod
    def count_viewers(self, bet_id: int) -> int: ...
