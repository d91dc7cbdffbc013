"""
Repository for the per-bet viewer allow-list.
"""

from collections.abc import Callable

from domain.errors import NotAuthorizedError
from repositories.base_repository import BaseRepository
from repositories.interfaces import IViewerRepository


class ViewerRepository(BaseRepository, IViewerRepository):
    """
    Monotonic (bet_id, identity) membership set.

    Rows are only ever inserted; there is no revocation.
    """

    def is_viewer(self, bet_id: int, identity: str) -> bool:
        if not self.is_valid_row_id(bet_id):
            return False
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT 1 FROM bet_viewers WHERE bet_id = ? AND identity = ?",
                (bet_id, identity),
            )
            return cursor.fetchone() is not None

    def add_viewer_atomic(
        self,
        *,
        bet_id: int,
        identity: str,
        granted_by: str,
        granted_at: int,
        before_commit: Callable[[], None] | None = None,
    ) -> bool:
        """
        Atomically add an identity to a bet's viewer set.

        The granter's membership is re-checked inside the transaction.
        before_commit runs after the insert so its failure (e.g. a gateway
        grant error) rolls the insert back.

        Returns:
            True if the identity was added, False if it was already a viewer

        Raises:
            NotAuthorizedError: If granted_by is not a viewer of the bet
        """
        if not self.is_valid_row_id(bet_id):
            raise NotAuthorizedError(granted_by, bet_id)
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT 1 FROM bet_viewers WHERE bet_id = ? AND identity = ?",
                (bet_id, granted_by),
            )
            if cursor.fetchone() is None:
                raise NotAuthorizedError(granted_by, bet_id)

            cursor.execute(
                "SELECT 1 FROM bet_viewers WHERE bet_id = ? AND identity = ?",
                (bet_id, identity),
            )
            if cursor.fetchone() is not None:
                return False

            cursor.execute(
                "SELECT COALESCE(MAX(seq), -1) + 1 FROM bet_viewers WHERE bet_id = ?",
                (bet_id,),
            )
            seq = cursor.fetchone()[0]
            cursor.execute(
                """
                INSERT INTO bet_viewers (bet_id, identity, granted_by, granted_at, seq)
                VALUES (?, ?, ?, ?, ?)
                """,
                (bet_id, identity, granted_by, granted_at, seq),
            )
            if before_commit is not None:
                before_commit()
            return True

    def get_viewers(self, bet_id: int) -> list[str]:
        """Viewer identities in grant order."""
        if not self.is_valid_row_id(bet_id):
            return []
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT identity FROM bet_viewers WHERE bet_id = ? ORDER BY seq ASC",
                (bet_id,),
            )
            return [row["identity"] for row in cursor.fetchall()]

    def count_viewers(self, bet_id: int) -> int:
        if not self.is_valid_row_id(bet_id):
            return 0
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM bet_viewers WHERE bet_id = ?", (bet_id,))
            return cursor.fetchone()[0]
