"""
Schema and migration management for the ledger's SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("wager_ledger.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        with self._connect() as conn:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Bet records; handles are opaque gateway references, never plaintext
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bets (
                bet_id INTEGER PRIMARY KEY AUTOINCREMENT,
                player TEXT NOT NULL,
                wager_handle TEXT NOT NULL,
                guess_handle TEXT NOT NULL,
                outcome_handle TEXT NOT NULL,
                payout_handle TEXT NOT NULL,
                created_at INTEGER NOT NULL,
                state INTEGER NOT NULL
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("create_bet_viewers_table", self._migration_create_bet_viewers_table),
            ("create_bet_events_table", self._migration_create_bet_events_table),
            ("add_handle_type_columns", self._migration_add_handle_type_columns),
            ("add_indexes_v1", self._migration_add_indexes_v1),
        ]

    # --- Migrations ---

    def _migration_create_bet_viewers_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_viewers (
                bet_id INTEGER NOT NULL,
                identity TEXT NOT NULL,
                granted_by TEXT,
                granted_at INTEGER NOT NULL,
                seq INTEGER NOT NULL,
                PRIMARY KEY (bet_id, identity),
                FOREIGN KEY (bet_id) REFERENCES bets(bet_id)
            )
            """
        )

    def _migration_create_bet_events_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bet_events (
                event_id INTEGER PRIMARY KEY AUTOINCREMENT,
                bet_id INTEGER NOT NULL,
                event_type TEXT NOT NULL,
                player TEXT NOT NULL,
                emitted_at INTEGER NOT NULL,
                FOREIGN KEY (bet_id) REFERENCES bets(bet_id)
            )
            """
        )

    def _migration_add_handle_type_columns(self, cursor) -> None:
        self._add_column_if_not_exists(cursor, "bets", "wager_type", "TEXT NOT NULL DEFAULT 'euint64'")
        self._add_column_if_not_exists(cursor, "bets", "guess_type", "TEXT NOT NULL DEFAULT 'euint8'")
        self._add_column_if_not_exists(cursor, "bets", "outcome_type", "TEXT NOT NULL DEFAULT 'euint8'")
        self._add_column_if_not_exists(cursor, "bets", "payout_type", "TEXT NOT NULL DEFAULT 'euint64'")

    def _migration_add_indexes_v1(self, cursor) -> None:
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_player ON bets(player)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bet_events_bet ON bet_events(bet_id)")
