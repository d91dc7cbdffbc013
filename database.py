"""
Database bootstrap for the confidential wager ledger.
"""

import logging

from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("wager_ledger.database")


class Database:
    """
    Thin handle on the SQLite file: ensures the schema exists on construction.

    Repositories open their own connections; this class only owns setup.
    """

    def __init__(self, db_path: str = "confidential_wager.db"):
        self.db_path = db_path
        self.use_uri = db_path.startswith("file:")
        logger.debug(f"Opening ledger database {db_path}")
        SchemaManager(db_path, use_uri=self.use_uri).initialize()
