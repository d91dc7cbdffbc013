"""
Application services layer.

Services orchestrate ledger operations using repositories, domain services
and the encrypted-value gateway.
"""

from services.ledger_stats_service import LedgerStatsService
from services.settlement_service import SettlementService
from services.viewer_service import ViewerService

# Result type for consistent error handling
from services.result import Result

# Service interfaces (ABCs)
from services.interfaces import (
    IEncryptedValueGateway,
    ILedgerStatsService,
    ISettlementService,
    IViewerService,
)

__all__ = [
    # Concrete services
    "SettlementService",
    "ViewerService",
    "LedgerStatsService",
    # Result type
    "Result",
    # Interfaces
    "IEncryptedValueGateway",
    "ISettlementService",
    "IViewerService",
    "ILedgerStatsService",
]
