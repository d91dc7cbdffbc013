"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.bet_repository import BetRepository
from repositories.interfaces import IBetRepository, IViewerRepository
from repositories.viewer_repository import ViewerRepository

__all__ = [
    "BaseRepository",
    "BetRepository",
    "ViewerRepository",
    "IBetRepository",
    "IViewerRepository",
]
