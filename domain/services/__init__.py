"""
Domain services containing pure business logic.
"""

from domain.services.outcome_derivation_service import OutcomeDerivationService

__all__ = ["OutcomeDerivationService"]
