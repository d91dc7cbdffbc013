"""
Handles confidential bet creation and immediate settlement.
"""

import logging
import time

from config import (
    BATCH_MAX_SIZE,
    CONTRACT_IDENTITY,
    GUESS_BOUND,
    HOUSE_IDENTITY,
    PAYOUT_MULTIPLIER,
)
from domain.errors import BetNotFoundError, GatewayError, InvalidProofError
from domain.models.bet import Bet, BetSummary, EncryptedFields
from domain.services.outcome_derivation_service import OutcomeDerivationService
from repositories.bet_repository import EVENT_BET_CREATED, EVENT_BET_SETTLED, BetRepository
from services import error_codes
from services.interfaces import IEncryptedValueGateway, ISettlementService
from services.result import Result

logger = logging.getLogger("wager_ledger.services.settlement")


class SettlementService(ISettlementService):
    """
    Settles encrypted even/odd bets in one atomic step.

    Outcome and payout are derived through the gateway before anything is
    written; the record, its initial viewers, its notifications and the
    gateway grants are then committed together or not at all.
    """

    def __init__(
        self,
        bet_repo: BetRepository,
        gateway: IEncryptedValueGateway,
        derivation: OutcomeDerivationService | None = None,
        house_identity: str | None = None,
        contract_identity: str | None = None,
        batch_max_size: int | None = None,
    ):
        self.bet_repo = bet_repo
        self.gateway = gateway
        self.derivation = (
            derivation
            if derivation is not None
            else OutcomeDerivationService(gateway, PAYOUT_MULTIPLIER, GUESS_BOUND)
        )
        self.house_identity = house_identity if house_identity is not None else HOUSE_IDENTITY
        self.contract_identity = (
            contract_identity if contract_identity is not None else CONTRACT_IDENTITY
        )
        self.batch_max_size = batch_max_size if batch_max_size is not None else BATCH_MAX_SIZE

    def settle(
        self,
        wager_input: bytes,
        wager_proof: bytes,
        guess_input: bytes,
        guess_proof: bytes,
        submitter: str,
    ) -> Result[int]:
        """
        Create and settle a single bet.

        Returns:
            Result.ok(bet_id) on success
            Result.fail(message, code) if a proof is rejected

        Error codes:
            - INVALID_PROOF: The gateway rejected the wager or guess proof
            - GATEWAY_ERROR: The gateway failed while deriving or granting
        """
        result = self._settle_entries(
            [(wager_input, wager_proof, guess_input, guess_proof)], submitter
        )
        if not result.success:
            return Result.fail(result.error, code=result.error_code)
        return Result.ok(result.value[0])

    def settle_batch(
        self,
        wager_inputs: list[bytes],
        guess_inputs: list[bytes],
        wager_proofs: list[bytes],
        guess_proofs: list[bytes],
        submitter: str,
    ) -> Result[list[int]]:
        """
        Create and settle several bets in one indivisible call.

        All four lists are parallel. Shape is validated before any gateway
        call; ids are assigned in list order with no interleaving.

        Error codes:
            - ARRAY_LENGTH_MISMATCH: Input lists differ in length
            - EMPTY_BATCH: No bets supplied
            - BATCH_SIZE_EXCEEDED: More than batch_max_size bets supplied
            - INVALID_PROOF: Any entry's proof was rejected (nothing persisted)
        """
        lengths = {len(wager_inputs), len(guess_inputs), len(wager_proofs), len(guess_proofs)}
        if len(lengths) != 1:
            logger.warning(f"Rejected batch from {submitter}: array length mismatch")
            return Result.fail("Array length mismatch", code=error_codes.ARRAY_LENGTH_MISMATCH)

        size = len(wager_inputs)
        if size == 0:
            return Result.fail("Batch must contain at least one bet", code=error_codes.EMPTY_BATCH)
        if size > self.batch_max_size:
            logger.warning(f"Rejected batch from {submitter}: {size} bets")
            return Result.fail(
                f"Batch size limited to {self.batch_max_size} bets",
                code=error_codes.BATCH_SIZE_EXCEEDED,
            )

        return self._settle_entries(
            list(zip(wager_inputs, wager_proofs, guess_inputs, guess_proofs)), submitter
        )

    def fetch(self, bet_id: int) -> Result[Bet]:
        """
        Look up a bet.

        Error codes:
            - BET_NOT_FOUND: The id was never allocated
        """
        try:
            return Result.ok(self.bet_repo.fetch(bet_id))
        except BetNotFoundError as e:
            return Result.fail(str(e), code=error_codes.BET_NOT_FOUND)

    def summary(self, bet_id: int) -> BetSummary:
        """Plaintext metadata; unknown ids report state NONE."""
        return self.bet_repo.get_summary(bet_id)

    def owner(self, bet_id: int) -> Result[str]:
        return self.fetch(bet_id).map(lambda bet: Result.ok(bet.player))

    def bet_count(self) -> int:
        return self.bet_repo.get_bet_count()

    def bets_by_player(self, player: str) -> list[int]:
        return self.bet_repo.get_bet_ids_by_player(player)

    def events(self, bet_id: int | None = None) -> list[dict]:
        return self.bet_repo.get_events(bet_id)

    # --- Internals ---

    def _settle_entries(
        self,
        entries: list[tuple[bytes, bytes, bytes, bytes]],
        submitter: str,
    ) -> Result[list[int]]:
        try:
            derived: list[EncryptedFields] = []
            for wager_input, wager_proof, guess_input, guess_proof in entries:
                wager, guess = self.derivation.decode_inputs(
                    wager_input, wager_proof, guess_input, guess_proof
                )
                derived.append(self.derivation.derive(wager, guess))

            bet_ids = self.bet_repo.insert_settled_bets_atomic(
                player=submitter,
                entries=derived,
                created_at=int(time.time()),
                initial_viewers=[submitter, self.house_identity],
                before_commit=lambda settled: self._grant_initial(settled, submitter),
            )
        except InvalidProofError as e:
            logger.warning(f"Rejected encrypted input from {submitter}: {e}")
            return Result.fail(str(e), code=error_codes.INVALID_PROOF)
        except GatewayError as e:
            logger.error(f"Gateway failure settling for {submitter}: {e}")
            return Result.fail(str(e), code=error_codes.GATEWAY_ERROR)

        for bet_id in bet_ids:
            logger.info(f"{EVENT_BET_CREATED} bet_id={bet_id} player={submitter}")
            logger.info(f"{EVENT_BET_SETTLED} bet_id={bet_id} player={submitter}")
        return Result.ok(bet_ids)

    def _grant_initial(
        self, settled: list[tuple[int, EncryptedFields]], submitter: str
    ) -> None:
        # The contract keeps access so later operations can still use the handles
        for _bet_id, fields in settled:
            for identity in (self.contract_identity, self.house_identity, submitter):
                for handle in fields.handles():
                    self.gateway.grant(handle, identity)
