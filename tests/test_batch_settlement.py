"""
Tests for SettlementService.settle_batch().
"""

import pytest

from domain.errors import GatewayError
from domain.models.bet import BetState
from services import error_codes
from services.settlement_service import SettlementService
from tests.conftest import ALICE, BOB, HOUSE, batch_args, encrypt_bet, settle_bet


def _inputs(gateway, count, player=ALICE):
    return [encrypt_bet(gateway, 10 + i, i % 2, player) for i in range(count)]


class TestBatchValidation:
    """Shape checks run before any encrypted input is touched."""

    def test_empty_batch_rejected(self, settlement_service):
        result = settlement_service.settle_batch([], [], [], [], ALICE)

        assert result.success is False
        assert result.error_code == error_codes.EMPTY_BATCH
        assert settlement_service.bet_count() == 0

    def test_oversized_batch_rejected(self, settlement_service, gateway):
        result = settlement_service.settle_batch(*batch_args(_inputs(gateway, 6)), ALICE)

        assert result.success is False
        assert result.error_code == error_codes.BATCH_SIZE_EXCEEDED
        assert result.error == "Batch size limited to 5 bets"
        assert settlement_service.bet_count() == 0

    @pytest.mark.parametrize("short_index", [0, 1, 2, 3])
    def test_length_mismatch_rejected(self, settlement_service, gateway, short_index):
        lists = [list(arg) for arg in batch_args(_inputs(gateway, 3))]
        lists[short_index].pop()

        result = settlement_service.settle_batch(*lists, ALICE)

        assert result.success is False
        assert result.error_code == error_codes.ARRAY_LENGTH_MISMATCH
        assert result.error == "Array length mismatch"
        assert settlement_service.bet_count() == 0

    def test_mismatch_reported_before_size(self, settlement_service, gateway):
        lists = [list(arg) for arg in batch_args(_inputs(gateway, 7))]
        lists[2].pop()

        result = settlement_service.settle_batch(*lists, ALICE)

        assert result.error_code == error_codes.ARRAY_LENGTH_MISMATCH

    def test_batch_limit_is_configurable(self, bet_repository, gateway):
        service = SettlementService(
            bet_repo=bet_repository, gateway=gateway, house_identity=HOUSE, batch_max_size=2
        )

        result = service.settle_batch(*batch_args(_inputs(gateway, 3)), ALICE)

        assert result.error_code == error_codes.BATCH_SIZE_EXCEEDED


class TestBatchSettlement:
    def test_full_batch_assigns_ids_in_order(self, settlement_service, gateway):
        inputs = _inputs(gateway, 5)

        result = settlement_service.settle_batch(*batch_args(inputs), ALICE)

        assert result.success is True
        assert result.value == [1, 2, 3, 4, 5]
        assert settlement_service.bet_count() == 5
        for index, bet_id in enumerate(result.value):
            bet = settlement_service.fetch(bet_id).unwrap()
            assert bet.player == ALICE
            assert bet.state == BetState.SETTLED
            assert gateway.decrypt(bet.wager, HOUSE) == 10 + index
            assert gateway.decrypt(bet.guess, HOUSE) == index % 2

    def test_batch_continues_after_single_bets(self, settlement_service, gateway):
        settle_bet(settlement_service, gateway, player=BOB)

        result = settlement_service.settle_batch(*batch_args(_inputs(gateway, 2)), ALICE)

        assert result.value == [2, 3]

    def test_each_batch_bet_has_own_outcome(self, settlement_service, gateway):
        result = settlement_service.settle_batch(*batch_args(_inputs(gateway, 5)), ALICE)
        bets = [settlement_service.fetch(i).unwrap() for i in result.value]

        outcome_handles = {bet.outcome.handle_id for bet in bets}
        assert len(outcome_handles) == 5
        for bet in bets:
            wager = gateway.decrypt(bet.wager, HOUSE)
            won = gateway.decrypt(bet.outcome, HOUSE) == gateway.decrypt(bet.guess, HOUSE)
            assert gateway.decrypt(bet.payout, HOUSE) == (2 * wager if won else 0)

    def test_bad_proof_in_middle_persists_nothing(self, settlement_service, gateway):
        inputs = _inputs(gateway, 3)
        wagers, guesses, wager_proofs, guess_proofs = batch_args(inputs)
        wager_proofs[1] = wager_proofs[0]

        result = settlement_service.settle_batch(
            wagers, guesses, wager_proofs, guess_proofs, ALICE
        )

        assert result.success is False
        assert result.error_code == error_codes.INVALID_PROOF
        assert settlement_service.bet_count() == 0
        assert settlement_service.events() == []

    def test_batch_events_in_id_order(self, settlement_service, gateway):
        settlement_service.settle_batch(*batch_args(_inputs(gateway, 2)), ALICE)

        events = settlement_service.events()

        assert [(e["bet_id"], e["event_type"]) for e in events] == [
            (1, "BetCreated"),
            (1, "BetSettled"),
            (2, "BetCreated"),
            (2, "BetSettled"),
        ]

    def test_grant_failure_persists_nothing(self, settlement_service, gateway, monkeypatch):
        """Grants start only after every row is written; a failure rolls all rows back."""
        inputs = _inputs(gateway, 2)
        real_grant = gateway.grant
        calls = []

        def flaky_grant(handle, identity):
            calls.append((handle, identity))
            if len(calls) == 13:
                raise GatewayError("grant unavailable")
            real_grant(handle, identity)

        monkeypatch.setattr(gateway, "grant", flaky_grant)

        result = settlement_service.settle_batch(*batch_args(inputs), ALICE)

        assert result.success is False
        assert result.error_code == error_codes.GATEWAY_ERROR
        assert settlement_service.bet_count() == 0
        assert settlement_service.events() == []
        assert settlement_service.summary(1).state == BetState.NONE
