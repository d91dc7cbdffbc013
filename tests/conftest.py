"""
Pytest fixtures for tests.

Uses a session-scoped schema template so migrations run once; each test
copies the resulting database file instead of re-initializing it.

Identities and the seeded development gateway are centralized here so
tests share the same house/contract names.
"""

import shutil

import pytest

from database import Database
from domain.models.bet import EUINT8, EUINT64, EncryptedFields, EncryptedHandle, EncryptedInput
from domain.services.outcome_derivation_service import OutcomeDerivationService
from infrastructure.plaintext_gateway import PlaintextGateway
from repositories.bet_repository import BetRepository
from repositories.viewer_repository import ViewerRepository
from services.ledger_stats_service import LedgerStatsService
from services.settlement_service import SettlementService
from services.viewer_service import ViewerService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

HOUSE = "0xhouse"
"""House identity used by every service fixture."""

CONTRACT = "0xledger"
"""Contract execution identity used by every service fixture."""

ALICE = "0xalice"
BOB = "0xbob"
CAROL = "0xcarol"

TEST_PROOF_SECRET = "test-proof-secret"


def encrypt_bet(gateway: PlaintextGateway, wager: int, guess: int, player: str):
    """Encrypt a wager/guess pair the way a client would before submitting."""
    wager_input = gateway.encrypt(wager, EUINT64, player)
    guess_input = gateway.encrypt(guess, EUINT8, player)
    return wager_input, guess_input


def settle_bet(settlement_service, gateway, wager=100, guess=0, player=ALICE) -> int:
    """Settle one bet and return its id, failing the test on error."""
    wager_input, guess_input = encrypt_bet(gateway, wager, guess, player)
    result = settlement_service.settle(
        wager_input.handle, wager_input.proof, guess_input.handle, guess_input.proof, player
    )
    assert result.success, result.error
    return result.value


def make_fields(n: int) -> EncryptedFields:
    """Fake handles for repository tests; repositories never interpret them."""
    return EncryptedFields(
        wager=EncryptedHandle(f"{n:02x}" + "a" * 30, EUINT64),
        guess=EncryptedHandle(f"{n:02x}" + "b" * 30, EUINT8),
        outcome=EncryptedHandle(f"{n:02x}" + "c" * 30, EUINT8),
        payout=EncryptedHandle(f"{n:02x}" + "d" * 30, EUINT64),
    )


def batch_args(inputs: list[tuple[EncryptedInput, EncryptedInput]]):
    """Split (wager, guess) input pairs into the four parallel batch lists."""
    return (
        [w.handle for w, _ in inputs],
        [g.handle for _, g in inputs],
        [w.proof for w, _ in inputs],
        [g.proof for _, g in inputs],
    )


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    All migrations run ONCE here. Tests copy from this template.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


# =============================================================================
# GATEWAY FIXTURES
# =============================================================================


@pytest.fixture
def gateway():
    """Seeded plaintext gateway so outcome draws are reproducible."""
    return PlaintextGateway(proof_secret=TEST_PROOF_SECRET, seed=1234)


@pytest.fixture
def unseeded_gateway():
    """Gateway drawing from the OS randomness source."""
    return PlaintextGateway(proof_secret=TEST_PROOF_SECRET)


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def bet_repository(repo_db_path):
    """Create a bet repository with temp database."""
    return BetRepository(repo_db_path)


@pytest.fixture
def viewer_repository(repo_db_path):
    """Create a viewer repository with temp database."""
    return ViewerRepository(repo_db_path)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def settlement_service(bet_repository, gateway):
    """Create a settlement service with the shared identities and batch limit of 5."""
    return SettlementService(
        bet_repo=bet_repository,
        gateway=gateway,
        derivation=OutcomeDerivationService(gateway, payout_multiplier=2, guess_bound=2),
        house_identity=HOUSE,
        contract_identity=CONTRACT,
        batch_max_size=5,
    )


@pytest.fixture
def viewer_service(bet_repository, viewer_repository, gateway):
    """Create a viewer service sharing the settlement gateway."""
    return ViewerService(
        bet_repo=bet_repository,
        viewer_repo=viewer_repository,
        gateway=gateway,
    )


@pytest.fixture
def stats_service(bet_repository):
    """Create a ledger statistics service."""
    return LedgerStatsService(bet_repository)
