"""Tests for ServiceContainer."""

import pytest

from infrastructure.plaintext_gateway import PlaintextGateway
from infrastructure.service_container import ServiceConfig, ServiceContainer
from tests.conftest import ALICE, TEST_PROOF_SECRET, encrypt_bet


@pytest.fixture
def config(temp_db_path):
    """Create a test configuration."""
    return ServiceConfig(
        db_path=temp_db_path,
        house_identity="house",
        contract_identity="ledger",
        batch_max_size=5,
        gateway_proof_secret=TEST_PROOF_SECRET,
        gateway_seed=99,
    )


class TestServiceContainerInitialization:
    """Tests for ServiceContainer initialization."""

    def test_initialize_creates_repositories_and_services(self, config):
        container = ServiceContainer(config)
        container.initialize()

        assert container.bet_repo is not None
        assert container.viewer_repo is not None
        assert container.settlement_service is not None
        assert container.viewer_service is not None
        assert container.stats_service is not None
        assert container.is_initialized is True

    def test_initialize_is_idempotent(self, config):
        """Calling initialize multiple times is safe."""
        container = ServiceContainer(config)

        container.initialize()
        first = container.settlement_service
        container.initialize()

        assert container.settlement_service is first

    def test_access_before_initialize_raises(self, config):
        container = ServiceContainer(config)

        with pytest.raises(RuntimeError, match="not initialized"):
            _ = container.settlement_service

    def test_default_gateway_is_plaintext(self, config):
        container = ServiceContainer(config)
        container.initialize()

        assert isinstance(container.gateway, PlaintextGateway)

    def test_injected_gateway_is_used(self, config):
        gateway = PlaintextGateway(TEST_PROOF_SECRET, seed=1)
        container = ServiceContainer(config, gateway=gateway)
        container.initialize()

        assert container.gateway is gateway
        assert container.settlement_service.gateway is gateway
        assert container.viewer_service.gateway is gateway


class TestServiceConfig:
    def test_config_reaches_services(self, config):
        container = ServiceContainer(config)
        container.initialize()

        settlement = container.settlement_service
        assert settlement.house_identity == "house"
        assert settlement.contract_identity == "ledger"
        assert settlement.batch_max_size == 5

    def test_defaults_from_environment_config(self):
        import config as app_config

        defaults = ServiceConfig()

        assert defaults.batch_max_size == app_config.BATCH_MAX_SIZE
        assert defaults.house_identity == app_config.HOUSE_IDENTITY


class TestServiceContainerLifecycle:
    def test_settle_and_read_through_container(self, config):
        container = ServiceContainer(config)
        container.initialize()
        wager, guess = encrypt_bet(container.gateway, 40, 1, ALICE)

        bet_id = container.settlement_service.settle(
            wager.handle, wager.proof, guess.handle, guess.proof, ALICE
        ).unwrap()

        fields = container.viewer_service.read_encrypted_fields(bet_id, ALICE).unwrap()
        assert container.gateway.decrypt(fields.wager, ALICE) == 40
        assert container.viewer_service.is_viewer(bet_id, "house")
        assert container.stats_service.stats().total_bets == 1
