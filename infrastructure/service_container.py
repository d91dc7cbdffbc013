"""
Service container for dependency injection and initialization.

This module centralizes repository, gateway and service creation.

Usage:
    container = ServiceContainer(config)
    container.initialize()

    # Access services
    settlement = container.settlement_service
    viewers = container.viewer_service
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import config as app_config

if TYPE_CHECKING:
    from services.interfaces import IEncryptedValueGateway
    from services.ledger_stats_service import LedgerStatsService
    from services.settlement_service import SettlementService
    from services.viewer_service import ViewerService

from database import Database

# Repositories
from repositories.bet_repository import BetRepository
from repositories.viewer_repository import ViewerRepository

logger = logging.getLogger("wager_ledger.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    bet: BetRepository | None = None
    viewer: ViewerRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = field(default_factory=lambda: app_config.DB_PATH)

    # Identities
    house_identity: str = field(default_factory=lambda: app_config.HOUSE_IDENTITY)
    contract_identity: str = field(default_factory=lambda: app_config.CONTRACT_IDENTITY)

    # Settlement
    batch_max_size: int = field(default_factory=lambda: app_config.BATCH_MAX_SIZE)
    payout_multiplier: int = field(default_factory=lambda: app_config.PAYOUT_MULTIPLIER)
    guess_bound: int = field(default_factory=lambda: app_config.GUESS_BOUND)

    # Development gateway
    gateway_proof_secret: str = field(default_factory=lambda: app_config.GATEWAY_PROOF_SECRET)
    gateway_seed: int | None = field(default_factory=lambda: app_config.GATEWAY_DETERMINISTIC_SEED)


class ServiceContainer:
    """
    Central container for all ledger services.

    Handles initialization order and dependency injection. A gateway can be
    injected; otherwise the plaintext development gateway is created.

    Example:
        container = ServiceContainer(config)
        container.initialize()
        result = container.settlement_service.settle(...)
    """

    def __init__(
        self,
        config: ServiceConfig | None = None,
        gateway: "IEncryptedValueGateway | None" = None,
    ):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
            gateway: Encrypted-value gateway (plaintext dev gateway if None)
        """
        self.config = config or ServiceConfig()
        self._gateway = gateway
        self._initialized = False
        self._repos = RepositoryContainer()

        self._database: Database | None = None
        self._services: dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_database()
        self._init_repositories()
        self._init_gateway()
        self._init_services()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Initialize database and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")

        self._database = Database(self.config.db_path)

    def _init_repositories(self) -> None:
        logger.debug("Initializing repositories")

        db_path = self.config.db_path
        self._repos.bet = BetRepository(db_path)
        self._repos.viewer = ViewerRepository(db_path)

    def _init_gateway(self) -> None:
        if self._gateway is not None:
            return

        from infrastructure.plaintext_gateway import PlaintextGateway

        logger.warning("No gateway injected; using plaintext development gateway")
        self._gateway = PlaintextGateway(
            proof_secret=self.config.gateway_proof_secret,
            seed=self.config.gateway_seed,
        )

    def _init_services(self) -> None:
        logger.debug("Initializing ledger services")

        from domain.services.outcome_derivation_service import OutcomeDerivationService
        from services.ledger_stats_service import LedgerStatsService
        from services.settlement_service import SettlementService
        from services.viewer_service import ViewerService

        derivation = OutcomeDerivationService(
            self._gateway,
            payout_multiplier=self.config.payout_multiplier,
            guess_bound=self.config.guess_bound,
        )
        self._services["settlement"] = SettlementService(
            bet_repo=self._repos.bet,
            gateway=self._gateway,
            derivation=derivation,
            house_identity=self.config.house_identity,
            contract_identity=self.config.contract_identity,
            batch_max_size=self.config.batch_max_size,
        )
        self._services["viewer"] = ViewerService(
            bet_repo=self._repos.bet,
            viewer_repo=self._repos.viewer,
            gateway=self._gateway,
        )
        self._services["stats"] = LedgerStatsService(bet_repo=self._repos.bet)

    # =========================================================================
    # Repository accessors
    # =========================================================================

    @property
    def bet_repo(self) -> BetRepository:
        self._ensure_initialized()
        return self._repos.bet

    @property
    def viewer_repo(self) -> ViewerRepository:
        self._ensure_initialized()
        return self._repos.viewer

    @property
    def gateway(self) -> "IEncryptedValueGateway":
        self._ensure_initialized()
        return self._gateway

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def settlement_service(self) -> "SettlementService":
        self._ensure_initialized()
        return self._services["settlement"]

    @property
    def viewer_service(self) -> "ViewerService":
        self._ensure_initialized()
        return self._services["viewer"]

    @property
    def stats_service(self) -> "LedgerStatsService":
        self._ensure_initialized()
        return self._services["stats"]

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("ServiceContainer not initialized. Call initialize() first.")
