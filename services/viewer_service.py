"""
Service for the per-bet viewer allow-list and encrypted field access.
"""

import logging
import time

from domain.errors import BetNotFoundError, GatewayError, NotAuthorizedError
from domain.models.bet import EncryptedFields
from repositories.bet_repository import BetRepository
from repositories.viewer_repository import ViewerRepository
from services import error_codes
from services.interfaces import IEncryptedValueGateway, IViewerService
from services.result import Result

logger = logging.getLogger("wager_ledger.services.viewers")


class ViewerService(IViewerService):
    """
    Gates encrypted field reads and auditor delegation.

    Every identity added here is granted on the gateway in the same
    transaction, so the allow-list and the gateway ACL never diverge.
    """

    def __init__(
        self,
        bet_repo: BetRepository,
        viewer_repo: ViewerRepository,
        gateway: IEncryptedValueGateway,
    ):
        self.bet_repo = bet_repo
        self.viewer_repo = viewer_repo
        self.gateway = gateway

    def is_viewer(self, bet_id: int, identity: str) -> bool:
        return self.viewer_repo.is_viewer(bet_id, identity)

    def grant_auditor(self, bet_id: int, auditor: str, requester: str) -> Result[None]:
        """
        Delegate viewer access on a bet to a new identity.

        Re-granting an existing viewer succeeds without changes.

        Error codes:
            - BET_NOT_FOUND: The bet does not exist
            - NOT_AUTHORIZED: requester is not a viewer of the bet
            - GATEWAY_ERROR: The gateway grant failed (nothing recorded)
        """
        try:
            bet = self.bet_repo.fetch(bet_id)
            added = self.viewer_repo.add_viewer_atomic(
                bet_id=bet_id,
                identity=auditor,
                granted_by=requester,
                granted_at=int(time.time()),
                before_commit=lambda: self._grant_fields(bet.fields, auditor),
            )
        except BetNotFoundError as e:
            return Result.fail(str(e), code=error_codes.BET_NOT_FOUND)
        except NotAuthorizedError as e:
            logger.warning(f"Denied delegation on bet {bet_id}: {e}")
            return Result.fail(str(e), code=error_codes.NOT_AUTHORIZED)
        except GatewayError as e:
            logger.error(f"Gateway grant failed for {auditor} on bet {bet_id}: {e}")
            return Result.fail(str(e), code=error_codes.GATEWAY_ERROR)

        if added:
            logger.info(f"ViewerGranted bet_id={bet_id} viewer={auditor} by={requester}")
        return Result.ok()

    def read_encrypted_fields(self, bet_id: int, requester: str) -> Result[EncryptedFields]:
        """
        Return the four opaque handles of a bet to one of its viewers.

        The caller decrypts separately through the gateway using its own grant.

        Error codes:
            - BET_NOT_FOUND: The bet does not exist
            - NOT_AUTHORIZED: requester is not a viewer of the bet
        """
        try:
            bet = self.bet_repo.fetch(bet_id)
        except BetNotFoundError as e:
            return Result.fail(str(e), code=error_codes.BET_NOT_FOUND)

        if not self.viewer_repo.is_viewer(bet_id, requester):
            logger.warning(f"Denied encrypted read of bet {bet_id} to {requester}")
            return Result.fail(
                str(NotAuthorizedError(requester, bet_id)), code=error_codes.NOT_AUTHORIZED
            )
        return Result.ok(bet.fields)

    def viewers(self, bet_id: int, requester: str) -> Result[list[str]]:
        """
        List a bet's viewers in grant order (viewers only).

        Error codes:
            - BET_NOT_FOUND: The bet does not exist
            - NOT_AUTHORIZED: requester is not a viewer of the bet
        """
        summary = self.bet_repo.get_summary(bet_id)
        if summary.player is None:
            return Result.fail(str(BetNotFoundError(bet_id)), code=error_codes.BET_NOT_FOUND)
        if not self.viewer_repo.is_viewer(bet_id, requester):
            return Result.fail(
                str(NotAuthorizedError(requester, bet_id)), code=error_codes.NOT_AUTHORIZED
            )
        return Result.ok(self.viewer_repo.get_viewers(bet_id))

    def _grant_fields(self, fields: EncryptedFields, identity: str) -> None:
        for handle in fields.handles():
            self.gateway.grant(handle, identity)
