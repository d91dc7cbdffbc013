"""
Ledger exceptions.

All subclass ValueError so callers that only care about rejection can
catch the base type; services map each subclass to an error code.
"""


class BetNotFoundError(ValueError):
    """Raised when a bet id was never allocated."""

    def __init__(self, bet_id: int):
        self.bet_id = bet_id
        super().__init__(f"Bet {bet_id} does not exist")


class NotAuthorizedError(ValueError):
    """Raised when an identity is not a viewer of the bet it tries to access."""

    def __init__(self, identity: str, bet_id: int):
        self.identity = identity
        self.bet_id = bet_id
        super().__init__(f"{identity} is not authorized to view bet {bet_id}")


class InvalidProofError(ValueError):
    """Raised by the gateway when an input proof does not match its ciphertext."""


class GatewayError(ValueError):
    """Raised by the gateway for malformed handles or type mismatches."""
