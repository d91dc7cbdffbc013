"""
Outcome and payout derivation domain service.

Turns an encrypted wager and guess into the four encrypted fields of a
settled bet. Works purely on gateway handles and never branches on a
decrypted condition.
"""

from typing import TYPE_CHECKING

from domain.models.bet import EUINT8, EUINT64, EncryptedFields, EncryptedHandle

if TYPE_CHECKING:
    from services.interfaces import IEncryptedValueGateway


class OutcomeDerivationService:
    """
    Pure domain service for even/odd settlement.

    payout = (guess == outcome) * (wager * multiplier), computed homomorphically.
    """

    def __init__(
        self,
        gateway: "IEncryptedValueGateway",
        payout_multiplier: int = 2,
        guess_bound: int = 2,
    ):
        self.gateway = gateway
        self.payout_multiplier = payout_multiplier
        self.guess_bound = guess_bound

    def decode_inputs(
        self,
        wager_input: bytes,
        wager_proof: bytes,
        guess_input: bytes,
        guess_proof: bytes,
    ) -> tuple[EncryptedHandle, EncryptedHandle]:
        """
        Decode external ciphertexts into internal handles.

        Raises:
            InvalidProofError: If either proof does not match its input
        """
        wager = self.gateway.decode(wager_input, wager_proof, EUINT64)
        guess = self.gateway.decode(guess_input, guess_proof, EUINT8)
        return wager, guess

    def derive(self, wager: EncryptedHandle, guess: EncryptedHandle) -> EncryptedFields:
        """
        Draw the outcome and compute the payout.

        Args:
            wager: euint64 stake
            guess: euint8 guess, 0 for even and 1 for odd

        Returns:
            EncryptedFields with wager, guess, outcome and payout handles
        """
        outcome = self.gateway.draw_uniform(EUINT8, self.guess_bound)
        matched = self.gateway.equal(guess, outcome)
        boosted = self.gateway.multiply(wager, self.payout_multiplier)
        payout = self.gateway.multiply(boosted, self.gateway.cast(matched, EUINT64))
        return EncryptedFields(wager=wager, guess=guess, outcome=outcome, payout=payout)
