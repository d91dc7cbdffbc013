"""
Plaintext-backed encrypted-value gateway for development and tests.

Values live in process memory behind random opaque handles. Input proofs
are HMACs over the handle and its type, so a tampered or mismatched
proof is rejected exactly like a real coprocessor would reject it.
Nothing here is confidential; it exists so the ledger can run end-to-end
without a homomorphic-encryption backend.
"""

import hashlib
import hmac
import logging
import random
import secrets

from domain.errors import GatewayError, InvalidProofError
from domain.models.bet import EBOOL, ENCRYPTED_TYPE_BITS, EncryptedHandle, EncryptedInput
from services.interfaces import IEncryptedValueGateway

logger = logging.getLogger("wager_ledger.gateway")


class PlaintextGateway(IEncryptedValueGateway):
    """
    In-process implementation of IEncryptedValueGateway.

    Also exposes the client-side encrypt() helper and a permission-checked
    decrypt(), which the ledger itself never calls.
    """

    def __init__(self, proof_secret: str, seed: int | None = None):
        self._secret = proof_secret.encode("utf-8")
        self._rng = random.Random(seed) if seed is not None else None
        self._values: dict[str, int] = {}
        self._types: dict[str, str] = {}
        self._acl: dict[str, set[str]] = {}

    # --- Client-side helpers ---

    def encrypt(self, value: int, type_tag: str, submitter: str | None = None) -> EncryptedInput:
        """
        Encrypt a plaintext the way a client SDK would.

        The resulting external handle is allowed for the submitter so they
        can decrypt their own input later.
        """
        handle = self._store(value, type_tag)
        if submitter is not None:
            self.grant(handle, submitter)
        raw = bytes.fromhex(handle.handle_id)
        return EncryptedInput(handle=raw, proof=self._sign(raw, type_tag))

    def decrypt(self, handle: EncryptedHandle, identity: str) -> int:
        """Reveal a plaintext to an identity holding a grant on the handle."""
        self._require_known(handle)
        if not self.is_allowed(handle, identity):
            raise GatewayError(f"{identity} may not decrypt handle {handle.handle_id[:12]}")
        return self._values[handle.handle_id]

    # --- IEncryptedValueGateway ---

    def decode(self, external_handle: bytes, proof: bytes, type_tag: str) -> EncryptedHandle:
        if type_tag not in ENCRYPTED_TYPE_BITS:
            raise GatewayError(f"Unknown encrypted type: {type_tag}")
        expected = self._sign(external_handle, type_tag)
        if not hmac.compare_digest(expected, bytes(proof)):
            logger.warning("Rejected input proof for %s handle", type_tag)
            raise InvalidProofError("Invalid input proof")
        handle_id = external_handle.hex()
        if self._types.get(handle_id) != type_tag:
            raise InvalidProofError("Input proof does not match ciphertext")
        return EncryptedHandle(handle_id, type_tag)

    def add(self, a: EncryptedHandle, b: EncryptedHandle | int) -> EncryptedHandle:
        left, right = self._operands(a, b)
        return self._store(left + right, a.type_tag)

    def multiply(self, a: EncryptedHandle, b: EncryptedHandle | int) -> EncryptedHandle:
        left, right = self._operands(a, b)
        return self._store(left * right, a.type_tag)

    def equal(self, a: EncryptedHandle, b: EncryptedHandle) -> EncryptedHandle:
        left, right = self._operands(a, b)
        return self._store(int(left == right), EBOOL)

    def cast(self, handle: EncryptedHandle, type_tag: str) -> EncryptedHandle:
        self._require_known(handle)
        return self._store(self._values[handle.handle_id], type_tag)

    def draw_uniform(self, type_tag: str, bound: int) -> EncryptedHandle:
        bits = ENCRYPTED_TYPE_BITS.get(type_tag)
        if bits is None:
            raise GatewayError(f"Unknown encrypted type: {type_tag}")
        if bound <= 0 or bound > 2**bits:
            raise GatewayError(f"Bound {bound} out of range for {type_tag}")
        if self._rng is not None:
            value = self._rng.randrange(bound)
        else:
            value = secrets.randbelow(bound)
        return self._store(value, type_tag)

    def grant(self, handle: EncryptedHandle, identity: str) -> None:
        self._require_known(handle)
        self._acl.setdefault(handle.handle_id, set()).add(identity)

    def is_allowed(self, handle: EncryptedHandle, identity: str) -> bool:
        return identity in self._acl.get(handle.handle_id, set())

    # --- Internals ---

    def _sign(self, raw: bytes, type_tag: str) -> bytes:
        return hmac.new(self._secret, raw + type_tag.encode("ascii"), hashlib.sha256).digest()

    def _new_handle_id(self) -> str:
        if self._rng is not None:
            return f"{self._rng.getrandbits(128):032x}"
        return secrets.token_hex(16)

    def _store(self, value: int, type_tag: str) -> EncryptedHandle:
        bits = ENCRYPTED_TYPE_BITS.get(type_tag)
        if bits is None:
            raise GatewayError(f"Unknown encrypted type: {type_tag}")
        handle_id = self._new_handle_id()
        # Integer types wrap like their fixed-width counterparts
        self._values[handle_id] = value % (2**bits)
        self._types[handle_id] = type_tag
        return EncryptedHandle(handle_id, type_tag)

    def _require_known(self, handle: EncryptedHandle) -> None:
        if self._types.get(handle.handle_id) != handle.type_tag:
            raise GatewayError(f"Unknown handle {handle!r}")

    def _operands(self, a: EncryptedHandle, b: EncryptedHandle | int) -> tuple[int, int]:
        self._require_known(a)
        if isinstance(b, EncryptedHandle):
            self._require_known(b)
            if b.type_tag != a.type_tag:
                raise GatewayError(f"Type mismatch: {a.type_tag} vs {b.type_tag}")
            return self._values[a.handle_id], self._values[b.handle_id]
        return self._values[a.handle_id], int(b)
