"""
Centralized configuration for the confidential wager ledger.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


DB_PATH = os.getenv("DB_PATH", "confidential_wager.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Identities
HOUSE_IDENTITY = os.getenv("HOUSE_IDENTITY", "house")
CONTRACT_IDENTITY = os.getenv("CONTRACT_IDENTITY", "wager-ledger")

# Settlement
BATCH_MAX_SIZE = _parse_int("BATCH_MAX_SIZE", 5)  # Caps per-call work
PAYOUT_MULTIPLIER = _parse_int("PAYOUT_MULTIPLIER", 2)
GUESS_BOUND = _parse_int("GUESS_BOUND", 2)  # Outcome drawn from [0, GUESS_BOUND)

# Development gateway (plaintext-backed, never for production ciphertexts)
GATEWAY_PROOF_SECRET = os.getenv("GATEWAY_PROOF_SECRET", "dev-gateway-secret")
GATEWAY_DETERMINISTIC_SEED: int | None = None
_seed_raw = os.getenv("GATEWAY_DETERMINISTIC_SEED")
if _seed_raw:
    try:
        GATEWAY_DETERMINISTIC_SEED = int(_seed_raw.strip())
    except ValueError:
        GATEWAY_DETERMINISTIC_SEED = None
