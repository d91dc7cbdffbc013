"""
Standard error codes for service layer.

These error codes allow callers to programmatically handle specific
error conditions without parsing error message text.

Usage:
    from services.error_codes import BET_NOT_FOUND, NOT_AUTHORIZED
    from services.result import Result

    if bet is None:
        return Result.fail(f"Bet {bet_id} does not exist", code=BET_NOT_FOUND)
"""

# Lookup errors
BET_NOT_FOUND = "bet_not_found"

# Authorization errors
NOT_AUTHORIZED = "not_authorized"

# Batch input-shape errors
ARRAY_LENGTH_MISMATCH = "array_length_mismatch"
BATCH_SIZE_EXCEEDED = "batch_size_exceeded"
EMPTY_BATCH = "empty_batch"

# Encrypted input errors
INVALID_PROOF = "invalid_proof"
GATEWAY_ERROR = "gateway_error"
