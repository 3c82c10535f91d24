"""
PULSE SIGNAL — Error Taxonomy

UPSTREAM      - a price or history source is unusable for a pair
INPUT         - no price could be obtained for the request
VERIFICATION  - identity assertion or token rejected
DELIVERY      - outbound email could not be sent

Verification errors carry the static message shown to clients.
"""
from typing import Optional


class PulseSignalError(Exception):
    """Base class for all service errors."""

    message: str = "Internal server error."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


# ─── Upstream ───────────────────────────────────────────────────

class UnsupportedSymbolError(PulseSignalError):
    """Pair has no listing for the requested source."""

    def __init__(self, pair: str, source: str):
        self.pair = pair
        self.source = source
        super().__init__(f"No {source} listing for pair {pair}")


# ─── Input ──────────────────────────────────────────────────────

class NoPriceAvailableError(PulseSignalError):
    message = "Failed to fetch current market prices."


# ─── Verification ───────────────────────────────────────────────

class VerificationError(PulseSignalError):
    message = "Verification failed."


class MissingAuthDataError(VerificationError):
    message = "No Telegram data provided."


class MissingHashError(VerificationError):
    message = "No hash parameter found."


class HashMismatchError(VerificationError):
    message = "Data verification failed."


class StaleAuthDataError(VerificationError):
    message = "Authentication data is outdated."


class TokenInvalidError(VerificationError):
    message = "Invalid or expired token."


class TokenExpiredError(VerificationError):
    message = "Token has expired."


# ─── Delivery ───────────────────────────────────────────────────

class EmailDeliveryError(PulseSignalError):
    message = "Failed to send verification email."
