"""
PULSE SIGNAL — Telegram Login Verifier
Checks a query-string encoded login payload signed by the Telegram bot.

    check_string = "\\n".join(f"{k}={v}" for k in sorted(fields) if k != "hash")
    secret       = sha256(bot_token)
    valid        = hmac_sha256(secret, check_string).hex() == fields["hash"]

and the payload's auth_date must be no older than max_age_seconds.
"""
import hashlib
import hmac
from datetime import datetime
from typing import Dict, Optional
from urllib.parse import parse_qsl

from pulse_signal.config.settings import get_settings
from pulse_signal.errors import (
    MissingAuthDataError, MissingHashError, HashMismatchError, StaleAuthDataError,
)
from pulse_signal.utils.logger import get_logger
from pulse_signal.utils.helpers import utc_now

logger = get_logger("telegram_verifier")

HASH_FIELD = "hash"
AUTH_DATE_FIELD = "auth_date"


class TelegramLoginVerifier:
    """Verifies signed identity assertions and returns the verified fields."""

    def __init__(self, bot_token: str, max_age_seconds: int = 86400):
        self.bot_token = bot_token
        self.max_age_seconds = max_age_seconds

    @staticmethod
    def parse(raw: str) -> Dict[str, str]:
        """Decode a query string; for repeated keys the last value wins."""
        return dict(parse_qsl(raw.lstrip("?"), keep_blank_values=True))

    @staticmethod
    def build_check_string(fields: Dict[str, str]) -> str:
        return "\n".join(
            f"{key}={fields[key]}" for key in sorted(fields) if key != HASH_FIELD
        )

    def secret_key(self) -> bytes:
        return hashlib.sha256(self.bot_token.encode()).digest()

    def compute_hash(self, fields: Dict[str, str]) -> str:
        check_string = self.build_check_string(fields)
        return hmac.new(self.secret_key(), check_string.encode(), hashlib.sha256).hexdigest()

    def is_fresh(self, fields: Dict[str, str], now: datetime) -> bool:
        try:
            auth_date = int(fields[AUTH_DATE_FIELD])
        except (KeyError, ValueError):
            return False
        return int(now.timestamp()) - auth_date <= self.max_age_seconds

    def verify(self, raw: Optional[str], now: Optional[datetime] = None) -> Dict[str, str]:
        """Return the verified fields (without hash) or raise a VerificationError."""
        if not raw:
            raise MissingAuthDataError()

        fields = self.parse(raw)
        provided_hash = fields.pop(HASH_FIELD, None)
        if not provided_hash:
            raise MissingHashError()

        if not hmac.compare_digest(self.compute_hash(fields).encode(), provided_hash.encode()):
            logger.warning("telegram_hash_mismatch", user_id=fields.get("id"))
            raise HashMismatchError()

        if not self.is_fresh(fields, now or utc_now()):
            logger.warning("telegram_auth_outdated", user_id=fields.get("id"),
                           auth_date=fields.get(AUTH_DATE_FIELD))
            raise StaleAuthDataError()

        logger.info("telegram_user_verified", user_id=fields.get("id"),
                    username=fields.get("username"))
        return fields


# Singleton
_verifier: Optional[TelegramLoginVerifier] = None


def get_telegram_verifier() -> TelegramLoginVerifier:
    global _verifier
    if _verifier is None:
        settings = get_settings().auth
        if not settings.bot_token:
            logger.warning("telegram_no_token", msg="BOT_TOKEN not configured")
        _verifier = TelegramLoginVerifier(settings.bot_token, settings.auth_max_age_seconds)
    return _verifier
