"""
PULSE SIGNAL — Email Verification Tokens
Issues single-use 128-bit tokens, mails the link, redeems once within the TTL.
"""
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional
from urllib.parse import urlencode

from pulse_signal.auth.token_store import TokenStore, InMemoryTokenStore, VerificationToken
from pulse_signal.notify.email_sender import EmailSender, get_email_sender
from pulse_signal.config.settings import get_settings
from pulse_signal.errors import TokenInvalidError, TokenExpiredError
from pulse_signal.utils.logger import get_logger
from pulse_signal.utils.helpers import utc_now

logger = get_logger("email_verification")


class TokenVerificationService:
    """Issue and redeem email verification tokens."""

    def __init__(
        self,
        store: TokenStore,
        sender: EmailSender,
        frontend_url: str,
        ttl_seconds: int = 900,
        token_bytes: int = 16,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.sender = sender
        self.frontend_url = frontend_url.rstrip("/")
        self.ttl = timedelta(seconds=ttl_seconds)
        self.token_bytes = token_bytes
        self.clock = clock

    def new_token(self) -> str:
        return secrets.token_urlsafe(self.token_bytes)

    def verification_link(self, token: str) -> str:
        return f"{self.frontend_url}/verify?{urlencode({'token': token})}"

    async def request_verification(self, email: str) -> str:
        """Store a fresh token for `email` and mail the link. Returns the token."""
        token = self.new_token()
        record = VerificationToken(email=email, expires_at=self.clock() + self.ttl)
        await self.store.put(token, record)

        try:
            await self.sender.send_verification(email, self.verification_link(token))
        except Exception:
            await self.store.delete(token)
            raise

        logger.info("verification_token_issued", email=email, expires_at=record.expires_at.isoformat())
        return token

    async def redeem(self, token: Optional[str]) -> VerificationToken:
        """Consume a token exactly once."""
        if not token:
            raise TokenInvalidError()

        record = await self.store.take(token)
        if record is None:
            logger.warning("verification_token_unknown")
            raise TokenInvalidError()

        if record.is_expired(self.clock()):
            logger.warning("verification_token_expired", email=record.email)
            raise TokenExpiredError()

        logger.info("verification_token_redeemed", email=record.email)
        return record


# Singleton
_service: Optional[TokenVerificationService] = None


def get_verification_service() -> TokenVerificationService:
    global _service
    if _service is None:
        settings = get_settings()
        _service = TokenVerificationService(
            store=InMemoryTokenStore(
                maxsize=settings.auth.token_store_maxsize,
                sweep_after_seconds=settings.auth.verification_token_ttl_seconds * 4,
            ),
            sender=get_email_sender(),
            frontend_url=settings.email.frontend_url,
            ttl_seconds=settings.auth.verification_token_ttl_seconds,
            token_bytes=settings.auth.verification_token_bytes,
        )
    return _service
