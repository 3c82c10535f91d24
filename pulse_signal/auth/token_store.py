"""
PULSE SIGNAL — Verification Token Store
Key-value interface for one-time email tokens plus the in-process backend.
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from cachetools import TTLCache

from pulse_signal.utils.logger import get_logger

logger = get_logger("token_store")


@dataclass(frozen=True)
class VerificationToken:
    """What a token stands for and until when."""
    email: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class TokenStore(ABC):
    """
    Storage for verification tokens. `take` must be atomic in the backend:
    of any number of concurrent callers, at most one receives the record.
    """

    @abstractmethod
    async def put(self, token: str, record: VerificationToken) -> None:
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[VerificationToken]:
        pass

    @abstractmethod
    async def delete(self, token: str) -> None:
        pass

    @abstractmethod
    async def take(self, token: str) -> Optional[VerificationToken]:
        """Remove and return the record in one step."""
        pass


class InMemoryTokenStore(TokenStore):
    """
    Process-local store, lost on restart. Records carry their own expiry;
    the cache TTL only sweeps tokens nobody came back for.
    """

    def __init__(self, maxsize: int = 10000, sweep_after_seconds: float = 3600):
        self._tokens: TTLCache = TTLCache(maxsize=maxsize, ttl=sweep_after_seconds)
        # TTLCache is not thread-safe; sync routes run in a threadpool
        self._lock = threading.Lock()

    async def put(self, token: str, record: VerificationToken) -> None:
        with self._lock:
            self._tokens[token] = record

    async def get(self, token: str) -> Optional[VerificationToken]:
        with self._lock:
            return self._tokens.get(token)

    async def delete(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    async def take(self, token: str) -> Optional[VerificationToken]:
        with self._lock:
            return self._tokens.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    @property
    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "tokens": len(self._tokens),
                "maxsize": self._tokens.maxsize,
            }
