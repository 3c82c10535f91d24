"""
PULSE SIGNAL — Base Data Adapter Interface
All price sources implement this interface.
"""
from abc import ABC, abstractmethod
from typing import Optional

import aiohttp

from pulse_signal.data.models import PriceTick, PriceHistory, DataSource
from pulse_signal.config.settings import get_settings


class BaseDataAdapter(ABC):
    """Abstract base class for all market data adapters."""

    def __init__(self, source: DataSource):
        self.source = source
        self.settings = get_settings().data
        self._session: Optional[aiohttp.ClientSession] = None

    async def connect(self) -> None:
        """Open the HTTP session."""
        timeout = aiohttp.ClientTimeout(total=self.settings.poll_timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)

    async def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if not self._session:
            await self.connect()
        return self._session

    @abstractmethod
    async def get_latest_price(self, symbol: str) -> Optional[PriceTick]:
        """Fetch the latest price for a normalized pair, or None on any failure."""
        pass

    async def get_price_history(self, symbol: str, days: int = 1) -> Optional[PriceHistory]:
        """Fetch hourly closes oldest first. Sources without history return None."""
        return None
