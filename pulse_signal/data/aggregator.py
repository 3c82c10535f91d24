"""
PULSE SIGNAL — Price Aggregator
Polls both price sources concurrently, then pulls history, for one pair.
"""
import asyncio
from typing import Optional, List

from pulse_signal.data.models import PriceTick, MarketQuote
from pulse_signal.data.adapters.base import BaseDataAdapter
from pulse_signal.data.adapters.coingecko_adapter import CoinGeckoAdapter
from pulse_signal.data.adapters.gemini_adapter import GeminiAdapter
from pulse_signal.config.settings import get_settings
from pulse_signal.utils.logger import get_logger

logger = get_logger("aggregator")


class PriceAggregator:
    """
    Fork-join over the two price fetchers followed by the history fetch.
    Fetchers never raise; a failed source simply shows up as None.
    """

    def __init__(
        self,
        coingecko: Optional[BaseDataAdapter] = None,
        gemini: Optional[BaseDataAdapter] = None,
    ):
        self.settings = get_settings().data
        self.coingecko = coingecko or CoinGeckoAdapter()
        self.gemini = gemini or GeminiAdapter()
        self._initialized = False

    @property
    def adapters(self) -> List[BaseDataAdapter]:
        return [self.coingecko, self.gemini]

    async def initialize(self) -> None:
        """Open adapter sessions."""
        if self._initialized:
            return

        for adapter in self.adapters:
            try:
                await adapter.connect()
            except Exception as e:
                logger.warning("adapter_connect_failed", adapter=adapter.source.value, error=str(e))

        self._initialized = True
        logger.info("aggregator_initialized", adapters=len(self.adapters))

    async def shutdown(self) -> None:
        """Close adapter sessions."""
        for adapter in self.adapters:
            try:
                await adapter.disconnect()
            except Exception as e:
                logger.warning("adapter_disconnect_failed", adapter=adapter.source.value, error=str(e))
        self._initialized = False

    @staticmethod
    def _as_tick(result) -> Optional[PriceTick]:
        if isinstance(result, PriceTick) and result.price > 0:
            return result
        if isinstance(result, BaseException):
            logger.error("price_fetch_raised", error=str(result))
        return None

    async def get_quote(self, symbol: str, days: Optional[int] = None) -> MarketQuote:
        """Fetch both prices concurrently, then the price history."""
        coingecko_result, gemini_result = await asyncio.gather(
            self.coingecko.get_latest_price(symbol),
            self.gemini.get_latest_price(symbol),
            return_exceptions=True,
        )
        coingecko = self._as_tick(coingecko_result)
        gemini = self._as_tick(gemini_result)

        history = None
        try:
            history = await self.coingecko.get_price_history(symbol, days or self.settings.history_days)
        except Exception as e:
            logger.error("history_fetch_raised", symbol=symbol, error=str(e))

        return MarketQuote(symbol=symbol, coingecko=coingecko, gemini=gemini, history=history)


# Singleton
_aggregator: Optional[PriceAggregator] = None


def get_price_aggregator() -> PriceAggregator:
    global _aggregator
    if _aggregator is None:
        _aggregator = PriceAggregator()
    return _aggregator
