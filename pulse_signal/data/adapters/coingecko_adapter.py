"""
PULSE SIGNAL — CoinGecko Data Adapter
Spot price (simple/price) and hourly history (market_chart) in USDT.
"""
from typing import Optional
from datetime import datetime, timezone

from pulse_signal.data.adapters.base import BaseDataAdapter
from pulse_signal.data.models import PriceTick, PriceHistory, DataSource
from pulse_signal.data.symbols import resolve_source_id, has_history
from pulse_signal.errors import UnsupportedSymbolError
from pulse_signal.utils.logger import get_logger

logger = get_logger("coingecko_adapter")

QUOTE_CURRENCY = "usdt"


class CoinGeckoAdapter(BaseDataAdapter):
    """CoinGecko data adapter — price source and the only history source."""

    def __init__(self):
        super().__init__(source=DataSource.COINGECKO)
        self.base_url = self.settings.coingecko_base_url

    async def connect(self) -> None:
        await super().connect()
        logger.info("coingecko_adapter_connected")

    async def disconnect(self) -> None:
        await super().disconnect()
        logger.info("coingecko_adapter_disconnected")

    async def get_latest_price(self, symbol: str) -> Optional[PriceTick]:
        """Fetch latest price from the simple/price endpoint."""
        try:
            coin_id = resolve_source_id(symbol, self.source)
            session = await self._ensure_session()

            url = f"{self.base_url}/simple/price"
            params = {"ids": coin_id, "vs_currencies": QUOTE_CURRENCY}

            async with session.get(url, params=params) as resp:
                if resp.status != 200:
                    logger.warning("coingecko_price_error", status=resp.status, symbol=symbol)
                    return None
                data = await resp.json()

            coin_data = data.get(coin_id) or {}
            price = coin_data.get(QUOTE_CURRENCY)
            if price is None or not float(price) > 0:
                logger.error("coingecko_invalid_response", symbol=symbol, body=data)
                return None

            logger.info("coingecko_price", symbol=symbol, coin_id=coin_id, price=float(price))
            return PriceTick(
                symbol=symbol,
                source=self.source,
                price=float(price),
                timestamp=datetime.now(timezone.utc),
                raw=coin_data,
            )
        except UnsupportedSymbolError:
            logger.error("coingecko_unknown_symbol", symbol=symbol)
            return None
        except Exception as e:
            logger.error("coingecko_price_exception", symbol=symbol, error=str(e))
            return None

    async def get_price_history(self, symbol: str, days: int = 1) -> Optional[PriceHistory]:
        """Fetch hourly closes from market_chart. Only wired pairs are queried."""
        if not has_history(symbol):
            return None

        try:
            coin_id = resolve_source_id(symbol, self.source)
            session = await self._ensure_session()

            url = f"{self.base_url}/coins/{coin_id}/market_chart"
            params = {"vs_currency": QUOTE_CURRENCY, "days": days, "interval": "hourly"}

            async with session.get(url, params=params) as resp:
                if resp.status != 200:
                    logger.warning("coingecko_history_error", status=resp.status, symbol=symbol)
                    return None
                data = await resp.json()

            closes = [float(item[1]) for item in data["prices"]]
            logger.info("coingecko_history", symbol=symbol, count=len(closes), last_5=closes[-5:])
            return PriceHistory(
                symbol=symbol,
                source=self.source,
                days=days,
                closes=closes,
                timestamp=datetime.now(timezone.utc),
            )
        except Exception as e:
            logger.error("coingecko_history_exception", symbol=symbol, error=str(e))
            return None
