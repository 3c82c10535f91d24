"""
PULSE SIGNAL — Gemini Data Adapter
Last traded price from the public ticker endpoint.
"""
from typing import Optional
from datetime import datetime, timezone

from pulse_signal.data.adapters.base import BaseDataAdapter
from pulse_signal.data.models import PriceTick, DataSource
from pulse_signal.data.symbols import resolve_source_id
from pulse_signal.errors import UnsupportedSymbolError
from pulse_signal.utils.logger import get_logger

logger = get_logger("gemini_adapter")


class GeminiAdapter(BaseDataAdapter):
    """Gemini exchange adapter — second price source, no history."""

    def __init__(self):
        super().__init__(source=DataSource.GEMINI)
        self.base_url = self.settings.gemini_base_url

    async def connect(self) -> None:
        await super().connect()
        logger.info("gemini_adapter_connected")

    async def disconnect(self) -> None:
        await super().disconnect()
        logger.info("gemini_adapter_disconnected")

    async def get_latest_price(self, symbol: str) -> Optional[PriceTick]:
        """Fetch the last trade price from pubticker."""
        try:
            ticker = resolve_source_id(symbol, self.source)
            session = await self._ensure_session()

            url = f"{self.base_url}/pubticker/{ticker}"

            async with session.get(url) as resp:
                if resp.status != 200:
                    logger.warning("gemini_price_error", status=resp.status, symbol=symbol)
                    return None
                data = await resp.json()

            price = float(data["last"])
            if not price > 0:
                logger.error("gemini_invalid_response", symbol=symbol, body=data)
                return None

            logger.info("gemini_price", symbol=symbol, ticker=ticker, price=price)
            return PriceTick(
                symbol=symbol,
                source=self.source,
                price=price,
                timestamp=datetime.now(timezone.utc),
                raw=data,
            )
        except UnsupportedSymbolError:
            logger.error("gemini_unknown_symbol", symbol=symbol)
            return None
        except Exception as e:
            logger.error("gemini_price_exception", symbol=symbol, error=str(e))
            return None
