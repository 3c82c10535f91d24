"""
PULSE SIGNAL — Data Models for Market Data
Canonical data structures passed between fetchers, aggregator and engine.
"""
from pydantic import BaseModel
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


class DataSource(str, Enum):
    COINGECKO = "coingecko"
    GEMINI = "gemini"


class PriceTick(BaseModel):
    """Single price observation from a data source."""
    symbol: str
    source: DataSource
    price: float
    timestamp: datetime
    raw: Optional[Dict[str, Any]] = None


class PriceHistory(BaseModel):
    """Hourly closing prices, oldest first."""
    symbol: str
    source: DataSource
    days: int
    closes: List[float]
    timestamp: datetime

    def __len__(self) -> int:
        return len(self.closes)


class MarketQuote(BaseModel):
    """Everything fetched for one trading-signal request."""
    symbol: str
    coingecko: Optional[PriceTick] = None
    gemini: Optional[PriceTick] = None
    history: Optional[PriceHistory] = None

    @property
    def coingecko_price(self) -> Optional[float]:
        return self.coingecko.price if self.coingecko else None

    @property
    def gemini_price(self) -> Optional[float]:
        return self.gemini.price if self.gemini else None

    @property
    def closes(self) -> Optional[List[float]]:
        return self.history.closes if self.history is not None else None
