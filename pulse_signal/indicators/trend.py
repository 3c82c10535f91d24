"""
PULSE SIGNAL — Trend Indicators
SMA (14)
"""
from typing import Optional
import pandas as pd

from pulse_signal.indicators.base import BaseIndicator, Closes


class SMAIndicator(BaseIndicator):
    """Simple Moving Average over a trailing window."""

    def __init__(self, period: int = 14):
        if period < 1:
            raise ValueError("period must be >= 1")
        self.period = period
        super().__init__(name="sma", params={"period": period})

    def calculate(self, closes: Closes) -> pd.Series:
        series = pd.Series(closes, dtype=float).reset_index(drop=True)
        result = series.rolling(window=self.period).mean()
        self._last_result = result
        return result

    def latest(self, closes: Optional[Closes]) -> Optional[float]:
        """Final SMA value, or None with fewer than `period` samples."""
        if closes is None or len(closes) < self.period:
            return None
        value = self.calculate(closes).iloc[-1]
        if pd.isna(value):
            return None
        return float(value)
