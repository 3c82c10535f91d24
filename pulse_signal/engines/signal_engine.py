"""
PULSE SIGNAL — Signal Engine
Averages the available spot prices, compares them with the 14-period SMA
of hourly history and derives fixed-ratio entry / stop-loss / take-profit
levels.

    reference = mean(present prices)
    bias      = BULLISH if reference > SMA else BEARISH
                (no SMA -> FALLBACK, priced like BULLISH)
    levels    = reference * multipliers[bias]

A heuristic, not a forecast: rationale text is fixed per branch.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional, Sequence, Tuple

from pulse_signal.data.models import MarketQuote
from pulse_signal.indicators.trend import SMAIndicator
from pulse_signal.config.settings import get_settings, SignalSettings
from pulse_signal.errors import NoPriceAvailableError
from pulse_signal.utils.logger import get_logger
from pulse_signal.utils.helpers import format_price, http_date, pct_diff, utc_now

logger = get_logger("signal_engine")

NOT_AVAILABLE = "N/A"


class Bias(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    FALLBACK = "fallback"


RATIONALES: Dict[Bias, str] = {
    Bias.BULLISH: "Bullish momentum: average price is above the {period}-period SMA.",
    Bias.BEARISH: "Bearish momentum: average price is below the {period}-period SMA.",
    Bias.FALLBACK: "Using available average price; historical SMA data is insufficient.",
}


@dataclass
class SignalLevels:
    """Entry, stop-loss and take-profit at full precision."""
    entry: float
    stop_loss: float
    take_profit: float
    rationale: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": format_price(self.entry),
            "stopLoss": format_price(self.stop_loss),
            "takeProfit": format_price(self.take_profit),
            "rationale": self.rationale,
        }


@dataclass
class TradingSignalReport:
    """Result of one trading-signal request."""
    pair: str
    coingecko_price: Optional[float]
    gemini_price: Optional[float]
    average_price: float
    current_sma: Optional[float]
    diff_percent: Optional[float]
    bias: Bias
    levels: SignalLevels
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "pair": self.pair,
            "coingeckoPrice": self.coingecko_price,
            "geminiPrice": self.gemini_price,
            "averagePrice": format_price(self.average_price),
            "currentSMA": format_price(self.current_sma) if self.current_sma is not None else NOT_AVAILABLE,
            "diffPercent": format_price(self.diff_percent) if self.diff_percent is not None else NOT_AVAILABLE,
            "signal": self.levels.to_dict(),
            "utcTime": http_date(self.generated_at),
        }

    def __repr__(self) -> str:
        return (
            f"TradingSignalReport({self.pair}: {self.bias.value} | "
            f"avg={self.average_price:.2f} sma={self.current_sma})"
        )


def average_price(prices: Sequence[Optional[float]]) -> float:
    """Mean of the present prices; raises NoPriceAvailableError if none."""
    present = [p for p in prices if p]
    if not present:
        raise NoPriceAvailableError()
    return sum(present) / len(present)


def source_divergence(first: Optional[float], second: Optional[float]) -> Optional[float]:
    """|first - second| / second * 100 when both sources reported."""
    if not first or not second:
        return None
    return pct_diff(first, second)


class SignalEngine:
    """Turns a MarketQuote into a TradingSignalReport."""

    def __init__(self, settings: Optional[SignalSettings] = None):
        self.settings = settings or get_settings().signals
        self.sma = SMAIndicator(period=self.settings.sma_period)

    @property
    def multipliers(self) -> Dict[Bias, Tuple[float, float, float]]:
        s = self.settings
        bullish = (s.bullish_entry_mult, s.bullish_stop_mult, s.bullish_target_mult)
        bearish = (s.bearish_entry_mult, s.bearish_stop_mult, s.bearish_target_mult)
        return {Bias.BULLISH: bullish, Bias.BEARISH: bearish, Bias.FALLBACK: bullish}

    @staticmethod
    def classify(price: float, sma: Optional[float]) -> Bias:
        if sma is None:
            return Bias.FALLBACK
        return Bias.BULLISH if price > sma else Bias.BEARISH

    def compute_levels(self, price: float, bias: Bias) -> SignalLevels:
        entry_mult, stop_mult, target_mult = self.multipliers[bias]
        return SignalLevels(
            entry=price * entry_mult,
            stop_loss=price * stop_mult,
            take_profit=price * target_mult,
            rationale=RATIONALES[bias].format(period=self.sma.period),
        )

    def generate(
        self,
        pair: str,
        coingecko_price: Optional[float],
        gemini_price: Optional[float],
        closes: Optional[List[float]] = None,
    ) -> TradingSignalReport:
        """Build the report from raw inputs."""
        price = average_price([coingecko_price, gemini_price])
        logger.info("price_for_calculation", pair=pair, price=price)

        current_sma = self.sma.latest(closes)
        bias = self.classify(price, current_sma)
        levels = self.compute_levels(price, bias)

        report = TradingSignalReport(
            pair=pair,
            coingecko_price=coingecko_price,
            gemini_price=gemini_price,
            average_price=price,
            current_sma=current_sma,
            diff_percent=source_divergence(coingecko_price, gemini_price),
            bias=bias,
            levels=levels,
            generated_at=utc_now(),
        )
        logger.info("signal_generated", pair=pair, bias=bias.value, sma=current_sma)
        return report

    def generate_from_quote(self, quote: MarketQuote) -> TradingSignalReport:
        return self.generate(
            quote.symbol,
            quote.coingecko_price,
            quote.gemini_price,
            quote.closes,
        )


# Singleton
_engine: Optional[SignalEngine] = None


def get_signal_engine() -> SignalEngine:
    global _engine
    if _engine is None:
        _engine = SignalEngine()
    return _engine
