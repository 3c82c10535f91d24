"""
PULSE SIGNAL — Common Utility Functions
"""
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """Return current UTC timestamp as ISO string."""
    return utc_now().isoformat()


def http_date(dt: Optional[datetime] = None) -> str:
    """RFC 1123 date, e.g. 'Mon, 19 Oct 2026 12:00:00 GMT'."""
    return format_datetime(dt or utc_now(), usegmt=True)


def normalize_pair(pair: str) -> str:
    """Normalize pair format: btc/usdt -> BTCUSDT, BTC-USDT -> BTCUSDT."""
    return pair.strip().replace("/", "").replace("-", "").upper()


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safe division avoiding ZeroDivisionError."""
    if denominator == 0:
        return default
    return numerator / denominator


def pct_diff(value: float, reference: float) -> float:
    """Absolute difference of value from reference, in percent of reference."""
    return safe_divide(abs(value - reference), reference) * 100.0


def format_price(value: float) -> str:
    """Two-decimal presentation string."""
    return f"{value:.2f}"
