"""
PULSE SIGNAL — Test Configuration & Fixtures
Shared fixtures for all test modules.
"""
from datetime import datetime, timezone

import numpy as np
import pytest

from pulse_signal.tests.fakes import AUTH_DATE


@pytest.fixture
def telegram_fields():
    return {
        "auth_date": str(AUTH_DATE),
        "first_name": "Alice",
        "id": "42",
        "username": "alice",
    }


@pytest.fixture
def auth_now():
    """A moment one hour after AUTH_DATE."""
    return datetime.fromtimestamp(AUTH_DATE + 3600, tz=timezone.utc)


@pytest.fixture
def hourly_closes():
    """25 hourly closes (one day of market_chart) drifting upward."""
    np.random.seed(42)
    n = 25
    base = 60000.0
    returns = np.random.normal(0.0005, 0.002, n)
    return [float(p) for p in base * np.exp(np.cumsum(returns))]


@pytest.fixture
def rising_closes():
    return [float(x) for x in range(1, 15)]
