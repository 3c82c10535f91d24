"""
PULSE SIGNAL — Base Indicator Interface
Indicators work on an ordered series of closing prices.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Union
import pandas as pd

Closes = Union[Sequence[float], pd.Series]


class BaseIndicator(ABC):
    """Abstract base class for technical indicators."""

    def __init__(self, name: str, params: Optional[Dict[str, Any]] = None):
        self.name = name
        self.params = params or {}
        self._last_result: Optional[pd.Series] = None

    @abstractmethod
    def calculate(self, closes: Closes) -> pd.Series:
        """
        Calculate the indicator series for the given closes, oldest first.
        Output is aligned with the input; undefined points are NaN.
        """
        pass

    def reset(self) -> None:
        """Reset any internal state."""
        self._last_result = None

    @property
    def last_result(self) -> Optional[pd.Series]:
        return self._last_result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, params={self.params})"
