"""
PULSE SIGNAL — Trading Pair Listings
Static per-source vocabulary for every supported trading pair.
"""
from dataclasses import dataclass
from typing import Dict, List

from pulse_signal.data.models import DataSource
from pulse_signal.errors import UnsupportedSymbolError


@dataclass(frozen=True)
class PairListing:
    """How one trading pair is named by each upstream source."""
    pair: str
    coingecko_id: str
    gemini_ticker: str
    has_history: bool = False


def _gemini_ticker(pair: str) -> str:
    """BTCUSDT -> btcusd (Gemini quotes in USD)."""
    if pair.endswith("USDT"):
        pair = pair[: -len("USDT")] + "USD"
    return pair.lower()


PAIR_LISTINGS: Dict[str, PairListing] = {
    listing.pair: listing
    for listing in (
        PairListing("BTCUSDT", "bitcoin", _gemini_ticker("BTCUSDT"), has_history=True),
        PairListing("TRXUSDT", "tron", _gemini_ticker("TRXUSDT")),
        PairListing("XRPUSDT", "ripple", _gemini_ticker("XRPUSDT")),
        PairListing("TONUSDT", "toncoin", _gemini_ticker("TONUSDT")),
        PairListing("SUIUSDT", "sui", _gemini_ticker("SUIUSDT")),
        PairListing("ETHUSDT", "ethereum", _gemini_ticker("ETHUSDT")),
        PairListing("SOLUSDT", "solana", _gemini_ticker("SOLUSDT")),
        PairListing("LTCUSDT", "litecoin", _gemini_ticker("LTCUSDT")),
        PairListing("DOGEUSDT", "dogecoin", _gemini_ticker("DOGEUSDT")),
        PairListing("LINKUSDT", "chainlink", _gemini_ticker("LINKUSDT")),
    )
}


def supported_pairs() -> List[str]:
    return sorted(PAIR_LISTINGS)


def get_listing(pair: str, source: DataSource) -> PairListing:
    """Look up a normalized pair, raising UnsupportedSymbolError if unlisted."""
    listing = PAIR_LISTINGS.get(pair)
    if listing is None:
        raise UnsupportedSymbolError(pair, source.value)
    return listing


def resolve_source_id(pair: str, source: DataSource) -> str:
    """Map a normalized pair to the identifier a source expects."""
    listing = get_listing(pair, source)
    if source == DataSource.COINGECKO:
        return listing.coingecko_id
    if source == DataSource.GEMINI:
        return listing.gemini_ticker
    raise UnsupportedSymbolError(pair, source.value)


def has_history(pair: str) -> bool:
    listing = PAIR_LISTINGS.get(pair)
    return bool(listing and listing.has_history)
