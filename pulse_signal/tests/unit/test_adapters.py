"""
PULSE SIGNAL — Unit Tests for Pair Listings and Price Adapters
"""
import aiohttp
import pytest

from pulse_signal.data.adapters.coingecko_adapter import CoinGeckoAdapter
from pulse_signal.data.adapters.gemini_adapter import GeminiAdapter
from pulse_signal.data.models import DataSource
from pulse_signal.data.symbols import (
    PAIR_LISTINGS, resolve_source_id, has_history, supported_pairs,
)
from pulse_signal.errors import UnsupportedSymbolError
from pulse_signal.utils.helpers import normalize_pair
from pulse_signal.tests.fakes import FakeResponse, FakeSession


class TestPairListings:
    def test_coingecko_ids(self):
        assert resolve_source_id("BTCUSDT", DataSource.COINGECKO) == "bitcoin"
        assert resolve_source_id("TRXUSDT", DataSource.COINGECKO) == "tron"
        assert resolve_source_id("XRPUSDT", DataSource.COINGECKO) == "ripple"
        assert resolve_source_id("TONUSDT", DataSource.COINGECKO) == "toncoin"
        assert resolve_source_id("SUIUSDT", DataSource.COINGECKO) == "sui"

    def test_gemini_tickers(self):
        assert resolve_source_id("BTCUSDT", DataSource.GEMINI) == "btcusd"
        assert resolve_source_id("XRPUSDT", DataSource.GEMINI) == "xrpusd"

    def test_majors_listed_on_both_sources(self):
        assert resolve_source_id("ETHUSDT", DataSource.COINGECKO) == "ethereum"
        assert resolve_source_id("ETHUSDT", DataSource.GEMINI) == "ethusd"
        assert resolve_source_id("SOLUSDT", DataSource.GEMINI) == "solusd"
        assert resolve_source_id("LINKUSDT", DataSource.COINGECKO) == "chainlink"
        assert not has_history("ETHUSDT")

    def test_mapping_total_and_deterministic(self):
        for pair in supported_pairs():
            for source in DataSource:
                assert resolve_source_id(pair, source) == resolve_source_id(pair, source)

    def test_unsupported_pair(self):
        with pytest.raises(UnsupportedSymbolError) as exc:
            resolve_source_id("PEPEUSDT", DataSource.COINGECKO)
        assert exc.value.pair == "PEPEUSDT"
        assert exc.value.source == "coingecko"

    def test_only_btc_has_history(self):
        assert has_history("BTCUSDT")
        assert [p for p in PAIR_LISTINGS if has_history(p)] == ["BTCUSDT"]
        assert not has_history("PEPEUSDT")

    def test_normalize_pair(self):
        assert normalize_pair("btcusdt") == "BTCUSDT"
        assert normalize_pair(" btc/usdt ") == "BTCUSDT"
        assert normalize_pair("BTC-USDT") == "BTCUSDT"


class TestCoinGeckoAdapter:
    @pytest.mark.asyncio
    async def test_latest_price(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession(FakeResponse({"bitcoin": {"usdt": 65000.5}}))
        tick = await adapter.get_latest_price("BTCUSDT")
        assert tick.price == 65000.5
        assert tick.source == DataSource.COINGECKO
        call = adapter._session.calls[0]
        assert call["url"].endswith("/simple/price")
        assert call["params"] == {"ids": "bitcoin", "vs_currencies": "usdt"}

    @pytest.mark.asyncio
    async def test_unsupported_pair_makes_no_call(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession()
        assert await adapter.get_latest_price("PEPEUSDT") is None
        assert adapter._session.calls == []

    @pytest.mark.asyncio
    async def test_bad_status(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession(FakeResponse({}, status=429))
        assert await adapter.get_latest_price("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession(FakeResponse({"bitcoin": {}}))
        assert await adapter.get_latest_price("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_network_error(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession(FakeResponse(error=aiohttp.ClientConnectionError("down")))
        assert await adapter.get_latest_price("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_history(self):
        adapter = CoinGeckoAdapter()
        payload = {"prices": [[1700000000000, 100.0], [1700003600000, 101.0], [1700007200000, 102.5]]}
        adapter._session = FakeSession(FakeResponse(payload))
        history = await adapter.get_price_history("BTCUSDT", days=1)
        assert history.closes == [100.0, 101.0, 102.5]
        call = adapter._session.calls[0]
        assert call["url"].endswith("/coins/bitcoin/market_chart")
        assert call["params"] == {"vs_currency": "usdt", "days": 1, "interval": "hourly"}

    @pytest.mark.asyncio
    async def test_history_not_wired(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession()
        assert await adapter.get_price_history("XRPUSDT") is None
        assert adapter._session.calls == []

    @pytest.mark.asyncio
    async def test_history_malformed(self):
        adapter = CoinGeckoAdapter()
        adapter._session = FakeSession(FakeResponse({"error": "rate limited"}))
        assert await adapter.get_price_history("BTCUSDT") is None


class TestGeminiAdapter:
    @pytest.mark.asyncio
    async def test_latest_price(self):
        adapter = GeminiAdapter()
        adapter._session = FakeSession(FakeResponse({"last": "64990.10", "bid": "64990"}))
        tick = await adapter.get_latest_price("BTCUSDT")
        assert tick.price == 64990.10
        assert adapter._session.calls[0]["url"].endswith("/pubticker/btcusd")

    @pytest.mark.asyncio
    async def test_missing_last(self):
        adapter = GeminiAdapter()
        adapter._session = FakeSession(FakeResponse({"result": "error"}))
        assert await adapter.get_latest_price("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_non_positive_price(self):
        adapter = GeminiAdapter()
        adapter._session = FakeSession(FakeResponse({"last": "0"}))
        assert await adapter.get_latest_price("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_no_history(self):
        assert await GeminiAdapter().get_price_history("BTCUSDT") is None

    @pytest.mark.asyncio
    async def test_disconnect_closes_session(self):
        adapter = GeminiAdapter()
        session = FakeSession()
        adapter._session = session
        await adapter.disconnect()
        assert session.closed
        assert adapter._session is None
