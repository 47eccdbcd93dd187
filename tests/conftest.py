"""
pytest configuration for the FX analysis test suite.

Marks:
  @pytest.mark.unit    — pure analyzers, models, config; no I/O
  @pytest.mark.api     — FastAPI routes and the pipeline against fake collaborators

Run subsets:
  pytest tests/ -m unit
  pytest tests/ -m api

Nothing here touches the network: broker calls go through fakes or
httpx.MockTransport, feeds are parsed from temp files.
"""
import pytest

from connectors.oanda.client import BrokerError
from libs.domain_models.analysis import Article


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast unit tests, no network")
    config.addinivalue_line("markers", "api: FastAPI routes with fake broker / news")


def _candle(close, i=0):
    return {
        "time": f"2026-10-19T{i // 60:02d}:{i % 60:02d}:00.000000000Z",
        "volume": 100 + i,
        "complete": True,
        "mid": {"o": str(close), "h": str(close), "l": str(close), "c": str(close)},
    }


@pytest.fixture
def candle_payload():
    """Build a broker-shaped candle payload from a list of closes."""
    def build(closes, instrument="EUR_USD", granularity="M15"):
        return {
            "instrument": instrument,
            "granularity": granularity,
            "candles": [_candle(c, i) for i, c in enumerate(closes)],
        }
    return build


class FakeBroker:
    """Stands in for OandaClient; records every call."""

    def __init__(self, closes=None, fail=False):
        self.closes = closes or []
        self.fail = fail
        self.calls = []

    def _check(self):
        if self.fail:
            raise BrokerError(401, "Insufficient authorization to perform request.")

    async def get_account_details(self):
        self.calls.append(("account",))
        self._check()
        return {"account": {
            "id": "101-004-1234567-001", "alias": "Primary", "balance": "100000.0000",
            "currency": "USD", "marginUsed": "250.5000", "marginAvailable": "99749.5000",
            "openTradeCount": 2, "unrealizedPL": "-12.3400",
        }}

    async def get_pricing(self, instruments):
        self.calls.append(("pricing", list(instruments)))
        self._check()
        return {"prices": [
            {"instrument": i, "bids": [{"price": "1.08500"}], "asks": [{"price": "1.08520"}]}
            for i in instruments
        ]}

    async def get_candles(self, instrument, granularity="H1", count=500):
        self.calls.append(("candles", instrument, granularity, count))
        self._check()
        return {
            "instrument": instrument,
            "granularity": granularity,
            "candles": [_candle(c, i) for i, c in enumerate(self.closes)],
        }

    async def get_instruments(self):
        self.calls.append(("instruments",))
        self._check()
        return {"instruments": [{"name": "EUR_USD", "type": "CURRENCY"}]}

    async def close(self):
        pass


class FailingNewsSource:
    def fetch_articles(self) -> list[Article]:
        raise ConnectionError("feed unreachable")


@pytest.fixture
def fake_broker():
    return FakeBroker


@pytest.fixture
def failing_news():
    return FailingNewsSource()
