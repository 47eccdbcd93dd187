"""
Rate-limited async client for the OANDA v3 REST API.
Practice or live host is picked from settings; all calls are read-only.
"""
import asyncio
import logging
import time
from typing import Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from libs.config import Settings

logger = logging.getLogger(__name__)


class BrokerError(Exception):
    """The broker answered with an HTTP error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"broker returned {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TokenBucket:
    """
    Async token bucket rate limiter. OANDA allows 120 requests/second per
    connection; OandaClient runs it at 50/s with a burst of 100.
    """

    def __init__(self, rate: float, capacity: float):
        self.rate = rate  # requests per second
        self.capacity = capacity
        self._tokens = capacity
        self._stamp = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self._tokens = min(self.capacity, self._tokens + (now - self._stamp) * self.rate)
        self._stamp = now

    async def acquire(self) -> None:
        """Wait until one request may be sent to the broker."""
        async with self._lock:
            self._refill()
            if self._tokens >= 1:
                self._tokens -= 1
                return
            delay = (1 - self._tokens) / self.rate
            logger.debug("Broker rate limit reached, waiting %.3fs", delay)
            await asyncio.sleep(delay)
            # the slept interval paid for this request
            self._tokens = 0
            self._stamp = time.monotonic()


_transport_retry = retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(min=1, max=8),
    reraise=True,
)


class OandaClient:
    """
    Async wrapper around the OANDA v3 API.
    Rate limited well under OANDA's 120 requests/second ceiling.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.account_id = settings.oanda_account_id
        self.base_url = settings.oanda_base_url
        self.available = settings.broker_configured
        self._access_token = settings.oanda_api_key
        self._timeout = settings.broker_timeout
        self._transport = transport
        self._rate_limiter = TokenBucket(rate=50.0, capacity=100.0)
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    @_transport_retry
    async def _get(self, path: str, params: Optional[dict] = None) -> dict:
        await self._rate_limiter.acquire()
        client = await self._get_client()
        resp = await client.get(path, headers=self.headers, params=params)
        if resp.is_error:
            try:
                message = resp.json().get("errorMessage", resp.text)
            except ValueError:
                message = resp.text
            logger.error("GET %s failed (%s): %s", path, resp.status_code, message)
            raise BrokerError(resp.status_code, message)
        try:
            return resp.json()
        except ValueError as e:
            logger.error("GET %s returned a non-JSON body: %s", path, e)
            raise BrokerError(resp.status_code, "invalid JSON body") from e

    async def get_account_details(self) -> dict:
        """Account balance, margin and open trade summary."""
        return await self._get(f"/v3/accounts/{self.account_id}")

    async def get_pricing(self, instruments: list[str]) -> dict:
        """Current bid/ask for each instrument."""
        return await self._get(
            f"/v3/accounts/{self.account_id}/pricing",
            params={"instruments": ",".join(instruments)},
        )

    async def get_candles(self, instrument: str, granularity: str = "H1", count: int = 500) -> dict:
        """Historical midpoint candles, oldest first."""
        return await self._get(
            f"/v3/instruments/{instrument}/candles",
            params={"granularity": granularity, "count": count},
        )

    async def get_instruments(self) -> dict:
        """Instruments tradeable on the account."""
        return await self._get(f"/v3/accounts/{self.account_id}/instruments")

    async def close(self):
        if self._http and not self._http.is_closed:
            await self._http.aclose()
