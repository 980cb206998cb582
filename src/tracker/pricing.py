"""
Stock price oracle with a short-lived quote cache.

Wraps the Finnhub quote endpoint behind a best-effort interface: a failed
or timed-out lookup is logged and reported as "price unavailable" (None),
never raised, because every consumer already skips a missing price.

Caching:
- Each ticker's price is fresh for 5 minutes.
- Concurrent lookups of the same ticker fetch once; the others wait and
  read the cached value.
- Different tickers fetch independently and in parallel.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Iterator, Optional, Protocol

import requests

from src.finnhub_client import FinnhubAPIError

from .exceptions import PriceUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_MAX_WORKERS = 8


class QuoteSource(Protocol):
    """Anything that can return a current price for a ticker."""

    def get_current_price(self, symbol: str) -> float: ...


@dataclass
class CacheEntry:
    """Cached price for one ticker."""

    price: float
    timestamp: float

    def is_valid(self, now: float, max_age_seconds: float) -> bool:
        """Check if cache entry is still fresh."""
        return now - self.timestamp < max_age_seconds


@dataclass
class StockQuote:
    """A price lookup result, as reported by the stock-price endpoint."""

    ticker: str
    price: float
    timestamp: datetime
    cached: bool


class QuoteCache:
    """Thread-safe in-memory cache of ticker prices with a TTL."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize cache.

        Args:
            ttl_seconds: Freshness window per ticker (default: 5 minutes)
            clock: Returns the current time in seconds
        """
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, ticker: str) -> Optional[CacheEntry]:
        """Fresh entry for ticker, or None."""
        with self._lock:
            entry = self._entries.get(ticker)
        if entry and entry.is_valid(self.clock(), self.ttl_seconds):
            logger.debug(f"Cache HIT for {ticker}")
            return entry
        logger.debug(f"Cache MISS for {ticker}")
        return None

    def set(self, ticker: str, price: float) -> CacheEntry:
        """Store a price stamped with the current time."""
        entry = CacheEntry(price=price, timestamp=self.clock())
        with self._lock:
            self._entries[ticker] = entry
        return entry

    def clear(self) -> None:
        """Clear all cached prices."""
        with self._lock:
            self._entries.clear()
        logger.debug("Quote cache cleared")


class StockPriceOracle:
    """
    Best-effort stock price lookups for alerts and unrealized P/L.

    Attributes:
        source: Quote provider (FinnhubClient in production), or None
            when no API key is configured
        cache: QuoteCache shared by all lookups
        max_workers: Thread pool size for batch lookups
    """

    def __init__(
        self,
        source: Optional[QuoteSource] = None,
        cache: Optional[QuoteCache] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.source = source
        self.cache = cache if cache is not None else QuoteCache()
        self.max_workers = max_workers
        # ticker -> [lock, number of callers holding or waiting on it]
        self._ticker_locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _single_flight(self, ticker: str) -> Iterator[None]:
        """Hold the ticker's fetch lock; the lock is dropped once nobody uses it."""
        with self._locks_guard:
            slot = self._ticker_locks.setdefault(ticker, [threading.Lock(), 0])
            slot[1] += 1

        try:
            with slot[0]:
                yield
        finally:
            with self._locks_guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._ticker_locks[ticker]

    def _fetch(self, ticker: str) -> float:
        """
        Fetch a fresh price from the source.

        Raises:
            PriceUnavailableError: If no source is configured or the lookup fails
        """
        if self.source is None:
            raise PriceUnavailableError("No price data provider configured")

        try:
            price = self.source.get_current_price(ticker)
        except (FinnhubAPIError, requests.exceptions.RequestException, ValueError) as e:
            raise PriceUnavailableError(str(e)) from e

        if not price or price <= 0:
            raise PriceUnavailableError(f"No price data available for {ticker}")
        return float(price)

    def get_quote(self, ticker: str) -> Optional[StockQuote]:
        """
        Look up the current price for a ticker.

        Args:
            ticker: Stock ticker (any case)

        Returns:
            StockQuote, or None when the price is unavailable
        """
        ticker = ticker.upper().strip()

        entry = self.cache.get(ticker)
        if entry is not None:
            return StockQuote(
                ticker=ticker,
                price=entry.price,
                timestamp=datetime.fromtimestamp(entry.timestamp),
                cached=True,
            )

        with self._single_flight(ticker):
            # Another caller may have filled the cache while we waited
            entry = self.cache.get(ticker)
            if entry is not None:
                return StockQuote(
                    ticker=ticker,
                    price=entry.price,
                    timestamp=datetime.fromtimestamp(entry.timestamp),
                    cached=True,
                )

            try:
                price = self._fetch(ticker)
            except PriceUnavailableError as e:
                logger.warning(f"Price unavailable for {ticker}: {e}")
                return None

            entry = self.cache.set(ticker, price)
            logger.debug(f"Fetched price for {ticker}: ${price:.2f}")

        return StockQuote(
            ticker=ticker,
            price=entry.price,
            timestamp=datetime.fromtimestamp(entry.timestamp),
            cached=False,
        )

    def get_price(self, ticker: str) -> Optional[float]:
        """Current price for a ticker, or None when unavailable."""
        quote = self.get_quote(ticker)
        return quote.price if quote else None

    def get_prices(self, tickers: Iterable[str]) -> dict[str, float]:
        """
        Look up several tickers at once.

        Individual failures are left out of the result; the batch as a
        whole never fails.

        Args:
            tickers: Tickers in any case, duplicates allowed

        Returns:
            Mapping of uppercase ticker to price for successful lookups
        """
        unique = sorted({t.upper().strip() for t in tickers if t and t.strip()})
        if not unique:
            return {}

        workers = max(1, min(self.max_workers, len(unique)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(self.get_price, unique))

        prices = {
            ticker: price for ticker, price in zip(unique, results) if price is not None
        }
        logger.debug(f"Fetched {len(prices)}/{len(unique)} prices")
        return prices

    def clear_cache(self) -> None:
        """Forget all cached prices (manual refresh)."""
        self.cache.clear()
