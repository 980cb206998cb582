"""Process-wide stock price oracle.

The oracle and its quote cache are shared by every request so the
5-minute cache actually spans requests. Without a Finnhub API key the
oracle has no source and every lookup reports "price unavailable".
"""

import logging
from typing import Optional

from src.config import FinnhubConfig
from src.finnhub_client import FinnhubClient
from src.server.config import settings
from src.tracker.pricing import QuoteCache, StockPriceOracle

logger = logging.getLogger(__name__)

_price_oracle: Optional[StockPriceOracle] = None


def _build_client() -> Optional[FinnhubClient]:
    try:
        config = FinnhubConfig.load(settings.finnhub_key_file)
    except (ValueError, FileNotFoundError) as e:
        logger.warning(f"Stock prices disabled: {e}")
        return None
    return FinnhubClient(config)


def get_price_oracle() -> StockPriceOracle:
    """Get the global price oracle instance.

    Usable as a FastAPI dependency; tests override it.

    Returns:
        StockPriceOracle instance
    """
    global _price_oracle
    if _price_oracle is None:
        _price_oracle = StockPriceOracle(
            source=_build_client(),
            cache=QuoteCache(ttl_seconds=settings.price_cache_ttl),
            max_workers=settings.price_fetch_workers,
        )
    return _price_oracle


def shutdown_price_oracle() -> None:
    """Close the oracle's HTTP session, if one was opened."""
    global _price_oracle
    if _price_oracle is not None and isinstance(_price_oracle.source, FinnhubClient):
        _price_oracle.source.close()
    _price_oracle = None
