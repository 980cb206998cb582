"""
Finnhub API client for stock quotes.

This module provides the Finnhub data provider adapter, handling all
HTTP communication with the Finnhub API.

API Documentation: https://finnhub.io/docs/api

Endpoints used:
- /quote: Real-time quote for US stocks (free tier)

The /quote response is a flat JSON object:
    c: current price, d: change, dp: percent change,
    h: day high, l: day low, o: open, pc: previous close, t: timestamp

Finnhub answers unknown symbols with HTTP 200 and all-zero fields, so a
current price of 0 means "no data".
"""

import logging
import re
import time
from typing import Any, Dict

import requests

from .config import FinnhubConfig

logger = logging.getLogger(__name__)

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-]{1,10}$")


class FinnhubAPIError(Exception):
    """Custom exception for Finnhub API errors."""

    pass


class FinnhubClient:
    """
    Client for interacting with Finnhub API.

    This client handles:
    - HTTP requests with proper authentication
    - Retry logic with exponential backoff
    - Error handling and logging
    - Connection pooling via requests.Session
    """

    def __init__(self, config: FinnhubConfig):
        """
        Initialize client with configuration.

        Args:
            config: FinnhubConfig instance with API credentials and settings
        """
        self.config = config
        self.session = requests.Session()
        self.session.headers.update(
            {"Accept": "application/json", "User-Agent": "OptionsTracker/1.0"}
        )
        logger.info("Finnhub client initialized")

    def get_quote(self, symbol: str) -> Dict[str, Any]:
        """
        Retrieve the current quote for a symbol.

        Args:
            symbol: Stock ticker symbol (e.g., "F", "AAPL")

        Returns:
            API response as dictionary

        Raises:
            FinnhubAPIError: If API request fails
            ValueError: If symbol is invalid
        """
        if not symbol or not isinstance(symbol, str):
            raise ValueError(f"Invalid symbol: {symbol}")

        symbol = symbol.upper().strip()
        if not _SYMBOL_PATTERN.match(symbol):
            raise ValueError(f"Symbol must be 1-10 letters, digits, '.' or '-': {symbol}")

        url = f"{self.config.base_url}/quote"
        params = {"symbol": symbol, "token": self.config.api_key}

        logger.debug(f"Fetching quote for {symbol}")

        try:
            response = self._make_request_with_retry(url, params)

            if response.status_code == 401:
                raise FinnhubAPIError(
                    "Authentication failed. Check your API key. "
                    "Get a free API key at https://finnhub.io/register"
                )
            elif response.status_code == 429:
                raise FinnhubAPIError(
                    "Rate limit exceeded. Finnhub free tier allows 60 calls/minute."
                )
            elif response.status_code >= 500:
                raise FinnhubAPIError(
                    f"Finnhub server error (HTTP {response.status_code}). " "Try again later."
                )

            response.raise_for_status()

            data = response.json()
            logger.debug(f"Successfully retrieved quote for {symbol}")
            return data

        except requests.exceptions.Timeout as e:
            raise FinnhubAPIError(
                f"Request timeout after {self.config.timeout}s for symbol {symbol}"
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise FinnhubAPIError("Connection error. Check your internet connection.") from e
        except requests.exceptions.RequestException as e:
            raise FinnhubAPIError(f"API request failed: {str(e)}") from e
        except ValueError as e:
            raise FinnhubAPIError(f"Invalid JSON response from API: {str(e)}") from e

    def get_current_price(self, symbol: str) -> float:
        """
        Current price for a symbol.

        Args:
            symbol: Stock ticker symbol

        Returns:
            Current (last) price

        Raises:
            FinnhubAPIError: If the request fails or no price is available
            ValueError: If symbol is invalid
        """
        data = self.get_quote(symbol)
        price = data.get("c") if isinstance(data, dict) else None
        if not price:
            raise FinnhubAPIError(f"No price data available for {symbol.upper().strip()}")
        return float(price)

    def _make_request_with_retry(
        self, url: str, params: Dict[str, str], attempt: int = 1
    ) -> requests.Response:
        """
        Make HTTP request with exponential backoff retry.

        Args:
            url: Request URL
            params: Query parameters
            attempt: Current attempt number (used for recursion)

        Returns:
            HTTP response object

        Raises:
            requests.exceptions.RequestException: If all retry attempts fail
        """
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            return response

        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            if attempt >= self.config.max_retries:
                logger.error(f"All {self.config.max_retries} retry attempts failed")
                raise

            delay = self.config.retry_delay * (2 ** (attempt - 1))

            logger.warning(
                f"Request failed (attempt {attempt}/{self.config.max_retries}). "
                f"Retrying in {delay:.1f}s... Error: {str(e)}"
            )

            time.sleep(delay)
            return self._make_request_with_retry(url, params, attempt + 1)

    def close(self) -> None:
        """
        Close the HTTP session and cleanup resources.

        Should be called when done using the client.
        """
        self.session.close()
        logger.info("Finnhub client closed")

    def __enter__(self) -> "FinnhubClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - cleanup resources."""
        self.close()
