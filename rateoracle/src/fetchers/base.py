"""Base fetcher interface and shared HTTP transport.

All venue fetchers inherit from BaseFetcher and implement fetch_quote().
One httpx.AsyncClient is shared by every fetcher of an ExchangeRateClient so
connections (and the proxy, when routing through Tor) are set up once.

Fetchers never retry and never swallow errors: each failure is raised as a
FetcherError subclass and the caller decides what a failure means.

.. code-block:: python

    @register_fetcher
    class MyFetcher(BaseFetcher):
        name = "myvenue"

        async def fetch_quote(self, pair: ExchangePair) -> Quote:
            data = await self.get_json(f"https://api.example.com/{pair.symbol(self.name)}")
            return self.make_quote(data["bid"], data["ask"], pair.symbol(self.name))
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

import httpx

from ..ExchangePair import ExchangePair
from ..Quote import Quote

logger = logging.getLogger(__name__)

# Default timeouts for HTTP requests (seconds)
DEFAULT_TIMEOUT = 10.0
DEFAULT_CONNECT_TIMEOUT = 10.0

# Largest decimal exponent accepted in a venue price (28-digit fixed point)
MAX_PRICE_EXPONENT = 28


class FetcherError(Exception):
    """Base exception for fetcher errors."""

    pass


class FetcherHTTPError(FetcherError):
    """Raised when the venue answers with a non-2xx status.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


class FetcherDecodeError(FetcherError):
    """Raised when a response body does not have the expected shape."""

    pass


def create_client(
    proxy: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
) -> httpx.AsyncClient:
    """Create the HTTP client shared by all fetchers.

    :param proxy: Optional proxy URL (e.g., "socks5://127.0.0.1:9050" for Tor).
    :param timeout: Read/write/pool timeout in seconds.
    :param connect_timeout: Connection timeout in seconds.
    :returns: New httpx.AsyncClient instance.
    """
    return httpx.AsyncClient(
        proxy=proxy,
        timeout=httpx.Timeout(timeout, connect=connect_timeout),
        limits=httpx.Limits(max_connections=50, max_keepalive_connections=20),
        follow_redirects=True,
    )


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number or numeric string to a finite Decimal.

    :param value: Value read from a venue response.
    :returns: Parsed Decimal.
    :raises FetcherDecodeError: If the value is not a finite number or its
        magnitude is outside 1E-28 .. 1E+28.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
        raise FetcherDecodeError(f"Expected a number, got {value!r}")
    try:
        result = Decimal(value)
    except InvalidOperation as e:
        raise FetcherDecodeError(f"Invalid number {value!r}") from e
    if not result.is_finite():
        raise FetcherDecodeError(f"Non-finite number {value!r}")
    if result and abs(result.adjusted()) > MAX_PRICE_EXPONENT:
        raise FetcherDecodeError(f"Number out of range {value!r}")
    return result


class BaseFetcher(ABC):
    """Abstract base class for venue fetchers.

    Subclasses must implement:
        - name: Class variable identifying the venue (e.g., "binance", "gemini")
        - fetch_quote(): Async method returning the venue's Quote for a pair

    :cvar name: Unique identifier for this fetcher.
    :ivar client: HTTP client used for requests.
    """

    # Fetcher identification
    name: ClassVar[str] = ""

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize the fetcher.

        :param client: Shared HTTP client (may be proxied).
        """
        self.client = client

    @abstractmethod
    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch the current best bid / best ask for a pair.

        :param pair: Pair to query.
        :returns: Quote reported by the venue.
        :raises FetcherError: On transport, HTTP or decode failure.
        """
        pass

    async def get_json(self, url: str, *, params: dict | None = None) -> Any:
        """Make one HTTP GET request and decode the JSON body.

        JSON floats are decoded as Decimal so no precision is lost.

        :param url: Request URL.
        :param params: Optional query parameters.
        :returns: Decoded JSON body.
        :raises FetcherHTTPError: On non-2xx response.
        :raises FetcherDecodeError: If the body is not valid JSON.
        :raises FetcherError: On network/timeout errors.
        """
        try:
            response = await self.client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise FetcherError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            raise FetcherError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                response.url,
                response.status_code,
                response.text[:200],
            )
            raise FetcherHTTPError(response.status_code, response.text[:200])

        try:
            return response.json(parse_float=Decimal)
        except (ValueError, RecursionError) as e:
            raise FetcherDecodeError(f"Invalid JSON from {response.url}: {e}") from e

    def make_quote(self, bid: Any, ask: Any, symbol: str) -> Quote:
        """Build a Quote from raw bid/ask values.

        A crossed quote (ask below bid) is kept but logged; a negative bid or
        ask is rejected.

        :param bid: Raw best bid from the response.
        :param ask: Raw best ask from the response.
        :param symbol: Venue symbol, for log context.
        :returns: Parsed Quote.
        :raises FetcherDecodeError: If either value is not a number or is negative.
        """
        quote = Quote(bid=to_decimal(bid), ask=to_decimal(ask))
        if quote.bid < 0 or quote.ask < 0:
            raise FetcherDecodeError(
                f"[{self.name}] Negative quote for {symbol}: bid={quote.bid} ask={quote.ask}"
            )
        if quote.is_crossed:
            logger.warning(
                f"[{self.name}] Crossed quote for {symbol}: bid={quote.bid} ask={quote.ask}"
            )
        return quote


# Registry of available fetchers (populated by subclass imports)
FETCHER_REGISTRY: dict[str, type[BaseFetcher]] = {}


def register_fetcher(cls: type[BaseFetcher]) -> type[BaseFetcher]:
    """Decorator to register a fetcher class in the global registry.

    :param cls: Fetcher class to register.
    :returns: The registered class (unchanged).
    :raises ValueError: If fetcher has no name defined.
    """
    if not cls.name:
        raise ValueError(f"Fetcher {cls.__name__} must define a 'name' class variable")
    FETCHER_REGISTRY[cls.name] = cls
    return cls


def get_fetcher(name: str, client: httpx.AsyncClient) -> BaseFetcher:
    """Get a fetcher instance by name.

    :param name: Fetcher name (e.g., "binance", "gemini").
    :param client: Shared HTTP client.
    :returns: Fetcher instance.
    :raises ValueError: If fetcher name is unknown.
    """
    if name not in FETCHER_REGISTRY:
        available = ", ".join(sorted(FETCHER_REGISTRY.keys()))
        raise ValueError(f"Unknown fetcher '{name}'. Available: {available}")
    return FETCHER_REGISTRY[name](client)


def get_available_fetchers() -> list[str]:
    """Get list of available fetcher names.

    :returns: Sorted list of registered fetcher names.
    """
    return sorted(FETCHER_REGISTRY.keys())
