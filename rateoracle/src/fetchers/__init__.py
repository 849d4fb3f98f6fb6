"""
Venue fetchers for the quorum exchange rate.

Each fetcher queries one exchange's public ticker and reduces it to a Quote
(best bid, best ask). The set of venues is closed: VENUES lists them in the
order the aggregator partitions their results.

Usage:
    from rateoracle.src.fetchers import create_client, get_fetcher

    async with create_client() as client:
        fetcher = get_fetcher("coinbase", client)
        quote = await fetcher.fetch_quote(ExchangePair.USD)
"""

# Import base classes and utilities
from .base import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
    FETCHER_REGISTRY,
    BaseFetcher,
    FetcherDecodeError,
    FetcherError,
    FetcherHTTPError,
    create_client,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)

# Import all fetcher implementations to trigger registration
from .binance import BinanceFetcher
from .coinbase import CoinbaseFetcher
from .gateio import GateIoFetcher
from .gemini import GeminiFetcher
from .kucoin import KuCoinFetcher
from .mexc import MexcFetcher

# Venues queried for every request, in partition order
VENUES: tuple[str, ...] = ("binance", "coinbase", "gateio", "gemini", "kucoin", "mexc")

__all__ = [
    # Base classes
    "BaseFetcher",
    "FetcherError",
    "FetcherDecodeError",
    "FetcherHTTPError",
    # Registry functions
    "register_fetcher",
    "get_fetcher",
    "get_available_fetchers",
    "create_client",
    "FETCHER_REGISTRY",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONNECT_TIMEOUT",
    "VENUES",
    # Fetcher implementations
    "BinanceFetcher",
    "CoinbaseFetcher",
    "GateIoFetcher",
    "GeminiFetcher",
    "KuCoinFetcher",
    "MexcFetcher",
]
