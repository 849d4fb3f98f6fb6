"""
ZEC Rate Oracle - Quorum Exchange Rate Module

This module derives one exchange rate from several independent venues:
- ExchangePair: Supported currencies and per-venue ticker symbols
- Quote: Best bid / best ask with mid-point price
- QueryCoordinator: Concurrent fan-out to all venues with a full join
- QuorumAggregator: Odd-sized median with random eviction
- ExchangeRateClient: Main entry point (get_rate)
- fetchers: One fetcher per venue
"""

from .ExchangePair import ExchangePair
from .ExchangeRateClient import AllSourcesFailedError, ExchangeRateClient
from .QueryCoordinator import QueryCoordinator
from .Quote import Quote
from .QuorumAggregator import (
    HELD_OUT_SOURCE,
    AggregationResult,
    QuorumAggregator,
)

__all__ = [
    "AggregationResult",
    "AllSourcesFailedError",
    "ExchangePair",
    "ExchangeRateClient",
    "HELD_OUT_SOURCE",
    "QueryCoordinator",
    "Quote",
    "QuorumAggregator",
]
