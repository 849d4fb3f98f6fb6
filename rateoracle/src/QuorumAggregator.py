"""QuorumAggregator: Odd-sized median over venue quotes with random eviction.

The median of an even-sized set is the average of two observed prices, a value no venue
actually reported and one that two colluding venues can steer. The aggregator
therefore always takes the median of an odd number of prices.

Algorithm:
    1. Partition venue outcomes into mid-prices and errors, in venue order
    2. Set the held-out venue aside
    3. Held-out succeeded: if the others are odd in number, evict one at
       random; then add the held-out price
    4. Held-out failed: if the others are even in number, evict one at random
    5. No prices left: fail with every venue's error
    6. Otherwise return the middle element of the sorted prices

Eviction picks uniformly among the candidates so no venue (or list position)
is systematically dropped. The held-out venue is never evicted.

.. code-block:: python

    >>> from decimal import Decimal
    >>> agg = QuorumAggregator(held_out="gemini")
    >>> q = lambda p: Quote(Decimal(p), Decimal(p))
    >>> result = agg.aggregate({"binance": q("100"), "kucoin": q("102"), "gemini": q("101")})
    >>> result.price
    Decimal('101')
"""

from __future__ import annotations

import logging
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TypedDict

from .fetchers import FetcherError
from .Quote import Quote

logger = logging.getLogger(__name__)

# Venue whose price is always kept; see module docstring.
HELD_OUT_SOURCE = "gemini"


class AggregationMetadata(TypedDict, total=False):
    """Metadata about an aggregation.

    :ivar error: Error type identifier, only set on failure.
    :ivar sources: Sources in the final price set, sorted by price.
    :ivar evicted: Source randomly evicted to restore odd cardinality, if any.
    :ivar failed: Sources whose query failed.
    :ivar count: Number of prices in the final set.
    :ivar median_source: Source whose price was selected.
    """

    error: str
    sources: list[str]
    evicted: str | None
    failed: list[str]
    count: int
    median_source: str


@dataclass
class AggregationResult:
    """Result of quorum aggregation.

    :ivar price: Median price, or None if every venue failed.
    :ivar metadata: Additional information about the aggregation.
    :ivar errors: Errors of the failed venues, in venue order.
    """

    price: Decimal | None
    metadata: AggregationMetadata
    errors: dict[str, FetcherError] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        """Check if aggregation was successful."""
        return self.price is not None

    @property
    def error(self) -> str | None:
        """Get error type if aggregation failed."""
        if self.price is None:
            return self.metadata.get("error")
        return None


class QuorumAggregator:
    """Aggregates venue quotes into a single manipulation-resistant price.

    :ivar held_out: Venue whose price is never evicted.
    :ivar rng: Random source used for eviction.

    .. code-block:: python

        >>> agg = QuorumAggregator(rng=random.Random(7))
        >>> agg.held_out
        'gemini'
    """

    def __init__(
        self,
        held_out: str = HELD_OUT_SOURCE,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the aggregator.

        :param held_out: Name of the held-out venue (default: gemini).
        :param rng: Random source for eviction. Defaults to a
            ``random.SystemRandom`` so eviction cannot be predicted.
        :raises ValueError: If held_out is empty.
        """
        if not held_out:
            raise ValueError("held_out must name a venue")

        self.held_out = held_out
        self.rng = rng if rng is not None else random.SystemRandom()

    def aggregate(self, outcomes: Mapping[str, Quote | FetcherError]) -> AggregationResult:
        """Aggregate per-venue outcomes into one median price.

        A held-out venue missing from ``outcomes`` is treated as failed.

        :param outcomes: Dict mapping venue name to its Quote or FetcherError,
            in venue order.
        :returns: AggregationResult with the median price, or None price and
            the venue errors when every venue failed.
        """
        # Step 1: Partition, keeping only the mid-price of each quote
        prices: list[tuple[str, Decimal]] = []
        errors: dict[str, FetcherError] = {}
        held_out_price: Decimal | None = None

        for source, outcome in outcomes.items():
            if isinstance(outcome, FetcherError):
                errors[source] = outcome
            elif source == self.held_out:
                held_out_price = outcome.price
            else:
                prices.append((source, outcome.price))

        # Step 2: Restore odd cardinality around the held-out venue
        evicted: tuple[str, Decimal] | None = None
        if held_out_price is not None:
            if len(prices) % 2 != 0:
                evicted = self._evict_random(prices)
            prices.append((self.held_out, held_out_price))
        elif len(prices) % 2 == 0:
            evicted = self._evict_random(prices)

        if evicted is not None:
            logger.debug(f"Evicted [{evicted[0]}] price {evicted[1]} to keep an odd quorum")

        # Step 3: Every venue failed
        if not prices:
            for source, error in errors.items():
                logger.error(f"[{source}] {error}")
            return AggregationResult(
                price=None,
                metadata={
                    "error": "all_sources_failed",
                    "failed": list(errors),
                },
                errors=errors,
            )

        # Step 4: Median of the odd-sized set
        ordered = sorted(prices, key=lambda item: item[1])
        median_source, median = ordered[len(ordered) // 2]

        return AggregationResult(
            price=median,
            metadata={
                "sources": [source for source, _ in ordered],
                "evicted": evicted[0] if evicted is not None else None,
                "failed": list(errors),
                "count": len(ordered),
                "median_source": median_source,
            },
            errors=errors,
        )

    def _evict_random(self, prices: list[tuple[str, Decimal]]) -> tuple[str, Decimal] | None:
        """Remove one uniformly chosen entry from prices in place.

        :param prices: Candidate (source, price) entries.
        :returns: The evicted entry, or None if prices is empty.
        """
        if not prices:
            return None
        return prices.pop(self.rng.randrange(len(prices)))
