"""ExchangeRateClient: Entry point for quorum ZEC exchange rates.

Architecture:
    - ExchangePair resolves the requested currency (or reports it unsupported)
    - QueryCoordinator queries all six venues concurrently and waits for all
    - QuorumAggregator reduces the quotes to an odd-sized median
    - Individual venue failures are logged and absorbed; only a total failure
      reaches the caller, as AllSourcesFailedError

Each get_rate() call is independent: nothing is cached or carried over
between requests.

.. code-block:: python

    async with ExchangeRateClient(proxy="socks5://127.0.0.1:9050") as client:
        rate = await client.get_rate("usd")
"""

from __future__ import annotations

import logging
import random
from decimal import Decimal

import httpx

from .ExchangePair import ExchangePair
from .fetchers import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
    VENUES,
    BaseFetcher,
    FetcherError,
    create_client,
    get_fetcher,
)
from .QueryCoordinator import QueryCoordinator
from .QuorumAggregator import HELD_OUT_SOURCE, QuorumAggregator

logger = logging.getLogger(__name__)


class AllSourcesFailedError(FetcherError):
    """Raised when every venue failed to return a quote.

    Chained to the first recorded venue error, which is also available as
    ``cause``.

    :ivar errors: Dict mapping venue name to its error, in venue order.
    :ivar cause: Representative venue error.
    """

    def __init__(self, errors: dict[str, FetcherError]) -> None:
        """Initialize the error.

        :param errors: Errors of all failed venues (must not be empty).
        """
        self.errors = errors
        source, self.cause = next(iter(errors.items()))
        super().__init__(f"All exchange requests failed ({source}: {self.cause})")


class ExchangeRateClient:
    """Fetches the ZEC exchange rate from several venues and aggregates it.

    The HTTP client is shared by all venue fetchers. A client passed in is
    borrowed and left open; one created here is closed by aclose().

    :ivar client: HTTP client used by all fetchers.
    :ivar fetchers: Dict mapping venue names to fetcher instances.
    :ivar coordinator: Concurrent venue query fan-out.
    :ivar aggregator: Odd-median quorum aggregator.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        proxy: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the exchange rate client.

        :param client: Optional HTTP client to use instead of creating one.
        :param proxy: Proxy URL for a created client (e.g., a Tor SOCKS port).
        :param timeout: Request timeout for a created client (default: 10.0).
        :param connect_timeout: Connect timeout for a created client (default: 10.0).
        :param rng: Optional random source for eviction (tests pin a seed).
        :raises ValueError: If client is given together with proxy.
        """
        if client is not None and proxy is not None:
            raise ValueError("proxy cannot be combined with an existing client")

        self._owns_client = client is None
        self.client = client or create_client(
            proxy=proxy, timeout=timeout, connect_timeout=connect_timeout
        )

        self.fetchers: dict[str, BaseFetcher] = {
            venue: get_fetcher(venue, self.client) for venue in VENUES
        }
        self.coordinator = QueryCoordinator(self.fetchers)
        self.aggregator = QuorumAggregator(held_out=HELD_OUT_SOURCE, rng=rng)

        logger.debug(
            f"ExchangeRateClient initialized: venues={list(VENUES)}, "
            f"held_out={HELD_OUT_SOURCE}, proxied={proxy is not None}"
        )

    async def get_rate(self, currency: str) -> Decimal | None:
        """Fetch the current ZEC rate in the given currency.

        :param currency: ISO currency code (e.g., "USD").
        :returns: Rate as quote currency per ZEC, or None if the currency is
            not supported (no request is made in that case).
        :raises AllSourcesFailedError: If no venue returned a quote.
        """
        pair = ExchangePair.from_currency(currency)
        if pair is None:
            logger.info(f"Currency {currency!r} is not supported")
            return None

        outcomes = await self.coordinator.query_all(pair)
        result = self.aggregator.aggregate(outcomes)

        if not result.success:
            logger.error(f"All exchange requests failed for {pair}")
            error = AllSourcesFailedError(result.errors)
            raise error from error.cause

        logger.info(
            f"{pair} rate {result.price} from {result.metadata['median_source']} "
            f"({result.metadata['count']} of {len(outcomes)} venues used)"
        )
        return result.price

    async def aclose(self) -> None:
        """Close the HTTP client if it was created by this instance."""
        if self._owns_client and not self.client.is_closed:
            await self.client.aclose()

    async def __aenter__(self) -> ExchangeRateClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
