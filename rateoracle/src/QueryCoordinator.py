"""QueryCoordinator: Concurrent fan-out to every venue with a full join.

Every venue is queried at once and the coordinator waits for all of them,
including the slowest: a late venue still gets its vote. There is no timeout
here; the HTTP client's timeouts bound each request.

Results come back in a dict keyed by venue name, in the coordinator's venue
order, holding either the venue's Quote or the FetcherError it raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from .fetchers import FetcherError

if TYPE_CHECKING:
    from .ExchangePair import ExchangePair
    from .fetchers import BaseFetcher
    from .Quote import Quote

logger = logging.getLogger(__name__)


class QueryCoordinator:
    """Queries all venue fetchers concurrently.

    :ivar fetchers: Dict mapping venue names to fetcher instances, in venue order.
    """

    def __init__(self, fetchers: dict[str, BaseFetcher]) -> None:
        """Initialize the query coordinator.

        :param fetchers: Dict mapping venue names to fetcher instances.
        :raises ValueError: If no fetchers are given.
        """
        if not fetchers:
            raise ValueError("At least one fetcher is required")
        self.fetchers = fetchers

    async def query_all(self, pair: ExchangePair) -> dict[str, Quote | FetcherError]:
        """Query every venue for a pair and wait for all of them.

        :param pair: Pair to query.
        :returns: Dict mapping venue name to its Quote or FetcherError.
        """
        names = list(self.fetchers)
        outcomes = await asyncio.gather(*(self._query_one(name, pair) for name in names))
        results = dict(zip(names, outcomes, strict=True))
        logger.debug(f"Venue results for {pair}: {results}")
        return results

    async def _query_one(self, name: str, pair: ExchangePair) -> Quote | FetcherError:
        """Query a single venue, capturing its failure as a value.

        :param name: Venue name.
        :param pair: Pair to query.
        :returns: Quote on success, the raised FetcherError otherwise.
        """
        try:
            return await self.fetchers[name].fetch_quote(pair)
        except FetcherError as e:
            logger.warning(f"[{name}] Failed to fetch {pair}: {e}")
            return e
