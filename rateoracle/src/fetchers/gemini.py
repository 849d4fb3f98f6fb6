"""Gemini fetcher.

Endpoint: https://api.gemini.com/v2/ticker/{base}{quote}
Rate Limit: Medium (no key required)
Quote: Native USD
"""

from ..ExchangePair import ExchangePair
from ..Quote import Quote
from .base import BaseFetcher, FetcherDecodeError, register_fetcher


@register_fetcher
class GeminiFetcher(BaseFetcher):
    """Fetcher for the Gemini v2 ticker.

    Gemini is the held-out source of the quorum aggregator: its price is
    never randomly evicted.
    """

    name = "gemini"
    BASE_URL = "https://api.gemini.com/v2"

    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch best bid / ask from Gemini.

        :param pair: Pair to query.
        :returns: Current quote.
        :raises FetcherError: On failure.
        """
        symbol = pair.symbol(self.name)
        data = await self.get_json(f"{self.BASE_URL}/ticker/{symbol}")

        try:
            return self.make_quote(data["bid"], data["ask"], symbol)
        except (KeyError, TypeError) as e:
            raise FetcherDecodeError(
                f"[gemini] Unexpected response for {symbol}: {e!r}"
            ) from e
