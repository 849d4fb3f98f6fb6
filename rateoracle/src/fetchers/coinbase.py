"""Coinbase Exchange fetcher.

Endpoint: https://api.exchange.coinbase.com/products/{BASE}-{QUOTE}/ticker
Rate Limit: High (no key required)
Quote: Native USD
"""

from ..ExchangePair import ExchangePair
from ..Quote import Quote
from .base import BaseFetcher, FetcherDecodeError, register_fetcher


@register_fetcher
class CoinbaseFetcher(BaseFetcher):
    """Fetcher for Coinbase Exchange API.

    No API key required for public ticker endpoint.
    """

    name = "coinbase"
    BASE_URL = "https://api.exchange.coinbase.com"

    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch best bid / ask from Coinbase Exchange.

        :param pair: Pair to query.
        :returns: Current quote.
        :raises FetcherError: On failure.
        """
        symbol = pair.symbol(self.name)
        data = await self.get_json(f"{self.BASE_URL}/products/{symbol}/ticker")

        try:
            return self.make_quote(data["bid"], data["ask"], symbol)
        except (KeyError, TypeError) as e:
            raise FetcherDecodeError(
                f"[coinbase] Unexpected response for {symbol}: {e!r}"
            ) from e
