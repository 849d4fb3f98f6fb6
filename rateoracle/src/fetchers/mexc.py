"""MEXC fetcher.

Endpoint: https://api.mexc.com/api/v3/ticker/24hr?symbol={SYMBOL}
Rate Limit: High (no key required)
Quote: USDT pairs only, used as USD
"""

from ..ExchangePair import ExchangePair
from ..Quote import Quote
from .base import BaseFetcher, FetcherDecodeError, register_fetcher


@register_fetcher
class MexcFetcher(BaseFetcher):
    """Fetcher for the MEXC spot 24h ticker (Binance-compatible shape)."""

    name = "mexc"
    BASE_URL = "https://api.mexc.com/api/v3"

    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch best bid / ask from MEXC.

        :param pair: Pair to query.
        :returns: Current quote.
        :raises FetcherError: On failure.
        """
        symbol = pair.symbol(self.name)
        data = await self.get_json(
            f"{self.BASE_URL}/ticker/24hr", params={"symbol": symbol}
        )

        try:
            return self.make_quote(data["bidPrice"], data["askPrice"], symbol)
        except (KeyError, TypeError) as e:
            raise FetcherDecodeError(
                f"[mexc] Unexpected response for {symbol}: {e!r}"
            ) from e
