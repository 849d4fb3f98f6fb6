"""KuCoin fetcher.

Endpoint: https://api.kucoin.com/api/v1/market/stats?symbol={BASE}-{QUOTE}
Rate Limit: High (no key required)
Quote: USDT pairs only, used as USD
"""

from ..ExchangePair import ExchangePair
from ..Quote import Quote
from .base import BaseFetcher, FetcherDecodeError, register_fetcher


@register_fetcher
class KuCoinFetcher(BaseFetcher):
    """Fetcher for KuCoin 24h market stats.

    The payload is wrapped in a ``{"code": ..., "data": {...}}`` envelope;
    ``buy`` is the best bid and ``sell`` the best ask.
    """

    name = "kucoin"
    BASE_URL = "https://api.kucoin.com/api/v1"

    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch best bid / ask from KuCoin.

        :param pair: Pair to query.
        :returns: Current quote.
        :raises FetcherError: On failure.
        """
        symbol = pair.symbol(self.name)
        data = await self.get_json(
            f"{self.BASE_URL}/market/stats", params={"symbol": symbol}
        )

        try:
            stats = data["data"]
            return self.make_quote(stats["buy"], stats["sell"], symbol)
        except (KeyError, TypeError) as e:
            raise FetcherDecodeError(
                f"[kucoin] Unexpected response for {symbol}: {e!r}"
            ) from e
