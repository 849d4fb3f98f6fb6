"""Gate.io fetcher.

Endpoint: https://api.gateio.ws/api/v4/spot/tickers?currency_pair={BASE}_{QUOTE}
Rate Limit: High (no key required)
Quote: USDT pairs only, used as USD
"""

from ..ExchangePair import ExchangePair
from ..Quote import Quote
from .base import BaseFetcher, FetcherDecodeError, FetcherHTTPError, register_fetcher

# Status reported when the venue answers with an empty ticker list
GONE = 410


@register_fetcher
class GateIoFetcher(BaseFetcher):
    """Fetcher for Gate.io spot tickers.

    The tickers endpoint always returns a list, even when filtered to one
    currency pair. An empty list means the pair is not (or no longer) listed
    and is reported like an HTTP 410.
    """

    name = "gateio"
    BASE_URL = "https://api.gateio.ws/api/v4"

    async def fetch_quote(self, pair: ExchangePair) -> Quote:
        """Fetch best bid / ask from Gate.io.

        :param pair: Pair to query.
        :returns: Current quote.
        :raises FetcherHTTPError: If the venue returns no ticker.
        :raises FetcherError: On other failures.
        """
        symbol = pair.symbol(self.name)
        data = await self.get_json(
            f"{self.BASE_URL}/spot/tickers", params={"currency_pair": symbol}
        )

        if not isinstance(data, list):
            raise FetcherDecodeError(
                f"[gateio] Expected a list for {symbol}, got {type(data).__name__}"
            )
        if not data:
            raise FetcherHTTPError(GONE, f"No ticker returned for {symbol}")

        ticker = data[0]
        try:
            return self.make_quote(ticker["highest_bid"], ticker["lowest_ask"], symbol)
        except (KeyError, TypeError) as e:
            raise FetcherDecodeError(
                f"[gateio] Unexpected response for {symbol}: {e!r}"
            ) from e
