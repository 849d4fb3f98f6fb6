"""ExchangePair: Supported currency pairs and their per-venue ticker symbols.

Each venue names the same market differently (``ZEC-USD``, ``ZECUSDT``,
``zecusd``...). The table below is the single place that knows those names.
Venues quoting against USDT are used as USD quotes; the peg error is well
inside the tolerance of a display-grade rate.

.. code-block:: python

    >>> pair = ExchangePair.from_currency("USD")
    >>> str(pair)
    'zec/usd'
    >>> pair.symbol("kucoin")
    'ZEC-USDT'
    >>> ExchangePair.from_currency("eur") is None
    True
"""

from __future__ import annotations

from enum import Enum


class ExchangePair(Enum):
    """Closed set of base/quote pairs the oracle can price.

    :ivar base: Base asset symbol (lowercase).
    :ivar quote: Quote currency code (lowercase).
    """

    USD = ("zec", "usd")

    def __init__(self, base: str, quote: str) -> None:
        self.base = base
        self.quote = quote

    def __str__(self) -> str:
        """Return the pair as ``base/quote``."""
        return f"{self.base}/{self.quote}"

    def symbol(self, venue: str) -> str:
        """Return the ticker symbol a venue uses for this pair.

        The table is total for every venue the oracle queries; a missing entry
        is a bug and surfaces as ``KeyError``.

        :param venue: Fetcher name (e.g., "binance", "gemini").
        :returns: Venue-specific symbol string.
        """
        return VENUE_SYMBOLS[self][venue]

    @classmethod
    def from_currency(cls, code: str) -> ExchangePair | None:
        """Resolve a quote currency code to a supported pair.

        :param code: ISO 4217 currency code, case-insensitive (e.g., "USD").
        :returns: Matching pair, or None if the currency is not supported.

        .. code-block:: python

            >>> ExchangePair.from_currency(" usd ")
            <ExchangePair.USD: ('zec', 'usd')>
        """
        code = code.strip().lower()
        for pair in cls:
            if pair.quote == code:
                return pair
        return None


VENUE_SYMBOLS: dict[ExchangePair, dict[str, str]] = {
    ExchangePair.USD: {
        "binance": "ZECUSDT",
        "coinbase": "ZEC-USD",
        "gateio": "ZEC_USDT",
        "gemini": "zecusd",
        "kucoin": "ZEC-USDT",
        "mexc": "ZECUSDT",
    },
}
