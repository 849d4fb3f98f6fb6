"""Test helpers: fake venue endpoints served through httpx.MockTransport."""

from decimal import Decimal
from typing import Any

import httpx

from rateoracle.src.Quote import Quote

VENUE_HOSTS = {
    "api.binance.com": "binance",
    "api.exchange.coinbase.com": "coinbase",
    "api.gateio.ws": "gateio",
    "api.gemini.com": "gemini",
    "api.kucoin.com": "kucoin",
    "api.mexc.com": "mexc",
}


def ticker_payload(venue: str, bid: str, ask: str) -> Any:
    """Build a realistic ticker response body for a venue."""
    if venue in ("binance", "mexc"):
        return {
            "symbol": "ZECUSDT",
            "priceChange": "-0.41",
            "priceChangePercent": "-1.3",
            "prevClosePrice": "31.02",
            "lastPrice": bid,
            "bidPrice": bid,
            "bidQty": "12.5",
            "askPrice": ask,
            "askQty": "3.1",
            "openPrice": "31.02",
            "highPrice": "31.50",
            "lowPrice": "29.80",
            "volume": "41230.1",
            "quoteVolume": "1270455.8",
            "openTime": 1729000000000,
            "closeTime": 1729086400000,
        }
    if venue == "coinbase":
        return {
            "ask": ask,
            "bid": bid,
            "volume": "8121.44",
            "trade_id": 4412345,
            "price": bid,
            "size": "0.52",
            "time": "2024-10-16T12:00:00.000000Z",
        }
    if venue == "gateio":
        return [
            {
                "currency_pair": "ZEC_USDT",
                "last": bid,
                "lowest_ask": ask,
                "highest_bid": bid,
                "change_percentage": "-1.1",
                "base_volume": "5311.2",
                "quote_volume": "163000.4",
                "high_24h": "31.4",
                "low_24h": "29.9",
            }
        ]
    if venue == "gemini":
        return {
            "symbol": "ZECUSD",
            "open": "31.0",
            "high": "31.4",
            "low": "29.9",
            "close": bid,
            "changes": ["30.9", "30.8"],
            "bid": bid,
            "ask": ask,
        }
    if venue == "kucoin":
        return {
            "code": "200000",
            "data": {
                "time": 1729086400000,
                "symbol": "ZEC-USDT",
                "buy": bid,
                "sell": ask,
                "changeRate": "-0.012",
                "changePrice": "-0.37",
                "high": "31.4",
                "low": "29.9",
                "vol": "6120.1",
                "volValue": "187000.2",
                "last": bid,
                "averagePrice": "30.7",
                "takerFeeRate": "0.001",
                "makerFeeRate": "0.001",
                "takerCoefficient": "1",
                "makerCoefficient": "1",
            },
        }
    raise ValueError(f"Unknown venue {venue}")


class FakeVenues:
    """Programmable stand-in for all six exchange APIs.

    Venues without a configured response answer with HTTP 503.
    """

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def set_quote(self, venue: str, bid: str, ask: str | None = None) -> None:
        body = ticker_payload(venue, bid, ask if ask is not None else bid)
        self.responses[venue] = lambda request: httpx.Response(200, json=body)

    def set_body(self, venue: str, body: Any) -> None:
        self.responses[venue] = lambda request: httpx.Response(200, json=body)

    def set_text(self, venue: str, text: str) -> None:
        self.responses[venue] = lambda request: httpx.Response(200, text=text)

    def set_status(self, venue: str, status: int) -> None:
        self.responses[venue] = lambda request: httpx.Response(status, text="unavailable")

    def set_exception(self, venue: str, exc_type: type[httpx.RequestError]) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated failure", request=request)

        self.responses[venue] = raise_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        venue = VENUE_HOSTS[request.url.host]
        responder = self.responses.get(venue)
        if responder is None:
            return httpx.Response(503, text="no response configured")
        return responder(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requested_venues(self) -> list[str]:
        return [VENUE_HOSTS[request.url.host] for request in self.requests]


class FixedIndex:
    """Random source stub that always picks the same index."""

    def __init__(self, index: int) -> None:
        self.index = index
        self.calls: list[int] = []

    def randrange(self, n: int) -> int:
        self.calls.append(n)
        return self.index


def quote(price: str) -> Quote:
    """Quote whose mid-price is exactly ``price``."""
    return Quote(bid=Decimal(price), ask=Decimal(price))
