"""Unit tests for venue fetchers and the shared transport."""

from decimal import Decimal

import httpx
import pytest

from helpers import FakeVenues
from rateoracle.src.ExchangePair import ExchangePair
from rateoracle.src.fetchers import (
    VENUES,
    BaseFetcher,
    FetcherDecodeError,
    FetcherError,
    FetcherHTTPError,
    GateIoFetcher,
    get_available_fetchers,
    get_fetcher,
    register_fetcher,
)
from rateoracle.src.fetchers.base import to_decimal
from rateoracle.src.Quote import Quote


class TestRegistry:
    """Test fetcher registration."""

    def test_all_venues_registered(self) -> None:
        """Every queried venue has a registered fetcher."""
        assert set(VENUES) <= set(get_available_fetchers())

    @pytest.mark.asyncio
    async def test_unknown_fetcher(self) -> None:
        """Unknown names raise ValueError listing the available ones."""
        async with httpx.AsyncClient() as client:
            with pytest.raises(ValueError, match="Unknown fetcher 'kraken'"):
                get_fetcher("kraken", client)

    def test_register_requires_name(self) -> None:
        """A fetcher class without a name cannot be registered."""

        class Nameless(BaseFetcher):
            async def fetch_quote(self, pair: ExchangePair) -> Quote:
                raise NotImplementedError

        with pytest.raises(ValueError, match="must define a 'name'"):
            register_fetcher(Nameless)


class TestToDecimal:
    """Test numeric field parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30.15", Decimal("30.15")),
            (31, Decimal("31")),
            (Decimal("0.5"), Decimal("0.5")),
            ("0E-1000000", Decimal("0")),
            ("1E+28", Decimal("1E+28")),
        ],
    )
    def test_valid(self, value: object, expected: Decimal) -> None:
        """Strings, ints and Decimals are accepted."""
        assert to_decimal(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, "abc", "NaN", "Infinity", True, [], {}, "1E+1000000", "1E-1000000"],
    )
    def test_invalid(self, value: object) -> None:
        """Anything else is a decode error."""
        with pytest.raises(FetcherDecodeError):
            to_decimal(value)


@pytest.mark.asyncio
@pytest.mark.parametrize("venue", VENUES)
async def test_fetch_quote_parses_each_venue(venues: FakeVenues, venue: str) -> None:
    """Each fetcher reads its venue's bid/ask fields."""
    venues.set_quote(venue, bid="30.10", ask="30.30")

    async with venues.client() as client:
        quote = await get_fetcher(venue, client).fetch_quote(ExchangePair.USD)

    assert quote == Quote(bid=Decimal("30.10"), ask=Decimal("30.30"))
    assert quote.price == Decimal("30.20")
    assert venues.requested_venues() == [venue]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("venue", "url"),
    [
        ("binance", "https://api.binance.com/api/v3/ticker/24hr?symbol=ZECUSDT"),
        ("coinbase", "https://api.exchange.coinbase.com/products/ZEC-USD/ticker"),
        ("gateio", "https://api.gateio.ws/api/v4/spot/tickers?currency_pair=ZEC_USDT"),
        ("gemini", "https://api.gemini.com/v2/ticker/zecusd"),
        ("kucoin", "https://api.kucoin.com/api/v1/market/stats?symbol=ZEC-USDT"),
        ("mexc", "https://api.mexc.com/api/v3/ticker/24hr?symbol=ZECUSDT"),
    ],
)
async def test_fetch_quote_requests_venue_endpoint(
    venues: FakeVenues, venue: str, url: str
) -> None:
    """Each fetcher makes exactly one GET to its endpoint with its symbol."""
    venues.set_quote(venue, bid="1", ask="2")

    async with venues.client() as client:
        await get_fetcher(venue, client).fetch_quote(ExchangePair.USD)

    assert len(venues.requests) == 1
    assert venues.requests[0].method == "GET"
    assert str(venues.requests[0].url) == url


@pytest.mark.asyncio
async def test_json_numbers_are_decimal(venues: FakeVenues) -> None:
    """Numeric JSON (not string) prices keep full precision."""
    venues.set_text("gemini", '{"bid": 30.1, "ask": 30.2000000000000001}')

    async with venues.client() as client:
        quote = await get_fetcher("gemini", client).fetch_quote(ExchangePair.USD)

    assert quote.ask == Decimal("30.2000000000000001")


@pytest.mark.asyncio
async def test_crossed_quote_is_kept_and_logged(
    venues: FakeVenues, caplog: pytest.LogCaptureFixture
) -> None:
    """Ask below bid is not rejected but produces a warning."""
    venues.set_quote("coinbase", bid="31", ask="30")

    async with venues.client() as client:
        quote = await get_fetcher("coinbase", client).fetch_quote(ExchangePair.USD)

    assert quote.price == Decimal("30.5")
    assert "Crossed quote" in caplog.text


class TestFetchFailures:
    """Failures surface as FetcherError subclasses."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("venue", VENUES)
    async def test_http_error(self, venues: FakeVenues, venue: str) -> None:
        """Non-2xx status raises FetcherHTTPError with the status code."""
        venues.set_status(venue, 503)

        async with venues.client() as client:
            with pytest.raises(FetcherHTTPError) as exc_info:
                await get_fetcher(venue, client).fetch_quote(ExchangePair.USD)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_timeout(self, venues: FakeVenues) -> None:
        """Timeouts become FetcherError."""
        venues.set_exception("binance", httpx.ReadTimeout)

        async with venues.client() as client:
            with pytest.raises(FetcherError, match="Request timeout"):
                await get_fetcher("binance", client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    async def test_connection_error(self, venues: FakeVenues) -> None:
        """Network errors become FetcherError."""
        venues.set_exception("kucoin", httpx.ConnectError)

        async with venues.client() as client:
            with pytest.raises(FetcherError, match="Request failed"):
                await get_fetcher("kucoin", client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    async def test_invalid_json(self, venues: FakeVenues) -> None:
        """A body that is not JSON is a decode error."""
        venues.set_text("mexc", "<html>maintenance</html>")

        async with venues.client() as client:
            with pytest.raises(FetcherDecodeError, match="Invalid JSON"):
                await get_fetcher("mexc", client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("venue", "body"),
        [
            ("binance", {"symbol": "ZECUSDT", "lastPrice": "30"}),
            ("coinbase", {"message": "NotFound"}),
            ("gemini", ["bid", "ask"]),
            ("kucoin", {"code": "200000", "data": None}),
            ("kucoin", {"code": "400100", "msg": "invalid symbol"}),
            ("mexc", {"bidPrice": "not a number", "askPrice": "30"}),
            ("gateio", {"label": "INVALID_CURRENCY_PAIR"}),
            ("gateio", [{"currency_pair": "ZEC_USDT"}]),
        ],
    )
    async def test_unexpected_shape(self, venues: FakeVenues, venue: str, body: object) -> None:
        """Missing or malformed fields are decode errors."""
        venues.set_body(venue, body)

        async with venues.client() as client:
            with pytest.raises(FetcherDecodeError):
                await get_fetcher(venue, client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    async def test_gateio_empty_list_is_gone(self, venues: FakeVenues) -> None:
        """An empty ticker list is reported like HTTP 410."""
        venues.set_body("gateio", [])

        async with venues.client() as client:
            with pytest.raises(FetcherHTTPError) as exc_info:
                await GateIoFetcher(client).fetch_quote(ExchangePair.USD)

        assert exc_info.value.status_code == 410

    @pytest.mark.asyncio
    async def test_deeply_nested_json(self, venues: FakeVenues) -> None:
        """A body nested past the decoder's recursion limit is a decode error."""
        venues.set_text("gemini", "[" * 100_000 + "]" * 100_000)

        async with venues.client() as client:
            with pytest.raises(FetcherDecodeError, match="Invalid JSON"):
                await get_fetcher("gemini", client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    async def test_out_of_range_json_number(self, venues: FakeVenues) -> None:
        """A huge exponent in a numeric JSON price is rejected before use."""
        venues.set_text("binance", '{"bidPrice": 1E+1000000, "askPrice": "30"}')

        async with venues.client() as client:
            with pytest.raises(FetcherDecodeError, match="out of range"):
                await get_fetcher("binance", client).fetch_quote(ExchangePair.USD)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("bid", "ask"), [("-30", "30"), ("30", "-0.01")])
    async def test_negative_quote(self, venues: FakeVenues, bid: str, ask: str) -> None:
        """A negative bid or ask is a decode error."""
        venues.set_quote("kucoin", bid=bid, ask=ask)

        async with venues.client() as client:
            with pytest.raises(FetcherDecodeError, match="Negative quote"):
                await get_fetcher("kucoin", client).fetch_quote(ExchangePair.USD)
