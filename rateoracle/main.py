#!/usr/bin/env python3
"""ZEC Rate Oracle.

Queries several exchanges in parallel and prints one quorum-aggregated
ZEC exchange rate. Useful for checking venue connectivity (e.g. through Tor)
and for scripting.

Exit status: 0 on success, 1 if every venue failed, 2 if the currency is not
supported.
"""

import argparse
import asyncio
import logging
import os
import sys
from decimal import Decimal

from .src.ExchangeRateClient import AllSourcesFailedError, ExchangeRateClient
from .src.fetchers import VENUES

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

EXIT_ALL_FAILED = 1
EXIT_UNSUPPORTED = 2


async def fetch_rate(
    currency: str,
    proxy: str | None,
    timeout: float,
    connect_timeout: float,
) -> Decimal | None:
    """Fetch one aggregated rate with a client that lives for this call.

    :param currency: ISO currency code.
    :param proxy: Optional proxy URL.
    :param timeout: Request timeout in seconds.
    :param connect_timeout: Connect timeout in seconds.
    :returns: Rate, or None if the currency is not supported.
    :raises AllSourcesFailedError: If every venue failed.
    """
    async with ExchangeRateClient(
        proxy=proxy, timeout=timeout, connect_timeout=connect_timeout
    ) as client:
        return await client.get_rate(currency)


def main() -> None:
    """Main entry point for the ZEC Rate Oracle CLI."""
    parser = argparse.ArgumentParser(
        description="ZEC Rate Oracle: Quorum exchange rate from multiple exchanges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Venues queried:
  {', '.join(VENUES)}

Examples:
  # USD rate over the direct network
  python -m rateoracle.main --currency usd

  # Through a local Tor SOCKS proxy
  python -m rateoracle.main --proxy socks5://127.0.0.1:9050

Environment variables (CLI args take precedence):
  CURRENCY, PROXY, FETCH_TIMEOUT, CONNECT_TIMEOUT
""",
    )

    parser.add_argument(
        "--currency",
        type=str,
        help="ISO currency code to price ZEC in (default: usd)",
        default=os.environ.get("CURRENCY") or "usd",
    )

    parser.add_argument(
        "--proxy",
        type=str,
        help="Proxy URL for all venue requests (e.g., socks5://127.0.0.1:9050)",
        default=os.environ.get("PROXY"),
    )

    parser.add_argument(
        "--fetch-timeout",
        dest="fetch_timeout",
        type=float,
        help="Timeout for individual venue requests in seconds (default: 10.0)",
        default=float(os.environ.get("FETCH_TIMEOUT") or "10.0"),
    )

    parser.add_argument(
        "--connect-timeout",
        dest="connect_timeout",
        type=float,
        help="Connection timeout in seconds (default: 10.0)",
        default=float(os.environ.get("CONNECT_TIMEOUT") or "10.0"),
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    args = parser.parse_args()

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.fetch_timeout <= 0:
        parser.error("--fetch-timeout must be positive")

    if args.connect_timeout <= 0:
        parser.error("--connect-timeout must be positive")

    logger.debug(f"Currency:          {args.currency}")
    logger.debug(f"Proxy:             {args.proxy or 'none'}")
    logger.debug(f"Fetch Timeout:     {args.fetch_timeout}s")
    logger.debug(f"Connect Timeout:   {args.connect_timeout}s")

    try:
        rate = asyncio.run(
            fetch_rate(
                args.currency,
                args.proxy,
                args.fetch_timeout,
                args.connect_timeout,
            )
        )
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        sys.exit(130)
    except AllSourcesFailedError as e:
        logger.error(f"No rate available: {e}")
        sys.exit(EXIT_ALL_FAILED)

    if rate is None:
        logger.error(f"Currency {args.currency!r} is not supported")
        sys.exit(EXIT_UNSUPPORTED)

    print(rate)


if __name__ == "__main__":
    main()
