"""Quote: Canonical best bid / best ask representation shared by all fetchers.

Every venue reports its ticker in a different shape; fetchers reduce it to a
Quote so the aggregator only ever sees one type. The representative price of a
venue is the mid-point between bid and ask rather than the last trade, which
is cheaper to push around with a single targeted fill.

.. code-block:: python

    >>> from decimal import Decimal
    >>> quote = Quote(bid=Decimal("30.10"), ask=Decimal("30.30"))
    >>> quote.price
    Decimal('30.20')
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Quote:
    """Best bid and best ask reported by one venue.

    ``bid <= ask`` is expected but not enforced; see :attr:`is_crossed`.

    :ivar bid: Highest current bid.
    :ivar ask: Lowest current ask.
    """

    bid: Decimal
    ask: Decimal

    @property
    def price(self) -> Decimal:
        """Mid-point between best bid and best ask."""
        return (self.bid + self.ask) / 2

    @property
    def is_crossed(self) -> bool:
        """Check if the venue reported an ask below its bid."""
        return self.ask < self.bid
