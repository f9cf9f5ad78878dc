"""
Change Maker - Greedy coin breakdown for change and refunds.

Plans which coins to return without touching the coin stock; the
controller commits the plan once the whole amount is covered.
"""

from __future__ import annotations

from vending_machine.core.exceptions import InsufficientChangeError, InvalidQuantityError
from vending_machine.core.value_objects import Coin
from vending_machine.domain.stock_ledger import StockLedger


class ChangeMaker:
    """
    Largest-denomination-first change planner.

    For US-style denominations {25, 10, 5, 1} greedy selection yields the
    minimal coin count when stock is unconstrained.
    """

    def __init__(self, denominations: list[Coin] | None = None) -> None:
        if denominations is None:
            self._denominations = Coin.descending()
        else:
            self._denominations = sorted(
                denominations,
                key=lambda coin: coin.denomination,
                reverse=True,
            )

    @property
    def denominations(self) -> list[Coin]:
        """Denominations tried, largest first."""
        return list(self._denominations)

    def plan(self, amount: int, coin_stock: StockLedger[Coin]) -> list[Coin]:
        """
        Compute the coins for an amount using only coins in stock.

        Args:
            amount: Amount in cents.
            coin_stock: Ledger consulted for availability. Not modified.

        Returns:
            Coins ordered largest first. Empty for a zero amount.

        Raises:
            InvalidQuantityError: If amount is negative.
            InsufficientChangeError: If the stock cannot cover the amount.
        """
        if amount < 0:
            raise InvalidQuantityError(f"Invalid change amount: {amount}")

        change: list[Coin] = []
        remaining = amount

        for coin in self._denominations:
            if remaining < coin.denomination:
                continue
            count = min(remaining // coin.denomination, coin_stock.quantity(coin))
            if count > 0:
                change.extend([coin] * count)
                remaining -= count * coin.denomination

        if remaining > 0:
            raise InsufficientChangeError(
                "Insufficient change available",
                amount=amount,
                remaining=remaining,
            )

        return change
