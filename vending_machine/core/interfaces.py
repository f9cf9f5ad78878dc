"""
Interfaces (Protocols) for the vending machine.

Defines the public machine surface using Python's Protocol for
structural subtyping (duck typing with type hints).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .value_objects import Coin, Item, PurchaseResult


@runtime_checkable
class Selector(Protocol):
    """Protocol for anything that sells items for coins."""

    def select_item(self, item: Item) -> bool:
        """
        Select an item for purchase.

        Returns:
            True if the item is in stock and now selected.
        """
        ...

    def check_price(self, item: Item) -> int:
        """Get the price of an item in cents."""
        ...

    def insert_coin(self, coin: Coin) -> None:
        """Add a coin to the current balance."""
        ...

    def purchase_item(self) -> PurchaseResult:
        """Settle the purchase of the selected item."""
        ...

    def refund(self) -> list[Coin]:
        """Return the current balance as coins."""
        ...

    def reset(self) -> None:
        """Restore the machine to its initial stock."""
        ...
