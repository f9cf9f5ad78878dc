"""
Stock Ledger - Per-kind inventory counts.

Used by the controller for both coin stock and item stock.
"""

from __future__ import annotations

from typing import Generic, Hashable, TypeVar

from vending_machine.core.exceptions import InvalidQuantityError


K = TypeVar("K", bound=Hashable)


class StockLedger(Generic[K]):
    """
    Mapping from a kind to a non-negative count.

    Counts never go negative: ``deduct`` on an empty kind does nothing.
    """

    def __init__(self) -> None:
        self._counts: dict[K, int] = {}

    def quantity(self, kind: K) -> int:
        """Get the current count, 0 for kinds never seen."""
        return self._counts.get(kind, 0)

    def add(self, kind: K, quantity: int) -> None:
        """
        Increase the count of a kind.

        Args:
            kind: The kind to increase.
            quantity: Number of units to add.

        Raises:
            InvalidQuantityError: If quantity is negative.
        """
        if quantity < 0:
            raise InvalidQuantityError(
                f"Cannot add a negative quantity: {quantity}",
                details={"kind": str(kind), "quantity": quantity},
            )
        self._counts[kind] = self.quantity(kind) + quantity

    def deduct(self, kind: K) -> bool:
        """
        Remove one unit of a kind if any is in stock.

        Returns:
            True if a unit was removed, False if the kind was already empty.
        """
        if not self.has_item(kind):
            return False
        self._counts[kind] -= 1
        return True

    def has_item(self, kind: K) -> bool:
        """Check whether at least one unit is in stock."""
        return self.quantity(kind) > 0

    def clear(self) -> None:
        """Remove all entries."""
        self._counts.clear()

    def snapshot(self) -> dict[K, int]:
        """Copy of the current counts."""
        return dict(self._counts)

    def total(self) -> int:
        """Total units across all kinds."""
        return sum(self._counts.values())

    def __contains__(self, kind: object) -> bool:
        return self._counts.get(kind, 0) > 0

    def __repr__(self) -> str:
        return f"StockLedger({self._counts!r})"
