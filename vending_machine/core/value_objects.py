"""
Value Objects for the vending machine.

Immutable objects that represent values in the domain.
Value objects are compared by value, not by identity.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator


# =============================================================================
# Enums
# =============================================================================


class Coin(Enum):
    """Accepted coin denominations, valued in cents."""

    PENNY = 1
    NICKEL = 5
    DIME = 10
    QUARTER = 25

    @property
    def denomination(self) -> int:
        """Face value in cents."""
        return self.value

    @classmethod
    def descending(cls) -> list["Coin"]:
        """Coins ordered from the largest denomination to the smallest."""
        return sorted(cls, key=lambda coin: coin.denomination, reverse=True)


class Item(Enum):
    """Purchasable products with their fixed price in cents."""

    SKITTLES = ("Skittles", 15)
    TWIX = ("Twix", 35)
    SNICKERS = ("Snickers", 25)

    def __init__(self, display_name: str, price: int) -> None:
        self.display_name = display_name
        self.price = price


class MachineState(Enum):
    """Conceptual states of the vending controller."""

    IDLE = auto()       # No item selected
    SELECTED = auto()   # Item chosen, awaiting payment


# =============================================================================
# Money Value Object
# =============================================================================


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing monetary amounts.

    Internally stores amounts in cents (smallest unit) to avoid
    floating-point precision issues.

    Attributes:
        cents: Amount in cents.
    """

    cents: int = 0

    def __post_init__(self) -> None:
        """Validate the amount."""
        if self.cents < 0:
            raise ValueError("Amount cannot be negative")

    @classmethod
    def of_coins(cls, coins: list[Coin]) -> "Money":
        """Total value of a collection of coins."""
        return cls(cents=sum(coin.denomination for coin in coins))

    @property
    def dollars(self) -> float:
        """Get amount in dollars."""
        return self.cents / 100

    def __str__(self) -> str:
        return f"${self.dollars:.2f}"

    def __repr__(self) -> str:
        return f"Money(cents={self.cents})"


# =============================================================================
# Purchase Result Value Object
# =============================================================================


@dataclass(frozen=True)
class PurchaseResult:
    """
    Result of a settled purchase.

    Unpacks as ``item, change`` so callers can treat it as a pair.

    Attributes:
        item: The dispensed item.
        change: Coins returned as change, largest first.
    """

    item: Item
    change: tuple[Coin, ...] = field(default_factory=tuple)

    @property
    def change_total(self) -> int:
        """Total change returned in cents."""
        return Money.of_coins(list(self.change)).cents

    def __iter__(self) -> Iterator[Any]:
        yield self.item
        yield list(self.change)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for command responses."""
        return {
            "item": self.item.name,
            "price": self.item.price,
            "change": [coin.name for coin in self.change],
            "change_total": self.change_total,
        }
