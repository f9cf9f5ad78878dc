"""
Core module - Foundation layer with no external dependencies.

Contains:
- Exceptions
- Interfaces (Protocols)
- Value Objects
- Catalog enums
"""

from .exceptions import (
    VendingMachineError,
    InvalidStateError,
    PaymentError,
    InsufficientFundsError,
    InsufficientChangeError,
    StockError,
    InvalidQuantityError,
    CommandError,
    InvalidArgumentError,
)
from .interfaces import Selector
from .value_objects import (
    Coin,
    Item,
    MachineState,
    Money,
    PurchaseResult,
)


__all__ = [
    # Exceptions
    "VendingMachineError",
    "InvalidStateError",
    "PaymentError",
    "InsufficientFundsError",
    "InsufficientChangeError",
    "StockError",
    "InvalidQuantityError",
    "CommandError",
    "InvalidArgumentError",
    # Interfaces
    "Selector",
    # Value Objects
    "Coin",
    "Item",
    "MachineState",
    "Money",
    "PurchaseResult",
]
