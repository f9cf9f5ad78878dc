"""
Vending machine simulation.

Coin-operated machine with item selection, payment accumulation,
purchase settlement, greedy change-making and refunds.
"""

from vending_machine.core import (
    Coin,
    InsufficientChangeError,
    InsufficientFundsError,
    InvalidStateError,
    Item,
    PurchaseResult,
    VendingMachineError,
)
from vending_machine.domain import VendingMachine


__all__ = [
    "Coin",
    "InsufficientChangeError",
    "InsufficientFundsError",
    "InvalidStateError",
    "Item",
    "PurchaseResult",
    "VendingMachine",
    "VendingMachineError",
]
