"""
Domain layer - Business logic and domain models.

Contains:
- Stock ledger
- Change maker
- Vending machine controller
"""

from .stock_ledger import StockLedger
from .change_maker import ChangeMaker
from .vending_machine import VendingMachine


__all__ = [
    "StockLedger",
    "ChangeMaker",
    "VendingMachine",
]
