"""
Pytest configuration for vending machine tests.

Provides fresh machines and publishers for each test.
"""

import pytest

from vending_machine.domain.vending_machine import VendingMachine
from vending_machine.event_system import EventPublisher
from vending_machine.infrastructure.settings import StockSettings


@pytest.fixture
def publisher():
    """Create a fresh event publisher."""
    return EventPublisher()


@pytest.fixture
def machine(publisher):
    """Create a machine seeded with the default stock."""
    return VendingMachine(publisher=publisher)


@pytest.fixture
def empty_coin_machine(publisher):
    """Create a machine with items in stock but no coins for change."""
    return VendingMachine(
        stock_settings=StockSettings(initial_coin_count=0),
        publisher=publisher,
    )
