"""
Vending Machine - Balance, selection and settlement state machine.

Owns the current balance, the current selection and the coin and item
ledgers. Every operation runs to completion synchronously; a controller
instance must not be shared between concurrent purchasers.
"""

from __future__ import annotations

from typing import Any, Optional

from vending_machine.core.exceptions import InsufficientFundsError, InvalidStateError
from vending_machine.core.value_objects import (
    Coin,
    Item,
    MachineState,
    Money,
    PurchaseResult,
)
from vending_machine.domain.change_maker import ChangeMaker
from vending_machine.domain.stock_ledger import StockLedger
from vending_machine.event_system import EventPublisher, EventType
from vending_machine.infrastructure.settings import StockSettings, get_settings
from vending_machine.loggers import logger


class VendingMachine:
    """
    Coin-operated vending machine controller.

    Selection is cleared after a successful purchase and on reset, so a
    repeat purchase always needs a fresh selection. Coins returned as
    change are deducted from the coin stock.
    """

    def __init__(
        self,
        stock_settings: Optional[StockSettings] = None,
        publisher: Optional[EventPublisher] = None,
        change_maker: Optional[ChangeMaker] = None,
    ) -> None:
        """
        Initialize the machine with seeded stock.

        Args:
            stock_settings: Seed levels; defaults to application settings.
            publisher: Event publisher for narration; a private one if omitted.
            change_maker: Change planner; greedy over all coins if omitted.
        """
        self._stock_settings = stock_settings or get_settings().stock
        self._publisher = publisher or EventPublisher()
        self._change_maker = change_maker or ChangeMaker()

        self._coin_stock: StockLedger[Coin] = StockLedger()
        self._item_stock: StockLedger[Item] = StockLedger()
        self._balance = 0
        self._selection: Optional[Item] = None

        self._seed_stock()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def balance(self) -> int:
        """Current inserted balance in cents."""
        return self._balance

    @property
    def selection(self) -> Optional[Item]:
        """Currently selected item, if any."""
        return self._selection

    @property
    def state(self) -> MachineState:
        """Current conceptual state."""
        if self._selection is None:
            return MachineState.IDLE
        return MachineState.SELECTED

    @property
    def coin_stock(self) -> StockLedger[Coin]:
        """Coins available for change."""
        return self._coin_stock

    @property
    def item_stock(self) -> StockLedger[Item]:
        """Sellable inventory."""
        return self._item_stock

    @property
    def publisher(self) -> EventPublisher:
        """Publisher receiving narration events."""
        return self._publisher

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def select_item(self, item: Item) -> bool:
        """
        Select an item for purchase.

        Out of stock is reported, not raised: the selection is left as is.

        Args:
            item: Item to select.

        Returns:
            True if the item was selected.
        """
        if not self._item_stock.has_item(item):
            logger.warning(f"Item is out of stock: {item.display_name}")
            self._publisher.publish(EventType.ITEM_OUT_OF_STOCK, item=item)
            return False

        self._selection = item
        logger.info(f"Selected Item: {item.display_name}")
        self._publisher.publish(EventType.ITEM_SELECTED, item=item)
        return True

    def check_price(self, item: Item) -> int:
        """Get the price of an item in cents."""
        return item.price

    def insert_coin(self, coin: Coin) -> None:
        """
        Add a coin to the balance.

        The coin also becomes available as future change.
        """
        self._balance += coin.denomination
        self._coin_stock.add(coin, 1)
        logger.info(f"Inserted {coin.name}. Current Balance: {self._balance}")
        self._publisher.publish(EventType.COIN_INSERTED, coin=coin, balance=self._balance)

    def purchase_item(self) -> PurchaseResult:
        """
        Settle the purchase of the selected item.

        Change is planned in full before anything is mutated, so a failed
        purchase leaves balance, selection and both ledgers untouched.

        Returns:
            PurchaseResult with the item and the change coins.

        Raises:
            InvalidStateError: If no item is selected.
            InsufficientFundsError: If the balance is below the price.
            InsufficientChangeError: If the coin stock cannot make change.
        """
        item = self._selection
        if item is None:
            raise InvalidStateError("No item selected")

        if self._balance < item.price:
            raise InsufficientFundsError(
                f"Insufficient balance: {Money(self._balance)} inserted, "
                f"{item.display_name} costs {Money(item.price)}",
                required=item.price,
                available=self._balance,
            )

        change = self._change_maker.plan(self._balance - item.price, self._coin_stock)

        self._dispense_coins(change)
        self._item_stock.deduct(item)
        self._balance = 0
        self._selection = None

        result = PurchaseResult(item=item, change=tuple(change))
        logger.info(
            f"Dispensing {item.display_name}. "
            f"Change: {Money(result.change_total)} {[coin.name for coin in change]}"
        )
        self._publisher.publish(EventType.ITEM_DISPENSED, item=item, change=list(change))
        return result

    def refund(self) -> list[Coin]:
        """
        Return the whole balance as coins.

        Returns:
            Coins summing to the balance; empty if the balance is zero.

        Raises:
            InsufficientChangeError: If the coin stock cannot cover the
                balance. The balance is kept.
        """
        coins = self._change_maker.plan(self._balance, self._coin_stock)

        self._dispense_coins(coins)
        refunded = self._balance
        self._balance = 0

        if coins:
            logger.info(f"Refunded {Money(refunded)}: {[coin.name for coin in coins]}")
        self._publisher.publish(EventType.REFUNDED, coins=list(coins), amount=refunded)
        return coins

    def reset(self) -> None:
        """Clear balance and selection, and restore the initial stock."""
        self._item_stock.clear()
        self._coin_stock.clear()
        self._balance = 0
        self._selection = None
        self._seed_stock()

        logger.info("Machine reset to initial stock")
        self._publisher.publish(EventType.MACHINE_RESET)

    def status(self) -> dict[str, Any]:
        """Snapshot of the machine for status reporting."""
        return {
            "state": self.state.name.lower(),
            "balance": self._balance,
            "selection": self._selection.name if self._selection else None,
            "coin_stock": {coin.name: count for coin, count in self._coin_stock.snapshot().items()},
            "item_stock": {item.name: count for item, count in self._item_stock.snapshot().items()},
            "items_remaining": self._item_stock.total(),
        }

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _seed_stock(self) -> None:
        """Seed both ledgers with the configured initial counts."""
        for coin in Coin:
            self._coin_stock.add(coin, self._stock_settings.initial_coin_count)
        for item in Item:
            self._item_stock.add(item, self._stock_settings.initial_item_count)

    def _dispense_coins(self, coins: list[Coin]) -> None:
        """Remove planned change coins from the coin stock."""
        for coin in coins:
            self._coin_stock.deduct(coin)
