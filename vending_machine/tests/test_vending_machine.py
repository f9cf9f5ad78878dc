"""
Unit tests for the vending machine core and domain layers.

Tests value objects, exceptions, the stock ledger, change making and
the controller state machine.
"""

import pytest
from unittest.mock import MagicMock

from vending_machine.core.value_objects import (
    Coin,
    Item,
    MachineState,
    Money,
    PurchaseResult,
)
from vending_machine.core.exceptions import (
    VendingMachineError,
    InvalidStateError,
    PaymentError,
    InsufficientFundsError,
    InsufficientChangeError,
    InvalidQuantityError,
)
from vending_machine.core.interfaces import Selector
from vending_machine.domain.stock_ledger import StockLedger
from vending_machine.domain.change_maker import ChangeMaker
from vending_machine.domain.vending_machine import VendingMachine
from vending_machine.event_system import EventType
from vending_machine.infrastructure.settings import StockSettings


COIN_SEQUENCES = [
    [],
    [Coin.PENNY],
    [Coin.QUARTER, Coin.QUARTER],
    [Coin.QUARTER, Coin.DIME, Coin.NICKEL, Coin.PENNY, Coin.QUARTER],
    [Coin.DIME] * 7,
    [Coin.PENNY, Coin.NICKEL] * 6,
    [Coin.QUARTER] * 12 + [Coin.PENNY] * 3,
]


def seeded_coin_stock(count=10):
    """Build a coin ledger with the same count of every coin."""
    stock = StockLedger()
    for coin in Coin:
        stock.add(coin, count)
    return stock


# =============================================================================
# Value Objects Tests
# =============================================================================


class TestCatalog:
    """Tests for the Coin and Item catalogs."""

    def test_coin_denominations(self):
        assert [coin.denomination for coin in Coin] == [1, 5, 10, 25]

    def test_coins_descending(self):
        assert Coin.descending() == [Coin.QUARTER, Coin.DIME, Coin.NICKEL, Coin.PENNY]

    def test_item_prices(self):
        """Test item names and prices."""
        assert Item.SKITTLES.display_name == "Skittles"
        assert Item.SKITTLES.price == 15
        assert Item.TWIX.price == 35
        assert Item.SNICKERS.price == 25


class TestMoney:
    """Tests for Money value object."""

    def test_money_dollars(self):
        assert Money(35).dollars == 0.35

    def test_money_of_coins(self):
        assert Money.of_coins([Coin.QUARTER, Coin.DIME, Coin.PENNY]).cents == 36

    def test_money_str(self):
        assert str(Money(150)) == "$1.50"

    def test_money_negative_raises(self):
        with pytest.raises(ValueError):
            Money(cents=-1)


class TestPurchaseResult:
    """Tests for PurchaseResult value object."""

    def test_unpacks_as_pair(self):
        """Test that a result unpacks into item and change list."""
        result = PurchaseResult(item=Item.TWIX, change=(Coin.DIME, Coin.NICKEL))
        item, change = result
        assert item is Item.TWIX
        assert change == [Coin.DIME, Coin.NICKEL]

    def test_to_dict(self):
        result = PurchaseResult(item=Item.TWIX, change=(Coin.DIME, Coin.NICKEL))
        assert result.to_dict() == {
            "item": "TWIX",
            "price": 35,
            "change": ["DIME", "NICKEL"],
            "change_total": 15,
        }


# =============================================================================
# Exception Tests
# =============================================================================


class TestExceptions:
    """Tests for custom exceptions."""

    def test_vending_machine_error(self):
        """Test VendingMachineError creation and to_dict."""
        error = VendingMachineError("Test error", code="TEST_001")
        assert error.message == "Test error"
        assert error.code == "TEST_001"

        d = error.to_dict()
        assert d["error"] == "TEST_001"
        assert d["message"] == "Test error"

    def test_default_code_is_class_name(self):
        assert InvalidStateError("No item selected").code == "InvalidStateError"

    def test_insufficient_funds_details(self):
        error = InsufficientFundsError("Too little", required=25, available=10)
        assert isinstance(error, PaymentError)
        assert error.details == {"required": 25, "available": 10}

    def test_insufficient_change_details(self):
        error = InsufficientChangeError("No coins", amount=15, remaining=5)
        assert isinstance(error, PaymentError)
        assert error.details == {"amount": 15, "remaining": 5}


# =============================================================================
# Stock Ledger Tests
# =============================================================================


class TestStockLedger:
    """Tests for StockLedger."""

    def test_unknown_kind_has_zero_quantity(self):
        ledger = StockLedger()
        assert ledger.quantity(Item.TWIX) == 0
        assert not ledger.has_item(Item.TWIX)

    def test_add(self):
        ledger = StockLedger()
        ledger.add(Coin.DIME, 3)
        ledger.add(Coin.DIME, 2)
        assert ledger.quantity(Coin.DIME) == 5
        assert ledger.has_item(Coin.DIME)

    def test_add_zero_creates_empty_entry(self):
        ledger = StockLedger()
        ledger.add(Coin.DIME, 0)
        assert ledger.quantity(Coin.DIME) == 0
        assert Coin.DIME not in ledger

    def test_add_negative_raises(self):
        ledger = StockLedger()
        with pytest.raises(InvalidQuantityError):
            ledger.add(Coin.DIME, -1)

    def test_deduct(self):
        ledger = StockLedger()
        ledger.add(Item.TWIX, 2)
        assert ledger.deduct(Item.TWIX) is True
        assert ledger.quantity(Item.TWIX) == 1

    def test_deduct_empty_is_noop(self):
        """Test that deducting an empty kind never goes negative."""
        ledger = StockLedger()
        ledger.add(Item.TWIX, 1)
        assert ledger.deduct(Item.TWIX) is True
        assert ledger.deduct(Item.TWIX) is False
        assert ledger.deduct(Item.SNICKERS) is False
        assert ledger.quantity(Item.TWIX) == 0
        assert ledger.quantity(Item.SNICKERS) == 0

    def test_clear(self):
        ledger = seeded_coin_stock()
        ledger.clear()
        assert all(ledger.quantity(coin) == 0 for coin in Coin)
        assert ledger.total() == 0

    def test_container_protocol(self):
        ledger = StockLedger()
        ledger.add(Coin.DIME, 2)
        ledger.add(Coin.PENNY, 0)
        assert Coin.DIME in ledger
        assert Coin.PENNY not in ledger
        assert ledger.total() == 2
        assert ledger.snapshot() == {Coin.DIME: 2, Coin.PENNY: 0}


# =============================================================================
# Change Maker Tests
# =============================================================================


class TestChangeMaker:
    """Tests for greedy change making."""

    @pytest.fixture
    def change_maker(self):
        return ChangeMaker()

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (0, []),
            (40, [Coin.QUARTER, Coin.DIME, Coin.NICKEL]),
            (16, [Coin.DIME, Coin.NICKEL, Coin.PENNY]),
            (
                99,
                [Coin.QUARTER] * 3 + [Coin.DIME] * 2 + [Coin.PENNY] * 4,
            ),
        ],
    )
    def test_greedy_with_full_stock(self, change_maker, amount, expected):
        assert change_maker.plan(amount, seeded_coin_stock()) == expected

    def test_respects_available_stock(self, change_maker):
        """Test that missing quarters are made up from smaller coins."""
        stock = seeded_coin_stock()
        stock.clear()
        stock.add(Coin.DIME, 2)
        stock.add(Coin.NICKEL, 1)
        assert change_maker.plan(25, stock) == [Coin.DIME, Coin.DIME, Coin.NICKEL]

    def test_plan_does_not_modify_stock(self, change_maker):
        stock = seeded_coin_stock()
        change_maker.plan(99, stock)
        assert all(stock.quantity(coin) == 10 for coin in Coin)

    def test_insufficient_change(self, change_maker):
        stock = StockLedger()
        stock.add(Coin.QUARTER, 10)
        with pytest.raises(InsufficientChangeError) as exc_info:
            change_maker.plan(30, stock)
        assert exc_info.value.amount == 30
        assert exc_info.value.remaining == 5

    def test_negative_amount_raises(self, change_maker):
        with pytest.raises(InvalidQuantityError):
            change_maker.plan(-5, seeded_coin_stock())

    def test_restricted_denominations(self):
        change_maker = ChangeMaker([Coin.PENNY, Coin.DIME])
        assert change_maker.denominations == [Coin.DIME, Coin.PENNY]
        assert change_maker.plan(12, seeded_coin_stock()) == [Coin.DIME, Coin.PENNY, Coin.PENNY]

    def test_default_denominations(self):
        assert ChangeMaker().denominations == Coin.descending()

    def test_empty_denominations_make_no_change(self):
        """Test that an empty denomination list is not replaced by the defaults."""
        change_maker = ChangeMaker([])
        assert change_maker.denominations == []
        assert change_maker.plan(0, seeded_coin_stock()) == []
        with pytest.raises(InsufficientChangeError):
            change_maker.plan(5, seeded_coin_stock())


# =============================================================================
# Vending Machine Tests
# =============================================================================


class TestVendingMachine:
    """Tests for the VendingMachine controller."""

    def test_initial_state(self, machine):
        """Test initial balance, selection and seeded stock."""
        assert machine.balance == 0
        assert machine.selection is None
        assert machine.state == MachineState.IDLE
        assert all(machine.coin_stock.quantity(coin) == 10 for coin in Coin)
        assert all(machine.item_stock.quantity(item) == 5 for item in Item)

    def test_implements_selector(self, machine):
        assert isinstance(machine, Selector)

    def test_select_item(self, machine):
        assert machine.select_item(Item.TWIX) is True
        assert machine.selection is Item.TWIX
        assert machine.state == MachineState.SELECTED
        assert machine.balance == 0

    def test_select_out_of_stock_keeps_selection(self, machine):
        """Test that an out-of-stock selection is reported, not raised."""
        machine.select_item(Item.TWIX)
        machine.item_stock.clear()
        assert machine.select_item(Item.SNICKERS) is False
        assert machine.selection is Item.TWIX

    def test_select_out_of_stock_logs_warning(self, machine, caplog):
        machine.item_stock.clear()
        machine.select_item(Item.SKITTLES)
        assert "out of stock" in caplog.text

    def test_check_price(self, machine):
        assert machine.check_price(Item.TWIX) == 35
        assert machine.check_price(Item.SKITTLES) == 15

    @pytest.mark.parametrize("coins", COIN_SEQUENCES)
    def test_insert_coin_accumulates_balance(self, machine, coins):
        for coin in coins:
            machine.insert_coin(coin)
        assert machine.balance == Money.of_coins(coins).cents

    def test_insert_coin_adds_to_coin_stock(self, machine):
        machine.insert_coin(Coin.QUARTER)
        assert machine.coin_stock.quantity(Coin.QUARTER) == 11

    def test_purchase_without_selection(self, machine):
        machine.insert_coin(Coin.QUARTER)
        with pytest.raises(InvalidStateError):
            machine.purchase_item()

    def test_purchase_twix_with_two_quarters(self, machine):
        """Test the standard purchase scenario with change."""
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.QUARTER)

        item, change = machine.purchase_item()

        assert item is Item.TWIX
        assert change == [Coin.DIME, Coin.NICKEL]
        assert machine.item_stock.quantity(Item.TWIX) == 4
        assert machine.balance == 0

    def test_purchase_deducts_change_from_coin_stock(self, machine):
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()

        assert machine.coin_stock.quantity(Coin.QUARTER) == 12
        assert machine.coin_stock.quantity(Coin.DIME) == 9
        assert machine.coin_stock.quantity(Coin.NICKEL) == 9
        assert machine.coin_stock.quantity(Coin.PENNY) == 10

    def test_purchase_exact_amount(self, machine):
        machine.select_item(Item.SNICKERS)
        machine.insert_coin(Coin.QUARTER)
        result = machine.purchase_item()
        assert result.change == ()
        assert result.change_total == 0

    def test_purchase_clears_selection(self, machine):
        machine.select_item(Item.SNICKERS)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()

        assert machine.selection is None
        assert machine.state == MachineState.IDLE
        machine.insert_coin(Coin.QUARTER)
        with pytest.raises(InvalidStateError):
            machine.purchase_item()

    def test_purchase_insufficient_funds(self, machine):
        """Test that a short balance leaves balance and stock unchanged."""
        machine.select_item(Item.SNICKERS)
        machine.insert_coin(Coin.DIME)

        with pytest.raises(InsufficientFundsError) as exc_info:
            machine.purchase_item()

        assert exc_info.value.required == 25
        assert exc_info.value.available == 10
        assert machine.balance == 10
        assert machine.item_stock.quantity(Item.SNICKERS) == 5
        assert machine.selection is Item.SNICKERS

    def test_purchase_insufficient_change_mutates_nothing(self, empty_coin_machine):
        machine = empty_coin_machine
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.QUARTER)

        with pytest.raises(InsufficientChangeError):
            machine.purchase_item()

        assert machine.balance == 50
        assert machine.selection is Item.TWIX
        assert machine.item_stock.quantity(Item.TWIX) == 5
        assert machine.coin_stock.quantity(Coin.QUARTER) == 2

    def test_change_runs_out_after_repeated_purchases(self, empty_coin_machine):
        """Test that dispensed change is no longer available."""
        machine = empty_coin_machine
        machine.coin_stock.add(Coin.NICKEL, 1)

        machine.select_item(Item.SKITTLES)
        machine.insert_coin(Coin.DIME)
        machine.insert_coin(Coin.DIME)
        assert machine.purchase_item().change == (Coin.NICKEL,)
        assert machine.coin_stock.quantity(Coin.NICKEL) == 0

        machine.select_item(Item.SKITTLES)
        machine.insert_coin(Coin.DIME)
        machine.insert_coin(Coin.DIME)
        with pytest.raises(InsufficientChangeError):
            machine.purchase_item()

    def test_refund(self, machine):
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.DIME)
        machine.insert_coin(Coin.PENNY)

        coins = machine.refund()

        assert Money.of_coins(coins).cents == 36
        assert coins == [Coin.QUARTER, Coin.DIME, Coin.PENNY]
        assert machine.balance == 0

    @pytest.mark.parametrize("inserted", COIN_SEQUENCES)
    def test_refund_sums_to_balance(self, machine, inserted):
        """Test that refunded coins always add up to the balance."""
        for coin in inserted:
            machine.insert_coin(coin)
        balance = machine.balance

        coins = machine.refund()

        assert Money.of_coins(coins).cents == balance
        assert machine.balance == 0

    def test_refund_zero_balance(self, machine):
        assert machine.refund() == []
        assert machine.balance == 0

    def test_refund_keeps_selection_and_items(self, machine):
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.DIME)
        machine.refund()
        assert machine.selection is Item.TWIX
        assert machine.item_stock.quantity(Item.TWIX) == 5

    def test_refund_insufficient_change_keeps_balance(self, empty_coin_machine):
        machine = empty_coin_machine
        machine.coin_stock.add(Coin.QUARTER, 1)
        for _ in range(3):
            machine.insert_coin(Coin.DIME)

        with pytest.raises(InsufficientChangeError):
            machine.refund()

        assert machine.balance == 30
        assert machine.coin_stock.quantity(Coin.DIME) == 3

    def test_reset(self, machine):
        """Test that reset restores stock regardless of prior state."""
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()
        machine.select_item(Item.SKITTLES)
        machine.insert_coin(Coin.DIME)

        machine.reset()

        assert machine.balance == 0
        assert machine.selection is None
        assert all(machine.coin_stock.quantity(coin) == 10 for coin in Coin)
        assert all(machine.item_stock.quantity(item) == 5 for item in Item)

    def test_custom_stock_settings(self):
        machine = VendingMachine(
            stock_settings=StockSettings(initial_coin_count=2, initial_item_count=1)
        )
        assert machine.coin_stock.quantity(Coin.PENNY) == 2
        assert machine.item_stock.quantity(Item.TWIX) == 1

    def test_item_sells_out(self):
        machine = VendingMachine(stock_settings=StockSettings(initial_item_count=1))
        machine.select_item(Item.SNICKERS)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()
        assert machine.select_item(Item.SNICKERS) is False

    def test_status(self, machine):
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.NICKEL)
        status = machine.status()
        assert status["state"] == "selected"
        assert status["balance"] == 5
        assert status["selection"] == "TWIX"
        assert status["coin_stock"]["NICKEL"] == 11
        assert status["item_stock"]["TWIX"] == 5
        assert status["items_remaining"] == 15


class TestVendingMachineEvents:
    """Tests for events published by the controller."""

    def test_select_publishes_event(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.ITEM_SELECTED, handler)
        machine.select_item(Item.TWIX)
        handler.assert_called_once_with({"type": EventType.ITEM_SELECTED, "item": Item.TWIX})

    def test_out_of_stock_publishes_event(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.ITEM_OUT_OF_STOCK, handler)
        machine.item_stock.clear()
        machine.select_item(Item.TWIX)
        handler.assert_called_once()

    def test_insert_publishes_balance(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.COIN_INSERTED, handler)
        machine.insert_coin(Coin.DIME)
        machine.insert_coin(Coin.DIME)
        assert handler.call_args.args[0]["balance"] == 20

    def test_purchase_publishes_dispensed(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.ITEM_DISPENSED, handler)
        machine.select_item(Item.SKITTLES)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()
        event = handler.call_args.args[0]
        assert event["item"] is Item.SKITTLES
        assert event["change"] == [Coin.DIME]

    def test_failed_purchase_publishes_nothing(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.ITEM_DISPENSED, handler)
        machine.select_item(Item.TWIX)
        with pytest.raises(InsufficientFundsError):
            machine.purchase_item()
        handler.assert_not_called()

    def test_reset_publishes_event(self, machine, publisher):
        handler = MagicMock()
        publisher.register_handler(EventType.MACHINE_RESET, handler)
        machine.reset()
        handler.assert_called_once_with({"type": EventType.MACHINE_RESET})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
