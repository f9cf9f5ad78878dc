"""
Custom exceptions for the vending machine.

Provides a hierarchy of typed exceptions for better error handling
and more informative error messages.
"""

from typing import Any, Optional


class VendingMachineError(Exception):
    """Base exception for all vending machine errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            code: Optional error code for programmatic handling.
            details: Optional additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for command responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# State Errors
# =============================================================================


class InvalidStateError(VendingMachineError):
    """Operation attempted out of order (e.g. purchase with no selection)."""

    pass


# =============================================================================
# Payment Errors
# =============================================================================


class PaymentError(VendingMachineError):
    """Base exception for payment-related errors."""

    pass


class InsufficientFundsError(PaymentError):
    """Inserted balance does not cover the selected item's price."""

    def __init__(
        self,
        message: str,
        required: int = 0,
        available: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.required = required
        self.available = available
        self.details["required"] = required
        self.details["available"] = available


class InsufficientChangeError(PaymentError):
    """Coin stock cannot make up the requested amount."""

    def __init__(
        self,
        message: str,
        amount: int = 0,
        remaining: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.amount = amount
        self.remaining = remaining
        self.details["amount"] = amount
        self.details["remaining"] = remaining


# =============================================================================
# Stock Errors
# =============================================================================


class StockError(VendingMachineError):
    """Base exception for stock ledger errors."""

    pass


class InvalidQuantityError(StockError):
    """Negative quantity or amount passed to a ledger or change maker."""

    pass


# =============================================================================
# Command Errors
# =============================================================================


class CommandError(VendingMachineError):
    """Base exception for command routing errors."""

    pass


class InvalidArgumentError(CommandError):
    """Command argument could not be resolved."""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.argument = argument
        if argument:
            self.details["argument"] = argument
