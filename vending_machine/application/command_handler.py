"""
Command Handler - Routes commands to vending machine operations.

Provides clean command routing with validation and error handling.
A command is a dictionary of the form::

    {"command": "insert_coin", "command_id": 3, "data": {"coin": "QUARTER"}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TypeVar

from vending_machine.core.exceptions import InvalidArgumentError, VendingMachineError
from vending_machine.core.value_objects import Coin, Item, Money
from vending_machine.domain.vending_machine import VendingMachine
from vending_machine.loggers import logger


# Type alias for command handlers
CommandHandlerFunc = Callable[..., dict[str, Any]]

E = TypeVar("E", bound=Enum)


@dataclass
class CommandResponse:
    """
    Standardized response for command execution.

    Attributes:
        command_id: The ID of the executed command.
        success: Whether the command succeeded.
        message: Human-readable message.
        data: Optional response data.
        error: Error details when a machine error was raised.
    """

    command_id: Optional[int] = None
    success: bool = False
    message: Optional[str] = None
    data: Any = None
    error: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert the response to a dictionary."""
        result = {
            "command_id": self.command_id,
            "success": self.success,
            "message": self.message,
            "data": self.data,
        }
        if self.error:
            result["error"] = self.error
        return result


@dataclass
class CommandDefinition:
    """
    Definition of a command.

    Attributes:
        name: Command name.
        handler: Handler function.
        required_args: List of required argument names.
        description: Human-readable description.
    """

    name: str
    handler: CommandHandlerFunc
    required_args: list[str]
    description: str = ""


def resolve_enum(enum_cls: type[E], value: Any, argument: str) -> E:
    """
    Resolve an enum member from its name, case-insensitively.

    Raises:
        InvalidArgumentError: If the value names no member.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls[str(value).upper()]
    except KeyError:
        choices = ", ".join(member.name for member in enum_cls)
        raise InvalidArgumentError(
            f"Unknown {argument}: {value}. Expected one of: {choices}",
            argument=argument,
        ) from None


class CommandHandler:
    """
    Routes commands to their appropriate handlers.

    Each handler wraps one machine operation and returns a dictionary
    with ``success``, ``message`` and ``data``.
    """

    def __init__(self, machine: VendingMachine) -> None:
        """
        Initialize the command handler.

        Args:
            machine: The machine commands are executed against.
        """
        self._machine = machine
        self._commands: dict[str, CommandDefinition] = {}
        self._register_default_commands()

    def _register_default_commands(self) -> None:
        """Register all default command handlers."""
        self.register(
            "select_item",
            self._select_item,
            ["item"],
            "Select an item for purchase",
        )
        self.register(
            "check_price",
            self._check_price,
            ["item"],
            "Get the price of an item",
        )
        self.register(
            "insert_coin",
            self._insert_coin,
            ["coin"],
            "Insert a coin",
        )
        self.register(
            "purchase_item",
            self._purchase_item,
            [],
            "Purchase the selected item",
        )
        self.register(
            "refund",
            self._refund,
            [],
            "Refund the current balance",
        )
        self.register(
            "reset",
            self._reset,
            [],
            "Restore the initial stock",
        )
        self.register(
            "status",
            self._status,
            [],
            "Get machine status",
        )

    def register(
        self,
        command_name: str,
        handler: CommandHandlerFunc,
        required_args: list[str],
        description: str = "",
    ) -> None:
        """
        Register a command handler.

        Args:
            command_name: The name of the command.
            handler: The handler function.
            required_args: List of required argument names.
            description: Human-readable description.
        """
        self._commands[command_name] = CommandDefinition(
            name=command_name,
            handler=handler,
            required_args=required_args,
            description=description,
        )

    def get_available_commands(self) -> list[dict[str, Any]]:
        """Get list of available commands with their descriptions."""
        return [
            {
                "name": cmd.name,
                "required_args": cmd.required_args,
                "description": cmd.description,
            }
            for cmd in self._commands.values()
        ]

    def execute(self, command_data: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a command based on command data.

        Args:
            command_data: Dictionary containing 'command', 'command_id', and 'data'.

        Returns:
            Response dictionary with execution result.
        """
        if not isinstance(command_data, dict):
            logger.warning(f"Invalid command format: {command_data!r}")
            return CommandResponse(message="Invalid command format").to_dict()

        command = command_data.get("command")
        command_id = command_data.get("command_id")
        data = command_data.get("data", {}) or {}

        response = CommandResponse(command_id=command_id)

        if not isinstance(data, dict):
            logger.warning(f"Invalid data for command '{command}': {data!r}")
            response.message = "Invalid command format: data must be an object"
            return response.to_dict()

        if not isinstance(command, str) or command not in self._commands:
            logger.warning(f"Unknown command: {command}")
            response.message = f"Unknown command: {command}"
            return response.to_dict()

        definition = self._commands[command]

        kwargs = {arg: data.get(arg) for arg in definition.required_args}
        missing = [arg for arg in definition.required_args if kwargs.get(arg) is None]
        if missing:
            response.message = f"Missing required arguments: {missing}"
            return response.to_dict()

        try:
            result = definition.handler(**kwargs)
        except VendingMachineError as e:
            logger.warning(f"Command '{command}' failed: {e.message}")
            response.message = e.message
            response.error = e.to_dict()
            return response.to_dict()
        except Exception as e:
            logger.error(f"Error executing command '{command}': {e}")
            response.message = f"Error: {e}"
            return response.to_dict()

        response.success = result.get("success", False)
        response.message = result.get("message")
        response.data = result.get("data")
        return response.to_dict()

    def run_script(self, commands: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Execute commands in order.

        Commands without a ``command_id`` are numbered from 1. Entries
        that are not objects get a failed response.

        Returns:
            One response per command.
        """
        responses = []
        for index, command_data in enumerate(commands, start=1):
            if not isinstance(command_data, dict):
                logger.warning(f"Invalid command format: {command_data!r}")
                response = CommandResponse(command_id=index, message="Invalid command format")
                responses.append(response.to_dict())
                continue
            responses.append(self.execute({"command_id": index, **command_data}))
        return responses

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def _select_item(self, item: Any) -> dict[str, Any]:
        selected = resolve_enum(Item, item, "item")
        if not self._machine.select_item(selected):
            return {"success": False, "message": f"{selected.display_name} is out of stock"}
        return {
            "success": True,
            "message": f"Selected {selected.display_name}",
            "data": {"item": selected.name, "price": selected.price},
        }

    def _check_price(self, item: Any) -> dict[str, Any]:
        selected = resolve_enum(Item, item, "item")
        price = self._machine.check_price(selected)
        return {
            "success": True,
            "message": f"{selected.display_name} costs {Money(price)}",
            "data": {"item": selected.name, "price": price},
        }

    def _insert_coin(self, coin: Any) -> dict[str, Any]:
        inserted = resolve_enum(Coin, coin, "coin")
        self._machine.insert_coin(inserted)
        return {
            "success": True,
            "message": f"Balance: {Money(self._machine.balance)}",
            "data": {"coin": inserted.name, "balance": self._machine.balance},
        }

    def _purchase_item(self) -> dict[str, Any]:
        result = self._machine.purchase_item()
        return {
            "success": True,
            "message": f"Dispensed {result.item.display_name}",
            "data": result.to_dict(),
        }

    def _refund(self) -> dict[str, Any]:
        coins = self._machine.refund()
        amount = Money.of_coins(coins)
        return {
            "success": True,
            "message": f"Refunded {amount}",
            "data": {"coins": [coin.name for coin in coins], "amount": amount.cents},
        }

    def _reset(self) -> dict[str, Any]:
        self._machine.reset()
        return {"success": True, "message": "Machine reset"}

    def _status(self) -> dict[str, Any]:
        return {"success": True, "message": "OK", "data": self._machine.status()}
