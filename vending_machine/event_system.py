"""
Event system for the vending machine.

This module provides a publish-subscribe event system the controller uses
to narrate its actions (selection, coin insertion, dispensing, refunds).
Handlers run synchronously, in registration order.
"""

from enum import Enum
from typing import Any, Callable, Union

from vending_machine.loggers import logger


EventHandler = Callable[[dict[str, Any]], Any]


class EventType(str, Enum):
    """
    Enumeration of event types in the vending machine.

    These events are published after each controller operation.
    """

    ITEM_SELECTED = "item_selected"
    ITEM_OUT_OF_STOCK = "item_out_of_stock"
    COIN_INSERTED = "coin_inserted"
    ITEM_DISPENSED = "item_dispensed"
    REFUNDED = "refunded"
    MACHINE_RESET = "machine_reset"


class EventPublisher:
    """
    Publisher dispatching events to registered handlers.

    Attributes:
        handlers: Mapping of event types to their handler functions.
    """

    def __init__(self) -> None:
        self.handlers: dict[Union[EventType, str], list[EventHandler]] = {}

    def register_handler(
        self,
        event_type: Union[EventType, str],
        handler: EventHandler,
    ) -> None:
        """
        Register a handler for an event type.

        Args:
            event_type: The event type to handle.
            handler: Callable receiving the event dictionary.
        """
        if event_type not in self.handlers:
            self.handlers[event_type] = []
        self.handlers[event_type].append(handler)

    def register_all(self, handler: EventHandler) -> None:
        """Register a handler for every event type."""
        for event_type in EventType:
            self.register_handler(event_type, handler)

    def unregister_handler(
        self,
        event_type: Union[EventType, str],
        handler: EventHandler,
    ) -> None:
        """
        Unregister a handler for an event type.

        Args:
            event_type: The event type.
            handler: The handler function to remove.
        """
        if event_type in self.handlers:
            try:
                self.handlers[event_type].remove(handler)
            except ValueError:
                logger.debug(f"Handler not registered for {event_type}")

    def publish(self, event_type: Union[EventType, str], **data: Any) -> None:
        """
        Publish an event to all handlers registered for its type.

        A failing handler is logged and does not stop the others.

        Args:
            event_type: The type of event to publish.
            **data: Additional event data as keyword arguments.
        """
        event = {"type": event_type, **data}
        for handler in list(self.handlers.get(event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler error for {event_type}: {e}")
