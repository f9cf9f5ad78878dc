#!/usr/bin/env python3
"""
Vending Machine - Demo driver entry point.

Usage:
    python -m vending_machine.main [--script commands.json] [--debug] [--log-file PATH]

Without a script, runs the demo interaction: select Twix, insert two
quarters, purchase, then refund whatever balance is left.

A script is a JSON list of commands, for example::

    [
        {"command": "select_item", "data": {"item": "twix"}},
        {"command": "insert_coin", "data": {"coin": "quarter"}},
        {"command": "purchase_item"}
    ]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from vending_machine.application.command_handler import CommandHandler
from vending_machine.core.exceptions import VendingMachineError
from vending_machine.core.value_objects import Coin, Item
from vending_machine.domain.vending_machine import VendingMachine
from vending_machine.event_system import EventType
from vending_machine.loggers import build_file_handler, logger, set_level


def on_item_dispensed(event: dict[str, Any]) -> None:
    """Callback when an item leaves the machine."""
    change = [coin.name for coin in event["change"]]
    print(f"Dispensed {event['item'].display_name}, change: {change}")


def on_out_of_stock(event: dict[str, Any]) -> None:
    """Callback when a selection fails for lack of stock."""
    print(f"{event['item'].display_name} is out of stock")


def run_demo(machine: VendingMachine) -> int:
    """
    Run the scripted demo interaction.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    machine.publisher.register_handler(EventType.ITEM_DISPENSED, on_item_dispensed)
    machine.publisher.register_handler(EventType.ITEM_OUT_OF_STOCK, on_out_of_stock)

    try:
        machine.select_item(Item.TWIX)
        machine.insert_coin(Coin.QUARTER)
        machine.insert_coin(Coin.QUARTER)
        machine.purchase_item()
        refund = machine.refund()
    except VendingMachineError as e:
        logger.error(f"Demo failed: {e.message}")
        return 1

    print(f"Refunded Coins: {[coin.name for coin in refund]}")
    return 0


def run_script(machine: VendingMachine, script_path: Path) -> int:
    """
    Run a JSON command script through the command handler.

    Returns:
        Exit code (0 if every command succeeded, 1 otherwise).
    """
    try:
        commands = json.loads(script_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read script {script_path}: {e}")
        return 1

    if not isinstance(commands, list):
        logger.error(f"Script {script_path} must contain a JSON list of commands")
        return 1

    handler = CommandHandler(machine)
    responses = handler.run_script(commands)
    for response in responses:
        print(json.dumps(response))

    return 0 if all(response["success"] for response in responses) else 1


def main(script: Optional[Path] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    machine = VendingMachine()
    if script is not None:
        return run_script(machine, script)
    return run_demo(machine)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Coin-operated vending machine simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--script", "-s",
        type=Path,
        default=None,
        help="JSON file with a list of commands to run instead of the demo",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this rotating file",
    )
    return parser.parse_args(argv)


def cli() -> None:
    """Console script entry point."""
    args = parse_args()

    set_level(logger, logging.DEBUG if args.debug else logging.INFO)
    if args.log_file:
        logger.addHandler(build_file_handler(args.log_file, logger.level))

    try:
        sys.exit(main(args.script))
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    cli()
