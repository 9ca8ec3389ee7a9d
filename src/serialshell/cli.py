# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""CLI for the serial shell.

This module provides the interactive command-line interface and the
non-interactive --execute mode.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Optional

from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry, CommandResponse, build_registry
from .const import DEFAULT_BAUDRATE, HOOK_ERROR, HOOK_READ
from .prompt_common import InteractiveSession
from .state import ConnectionContext

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _to_text(item: Any) -> str:
    if isinstance(item, (bytes, bytearray)):
        return bytes(item).decode("utf-8", errors="replace")
    return str(item)


def format_lines(lines: list[Any]) -> str:
    """Render output lines, one per line, indented."""
    return "\n".join(f"  {_to_text(line)}" for line in lines)


def print_response(response: CommandResponse) -> None:
    if response.data:
        print(format_lines(response.data))


def install_output_hooks(registry: CommandRegistry) -> None:
    """Print inbound serial data and serial errors as they arrive."""

    def on_read(data: list) -> None:
        print(format_lines(["Data Received!", *data]))

    def on_error(data: list) -> None:
        print(format_lines(["Serial error!", *data]))

    registry.on_event(HOOK_READ, on_read)
    registry.on_event(HOOK_ERROR, on_error)


async def run_commands(
    registry: CommandRegistry,
    context: ConnectionContext,
    commands: list[str],
) -> bool:
    """Run command lines in order, printing each response.

    Returns:
        True if every command succeeded
    """
    all_success = True
    for line in commands:
        response = await registry.dispatch(line, context)
        print_response(response)
        if not response.ok:
            all_success = False
    return all_success


async def _interactive_loop(
    registry: CommandRegistry, context: ConnectionContext
) -> None:
    session = InteractiveSession(registry, is_connected=lambda: context.ready)

    with patch_stdout():
        # Reinstall logging to use patched stderr
        root_logger = logging.getLogger()
        saved_handlers = list(root_logger.handlers)
        for handler in saved_handlers:
            root_logger.removeHandler(handler)
        new_handler = logging.StreamHandler(sys.stderr)
        new_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(new_handler)

        try:
            async for line in session.input_loop():
                response = await registry.dispatch(line, context)
                print_response(response)
        finally:
            root_logger.removeHandler(new_handler)
            for handler in saved_handlers:
                root_logger.addHandler(handler)


async def run_shell(
    device: Optional[str] = None,
    open_port: bool = False,
    baudrate: int = DEFAULT_BAUDRATE,
    commands: Optional[list[str]] = None,
    wait: float = 0,
    registry: Optional[CommandRegistry] = None,
    context: Optional[ConnectionContext] = None,
) -> bool:
    """Run the serial shell.

    Args:
        device: Serial device to set at startup
        open_port: If True (and device is given), open it at startup
        baudrate: Baud rate used for every device set in this session
        commands: Commands to run non-interactively. When None the
                  interactive prompt is started instead.
        wait: Seconds to keep listening for serial data after the
              non-interactive commands complete
        registry: Registry to use, built-in commands when omitted
        context: Connection context to use, a fresh one when omitted

    Returns:
        True if every startup and non-interactive command succeeded
    """
    if registry is None:
        registry = build_registry()
    if context is None:
        context = ConnectionContext(baudrate=baudrate)

    install_output_hooks(registry)

    startup = []
    if device:
        startup.append(f"set {device}")
        if open_port:
            startup.append("open")

    try:
        success = await run_commands(registry, context, startup)

        if commands is None:
            await _interactive_loop(registry, context)
            return success

        success = await run_commands(registry, context, commands) and success
        if wait > 0:
            await asyncio.sleep(wait)
        return success
    finally:
        if context.ready and context.transport is not None:
            context.transport.close()
            context.reset()


def main():
    """CLI entry point for the serial shell."""
    parser = argparse.ArgumentParser(
        description="Serial Shell - Control a serial device with typed commands"
    )
    parser.add_argument(
        "--device", "-d",
        metavar="PATH",
        help="Serial device to set at startup (e.g. /dev/ttyUSB0 or COM3)"
    )
    parser.add_argument(
        "--open", "-o",
        action="store_true",
        dest="open_port",
        help="Open the device given with --device at startup"
    )
    parser.add_argument(
        "--baudrate", "-b",
        type=int,
        default=DEFAULT_BAUDRATE,
        help=f"Baud rate (default: {DEFAULT_BAUDRATE})"
    )
    parser.add_argument(
        "--execute", "-e",
        action="append",
        dest="commands",
        metavar="COMMAND",
        help="Run a command and exit. Can be specified multiple times to run "
             "commands in sequence. Implies non-interactive mode."
    )
    parser.add_argument(
        "--wait", "-w",
        type=float,
        default=0,
        metavar="SECONDS",
        help="With --execute, keep printing received data for this long "
             "before exiting (default: 0)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    if args.open_port and not args.device:
        parser.error("--open requires --device")
    if args.baudrate <= 0:
        parser.error("--baudrate must be a positive integer")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format=LOG_FORMAT,
    )

    try:
        result = asyncio.run(run_shell(
            device=args.device,
            open_port=args.open_port,
            baudrate=args.baudrate,
            commands=args.commands,
            wait=args.wait,
        ))

        # Exit with appropriate code for scripted use
        if args.commands is not None:
            sys.exit(0 if result else 1)

    except KeyboardInterrupt:
        print("\nSerial shell stopped.")


if __name__ == "__main__":
    main()
