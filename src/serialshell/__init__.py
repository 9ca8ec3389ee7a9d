# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Interactive command shell for a single serial device.

Commands are typed one per line and dispatched through a CommandRegistry.
Lifecycle commands (set, open, close, write) drive a pyserial transport
and broadcast hooks that front ends subscribe to.

Example usage:
    # Run interactively
    python -m serialshell --device /dev/ttyUSB0 --open

    # Or use programmatically
    from serialshell import ConnectionContext, build_registry
    registry = build_registry()
    context = ConnectionContext()
    registry.on_event("read", print)
    await registry.dispatch("set /dev/ttyUSB0", context)
    await registry.dispatch("open", context)
"""

from .cli import main, run_shell
from .commands import (
    CommandDescriptor,
    CommandNotFoundError,
    CommandRegistry,
    CommandResponse,
    DuplicateCommandError,
    ParamSpec,
    build_registry,
)
from .hooks import HookBus, HookRegistration
from .state import ConnectionContext
from .transport import SerialTransport, Transport, TransportError

__all__ = [
    # Commands
    "CommandDescriptor",
    "CommandNotFoundError",
    "CommandRegistry",
    "CommandResponse",
    "DuplicateCommandError",
    "ParamSpec",
    "build_registry",
    # Hooks
    "HookBus",
    "HookRegistration",
    # Connection
    "ConnectionContext",
    "SerialTransport",
    "Transport",
    "TransportError",
    # CLI
    "main",
    "run_shell",
]
