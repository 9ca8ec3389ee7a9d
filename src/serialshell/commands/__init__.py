# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command dispatch for the serial shell.

The command set is split into modules by concern:
- info: help
- control: quit
- connection: set, open, close, write

Each module exposes builder functions returning a CommandDescriptor;
build_registry() registers all of them into a fresh CommandRegistry.
"""

from .base import (
    CommandDescriptor,
    CommandError,
    CommandNotFoundError,
    CommandResponse,
    DuplicateCommandError,
    ParamSpec,
    no_command_response,
)
from .handler import build_registry, register_builtin_commands
from .registry import CommandRegistry

__all__ = [
    "CommandDescriptor",
    "CommandError",
    "CommandNotFoundError",
    "CommandRegistry",
    "CommandResponse",
    "DuplicateCommandError",
    "ParamSpec",
    "build_registry",
    "no_command_response",
    "register_builtin_commands",
]
