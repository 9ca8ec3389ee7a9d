# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Registry setup that combines all command modules."""

from typing import Optional

from ..hooks import HookBus
from .connection import close_command, open_command, set_command, write_command
from .control import quit_command
from .info import help_command
from .registry import CommandRegistry


def register_builtin_commands(registry: CommandRegistry) -> CommandRegistry:
    """Register the built-in command set, in help order."""
    hooks = registry.hooks
    registry.register(help_command(registry))
    registry.register(quit_command())
    registry.register(set_command(hooks))
    registry.register(close_command(hooks))
    registry.register(open_command(hooks))
    registry.register(write_command(hooks))
    return registry


def build_registry(hooks: Optional[HookBus] = None) -> CommandRegistry:
    """Create a registry populated with the built-in commands."""
    return register_builtin_commands(CommandRegistry(hooks))
