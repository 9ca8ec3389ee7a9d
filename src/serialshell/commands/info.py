# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Help command."""

from typing import TYPE_CHECKING

from ..const import STATUS_ERROR, STATUS_OK
from .base import CommandDescriptor, CommandNotFoundError, CommandResponse, ParamSpec

if TYPE_CHECKING:
    from ..state import ConnectionContext
    from .registry import CommandRegistry


def help_command(registry: "CommandRegistry") -> CommandDescriptor:
    """Build the help command for a registry.

    With no argument it lists the usage of every command; with a command
    name (or alias) it shows only that command's usage.
    """

    async def handle_help(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        if args and args[0]:
            try:
                descriptor = registry.get(args[0])
            except CommandNotFoundError as e:
                return CommandResponse(name, STATUS_ERROR, [str(e)])
            return CommandResponse(
                name, STATUS_OK, [f"Usage for {args[0]}: {descriptor.usage()}"]
            )

        lines = [
            f"- Usage for {descriptor.name}: {descriptor.usage()}"
            for descriptor in registry
        ]
        return CommandResponse(name, STATUS_OK, lines)

    return CommandDescriptor(
        ("help", "h"),
        handle_help,
        (ParamSpec("command", "string", required=False),),
        description="Show command usage",
    )
