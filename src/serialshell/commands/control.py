# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Control commands."""

import sys
from typing import TYPE_CHECKING, NoReturn

from .base import CommandDescriptor

if TYPE_CHECKING:
    from ..state import ConnectionContext


def quit_command() -> CommandDescriptor:
    """Build the command that exits the shell."""

    async def handle_quit(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> NoReturn:
        # Never responds; the front end closes the port while unwinding
        sys.exit(0)

    return CommandDescriptor(
        ("quit", "q", "exit"), handle_quit, description="Exit the shell"
    )
