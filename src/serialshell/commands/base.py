# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Base infrastructure for command handling.

This module provides the core types shared by the registry and every
command: parameter specifications, command descriptors, and the uniform
response returned from each invocation.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from ..const import STATUS_ERROR, STATUS_OK

if TYPE_CHECKING:
    from ..state import ConnectionContext


class CommandError(Exception):
    """Base class for command registry errors."""


class DuplicateCommandError(CommandError, ValueError):
    """Raised when registering a command whose name or alias is taken."""


class CommandNotFoundError(CommandError, LookupError):
    """Raised when a command name does not resolve to a registered command."""

    def __init__(self, name: str):
        super().__init__(f"No such command: {name}")
        self.name = name


@dataclass
class CommandResponse:
    """Result of executing a command.

    Attributes:
        name: Canonical name of the command that produced it, or None
              when the line did not resolve to a command
        status: 0 on success, otherwise a failure/advisory code
        data: Output lines to show the operator
    """

    name: Optional[str]
    status: int
    data: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def no_command_response() -> CommandResponse:
    """Response for a line that does not name a registered command."""
    return CommandResponse(None, STATUS_ERROR, ["Error: No Command"])


@dataclass(frozen=True)
class ParamSpec:
    """Specification for a command parameter.

    Purely descriptive: the type is advisory and only used when rendering
    usage strings.
    """

    name: str
    param_type: str = "string"
    required: bool = True

    def render(self) -> str:
        """Render as <name: type> when required, [name: type] otherwise."""
        inner = f"{self.name}: {self.param_type}"
        if self.required:
            return f"<{inner}>"
        return f"[{inner}]"


# Handler signature: (canonical name, context, positional args) -> response
CommandHandlerFunc = Callable[
    [str, "ConnectionContext", list[str]], Awaitable[CommandResponse]
]


@dataclass(frozen=True)
class CommandDescriptor:
    """A registered command.

    Binds a set of aliases (the first is canonical), a parameter
    specification and an async handler.
    """

    aliases: tuple[str, ...]
    handler: CommandHandlerFunc
    params: tuple[ParamSpec, ...] = ()
    description: str = ""

    def __post_init__(self):
        # Accept lists from callers but store immutable tuples
        object.__setattr__(self, "aliases", tuple(self.aliases))
        object.__setattr__(self, "params", tuple(self.params))
        if not self.aliases:
            raise ValueError("A command needs at least one alias")

    @property
    def name(self) -> str:
        """Canonical (primary) name."""
        return self.aliases[0]

    def usage(self) -> str:
        """Generate usage string, e.g. ``write/w/send <message: string>``."""
        parts = ["/".join(self.aliases)]
        parts.extend(param.render() for param in self.params)
        return " ".join(parts)

    async def invoke(
        self, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        """Run the handler and return its response."""
        return await self.handler(self.name, context, args)
