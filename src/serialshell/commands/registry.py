# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command registry and line dispatcher."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from ..const import STATUS_ERROR
from ..hooks import HookBus, HookListener, HookRegistration
from .base import (
    CommandDescriptor,
    CommandNotFoundError,
    CommandResponse,
    DuplicateCommandError,
    no_command_response,
)

if TYPE_CHECKING:
    from ..state import ConnectionContext

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Owns the registered commands and the hook bus they publish on.

    Commands are keyed by their canonical name and kept in registration
    order. Every alias across all commands is unique.
    """

    def __init__(self, hooks: Optional[HookBus] = None):
        self._commands: dict[str, CommandDescriptor] = {}
        self.hooks = hooks if hooks is not None else HookBus()

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(list(self._commands.values()))

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def register(self, descriptor: CommandDescriptor) -> CommandDescriptor:
        """Register a command under its canonical name.

        Raises:
            DuplicateCommandError: if the name or any alias is already taken
        """
        for alias in descriptor.aliases:
            existing = self.resolve(alias)
            if existing is not None:
                raise DuplicateCommandError(
                    f"'{alias}' is already registered by '{existing.name}'"
                )
        if len(set(descriptor.aliases)) != len(descriptor.aliases):
            raise DuplicateCommandError(
                f"Command '{descriptor.name}' repeats an alias"
            )
        self._commands[descriptor.name] = descriptor
        logger.debug(f"Registered command: {descriptor.usage()}")
        return descriptor

    def resolve(self, name: str) -> Optional[CommandDescriptor]:
        """Find the command that has name as one of its aliases."""
        for descriptor in self._commands.values():
            if name in descriptor.aliases:
                return descriptor
        return None

    def get(self, name: str) -> CommandDescriptor:
        """Like resolve(), but raises CommandNotFoundError when missing."""
        descriptor = self.resolve(name)
        if descriptor is None:
            raise CommandNotFoundError(name)
        return descriptor

    def list_names(self, primary_only: bool = False) -> Iterator[str]:
        """Yield primary names, or every alias of every command."""
        for descriptor in list(self._commands.values()):
            if primary_only:
                yield descriptor.name
            else:
                yield from descriptor.aliases

    async def dispatch(
        self,
        line: str,
        context: "ConnectionContext",
        respond: Optional[Callable[[CommandResponse], None]] = None,
    ) -> CommandResponse:
        """Execute a command line and return its response.

        The line is split on single spaces: the first token names the
        command and the rest are passed through as positional arguments.
        There is no quoting or escaping.

        Args:
            line: The raw input line (e.g. "write hello world")
            context: Shared connection context handed to the handler
            respond: Optional callback that also receives the response

        Returns:
            Exactly one CommandResponse per call
        """
        parts = line.split(" ")
        cmd, args = parts[0], parts[1:]

        descriptor = self.resolve(cmd)
        if descriptor is None:
            logger.debug(f"No command matches '{cmd}'")
            response = no_command_response()
        else:
            try:
                response = await descriptor.invoke(context, args)
            except Exception as e:
                logger.debug(f"Command '{descriptor.name}' failed", exc_info=True)
                response = CommandResponse(
                    descriptor.name, STATUS_ERROR, [f"Error: {e}"]
                )

        if respond is not None:
            respond(response)
        return response

    def on_event(self, event: str, listener: HookListener) -> HookRegistration:
        """Subscribe a listener to a hook."""
        return self.hooks.subscribe(event, listener)

    def fire_hook(self, event: str, data: Any) -> None:
        """Publish data to every listener of a hook."""
        self.hooks.publish(event, data)
