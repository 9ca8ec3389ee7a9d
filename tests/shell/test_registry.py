# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for the command registry and dispatcher (commands/registry.py)."""
from __future__ import annotations

import pytest

from serialshell.commands import (
    CommandDescriptor,
    CommandNotFoundError,
    CommandRegistry,
    CommandResponse,
    DuplicateCommandError,
)
from serialshell.hooks import HookBus


def _recording_command(aliases, calls):
    async def handler(name, context, args):
        calls.append((name, args))
        return CommandResponse(name, 0, ["done"])

    return CommandDescriptor(aliases, handler)


# ============================================================================
# Registration and Lookup
# ============================================================================

class TestRegistration:
    """Tests for registering and resolving commands."""

    def test_register_returns_descriptor(self):
        """register() returns the stored descriptor."""
        registry = CommandRegistry()
        descriptor = _recording_command(("ping",), [])
        assert registry.register(descriptor) is descriptor
        assert len(registry) == 1

    def test_every_alias_resolves_to_same_descriptor(self, registry):
        """Each alias of every built-in command resolves to its command."""
        for descriptor in registry:
            for alias in descriptor.aliases:
                assert registry.resolve(alias) is descriptor

    def test_resolve_unknown_returns_none(self, registry):
        """Unknown names resolve to None."""
        assert registry.resolve("nope") is None
        assert registry.resolve("") is None

    def test_resolve_is_case_sensitive(self, registry):
        """Names are matched exactly."""
        assert registry.resolve("HELP") is None

    def test_get_raises_for_unknown(self, registry):
        """get() raises CommandNotFoundError for unknown names."""
        with pytest.raises(CommandNotFoundError) as exc_info:
            registry.get("nope")
        assert exc_info.value.name == "nope"
        assert str(exc_info.value) == "No such command: nope"

    def test_contains_checks_aliases(self, registry):
        """The in operator accepts any alias."""
        assert "send" in registry
        assert "bogus" not in registry

    def test_duplicate_primary_rejected(self):
        """Registering a second command with the same name fails."""
        registry = CommandRegistry()
        registry.register(_recording_command(("ping",), []))
        with pytest.raises(DuplicateCommandError):
            registry.register(_recording_command(("ping", "p"), []))
        assert len(registry) == 1

    def test_duplicate_alias_rejected(self):
        """An alias already used by another command is rejected."""
        registry = CommandRegistry()
        registry.register(_recording_command(("ping", "p"), []))
        with pytest.raises(DuplicateCommandError):
            registry.register(_recording_command(("pong", "p"), []))
        assert registry.resolve("pong") is None

    def test_repeated_alias_within_command_rejected(self):
        """A command may not list the same alias twice."""
        registry = CommandRegistry()
        with pytest.raises(DuplicateCommandError):
            registry.register(_recording_command(("ping", "ping"), []))

    def test_duplicate_error_is_value_error(self):
        """DuplicateCommandError is a ValueError."""
        assert issubclass(DuplicateCommandError, ValueError)


class TestListNames:
    """Tests for listing command names."""

    def test_primary_names_in_registration_order(self, registry):
        """Primary names follow registration order."""
        assert list(registry.list_names(primary_only=True)) == [
            "help", "quit", "set", "close", "open", "write",
        ]

    def test_all_aliases(self, registry):
        """All aliases of all commands are listed."""
        assert list(registry.list_names()) == [
            "help", "h",
            "quit", "q", "exit",
            "set",
            "close", "stop",
            "open", "start",
            "write", "w", "send",
        ]

    def test_can_be_listed_repeatedly(self, registry):
        """Each call produces a fresh sequence."""
        assert list(registry.list_names()) == list(registry.list_names())


# ============================================================================
# Dispatch
# ============================================================================

class TestDispatch:
    """Tests for dispatching command lines."""

    @pytest.mark.asyncio
    async def test_dispatch_splits_command_and_args(self):
        """The first token names the command and the rest are args."""
        calls = []
        registry = CommandRegistry()
        registry.register(_recording_command(("say", "s"), calls))

        response = await registry.dispatch("s hello world", None)

        assert calls == [("say", ["hello", "world"])]
        assert response == CommandResponse("say", 0, ["done"])

    @pytest.mark.asyncio
    async def test_dispatch_splits_on_single_spaces(self):
        """Consecutive spaces produce empty arguments."""
        calls = []
        registry = CommandRegistry()
        registry.register(_recording_command(("say",), calls))

        await registry.dispatch("say a  b", None)

        assert calls == [("say", ["a", "", "b"])]

    @pytest.mark.asyncio
    async def test_unknown_command(self):
        """Unknown commands yield the no-command response without a handler call."""
        calls = []
        registry = CommandRegistry()
        registry.register(_recording_command(("say",), calls))

        response = await registry.dispatch("shout hi", None)

        assert response == CommandResponse(None, 1, ["Error: No Command"])
        assert calls == []

    @pytest.mark.asyncio
    async def test_empty_line_is_unknown(self, registry, context):
        """An empty line resolves to no command."""
        response = await registry.dispatch("", context)
        assert response.name is None
        assert response.status == 1

    @pytest.mark.asyncio
    async def test_respond_callback_receives_response(self, registry, context):
        """A respond callback is called exactly once with the response."""
        received = []
        response = await registry.dispatch("nope", context, received.append)
        assert received == [response]

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error_response(self):
        """A handler that raises produces a status 1 response."""
        async def broken(name, context, args):
            raise RuntimeError("kaput")

        registry = CommandRegistry()
        registry.register(CommandDescriptor(("broken",), broken))

        response = await registry.dispatch("broken", None)

        assert response == CommandResponse("broken", 1, ["Error: kaput"])


class TestHookProxy:
    """Tests for the registry's hook methods."""

    def test_fire_hook_reaches_on_event_listeners(self):
        """fire_hook() delivers to listeners added with on_event()."""
        registry = CommandRegistry()
        received = []
        registry.on_event("open", received.append)

        registry.fire_hook("open", ["x"])

        assert received == [["x"]]

    def test_uses_supplied_bus(self):
        """A registry publishes on the hook bus it was given."""
        bus = HookBus()
        registry = CommandRegistry(bus)
        received = []
        bus.subscribe("close", received.append)

        registry.fire_hook("close", [])

        assert registry.hooks is bus
        assert received == [[]]

    def test_registries_are_independent(self):
        """Separate registries do not share commands or hooks."""
        first, second = CommandRegistry(), CommandRegistry()
        first.register(_recording_command(("ping",), []))
        received = []
        second.on_event("open", received.append)

        first.fire_hook("open", [])

        assert second.resolve("ping") is None
        assert received == []
