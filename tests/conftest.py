# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Pytest configuration and fixtures for serial shell tests."""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import pytest

from serialshell import ConnectionContext, TransportError, build_registry
from serialshell.commands import CommandRegistry


# ============================================================================
# Fake Transport
# ============================================================================

class FakeTransport:
    """In-memory transport that records what the commands do with it."""

    def __init__(self, path: str, baudrate: int):
        self.path = path
        self.baudrate = baudrate
        self.written: list[str] = []
        self.listeners: dict[str, list[Callable[[Any], None]]] = {
            "data": [],
            "error": [],
        }
        self.open_calls = 0
        self.close_calls = 0
        self.open_error: Optional[str] = None
        self.write_error: Optional[str] = None
        # When set, open() waits on it so tests can act mid-open
        self.open_gate: Optional[asyncio.Event] = None
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    async def open(self) -> None:
        self.open_calls += 1
        if self.open_gate is not None:
            await self.open_gate.wait()
        if self.open_error:
            raise TransportError(self.open_error)
        self._open = True

    def close(self) -> None:
        self.close_calls += 1
        self._open = False

    async def write(self, message: str) -> None:
        if self.write_error:
            raise TransportError(self.write_error)
        self.written.append(message)

    def on(self, event: str, listener: Callable[[Any], None]) -> None:
        self.listeners[event].append(listener)

    def emit(self, event: str, payload: Any) -> None:
        """Simulate the device producing an event."""
        for listener in list(self.listeners[event]):
            listener(payload)


class TransportFactory:
    """Transport factory that remembers every transport it built."""

    def __init__(self):
        self.created: list[FakeTransport] = []

    def __call__(self, path: str, baudrate: int) -> FakeTransport:
        transport = FakeTransport(path, baudrate)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def transport_factory() -> TransportFactory:
    """Create a fake transport factory."""
    return TransportFactory()


@pytest.fixture
def context(transport_factory) -> ConnectionContext:
    """Create an unconfigured connection context using fake transports."""
    return ConnectionContext(transport_factory=transport_factory)


@pytest.fixture
def registry() -> CommandRegistry:
    """Create a registry with the built-in commands."""
    return build_registry()


@pytest.fixture
def hook_log(registry) -> list[tuple[str, Any]]:
    """Record every lifecycle hook fired on the registry."""
    log: list[tuple[str, Any]] = []
    for event in ("set", "open", "close", "write", "read", "error"):
        registry.on_event(event, lambda data, event=event: log.append((event, data)))
    return log
