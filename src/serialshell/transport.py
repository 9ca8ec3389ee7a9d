# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Serial transport built on pyserial.

pyserial is blocking, so open/write run in the event loop's default
executor and inbound data is read on a daemon thread. Every event the
reader produces is handed back to the event loop with
call_soon_threadsafe, which keeps listener calls on the loop thread and
serialized with command execution.
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Optional, Protocol

import serial

from .const import (
    DEFAULT_BAUDRATE,
    EVENT_DATA,
    EVENT_ERROR,
    READ_CHUNK_SIZE,
    READ_TIMEOUT,
    TRANSPORT_EVENTS,
)

logger = logging.getLogger(__name__)

TransportListener = Callable[[Any], None]


class TransportError(Exception):
    """Raised when the serial port fails to open, write or read."""


class Transport(Protocol):
    """Capability the lifecycle commands need from a transport."""

    @property
    def is_open(self) -> bool: ...

    async def open(self) -> None: ...

    def close(self) -> None: ...

    async def write(self, message: str) -> None: ...

    def on(self, event: str, listener: TransportListener) -> None: ...


class SerialTransport:
    """A serial port that is constructed closed and opened on demand.

    Events:
        data: bytes received from the device
        error: TransportError raised while reading
    """

    def __init__(self, path: str, baudrate: int = DEFAULT_BAUDRATE):
        self.path = path
        self.baudrate = baudrate

        # Assigning the port after construction keeps pyserial from opening it
        self._serial = serial.Serial()
        self._serial.port = path
        self._serial.baudrate = baudrate
        self._serial.timeout = READ_TIMEOUT

        self._listeners: dict[str, list[TransportListener]] = {
            event: [] for event in TRANSPORT_EVENTS
        }
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._reader: Optional[threading.Thread] = None
        self._stop = threading.Event()

    def __repr__(self) -> str:
        return f"SerialTransport({self.path!r}, baudrate={self.baudrate})"

    @property
    def is_open(self) -> bool:
        return bool(self._serial.is_open)

    def on(self, event: str, listener: TransportListener) -> None:
        """Register a listener for a transport event ("data" or "error")."""
        if event not in self._listeners:
            raise ValueError(
                f"Unknown transport event: {event}. "
                f"Use one of: {', '.join(TRANSPORT_EVENTS)}"
            )
        self._listeners[event].append(listener)

    async def open(self) -> None:
        """Open the port and start the reader thread.

        Raises:
            TransportError: if pyserial cannot open the port
        """
        if self.is_open:
            return

        self._loop = asyncio.get_running_loop()
        try:
            await self._loop.run_in_executor(None, self._serial.open)
        except (serial.SerialException, OSError) as e:
            raise TransportError(str(e)) from e

        logger.info(f"Opened {self.path} at {self.baudrate} baud")
        self._stop.clear()
        self._reader = threading.Thread(
            target=self._read_loop,
            name=f"serial-reader-{self.path}",
            daemon=True,
        )
        self._reader.start()

    def close(self) -> None:
        """Stop the reader thread and close the port.

        The reader is woken with cancel_read() and joined before the port
        is closed, since pyserial does not allow closing a port while
        another thread is inside read(). The join blocks the caller for
        at most one read timeout once the read has been cancelled.
        """
        self._stop.set()
        reader, self._reader = self._reader, None
        if self.is_open:
            self._serial.cancel_read()
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=READ_TIMEOUT * 10)
            if reader.is_alive():
                logger.warning(f"Reader for {self.path} did not stop in time")
        self._serial.close()
        logger.info(f"Closed {self.path}")

    async def write(self, message: str) -> None:
        """Write a message, encoded as UTF-8.

        Raises:
            TransportError: if the port is closed or the write fails
        """
        if not self.is_open:
            raise TransportError(f"Port {self.path} is not open")

        loop = asyncio.get_running_loop()
        data = message.encode("utf-8")
        try:
            await loop.run_in_executor(None, self._write_blocking, data)
        except (serial.SerialException, OSError) as e:
            raise TransportError(str(e)) from e
        logger.debug(f"Wrote {len(data)} bytes to {self.path}")

    def _write_blocking(self, data: bytes) -> None:
        self._serial.write(data)
        self._serial.flush()

    def _read_loop(self) -> None:
        """Reader thread body: forward chunks until stopped or failed."""
        while not self._stop.is_set():
            try:
                size = self._serial.in_waiting or 1
                chunk = self._serial.read(min(size, READ_CHUNK_SIZE))
            except (serial.SerialException, OSError) as e:
                # Reading from a port we just closed is expected to fail
                if not self._stop.is_set():
                    logger.warning(f"Read from {self.path} failed: {e}")
                    self._post(EVENT_ERROR, TransportError(str(e)))
                break
            if chunk:
                self._post(EVENT_DATA, bytes(chunk))

    def _post(self, event: str, payload: Any) -> None:
        """Hand an event to the event loop thread."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            loop.call_soon_threadsafe(self._emit, event, payload)
        except RuntimeError:
            # Loop shut down between the check and the call
            self._stop.set()

    def _emit(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(payload)
            except Exception:
                logger.exception(f"Error in transport '{event}' listener")
