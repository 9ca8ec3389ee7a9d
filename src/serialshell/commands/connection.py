# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Serial connection lifecycle commands: set, open, close and write."""

import logging
from typing import TYPE_CHECKING

from ..const import (
    EVENT_DATA,
    EVENT_ERROR,
    HOOK_CLOSE,
    HOOK_ERROR,
    HOOK_OPEN,
    HOOK_READ,
    HOOK_SET,
    HOOK_WRITE,
    STATUS_ERROR,
    STATUS_OK,
    STATUS_PRECONDITION,
)
from ..transport import TransportError
from .base import CommandDescriptor, CommandResponse, ParamSpec

if TYPE_CHECKING:
    from ..hooks import HookBus
    from ..state import ConnectionContext

logger = logging.getLogger(__name__)


def set_command(hooks: "HookBus") -> CommandDescriptor:
    """Build the command that selects the serial device."""

    async def handle_set(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        if not args or not args[0]:
            return CommandResponse(name, STATUS_PRECONDITION, ["No serial device given!"])

        device = args[0]
        previous = context.transport
        if previous is not None and context.ready:
            logger.info(f"Closing {context.device} before switching to {device}")
            previous.close()

        context.device = device
        context.transport = context.transport_factory(device, context.baudrate)
        context.initialized = True
        context.ready = False
        logger.info(f"Serial device set to {device}")

        hooks.publish(HOOK_SET, [device])
        return CommandResponse(name, STATUS_OK, [f"Set serial device to [{device}]"])

    return CommandDescriptor(
        ("set",),
        handle_set,
        (ParamSpec("device", "string", required=True),),
        description="Set the serial device",
    )


def close_command(hooks: "HookBus") -> CommandDescriptor:
    """Build the command that closes the serial connection."""

    async def handle_close(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        if not context.initialized or not context.ready:
            return CommandResponse(name, STATUS_PRECONDITION, ["Already closed!"])

        transport = context.transport
        context.reset()
        if transport is not None:
            transport.close()
        logger.info(f"Connection to {context.device} closed")

        hooks.publish(HOOK_CLOSE, [])
        return CommandResponse(
            name,
            STATUS_OK,
            [
                f"Closed serial device connection to [{context.device}]. "
                "Please run set and start again!"
            ],
        )

    return CommandDescriptor(
        ("close", "stop"), handle_close, description="Close serial connection"
    )


def open_command(hooks: "HookBus") -> CommandDescriptor:
    """Build the command that opens the serial connection.

    Once the transport is open its inbound data is republished on the
    ``read`` hook and its errors on the ``error`` hook.
    """

    def wire_transport(transport) -> None:
        def on_data(data) -> None:
            hooks.publish(HOOK_READ, [data])

        def on_error(err) -> None:
            hooks.publish(HOOK_ERROR, [str(err)])

        transport.on(EVENT_DATA, on_data)
        transport.on(EVENT_ERROR, on_error)

    async def handle_open(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        if not context.initialized:
            return CommandResponse(name, STATUS_PRECONDITION, ["No serial device set!"])
        if context.ready:
            return CommandResponse(name, STATUS_PRECONDITION, ["Already started!"])

        transport = context.transport
        try:
            await transport.open()
        except TransportError as e:
            logger.warning(f"Failed to open {context.device}: {e}")
            return CommandResponse(name, STATUS_ERROR, ["Error on connection!", str(e)])

        # The operator may have run set again while the open was pending
        if context.transport is not transport:
            transport.close()
            return CommandResponse(
                name, STATUS_PRECONDITION, ["Device changed while opening!"]
            )

        context.ready = True
        wire_transport(transport)
        logger.info(f"Connection to {context.device} opened")

        hooks.publish(HOOK_OPEN, list(args))
        return CommandResponse(
            name, STATUS_OK, [f"Connection to [{context.device}] opened!"]
        )

    return CommandDescriptor(
        ("open", "start"), handle_open, description="Open serial connection"
    )


def write_command(hooks: "HookBus") -> CommandDescriptor:
    """Build the command that writes a message to the serial port."""

    async def handle_write(
        name: str, context: "ConnectionContext", args: list[str]
    ) -> CommandResponse:
        if not context.initialized or not context.ready:
            return CommandResponse(name, STATUS_PRECONDITION, ["Not ready!"])

        message = " ".join(args)
        try:
            await context.transport.write(message)
        except TransportError as e:
            logger.warning(f"Failed to write to {context.device}: {e}")
            return CommandResponse(name, STATUS_ERROR, ["Error on send!", str(e)])

        hooks.publish(HOOK_WRITE, [message])
        return CommandResponse(name, STATUS_OK, [f"Message [{message}] sent!"])

    return CommandDescriptor(
        ("write", "w", "send"),
        handle_write,
        (ParamSpec("message", "string", required=True),),
        description="Write to the serial port",
    )
