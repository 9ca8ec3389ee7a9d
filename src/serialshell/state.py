# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Connection state shared by the lifecycle commands."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional

from .const import DEFAULT_BAUDRATE
from .transport import SerialTransport

if TYPE_CHECKING:
    from .transport import Transport


@dataclass
class ConnectionContext:
    """Mutable state of the single serial connection.

    State transitions are driven by the set/open/close commands:
        Unconfigured (initialized=False)
        Configured   (initialized=True, ready=False, transport built)
        Open         (initialized=True, ready=True)
    """

    device: str = ""
    initialized: bool = False
    ready: bool = False
    transport: Optional["Transport"] = None
    baudrate: int = DEFAULT_BAUDRATE
    # Builds an unopened transport from (path, baudrate)
    transport_factory: Callable[[str, int], "Transport"] = field(
        default=SerialTransport, repr=False
    )

    @property
    def state_name(self) -> str:
        """Human readable lifecycle state."""
        if self.ready:
            return "open"
        if self.initialized:
            return "configured"
        return "unconfigured"

    def reset(self) -> None:
        """Return to the unconfigured state, dropping the transport."""
        self.ready = False
        self.initialized = False
        self.transport = None
