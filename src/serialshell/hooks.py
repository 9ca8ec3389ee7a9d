# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Hook bus for broadcasting command lifecycle events.

Commands publish named events (``set``, ``open``, ``read`` ...) and any
number of listeners receive them without the command knowing who is
listening. Delivery is synchronous, on the caller's thread, in
registration order.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

HookListener = Callable[[Any], None]


@dataclass(eq=False)
class HookRegistration:
    """A single (event, listener) subscription.

    Compared by identity so the same listener may be registered more than
    once and each registration removed independently.
    """

    event: str
    listener: HookListener


class HookBus:
    """Registry of event listeners."""

    def __init__(self):
        self._registrations: dict[str, list[HookRegistration]] = {}

    def subscribe(self, event: str, listener: HookListener) -> HookRegistration:
        """Register a listener for an event.

        Returns:
            The registration, usable as a handle for unsubscribe()
        """
        registration = HookRegistration(event, listener)
        self._registrations.setdefault(event, []).append(registration)
        logger.debug(f"Subscribed listener to hook '{event}'")
        return registration

    def unsubscribe(self, registration: HookRegistration) -> bool:
        """Remove a registration. Returns False if it was not registered."""
        registrations = self._registrations.get(registration.event)
        if not registrations:
            return False
        for i, existing in enumerate(registrations):
            if existing is registration:
                del registrations[i]
                if not registrations:
                    del self._registrations[registration.event]
                return True
        return False

    def publish(self, event: str, data: Any) -> None:
        """Deliver data to every listener registered for event."""
        # Snapshot so listeners may subscribe/unsubscribe during delivery
        registrations = list(self._registrations.get(event, ()))
        logger.debug(f"Firing hook '{event}' to {len(registrations)} listener(s)")
        for registration in registrations:
            try:
                registration.listener(data)
            except Exception:
                logger.exception(f"Error in '{event}' hook listener")

    def listeners(self, event: str) -> tuple[HookListener, ...]:
        """Get the listeners currently registered for an event."""
        return tuple(r.listener for r in self._registrations.get(event, ()))

    def clear(self, event: Optional[str] = None) -> None:
        """Remove all listeners, or only those for one event."""
        if event is None:
            self._registrations.clear()
        else:
            self._registrations.pop(event, None)
