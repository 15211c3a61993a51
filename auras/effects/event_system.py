"""
Event system module for the aura engine.

Publishes lifecycle events (aura applied/removed/expired, effect recomputed
or ticked) to listeners registered by the host.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from auras.core.constants import NiceEnum, RemovalReason
from auras.core.logging import log_debug


class EventType(NiceEnum):
    """Enumeration of available event types."""

    AURA_APPLIED = "aura_applied"  # An aura instance was registered
    AURA_REMOVED = "aura_removed"  # Removed by a call (single, batch or clear)
    AURA_EXPIRED = "aura_expired"  # Removed because its Duration elapsed

    EFFECT_CHANGED = "effect_changed"  # Effect recomputed after add/remove
    EFFECT_TICKED = "effect_ticked"  # Effect recomputed by a Tick timer


class LifecycleEvent(BaseModel):
    """Base class for all lifecycle events."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    event_type: EventType = Field(
        description="The type of lifecycle event.",
    )
    target: Any = Field(description="The object the event happened on.")


class AuraEvent(LifecycleEvent):
    """Event data for aura application and removal."""

    aura_name: str = Field(description="The aura of the instance.")
    aura_instance_id: str = Field(description="The aura instance id.")
    reason: RemovalReason | None = Field(
        default=None,
        description="Why the instance left the object, None on application.",
    )

    def __str__(self) -> str:
        return (
            f"AuraEvent({self.event_type}, {self.aura_name}, "
            f"id={self.aura_instance_id})"
        )


class EffectEvent(LifecycleEvent):
    """Event data for effect recomputation."""

    effect_id: str = Field(description="The recomputed effect.")
    value: Any = Field(description="The value passed to the effect's apply.")
    active_count: int = Field(
        default=0,
        description="Number of instances the value was folded from.",
    )

    def __str__(self) -> str:
        return f"EffectEvent({self.event_type}, {self.effect_id}={self.value!r})"


Listener = Callable[[LifecycleEvent], None]


class EventBus:
    """
    Dispatches lifecycle events to listeners, per event type.

    Listeners run synchronously, in subscription order, inside the target's
    critical section. Exceptions raised by a listener propagate to the caller.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventType, list[Listener]] = {}

    def subscribe(self, event_type: EventType, listener: Listener) -> None:
        """
        Register a listener for one event type.

        Args:
            event_type (EventType):
                The event type to listen to.
            listener (Listener):
                Called with the event.

        """
        self._listeners.setdefault(event_type, []).append(listener)

    def unsubscribe(self, event_type: EventType, listener: Listener) -> bool:
        """
        Remove a listener.

        Returns:
            bool:
                True if the listener was subscribed, False otherwise.

        """
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def has_listeners(self, event_type: EventType) -> bool:
        return bool(self._listeners.get(event_type))

    def emit(self, event: LifecycleEvent) -> None:
        """Deliver ``event`` to every listener of its type."""
        listeners = list(self._listeners.get(event.event_type, ()))
        if listeners:
            log_debug(f"Emitting {event}", {"listeners": len(listeners)})
        for listener in listeners:
            listener(event)
