"""
Constants and enumerations for the aura engine.

Defines the reserved effect-instance field names, the template key that holds
effect instances, and the enumerations used by the lifecycle scheduler.
"""

from enum import Enum

# Key of an aura template that holds the effect instances. Every other key of
# the template is a shared field replicated into each effect instance.
EFFECT_INSTANCES_KEY = "EffectInstances"


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name


class ReservedField(NiceEnum):
    """Effect instance fields interpreted by the engine itself."""

    DURATION = "Duration"
    TICK = "Tick"
    CLEANUP = "Cleanup"


class TimerKind(NiceEnum):
    """Kinds of lifecycle timers armed for an effect instance."""

    DURATION = "DURATION"
    TICK = "TICK"


class TimerState(NiceEnum):
    """States of a lifecycle timer entry."""

    ARMED = "ARMED"
    FIRED = "FIRED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self in (TimerState.CANCELLED, TimerState.EXPIRED)


class RemovalReason(NiceEnum):
    """Why an aura instance left an object."""

    REMOVED = "REMOVED"
    EXPIRED = "EXPIRED"
    CLEARED = "CLEARED"
