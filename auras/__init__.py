"""
Composable, timed status effects for game objects.

The value of every effect on an object is recomputed from the full set of
currently active contributions, never from add/remove deltas, so removing one
of two overlapping stuns leaves the object stunned.

Typical use:

    from auras import AuraSystem, ManualScheduler, OneOrMore, SetAttribute

    system = AuraSystem(ManualScheduler())
    system.register_effect(
        "Stunned", default=False, reduce=OneOrMore(), apply=SetAttribute("stunned")
    )
    system.register_aura(
        "Stun",
        lambda settings: {
            "Duration": settings.get("Duration", 1),
            "EffectInstances": {"Stunned": {}},
        },
    )
    system.apply_aura(player, "Stun", {"Duration": 2})
"""

from .core import (
    AuraError,
    DuplicateRegistrationError,
    EngineConfig,
    InvalidSettingsError,
    NotFoundError,
    RemovalReason,
    ReservedField,
    UnknownAuraError,
    UnknownEffectError,
    setup_logging,
)
from .effects import (
    Aura,
    AuraEvent,
    AuraInstance,
    AuraTemplate,
    Effect,
    EffectEvent,
    EffectInstance,
    EventType,
    Max,
    Min,
    Noop,
    OneOrMore,
    Product,
    SetAttribute,
    Sum,
)
from .engine import AsyncioScheduler, ManualScheduler, Scheduler
from .interfaces import Applier, AuraConstructor, Reducer
from .system import AuraSystem

__all__ = [
    # Facade
    "AuraSystem",
    # Schedulers
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    # Definitions
    "Aura",
    "AuraInstance",
    "AuraTemplate",
    "Effect",
    "EffectInstance",
    # Interfaces
    "Applier",
    "AuraConstructor",
    "Reducer",
    # Stock reducers and appliers
    "Max",
    "Min",
    "Noop",
    "OneOrMore",
    "Product",
    "SetAttribute",
    "Sum",
    # Events
    "AuraEvent",
    "EffectEvent",
    "EventType",
    # Errors
    "AuraError",
    "DuplicateRegistrationError",
    "InvalidSettingsError",
    "NotFoundError",
    "UnknownAuraError",
    "UnknownEffectError",
    # Configuration
    "EngineConfig",
    "RemovalReason",
    "ReservedField",
    "setup_logging",
]
