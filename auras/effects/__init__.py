"""
Effects module for the aura engine.

This module contains the definition side of the engine: effects and their
instances, auras and their instances, the registries, stock reducers and
appliers, and the lifecycle event system.
"""

# Import definitions
from .effect import Effect
from .effect_instance import EffectInstance
from .aura import Aura, AuraInstance, AuraTemplate

# Import field value helpers
from .values import FieldValue, check_field_values, check_reserved_fields

# Import registries
from .registry import AuraRegistry, EffectRegistry

# Import stock reducers and appliers
from .reducers import Max, Min, OneOrMore, Product, Sum
from .appliers import Noop, SetAttribute

# Import the event system.
from .event_system import (
    AuraEvent,
    EffectEvent,
    EventBus,
    EventType,
    LifecycleEvent,
)

__all__ = [
    # Definitions
    "Effect",
    "EffectInstance",
    "Aura",
    "AuraInstance",
    "AuraTemplate",
    # Field values
    "FieldValue",
    "check_field_values",
    "check_reserved_fields",
    # Registries
    "AuraRegistry",
    "EffectRegistry",
    # Reducers
    "Max",
    "Min",
    "OneOrMore",
    "Product",
    "Sum",
    # Appliers
    "Noop",
    "SetAttribute",
    # Event system
    "AuraEvent",
    "EffectEvent",
    "EventBus",
    "EventType",
    "LifecycleEvent",
]
