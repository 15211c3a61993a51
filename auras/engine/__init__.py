"""
Engine module for the aura system.

This module contains the runtime side: per-object effect state, the
recomputation pipeline, the scheduler collaborators and the lifecycle
scheduler driving Duration and Tick timers.
"""

from .lifecycle import LifecycleScheduler, TimerEntry
from .recompute import fold, push, recompute
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle
from .state import ObjectEffectState, StateStore

__all__ = [
    # Lifecycle
    "LifecycleScheduler",
    "TimerEntry",
    # Recomputation
    "fold",
    "push",
    "recompute",
    # Schedulers
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    # State
    "ObjectEffectState",
    "StateStore",
]
