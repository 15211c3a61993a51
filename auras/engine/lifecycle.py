"""
Lifecycle scheduler.

Arms one timer entry per ``Duration`` or ``Tick`` field of every effect
instance of an aura instance, and turns timer firings into calls back into
the engine. Entries move ``ARMED -> FIRED -> CANCELLED | EXPIRED``.

The scheduler never decides on its own whether an aura instance is still
active: the expire/tick callbacks look the instance up in the object's
effect state at fire time and do nothing when it is gone.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from auras.core.constants import TimerKind, TimerState
from auras.core.logging import log_debug
from auras.effects.aura import AuraInstance

from .scheduler import Scheduler, TimerHandle

ExpireCallback = Callable[[Any, str], None]
TickCallback = Callable[[Any, str, str], None]


@dataclass
class TimerEntry:
    """One armed Duration or Tick timer of an effect instance."""

    target: Any
    aura_instance_id: str
    effect_id: str
    kind: TimerKind
    interval: float
    armed_at: float
    state: TimerState = TimerState.ARMED
    fire_count: int = 0
    handle: TimerHandle | None = field(default=None, repr=False)

    @property
    def due(self) -> float:
        """Time of the next firing (the only one for Duration entries)."""
        return self.armed_at + self.interval * (self.fire_count + 1)


class LifecycleScheduler:
    """
    Manages the Duration and Tick timers of every registered aura instance.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_expire: ExpireCallback,
        on_tick: TickCallback,
    ) -> None:
        """
        Initialize the lifecycle scheduler.

        Args:
            scheduler (Scheduler):
                The clock/timer collaborator.
            on_expire (ExpireCallback):
                Called as ``on_expire(target, aura_instance_id)`` when a
                Duration timer fires.
            on_tick (TickCallback):
                Called as ``on_tick(target, aura_instance_id, effect_id)`` when
                a Tick timer fires.

        """
        self.scheduler = scheduler
        self._on_expire = on_expire
        self._on_tick = on_tick
        self._entries: dict[str, list[TimerEntry]] = {}
        self._lock = threading.Lock()

    def arm(self, aura_instance: AuraInstance) -> list[TimerEntry]:
        """
        Arm the timers of every effect instance of ``aura_instance``.

        Args:
            aura_instance (AuraInstance):
                A freshly registered aura instance.

        Returns:
            list[TimerEntry]:
                The armed entries, possibly empty.

        """
        now = self.scheduler.now()
        entries: list[TimerEntry] = []
        for effect_id, instance in aura_instance.effect_instances.items():
            for kind, interval in (
                (TimerKind.DURATION, instance.duration),
                (TimerKind.TICK, instance.tick),
            ):
                if interval is None:
                    continue
                entry = TimerEntry(
                    target=aura_instance.target,
                    aura_instance_id=aura_instance.id,
                    effect_id=effect_id,
                    kind=kind,
                    interval=float(interval),
                    armed_at=now,
                )
                fire = partial(self._fire, entry)
                if kind is TimerKind.DURATION:
                    entry.handle = self.scheduler.call_later(entry.interval, fire)
                else:
                    entry.handle = self.scheduler.call_every(entry.interval, fire)
                entries.append(entry)

        if entries:
            with self._lock:
                self._entries.setdefault(aura_instance.id, []).extend(entries)
            log_debug(
                "Armed lifecycle timers",
                {"aura_instance": aura_instance.id, "timers": len(entries)},
            )
        return entries

    def cancel(self, aura_instance_id: str) -> int:
        """
        Cancel every timer of an aura instance, synchronously.

        A Duration entry currently firing is left to finish as EXPIRED.

        Args:
            aura_instance_id (str):
                The aura instance being removed.

        Returns:
            int:
                The number of entries cancelled.

        """
        with self._lock:
            entries = self._entries.pop(aura_instance_id, [])
        cancelled = 0
        for entry in entries:
            if entry.state.is_terminal:
                continue
            if entry.state is TimerState.FIRED and entry.kind is TimerKind.DURATION:
                continue
            if entry.handle is not None:
                entry.handle.cancel()
            entry.state = TimerState.CANCELLED
            cancelled += 1
        return cancelled

    def entries(self, aura_instance_id: str) -> list[TimerEntry]:
        """Returns the live entries of an aura instance."""
        with self._lock:
            return list(self._entries.get(aura_instance_id, ()))

    def remaining(self, aura_instance_id: str) -> float | None:
        """
        Get the time left before the aura instance expires.

        Returns:
            float | None:
                Seconds until the earliest armed Duration timer fires, or None
                if the instance has no armed Duration timer.

        """
        dues = [
            entry.due
            for entry in self.entries(aura_instance_id)
            if entry.kind is TimerKind.DURATION and entry.state is TimerState.ARMED
        ]
        if not dues:
            return None
        return max(0.0, min(dues) - self.scheduler.now())

    def _fire(self, entry: TimerEntry) -> None:
        # A handle cancelled concurrently with its firing must not act.
        if entry.state.is_terminal:
            return
        entry.state = TimerState.FIRED
        entry.fire_count += 1
        if entry.kind is TimerKind.DURATION:
            log_debug(
                "Duration elapsed",
                {"aura_instance": entry.aura_instance_id, "effect": entry.effect_id},
            )
            try:
                self._on_expire(entry.target, entry.aura_instance_id)
            finally:
                entry.state = TimerState.EXPIRED
        else:
            self._on_tick(entry.target, entry.aura_instance_id, entry.effect_id)
