"""
Aura system module.

``AuraSystem`` is the public entry point: it owns the registries, the per-object
state store, the lifecycle scheduler and the event bus, and serializes every
mutation of a given object.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from auras.core.config import EngineConfig
from auras.core.constants import RemovalReason
from auras.core.logging import log_debug, setup_logging
from auras.effects.aura import Aura, AuraInstance
from auras.effects.effect import Effect
from auras.effects.effect_instance import EffectInstance
from auras.effects.event_system import (
    AuraEvent,
    EffectEvent,
    EventBus,
    EventType,
)
from auras.effects.registry import AuraRegistry, EffectRegistry
from auras.engine.lifecycle import LifecycleScheduler
from auras.engine.recompute import fold, push, recompute
from auras.engine.scheduler import ManualScheduler, Scheduler
from auras.engine.state import ObjectEffectState, StateStore


class AuraSystem:
    """
    Applies, removes and queries auras on arbitrary target objects.

    Targets are opaque: they are only used as dictionary keys and handed to
    the effects' reduce/apply functions, so they must be hashable.

    Attributes:
        config (EngineConfig):
            Engine configuration.
        scheduler (Scheduler):
            Clock and timer collaborator.
        effects (EffectRegistry):
            Registered effects.
        auras (AuraRegistry):
            Registered auras.
        states (StateStore):
            Per-object effect states.
        lifecycle (LifecycleScheduler):
            Duration and Tick timers.
        events (EventBus):
            Lifecycle event listeners.

    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        config: EngineConfig | None = None,
        effects: EffectRegistry | None = None,
        auras: AuraRegistry | None = None,
    ) -> None:
        """
        Initialize the aura system.

        Args:
            scheduler (Scheduler | None):
                Timer collaborator, a fresh ManualScheduler if omitted.
            config (EngineConfig | None):
                Engine configuration, defaults if omitted. Its log_level,
                when set, is installed through setup_logging.
            effects (EffectRegistry | None):
                Effect registry to share, a fresh one if omitted.
            auras (AuraRegistry | None):
                Aura registry to share, a fresh one if omitted.

        """
        self.config = config or EngineConfig()
        if self.config.log_level is not None:
            setup_logging(self.config.log_level)
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.effects = effects if effects is not None else EffectRegistry()
        self.auras = auras if auras is not None else AuraRegistry()
        self.states = StateStore()
        self.events = EventBus()
        self.lifecycle = LifecycleScheduler(
            self.scheduler,
            on_expire=self._expire,
            on_tick=self._tick,
        )

    # === Registration ===

    def register_effect(
        self,
        effect_id: str,
        *,
        reduce: Callable[[Any, EffectInstance], Any],
        apply: Callable[[Any, Any], None],
        default: Any = None,
    ) -> Effect:
        """
        Register an effect.

        Args:
            effect_id (str):
                The unique effect id.
            reduce (Callable[[Any, EffectInstance], Any]):
                Fold function.
            apply (Callable[[Any, Any], None]):
                Pushes the aggregated value onto a target.
            default (Any):
                Fold seed and value when no instance is active.

        Raises:
            DuplicateRegistrationError:
                If ``effect_id`` is already registered.

        Returns:
            Effect:
                The registered effect.

        """
        return self.effects.define(effect_id, reduce=reduce, apply=apply, default=default)

    def register_aura(
        self, aura_name: str, constructor: Callable[[dict[str, Any]], Any]
    ) -> Aura:
        """
        Register an aura constructor.

        Args:
            aura_name (str):
                The unique aura name.
            constructor (Callable[[dict[str, Any]], Any]):
                settings -> template.

        Raises:
            DuplicateRegistrationError:
                If ``aura_name`` is already registered.

        Returns:
            Aura:
                The registered aura.

        """
        return self.auras.define(aura_name, constructor)

    # === Application & removal ===

    def apply_aura(
        self,
        target: Any,
        aura_name: str,
        settings: Mapping[str, Any] | None = None,
    ) -> str:
        """
        Apply an aura to a target.

        The template is built and fully validated before the target's state
        is touched, so a failing application leaves no trace.

        Args:
            target (Any):
                The object receiving the aura.
            aura_name (str):
                The registered aura to apply.
            settings (Mapping[str, Any] | None):
                Passed to the aura constructor, empty if omitted.

        Raises:
            UnknownAuraError:
                If ``aura_name`` is not registered.
            InvalidSettingsError:
                If the constructor fails or builds a malformed template.
            UnknownEffectError:
                If the template references an unregistered effect.

        Returns:
            str:
                The id of the new aura instance.

        """
        aura = self.auras.get(aura_name)
        template = aura.build(settings)
        for effect_id in template.effect_instances:
            self.effects.get(effect_id)

        aura_instance = AuraInstance.from_template(
            aura.name,
            target,
            template,
            applied_at=self.scheduler.now(),
            validate_values=self.config.validate_fields,
        )

        with self.states.locked(target, create=True) as state:
            if state is None:
                raise RuntimeError(f"No effect state could be created for {target!r}")
            touched = state.register(aura_instance)
            self.lifecycle.arm(aura_instance)
            log_debug(
                f"Applied aura {aura.name}",
                {"target": target, "aura_instance": aura_instance.id},
            )
            self._emit_aura(EventType.AURA_APPLIED, aura_instance)
            self._recompute_effects(state, touched)
        return aura_instance.id

    def remove_aura_instance(self, target: Any, aura_instance_id: str) -> bool:
        """
        Remove one aura instance from a target.

        Removing an instance that is not (or no longer) registered is a no-op:
        nothing is recomputed and no Cleanup runs.

        Args:
            target (Any):
                The object holding the aura.
            aura_instance_id (str):
                The instance to remove.

        Returns:
            bool:
                True if the instance was removed, False if it was absent.

        """
        with self.states.locked(target) as state:
            if state is None or aura_instance_id not in state:
                log_debug(
                    "Ignoring removal of absent aura instance",
                    {"target": target, "aura_instance": aura_instance_id},
                )
                return False
            self._remove_batch(state, [aura_instance_id], RemovalReason.REMOVED)
            return True

    def remove_aura(self, target: Any, aura_name: str) -> int:
        """
        Remove every instance of an aura from a target, as one batch.

        Each affected effect is recomputed once, whatever the number of
        instances removed.

        Args:
            target (Any):
                The object holding the aura.
            aura_name (str):
                The aura whose instances are removed.

        Returns:
            int:
                The number of instances removed (0 when none matched).

        """
        with self.states.locked(target) as state:
            if state is None:
                return 0
            ids = state.instances_of(aura_name)
            if not ids:
                return 0
            return len(self._remove_batch(state, ids, RemovalReason.REMOVED))

    def clear(self, target: Any) -> int:
        """
        Remove every aura from a target, as one batch.

        Returns:
            int:
                The number of instances removed.

        """
        with self.states.locked(target) as state:
            if state is None:
                return 0
            ids = list(state.aura_instances)
            if not ids:
                return 0
            return len(self._remove_batch(state, ids, RemovalReason.CLEARED))

    def release(self, target: Any) -> int:
        """
        Clear a target and destroy its effect state.

        Call this when the host object goes away.

        Returns:
            int:
                The number of instances removed.

        """
        with self.states.locked(target) as state:
            if state is None:
                return 0
            removed = self.clear(target)
            self.states.destroy(target)
            return removed

    # === Queries ===

    def has_aura(self, target: Any, aura_name: str) -> bool:
        with self.states.locked(target) as state:
            return state is not None and state.has_aura(aura_name)

    def has_effect(self, target: Any, effect_id: str) -> bool:
        with self.states.locked(target) as state:
            return state is not None and state.has_effect(effect_id)

    def get_effect_value(self, target: Any, effect_id: str) -> Any:
        """
        Get the current value of an effect on a target.

        Args:
            target (Any):
                The object to query.
            effect_id (str):
                The registered effect.

        Raises:
            UnknownEffectError:
                If ``effect_id`` is not registered.

        Returns:
            Any:
                The last value computed for the target, or the effect's
                default when no instance is active.

        """
        effect = self.effects.get(effect_id)
        with self.states.locked(target) as state:
            if state is not None and effect_id in state.values:
                return state.values[effect_id]
        return fold(effect, ())

    def get_auras(self, target: Any) -> list[str]:
        """Returns the distinct aura names on a target, in application order."""
        with self.states.locked(target) as state:
            return [] if state is None else state.aura_names()

    def get_aura_instances(self, target: Any) -> list[AuraInstance]:
        """Returns the aura instances on a target, in application order."""
        with self.states.locked(target) as state:
            return [] if state is None else list(state.aura_instances.values())

    def get_effect_instances(self, target: Any, effect_id: str) -> list[EffectInstance]:
        """Returns the active instances of an effect, in registration order."""
        with self.states.locked(target) as state:
            return [] if state is None else state.active_instances(effect_id)

    def get_remaining_duration(self, target: Any, aura_instance_id: str) -> float | None:
        """
        Get the time left before an aura instance expires.

        Returns:
            float | None:
                Seconds left, or None if the instance is not registered on
                the target or has no Duration.

        """
        with self.states.locked(target) as state:
            if state is None or aura_instance_id not in state:
                return None
            return self.lifecycle.remaining(aura_instance_id)

    # === Timer callbacks ===

    def _expire(self, target: Any, aura_instance_id: str) -> None:
        with self.states.locked(target) as state:
            if state is None or aura_instance_id not in state:
                log_debug(
                    "Expired aura instance already gone",
                    {"target": target, "aura_instance": aura_instance_id},
                )
                return
            self._remove_batch(state, [aura_instance_id], RemovalReason.EXPIRED)

    def _tick(self, target: Any, aura_instance_id: str, effect_id: str) -> None:
        with self.states.locked(target) as state:
            if state is None or aura_instance_id not in state:
                return
            self._recompute(state, effect_id, EventType.EFFECT_TICKED)

    # === Helpers ===

    def _remove_batch(
        self,
        state: ObjectEffectState,
        aura_instance_ids: Iterable[str],
        reason: RemovalReason,
    ) -> list[AuraInstance]:
        """
        Remove aura instances, then recompute each affected effect once.

        Each instance is handled as if removed on its own: its Cleanup
        instances get one apply with the value computed without them (and
        without the instances removed before them in this batch), then it is
        unregistered and its timers cancelled. Must run inside the target's
        critical section.
        """
        touched: dict[str, None] = {}
        removed: list[AuraInstance] = []
        for aura_instance_id in aura_instance_ids:
            aura_instance = state.aura_instances.get(aura_instance_id)
            if aura_instance is None:
                continue
            for effect_id, instance in aura_instance.effect_instances.items():
                if instance.cleanup:
                    recompute(
                        self.effects.get(effect_id),
                        state.target,
                        state.active_instances(effect_id, exclude=aura_instance_id),
                    )
            state.unregister(aura_instance_id)
            self.lifecycle.cancel(aura_instance_id)
            removed.append(aura_instance)
            touched.update(dict.fromkeys(aura_instance.effect_instances))
            log_debug(
                f"Removed aura {aura_instance.aura_name}",
                {
                    "target": state.target,
                    "aura_instance": aura_instance_id,
                    "reason": reason,
                },
            )
            self._emit_aura(
                EventType.AURA_EXPIRED
                if reason is RemovalReason.EXPIRED
                else EventType.AURA_REMOVED,
                aura_instance,
                reason,
            )
        self._recompute_effects(state, touched)
        return removed

    def _recompute_effects(self, state: ObjectEffectState, effect_ids: Iterable[str]) -> None:
        for effect_id in effect_ids:
            self._recompute(state, effect_id, EventType.EFFECT_CHANGED)

    def _recompute(
        self, state: ObjectEffectState, effect_id: str, event_type: EventType
    ) -> Any:
        effect = self.effects.get(effect_id)
        instances = state.active_instances(effect_id)
        value = fold(effect, instances)
        # Record before apply so queries made from inside apply see it.
        if instances:
            state.values[effect_id] = value
        else:
            state.values.pop(effect_id, None)
        push(effect, state.target, value)
        if self.config.emit_events:
            self.events.emit(
                EffectEvent(
                    event_type=event_type,
                    target=state.target,
                    effect_id=effect_id,
                    value=value,
                    active_count=len(instances),
                )
            )
        return value

    def _emit_aura(
        self,
        event_type: EventType,
        aura_instance: AuraInstance,
        reason: RemovalReason | None = None,
    ) -> None:
        if not self.config.emit_events:
            return
        self.events.emit(
            AuraEvent(
                event_type=event_type,
                target=aura_instance.target,
                aura_name=aura_instance.aura_name,
                aura_instance_id=aura_instance.id,
                reason=reason,
            )
        )
