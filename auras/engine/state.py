"""
Object effect state module.

Keeps, per target object, the registered aura instances and the derived
per-effect view of active effect instances. The store owning these states is
explicit: it is created by the host (through ``AuraSystem``) and states are
created and destroyed through it rather than living in globals.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from auras.core.logging import log_debug
from auras.effects.aura import AuraInstance
from auras.effects.effect_instance import EffectInstance


class ObjectEffectState:
    """
    Active auras and effects of one target object.

    Attributes:
        target (Any):
            The object this state belongs to.
        aura_instances (dict[str, AuraInstance]):
            Registered aura instances, in application order.
        active_by_effect (dict[str, dict[str, EffectInstance]]):
            Effect id -> {aura instance id -> effect instance}, in
            registration order. Always the grouped union of the effect
            instances of ``aura_instances``; effects with no active instance
            have no entry.
        values (dict[str, Any]):
            Last value computed for each effect with active instances.
        lock (threading.RLock):
            Serializes every mutation of this state.
        released (bool):
            Set once the state was destroyed; a released state is never
            mutated again.

    """

    def __init__(self, target: Any) -> None:
        self.target = target
        self.aura_instances: dict[str, AuraInstance] = {}
        self.active_by_effect: dict[str, dict[str, EffectInstance]] = {}
        self.values: dict[str, Any] = {}
        self.lock = threading.RLock()
        self.released = False

    def __contains__(self, aura_instance_id: object) -> bool:
        return aura_instance_id in self.aura_instances

    def __len__(self) -> int:
        return len(self.aura_instances)

    @property
    def is_empty(self) -> bool:
        return not self.aura_instances

    # === Registration ===

    def register(self, aura_instance: AuraInstance) -> list[str]:
        """
        Register an aura instance and index its effect instances.

        Args:
            aura_instance (AuraInstance):
                The instance to register.

        Raises:
            ValueError:
                If an instance with the same id is already registered.

        Returns:
            list[str]:
                The effect ids touched, in template order.

        """
        if aura_instance.id in self.aura_instances:
            raise ValueError(f"Aura instance {aura_instance.id} already registered.")
        self.aura_instances[aura_instance.id] = aura_instance
        for effect_id, instance in aura_instance.effect_instances.items():
            self.active_by_effect.setdefault(effect_id, {})[aura_instance.id] = instance
        return list(aura_instance.effect_instances)

    def unregister(self, aura_instance_id: str) -> AuraInstance | None:
        """
        Unregister an aura instance and drop its effect instances.

        Args:
            aura_instance_id (str):
                The id of the instance to remove.

        Returns:
            AuraInstance | None:
                The removed instance, None if it was not registered.

        """
        aura_instance = self.aura_instances.pop(aura_instance_id, None)
        if aura_instance is None:
            return None
        for effect_id in aura_instance.effect_instances:
            active = self.active_by_effect.get(effect_id)
            if active is None:
                continue
            active.pop(aura_instance_id, None)
            if not active:
                del self.active_by_effect[effect_id]
        return aura_instance

    # === Queries ===

    def active_instances(
        self, effect_id: str, exclude: str | None = None
    ) -> list[EffectInstance]:
        """
        Get the active instances of an effect, in registration order.

        Args:
            effect_id (str):
                The effect.
            exclude (str | None):
                An aura instance id whose contribution is left out.

        Returns:
            list[EffectInstance]:
                The ordered active instances.

        """
        active = self.active_by_effect.get(effect_id, {})
        return [
            instance
            for aura_instance_id, instance in active.items()
            if aura_instance_id != exclude
        ]

    def has_effect(self, effect_id: str) -> bool:
        return bool(self.active_by_effect.get(effect_id))

    def has_aura(self, aura_name: str) -> bool:
        return any(ai.aura_name == aura_name for ai in self.aura_instances.values())

    def instances_of(self, aura_name: str) -> list[str]:
        """Returns the ids of the registered instances of ``aura_name``."""
        return [
            ai.id for ai in self.aura_instances.values() if ai.aura_name == aura_name
        ]

    def aura_names(self) -> list[str]:
        """Returns the distinct aura names, in first-application order."""
        return list(dict.fromkeys(ai.aura_name for ai in self.aura_instances.values()))


class StateStore:
    """
    Owner of every ObjectEffectState, keyed by target identity (equality).

    States are created on first use and kept when they become empty; they are
    only dropped by ``destroy``.
    """

    def __init__(self) -> None:
        self._states: dict[Any, ObjectEffectState] = {}
        self._lock = threading.Lock()

    def __contains__(self, target: object) -> bool:
        return target in self._states

    def __len__(self) -> int:
        return len(self._states)

    def get(self, target: Any) -> ObjectEffectState | None:
        return self._states.get(target)

    def create(self, target: Any) -> ObjectEffectState:
        """Returns the state of ``target``, creating it if needed."""
        with self._lock:
            state = self._states.get(target)
            if state is None:
                state = ObjectEffectState(target)
                self._states[target] = state
                log_debug("Created effect state", {"target": target})
            return state

    def destroy(self, target: Any) -> ObjectEffectState | None:
        """
        Drop the state of ``target`` and mark it released.

        Returns:
            ObjectEffectState | None:
                The destroyed state, None if the target had none.

        """
        state = self._states.get(target)
        if state is None:
            return None
        with state.lock:
            with self._lock:
                if self._states.get(target) is state:
                    del self._states[target]
            state.released = True
        log_debug("Destroyed effect state", {"target": target})
        return state

    @contextmanager
    def locked(
        self, target: Any, create: bool = False
    ) -> Iterator[ObjectEffectState | None]:
        """
        Enter the critical section of ``target``.

        Yields the target's state with its lock held, or None when the target
        has no state and ``create`` is False. A state released while waiting
        for the lock is never yielded; the lookup is retried instead.

        Args:
            target (Any):
                The target object.
            create (bool):
                Create the state if it does not exist.

        """
        while True:
            state = self.create(target) if create else self.get(target)
            if state is None:
                yield None
                return
            with state.lock:
                if state.released:
                    continue
                yield state
                return
