"""
Recomputation engine.

The value of an effect on an object is never updated incrementally; it is
folded from scratch over the full ordered set of active instances every time
that set changes (or a Tick fires), then pushed through the effect's apply.
"""

import copy
from collections.abc import Iterable
from typing import Any

from auras.core.logging import log_debug
from auras.effects.effect import Effect
from auras.effects.effect_instance import EffectInstance


def fold(effect: Effect, instances: Iterable[EffectInstance]) -> Any:
    """
    Fold ``effect.reduce`` over ``instances``, seeded with the default.

    The default is copied first so reducers may mutate the accumulator
    without corrupting the effect definition.

    Args:
        effect (Effect):
            The effect to aggregate.
        instances (Iterable[EffectInstance]):
            The active instances, in registration order.

    Returns:
        Any:
            The aggregated value; the default when ``instances`` is empty.

    """
    value = copy.deepcopy(effect.default)
    for instance in instances:
        value = effect.reduce(value, instance)
    return value


def push(effect: Effect, target: Any, value: Any) -> None:
    """Call ``effect.apply`` for ``target``. Exceptions propagate."""
    log_debug(
        "Applying effect value",
        {"effect": effect.id, "target": target, "value": value},
    )
    effect.apply(target, value)


def recompute(effect: Effect, target: Any, instances: Iterable[EffectInstance]) -> Any:
    """
    Fold the value of ``effect`` and apply it to ``target`` exactly once.

    Args:
        effect (Effect):
            The effect to recompute.
        target (Any):
            The object the value is pushed onto.
        instances (Iterable[EffectInstance]):
            The active instances, in registration order.

    Returns:
        Any:
            The value passed to ``apply``.

    """
    value = fold(effect, instances)
    push(effect, target, value)
    return value
