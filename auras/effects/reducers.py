"""
Stock reducers for the common aggregation patterns.

Each reducer is a small, named callable object satisfying the ``Reducer``
interface, so it can be registered directly as an effect's ``reduce``:

    system.register_effect("Stunned", default=False, reduce=OneOrMore(), apply=...)
    system.register_effect("Slow", default=1.0, reduce=Product("Factor"), apply=...)
"""

from dataclasses import dataclass
from typing import Any

from .effect_instance import EffectInstance


@dataclass(frozen=True)
class OneOrMore:
    """True as soon as at least one instance is active (use default=False)."""

    def __call__(self, accumulator: Any, instance: EffectInstance) -> bool:
        return True


@dataclass(frozen=True)
class Sum:
    """Adds the ``field`` of every instance to the accumulator."""

    field: str
    missing: float = 0

    def __call__(self, accumulator: Any, instance: EffectInstance) -> Any:
        return accumulator + instance.get(self.field, self.missing)


@dataclass(frozen=True)
class Product:
    """Multiplies the accumulator by the ``field`` of every instance."""

    field: str
    missing: float = 1

    def __call__(self, accumulator: Any, instance: EffectInstance) -> Any:
        return accumulator * instance.get(self.field, self.missing)


@dataclass(frozen=True)
class Max:
    """Keeps the largest ``field`` value; instances without it are skipped."""

    field: str

    def __call__(self, accumulator: Any, instance: EffectInstance) -> Any:
        if self.field not in instance:
            return accumulator
        return max(accumulator, instance[self.field])


@dataclass(frozen=True)
class Min:
    """Keeps the smallest ``field`` value; instances without it are skipped."""

    field: str

    def __call__(self, accumulator: Any, instance: EffectInstance) -> Any:
        if self.field not in instance:
            return accumulator
        return min(accumulator, instance[self.field])
