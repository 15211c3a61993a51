"""
Capability interfaces for user supplied aggregation code.

Any callable with the matching signature satisfies these protocols, so plain
functions, lambdas and small callable objects (see ``auras.effects.reducers``)
can all be registered.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from auras.effects.aura import AuraTemplate
    from auras.effects.effect_instance import EffectInstance


class Reducer(Protocol):

    def __call__(self, accumulator: Any, instance: "EffectInstance") -> Any:
        """Combine the running aggregate with one active effect instance.

        Args:
            accumulator (Any): The aggregate so far, seeded with the default.
            instance (EffectInstance): The next instance in registration order.

        Returns:
            Any: The new aggregate.
        """
        ...


class Applier(Protocol):

    def __call__(self, target: Any, value: Any) -> None:
        """Push a freshly aggregated value onto the target object.

        Args:
            target (Any): The object the effect is active on.
            value (Any): The aggregated value.
        """
        ...


class AuraConstructor(Protocol):

    def __call__(
        self, settings: dict[str, Any]
    ) -> "Mapping[str, Any] | AuraTemplate":
        """Build an aura template from application settings.

        Args:
            settings (dict[str, Any]): The settings passed to apply_aura.

        Returns:
            Mapping[str, Any] | AuraTemplate: A mapping with an
            ``EffectInstances`` key plus shared fields, or a template.
        """
        ...
