"""
Effect and aura definition registries.

Both registries are append-only maps from a unique id to a definition:
registering an id twice fails, and looking up an unknown id fails fast.
"""

from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from auras.core.errors import (
    DuplicateRegistrationError,
    NotFoundError,
    UnknownAuraError,
    UnknownEffectError,
)
from auras.core.logging import log_debug, log_warning

from .aura import Aura
from .effect import Effect

_D = TypeVar("_D", Effect, Aura)


class _Registry(Generic[_D]):
    """In-memory, append-only collection of named definitions."""

    kind: str = "Entry"
    not_found: type[NotFoundError] = NotFoundError

    def __init__(self) -> None:
        self._definitions: dict[str, _D] = {}

    def _add(self, name: str, definition: _D) -> _D:
        if name in self._definitions:
            log_warning(
                f"{self.kind} already registered",
                {"name": name},
            )
            raise DuplicateRegistrationError(self.kind, name)
        self._definitions[name] = definition
        log_debug(f"Registered {self.kind.lower()}", {"name": name})
        return definition

    def get(self, name: str) -> _D:
        """
        Get a definition by name.

        Args:
            name (str):
                The registered name.

        Raises:
            NotFoundError:
                If nothing is registered under ``name``.

        Returns:
            The registered definition.

        """
        try:
            return self._definitions[name]
        except KeyError:
            raise self.not_found(name) from None

    def ids(self) -> list[str]:
        """Returns every registered name, in registration order."""
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[_D]:
        return iter(list(self._definitions.values()))


class EffectRegistry(_Registry[Effect]):
    """Stores named effect definitions."""

    kind = "Effect"
    not_found = UnknownEffectError

    def register(self, effect: Effect) -> Effect:
        """
        Register an effect under its id.

        Args:
            effect (Effect):
                The effect definition.

        Raises:
            DuplicateRegistrationError:
                If the effect id is already registered.

        Returns:
            Effect:
                The registered effect.

        """
        return self._add(effect.id, effect)

    def define(
        self,
        effect_id: str,
        *,
        reduce: Callable[[Any, Any], Any],
        apply: Callable[[Any, Any], None],
        default: Any = None,
    ) -> Effect:
        """Shorthand building the Effect definition and registering it."""
        return self.register(
            Effect(id=effect_id, default=default, reduce=reduce, apply=apply)
        )


class AuraRegistry(_Registry[Aura]):
    """Stores named aura constructors."""

    kind = "Aura"
    not_found = UnknownAuraError

    def register(self, aura: Aura) -> Aura:
        """
        Register an aura under its name.

        Effect ids referenced by the aura's templates are not checked here;
        they are resolved when the aura is applied.

        Args:
            aura (Aura):
                The aura definition.

        Raises:
            DuplicateRegistrationError:
                If the aura name is already registered.

        Returns:
            Aura:
                The registered aura.

        """
        return self._add(aura.name, aura)

    def define(self, name: str, constructor: Callable[[dict[str, Any]], Any]) -> Aura:
        """Shorthand building the Aura definition and registering it."""
        return self.register(Aura(name=name, constructor=constructor))
