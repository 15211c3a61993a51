"""
Stock appliers.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SetAttribute:
    """Writes the aggregated value to ``target.<name>``."""

    name: str

    def __call__(self, target: Any, value: Any) -> None:
        setattr(target, self.name, value)


@dataclass(frozen=True)
class Noop:
    """Applier for effects that are only queried, never pushed."""

    def __call__(self, target: Any, value: Any) -> None:
        return None
