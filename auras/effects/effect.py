"""
Effect definition module.

An effect is a reusable aggregation scheme for one kind of object
manipulation: a default value, a reduce function folding every active
instance into one value, and an apply function pushing that value onto the
target object.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Effect(BaseModel):
    """
    Immutable definition of an effect, registered once per effect id.

    The value pushed onto an object is always
    ``reduce(...reduce(reduce(default, i1), i2)..., iN)`` over the instances
    currently active on that object, in registration order.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        min_length=1,
        description="The unique name of the effect.",
    )
    default: Any = Field(
        default=None,
        description="Aggregation seed, and the value when nothing is active.",
    )
    reduce: Callable[[Any, Any], Any] = Field(
        description="Fold function (accumulator, instance) -> accumulator.",
    )
    apply: Callable[[Any, Any], None] = Field(
        description="Side effect pushing the aggregated value to the object.",
    )

    def __str__(self) -> str:
        return f"Effect({self.id})"
