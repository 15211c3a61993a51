"""
Effect instance module.

An effect instance is one concrete application of an effect: the data an aura
constructor produced for that effect, merged with the aura's shared fields.
"""

from collections.abc import ItemsView, KeysView
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from auras.core.constants import ReservedField


class EffectInstance(BaseModel):
    """
    Per-application data of an effect, owned by exactly one aura instance.

    Fields are read like a mapping (``instance["Amount"]``,
    ``instance.get("Amount", 0)``); the reserved lifecycle fields are also
    exposed as properties.
    """

    model_config = ConfigDict(frozen=True)

    effect_id: str = Field(
        description="The effect this instance contributes to.",
    )
    aura_instance_id: str = Field(
        description="The aura instance owning this effect instance.",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Instance fields, shared fields already merged in.",
    )

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def get(self, key: str, default: Any = None) -> Any:
        """Returns the field value, or ``default`` when the field is absent."""
        return self.data.get(key, default)

    def keys(self) -> KeysView[str]:
        return self.data.keys()

    def items(self) -> ItemsView[str, Any]:
        return self.data.items()

    @property
    def duration(self) -> float | None:
        """Seconds until the owning aura instance is removed, if any."""
        return self.data.get(ReservedField.DURATION.value)

    @property
    def tick(self) -> float | None:
        """Seconds between forced recomputations, if any."""
        return self.data.get(ReservedField.TICK.value)

    @property
    def cleanup(self) -> bool:
        """Whether a final apply excluding this instance runs on removal."""
        return self.data.get(ReservedField.CLEANUP.value, False) is True

    def __str__(self) -> str:
        return f"EffectInstance({self.effect_id}, aura={self.aura_instance_id})"
