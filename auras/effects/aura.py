"""
Aura module.

Defines the aura definition (a named constructor turning settings into a
template), the template itself, and the aura instance built from a template
when an aura is applied to an object.
"""

import uuid
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from auras.core.constants import EFFECT_INSTANCES_KEY
from auras.core.errors import InvalidSettingsError
from auras.core.logging import log_error

from .effect_instance import EffectInstance
from .values import check_field_values, check_reserved_fields


class AuraTemplate(BaseModel):
    """
    What an aura constructor produces: shared fields plus per-effect fields.
    """

    shared_fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Fields replicated into every effect instance.",
    )
    effect_instances: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Effect id -> instance-local fields, in declaration order.",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AuraTemplate":
        """
        Build a template from the mapping form returned by constructors.

        Every key except ``EffectInstances`` is a shared field.

        Args:
            data (Mapping[str, Any]):
                The constructor result.

        Raises:
            ValueError:
                If ``EffectInstances`` is missing or is not a mapping of
                mappings.

        Returns:
            AuraTemplate:
                The validated template.

        """
        if EFFECT_INSTANCES_KEY not in data:
            raise ValueError(f"template is missing the '{EFFECT_INSTANCES_KEY}' key")
        instances = data[EFFECT_INSTANCES_KEY]
        if not isinstance(instances, Mapping):
            raise ValueError(f"'{EFFECT_INSTANCES_KEY}' must be a mapping")
        return cls(
            shared_fields={k: v for k, v in data.items() if k != EFFECT_INSTANCES_KEY},
            effect_instances={
                effect_id: dict(fields) if isinstance(fields, Mapping) else fields
                for effect_id, fields in instances.items()
            },
        )


class Aura(BaseModel):
    """
    Named constructor bundling one or more effect instances into a single
    removable unit.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        min_length=1,
        description="The unique name of the aura.",
    )
    constructor: Callable[[dict[str, Any]], Any] = Field(
        description="settings -> template (mapping or AuraTemplate).",
    )

    def build(self, settings: Mapping[str, Any] | None = None) -> AuraTemplate:
        """
        Run the constructor and normalize its result into a template.

        Args:
            settings (Mapping[str, Any] | None):
                Application settings, an empty mapping when omitted.

        Raises:
            InvalidSettingsError:
                If the constructor raises or returns something that is not a
                valid template. A constructor exception is chained as cause.

        Returns:
            AuraTemplate:
                The template for a new aura instance.

        """
        settings = dict(settings or {})
        try:
            result = self.constructor(settings)
        except Exception as e:
            log_error(
                f"Aura constructor failed: {e}",
                {"aura": self.name, "settings": settings},
            )
            raise InvalidSettingsError(
                self.name, f"constructor raised {type(e).__name__}: {e}"
            ) from e

        if isinstance(result, AuraTemplate):
            return result
        if not isinstance(result, Mapping):
            raise InvalidSettingsError(
                self.name,
                f"constructor returned {type(result).__name__}, expected a mapping",
            )
        try:
            return AuraTemplate.from_mapping(result)
        except ValueError as e:
            raise InvalidSettingsError(self.name, str(e)) from e


class AuraInstance(BaseModel):
    """
    One concrete application of an aura, owning its effect instances.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(
        description="Unique id (uuid4) of this application.",
    )
    aura_name: str = Field(
        description="The aura this instance was built from.",
    )
    target: Any = Field(
        description="The object the aura is applied to.",
    )
    shared_fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Fields replicated into every effect instance.",
    )
    effect_instances: dict[str, EffectInstance] = Field(
        default_factory=dict,
        description="Effect id -> effect instance, in template order.",
    )
    applied_at: float = Field(
        default=0.0,
        description="Scheduler time at which the aura was applied.",
    )

    @classmethod
    def from_template(
        cls,
        aura_name: str,
        target: Any,
        template: AuraTemplate,
        applied_at: float = 0.0,
        validate_values: bool = True,
    ) -> "AuraInstance":
        """
        Build an aura instance, replicating shared fields into each effect
        instance. Instance-local fields win over shared fields.

        Args:
            aura_name (str):
                The aura being applied.
            target (Any):
                The object the aura is applied to.
            template (AuraTemplate):
                The constructor output.
            applied_at (float):
                Scheduler time of the application.
            validate_values (bool):
                Check every field value against the FieldValue union.

        Raises:
            InvalidSettingsError:
                If a reserved field is malformed, or a value is outside the
                FieldValue union while ``validate_values`` is set.

        Returns:
            AuraInstance:
                The new instance, not yet registered anywhere.

        """
        aura_instance_id = str(uuid.uuid4())
        effect_instances: dict[str, EffectInstance] = {}
        for effect_id, local_fields in template.effect_instances.items():
            data = {**template.shared_fields, **local_fields}
            try:
                check_reserved_fields(data)
                if validate_values:
                    check_field_values(data)
            except ValueError as e:
                raise InvalidSettingsError(aura_name, f"{effect_id}: {e}") from e
            effect_instances[effect_id] = EffectInstance(
                effect_id=effect_id,
                aura_instance_id=aura_instance_id,
                data=data,
            )
        return cls(
            id=aura_instance_id,
            aura_name=aura_name,
            target=target,
            shared_fields=dict(template.shared_fields),
            effect_instances=effect_instances,
            applied_at=applied_at,
        )

    def __str__(self) -> str:
        return f"AuraInstance({self.aura_name}, id={self.id})"
