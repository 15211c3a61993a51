"""
Engine configuration.

Settings are a pydantic model so they can be validated once and passed into an
``AuraSystem``. ``EngineConfig.from_env`` reads ``AURAS_*`` environment
variables for hosts that configure through the environment.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "AURAS_"


class EngineConfig(BaseModel):
    """
    Configuration of an aura engine instance.
    """

    model_config = ConfigDict(frozen=True)

    validate_fields: bool = Field(
        default=True,
        description=(
            "Validate every effect instance field against the FieldValue union "
            "when an aura is applied."
        ),
    )
    log_level: str | None = Field(
        default=None,
        description=(
            "When set, AuraSystem calls setup_logging with this level on "
            "construction. None leaves logging to the host."
        ),
    )
    emit_events: bool = Field(
        default=True,
        description="Publish lifecycle events on the engine's event bus.",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """
        Build a configuration from ``AURAS_*`` environment variables.

        Args:
            environ (Mapping[str, str] | None):
                The environment to read, defaults to ``os.environ``.

        Returns:
            EngineConfig:
                The validated configuration. Unset variables keep defaults.

        """
        environ = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        # pydantic parses "true"/"0"/"no" into booleans in lax mode.
        return cls.model_validate(values)
