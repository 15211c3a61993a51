"""
Field value model for effect instances.

Effect instances are ordered mappings from a string key to a small tagged
union of values (number, boolean, string or a nested mapping of the same).
The reserved fields ``Duration``, ``Tick`` and ``Cleanup`` carry lifecycle
meaning and are always checked, whatever the engine configuration.
"""

import math
from collections.abc import Mapping
from typing import Any, Union

from pydantic import TypeAdapter, ValidationError
from typing_extensions import TypeAliasType

from auras.core.constants import ReservedField

FieldValue = TypeAliasType(
    "FieldValue",
    "Union[bool, int, float, str, dict[str, FieldValue]]",
)

_FIELDS_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, FieldValue])


def is_number(value: Any) -> bool:
    """Returns True for int/float values, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_field_values(fields: Mapping[str, Any]) -> None:
    """
    Check that every field value belongs to the FieldValue union.

    Args:
        fields (Mapping[str, Any]):
            The effect instance fields.

    Raises:
        ValueError:
            If a key is not a string or a value is outside the union.

    """
    try:
        _FIELDS_ADAPTER.validate_python(dict(fields), strict=True)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'][:2])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ValueError(f"unsupported field values ({problems})") from exc


def check_reserved_fields(fields: Mapping[str, Any]) -> None:
    """
    Check the types and ranges of the reserved lifecycle fields.

    Args:
        fields (Mapping[str, Any]):
            The effect instance fields.

    Raises:
        ValueError:
            If Duration is not a non-negative number, Tick is not a positive
            number, or Cleanup is not a boolean.

    """
    if ReservedField.DURATION.value in fields:
        duration = fields[ReservedField.DURATION.value]
        if not is_number(duration) or not math.isfinite(duration) or duration < 0:
            raise ValueError(
                f"Duration must be a non-negative number, got {duration!r}"
            )

    if ReservedField.TICK.value in fields:
        tick = fields[ReservedField.TICK.value]
        if not is_number(tick) or not math.isfinite(tick) or tick <= 0:
            raise ValueError(f"Tick must be a positive number, got {tick!r}")

    if ReservedField.CLEANUP.value in fields:
        cleanup = fields[ReservedField.CLEANUP.value]
        if not isinstance(cleanup, bool):
            raise ValueError(f"Cleanup must be a boolean, got {cleanup!r}")
