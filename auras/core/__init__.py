"""
Core module for the aura engine.

This module contains the ambient pieces shared by the rest of the package:
constants and enumerations, the error taxonomy, configuration and logging.
"""

from .config import EngineConfig
from .constants import (
    EFFECT_INSTANCES_KEY,
    NiceEnum,
    RemovalReason,
    ReservedField,
    TimerKind,
    TimerState,
)
from .errors import (
    AuraError,
    DuplicateRegistrationError,
    InvalidSettingsError,
    NotFoundError,
    UnknownAuraError,
    UnknownEffectError,
)
from .logging import (
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
    setup_logging,
)

__all__ = [
    # Import from config.py
    "EngineConfig",
    # Import from constants.py
    "EFFECT_INSTANCES_KEY",
    "NiceEnum",
    "RemovalReason",
    "ReservedField",
    "TimerKind",
    "TimerState",
    # Import from errors.py
    "AuraError",
    "DuplicateRegistrationError",
    "InvalidSettingsError",
    "NotFoundError",
    "UnknownAuraError",
    "UnknownEffectError",
    # Import from logging.py
    "get_logger",
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "setup_logging",
]
