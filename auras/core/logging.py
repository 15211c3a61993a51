"""
Logging configuration module for the aura engine.

Provides centralized logging setup with colored output using rich, plus
small helpers that attach a context dictionary to every message.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Sets up logging configuration with rich colored output.

    The library never calls this on import; hosts call it once at startup.

    Args:
        level (int | str):
            The logging level to set. Defaults to logging.INFO.

    """
    # Create a rich console for logging
    console = Console(width=120, force_terminal=True, force_jupyter=False)

    # Configure the rich handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
    )

    rich_handler.setFormatter(
        logging.Formatter("%(name)s - %(message)s", datefmt="[%X]")
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )

    # basicConfig is a no-op once the root logger has handlers.
    logging.getLogger("auras").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Gets a logger instance with the specified name.

    Args:
        name (str):
            The name of the logger.

    Returns:
        logging.Logger:
            The configured logger instance.

    """
    return logging.getLogger(name)


# Default logger for the library.
logger = get_logger("auras")


def _with_context(message: str, context: dict[str, Any] | None) -> str:
    if not context:
        return message
    # Format context as key=value pairs
    context_str = " ".join(f"{k}={v}" for k, v in context.items())
    return f"{message} [{context_str}]"


def log_error(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs an error message with optional context.

    Args:
        message (str): The error message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.error(_with_context(message, context))


def log_warning(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs a warning message with optional context.

    Args:
        message (str): The warning message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.warning(_with_context(message, context))


def log_info(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs an info message with optional context.

    Args:
        message (str): The info message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    logger.info(_with_context(message, context))


def log_debug(message: str, context: dict[str, Any] | None = None) -> None:
    """
    Logs a debug message with optional context.

    The message is only formatted when DEBUG is enabled, since recomputation
    logs on every mutation.

    Args:
        message (str): The debug message.
        context (dict[str, Any] | None): Optional context dictionary.

    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(_with_context(message, context))
