"""Notification utilities for the results flows."""

import logging

from prefect import task

logger = logging.getLogger(__name__)


def _format(level: str, message: str, context: dict | None) -> str:
    log_msg = f"{level}: {message}"
    if context:
        log_msg += f" | Context: {context}"
    return log_msg


@task(name="log_warning")
def log_warning(message: str, context: dict | None = None):
    """Log warning message.

    Args:
        message: Warning message
        context: Optional context dictionary
    """
    log_msg = _format("WARNING", message, context)
    logger.warning(log_msg)
    print(f"⚠️  {log_msg}")


@task(name="log_error")
def log_error(message: str, context: dict | None = None):
    """Log error message and fail flow.

    Args:
        message: Error message
        context: Optional context dictionary

    Raises:
        RuntimeError: Always raises to fail the flow
    """
    log_msg = _format("ERROR", message, context)
    logger.error(log_msg)
    print(f"❌ {log_msg}")
    raise RuntimeError(log_msg)


@task(name="log_info")
def log_info(message: str, context: dict | None = None):
    """Log info message."""
    log_msg = _format("INFO", message, context)
    logger.info(log_msg)
    print(f"✓ {log_msg}")
