"""
Logger factory for the account recovery service.

Provides:
- get_logger(): Get a configured logger instance
- log_with_context(): Bind context (e.g. session_id) for a scope

Configuration lives in shared.logging_config and is applied by create_app().
"""

import structlog
from structlog.stdlib import BoundLogger


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> from shared.logging import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("otp_issued", session_id="abc", destination="6281...")
    """
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """
    Bind context to a logger for all subsequent log calls.

    Example:
        >>> log = log_with_context(get_logger(__name__), session_id="abc")
        >>> log.info("step_advanced", step=3)  # includes session_id
    """
    return logger.bind(**context)


__all__ = ["get_logger", "log_with_context"]
