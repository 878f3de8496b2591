"""
Observability helpers: logging configuration and safe structured logging.
"""

from hybrid_index.observability.logger import configure_logging
from hybrid_index.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)

__all__ = [
    "configure_logging",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
