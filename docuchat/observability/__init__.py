"""
Observability module.

Provides structured logging and correlation ID tracking.
"""

from docuchat.observability.correlation import get_correlation_id, set_correlation_id
from docuchat.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "get_correlation_id", "set_correlation_id"]
