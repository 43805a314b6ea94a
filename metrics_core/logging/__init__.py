"""Logging helpers for metric instrumentation."""

from metrics_core.logging.structured import (
    StructuredFormatter,
    StructuredLogger,
    configure_logging,
    get_logger,
    setup_structured_logging,
)

__all__ = [
    "StructuredFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "setup_structured_logging",
]
