"""Observability: structured logging via structlog."""

from envsource.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
