"""Structured logging configuration using structlog.

Provides JSON logging by default and console logging for development,
with redaction of secret values that end up in event context.
"""

import sys
from collections.abc import MutableMapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

# Context keys whose values are never rendered (O(1) lookup)
SECRET_KEYS: frozenset[str] = frozenset({
    "password",
    "passwd",
    "secret",
    "secrets",
    "token",
    "api_key",
    "apikey",
    "value",
    "values",
    "credential",
    "credentials",
    "private_key",
    "access_token",
    "refresh_token",
})

LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class SecretRedactor:
    """Processor that masks secret values in log events by key name."""

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        """Redact secrets from event dictionary."""
        return cast(EventDict, self._redact_dict(event_dict))

    def _redact_dict(self, data: MutableMapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in SECRET_KEYS:
                result[key] = "[REDACTED]"
            elif isinstance(value, dict):
                result[key] = self._redact_dict(value)
            else:
                result[key] = value
        return result


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_secrets: bool = True,
) -> None:
    """Configure structured logging.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format - "json" for production, "console" for development
        redact_secrets: Whether to mask secret values in event context
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_secrets:
        processors.append(SecretRedactor())

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, debug: bool | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name.

    Args:
        name: Logger name (typically __name__ of the module)
        debug: When given, filter at DEBUG (True) or INFO (False) regardless
            of the global configuration

    Returns:
        A bound structlog logger
    """
    if debug is None:
        return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))

    level = LEVELS["DEBUG"] if debug else LEVELS["INFO"]
    logger = structlog.wrap_logger(
        None,
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    return cast(structlog.stdlib.BoundLogger, logger.bind(logger_name=name))
