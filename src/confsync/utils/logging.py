"""
confsync Logging Configuration

Structured logging setup using structlog with JSON output for production
and human-readable output for development.
"""

import logging
import logging.config
import sys

import structlog


def setup_logging(
    log_level: str = "INFO",
    environment: str = "development",
    enable_json: bool = False,
) -> None:
    """Setup structured logging configuration."""

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Configure structlog processors
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Add environment-specific processors
    if environment == "production" or enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


class SyncEventLogger:
    """Logger for engine notifications with structured data."""

    def __init__(self):
        self.logger = get_logger("confsync.events")

    def log_ready(self, profile_names: list[str]) -> None:
        """Log the initial discovery result."""
        self.logger.info(
            "config_ready",
            profiles=profile_names,
            profile_count=len(profile_names),
        )

    def log_update(self, profile_name: str, version: int | None, content_type: str) -> None:
        """Log a cache update for one profile."""
        self.logger.info(
            "config_updated",
            profile=profile_name,
            version=version,
            content_type=content_type,
        )

    def log_error(self, source: str, error: Exception) -> None:
        """Log a recovered error."""
        self.logger.warning(
            "config_error",
            source=source,
            error=str(error),
            error_type=error.__class__.__name__,
        )

    def log_profile_deleted(self, profile_name: str) -> None:
        """Log a profile removed at the provider."""
        self.logger.warning("config_profile_deleted", profile=profile_name)

    def log_debug(self, message: str) -> None:
        """Log an engine debug message."""
        self.logger.debug("config_debug", detail=message)
