"""
Logging setup for the vendor status system.

Configures structlog on top of the standard library so that every module
can simply call ``structlog.get_logger(__name__)`` and bind its own context.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

from vendor_status.core.exceptions import ConfigurationError


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    structured: bool = True,
    include_stdlib: bool = True,
) -> None:
    """
    Set up logging configuration for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        structured: Whether to use structured logging format
        include_stdlib: Whether to configure standard library logging

    Raises:
        ConfigurationError: If logging configuration fails
    """
    try:
        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if structured:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,  # type: ignore[arg-type]
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

        if include_stdlib:
            # stderr keeps stdout free for CLI report output
            logging.basicConfig(
                format="%(message)s",
                stream=sys.stderr,
                level=getattr(logging, level.upper()),
            )

            if log_file:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(getattr(logging, level.upper()))
                logging.getLogger().addHandler(file_handler)

    except Exception as e:
        raise ConfigurationError(
            "Failed to setup logging configuration",
            details={"level": level, "log_file": str(log_file) if log_file else None},
            cause=e,
        ) from e


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, named after the calling module by convention."""
    return structlog.get_logger(name)
