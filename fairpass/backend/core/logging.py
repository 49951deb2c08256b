"""
Centralized Logging Configuration.

All modules log through structlog via get_logger(). Configuration is loaded
from config/settings/logging.yaml.

Every record carries timestamp, level, logger, event, func_name and lineno,
plus the context bound for the current request or job:
    source      - web, cli or tasks (bound by the middleware, CLI or task)
    request_id  - HTTP request correlation ID

Credentials never reach a handler. Values under sensitive keys (passwords,
access codes, ticket tokens, API keys) are masked, including inside
`extra={...}` dicts.

Usage:
    from fairpass.backend.core.logging import bind_source, get_logger, setup_logging

    setup_logging()
    bind_source("tasks")
    logger = get_logger(__name__)
    logger.info("Registration created", extra={"event_id": event_id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from fairpass.backend.core.config import find_project_root, get_app_config

VALID_SOURCES = frozenset({"web", "cli", "tasks"})

SENSITIVE_KEYS = frozenset({
    "password",
    "password_hash",
    "access_code",
    "qr_token",
    "token",
    "access_token",
    "refresh_token",
    "api_key",
    "authorization",
    "client_secret",
})

MASK = "***"


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: MASK if key.lower() in SENSITIVE_KEYS and item else _mask(item)
            for key, item in value.items()
        }
    return value


def mask_sensitive(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor: mask sensitive keys at the top level and in nested dicts."""
    return _mask(event_dict)


def bind_source(source: str) -> None:
    """Tag every following record in this context with its origin."""
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    structlog.contextvars.bind_contextvars(source=source)


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _quiet_libraries() -> None:
    for name in ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "taskiq"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments override the YAML configuration when given.

    Args:
        level: Log level name
        format_type: 'json' or 'console' for the console handler
        enable_console: Write records to stdout
        enable_file_logging: Write JSON lines to the configured rotating file
    """
    config = get_app_config().logging
    file_config = config.handlers.file

    level = level or config.level
    format_type = format_type or config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = file_config.enabled

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        mask_sensitive,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            console_handler.setFormatter(
                structlog.stdlib.ProcessorFormatter(
                    processor=structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
                    foreign_pre_chain=shared_processors,
                )
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    _quiet_libraries()


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
