"""
Logging.

structlog on top of the standard library root logger, configured from
config/settings/logging.yaml. Call setup_logging() once at start-up (the CLI
callback does) and get loggers with get_logger(__name__).

Records always carry a timestamp, level, logger name, function name and line
number. Records about a particular subsystem also carry a `source` field,
one of VALID_SOURCES, so a JSONL log can be filtered per subsystem:

    logger = get_logger(__name__)
    log_with_source(logger, "storage", "warning", "Corrupted slot", key="notes-list")

Console output goes to stderr so that command output on stdout stays clean.
The optional file handler writes one JSON object per line and rotates.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import Processor

from studynotes.core.config import load_yaml_config, resolve_project_path

VALID_SOURCES = frozenset({
    "cli",
    "session",
    "storage",
    "ai",
    "transfer",
    "internal",
    "unknown",
})

_NOISY_LOGGERS = ("httpx", "httpcore")

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Read logging.yaml once and keep it for the life of the process."""
    global _logging_config
    if _logging_config is None:
        _logging_config = load_yaml_config("logging.yaml")
    return _logging_config


def _get_logging_config() -> dict[str, Any]:
    return _load_logging_config()


def _resolve_log_path(configured_path: str) -> Path:
    return resolve_project_path(configured_path)


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _file_handler(file_config: dict[str, Any], formatter: logging.Formatter) -> logging.Handler:
    log_path = _resolve_log_path(file_config["path"])
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config["max_bytes"],
        backupCount=file_config["backup_count"],
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments left as None take their value from logging.yaml.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'console' (coloured, human readable) or 'json'
        enable_console: Write records to stderr
        enable_file_logging: Write JSONL records to the configured file
    """
    config = _get_logging_config()
    handlers = config["handlers"]

    if level is None:
        level = config["level"]
    if format_type is None:
        format_type = config["format"]
    if enable_console is None:
        enable_console = handlers["console"]["enabled"]
    if enable_file_logging is None:
        enable_file_logging = handlers["file"]["enabled"]

    processors = _shared_processors()
    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=processors,
    )
    if format_type == "console":
        console_formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
            foreign_pre_chain=processors,
        )
    else:
        console_formatter = json_formatter

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(console_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        root_logger.addHandler(_file_handler(handlers["file"], json_formatter))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically for __name__."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message tagged with the subsystem it concerns.

    Raises:
        ValueError: If source is not one of VALID_SOURCES
        AttributeError: If level is not a logger method
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source!r}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
