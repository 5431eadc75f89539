"""structlog setup for the reward service.

Every record, including stdlib records from uvicorn, SQLAlchemy and alembic,
goes through one processor chain and one stdout handler. Production renders
JSON lines (via orjson); other environments render colored console output.

Request middleware binds ``request_id`` and the auth dependency binds
``user_id``, so claim events can be correlated without passing them around.
"""

import logging
import sys
from typing import Any

import orjson
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from joytask import __version__

SERVICE_NAME = "joytask"

# Third-party loggers and the level they are capped at
NOISY_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "alembic": logging.INFO,
}


def add_service_context(app_env: str, version: str = __version__) -> Processor:
    """Processor stamping service, env and version on each event.

    Values already present in the event are left alone.
    """

    def processor(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("env", app_env)
        event_dict.setdefault("version", version)
        return event_dict

    return processor


def drop_color_message(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    # uvicorn duplicates the message with ANSI codes under this key
    event_dict.pop("color_message", None)
    return event_dict


def _orjson_dumps(event_dict: EventDict, **kwargs: Any) -> str:
    return orjson.dumps(event_dict, default=str).decode("utf-8")


def build_processors(app_env: str, use_json: bool) -> tuple[list[Processor], Processor]:
    """Return the shared pre-chain and the final renderer."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_context(app_env),
        drop_color_message,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
        processors.append(structlog.processors.format_exc_info)
        return processors, structlog.processors.JSONRenderer(serializer=_orjson_dumps)

    processors.append(structlog.dev.set_exc_info)
    return processors, structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    app_env: str = "development",
) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Root level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Force JSON output outside production
        app_env: Application environment; production always logs JSON
    """
    shared, renderer = build_processors(app_env, json_logs or app_env == "production")

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach key/values to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
