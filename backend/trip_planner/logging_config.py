"""structlog wiring for the planner service.

Everything logs through structlog on top of the stdlib root logger so that
uvicorn, LangChain and the OpenAI client end up in the same stream. The
renderer is picked from ``LOG_FORMAT``: ``console`` for local work, ``json``
for anything shipped to a collector, ``auto`` follows ``DEBUG``.
"""
import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper, add_log_level
from structlog.typing import Processor

from trip_planner.config import Settings, get_settings


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def uses_json(settings: Settings) -> bool:
    if settings.log_format == "auto":
        return not settings.debug
    return settings.log_format == "json"


def build_processors(settings: Settings) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if uses_json(settings):
        processors.append(JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure stdlib logging and structlog from settings"""
    settings = settings or get_settings()
    level = resolve_level(settings.log_level)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    # model clients log at the app level; chatty transports never go below INFO
    for name in settings.library_loggers_list:
        logging.getLogger(name).setLevel(level)
    for name in settings.quiet_loggers_list:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_request_context(**values: Any) -> None:
    """Start a fresh per-request log context"""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
