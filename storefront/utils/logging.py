from __future__ import annotations

"""Environment-driven output for the ``storefront.api`` request events.

Nothing is configured unless the environment asks for it:
  - STOREFRONT_API_LOG_LEVEL: explicit level for the request-event logger
  - STOREFRONT_DEBUG / STOREFRONT_DEBUG_LOGGING: truthy -> DEBUG
"""

import logging
import os
from typing import IO, Mapping, Optional

from storefront.utils.instrumentation import API_LOGGER_NAME

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"
_LEVEL_ENV_VAR = "STOREFRONT_API_LOG_LEVEL"
_DEBUG_FLAGS = ("STOREFRONT_DEBUG", "STOREFRONT_DEBUG_LOGGING")
_QUIET_LOGGERS = ("urllib3",)
_HANDLER_MARK = "_storefront_event_handler"


class RequestEventFormatter(logging.Formatter):
    """Append the structured ``event`` and ``context`` extras to the message.

    ``[OrderService.getOrders] attempt=0 method=GET phase=end ...``; records
    without an event are formatted as usual.
    """

    def __init__(self, fmt: str = _DEFAULT_FORMAT, datefmt: str = _DEFAULT_DATEFMT) -> None:
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        event = getattr(record, "event", None)
        if not isinstance(event, Mapping) or not event:
            return text
        fields = " ".join(f"{key}={event[key]}" for key in sorted(event))
        context = getattr(record, "context", None)
        return f"{text} | [{context}] {fields}" if context else f"{text} | {fields}"


def _coerce_level(value: Optional[str]) -> Optional[int]:
    text = (value or "").strip()
    if not text:
        return None
    if text.isdigit():
        return int(text)
    candidate = logging.getLevelName(text.upper())
    return candidate if isinstance(candidate, int) else None


def _env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def resolve_api_log_level(env: Optional[Mapping[str, str]] = None) -> Optional[int]:
    """Return the level requested through the environment, or ``None``."""
    source = os.environ if env is None else env
    level = _coerce_level(source.get(_LEVEL_ENV_VAR))
    if level is not None:
        return level
    if any(_env_truthy(source.get(flag)) for flag in _DEBUG_FLAGS):
        return logging.DEBUG
    return None


def configure_api_logging(
    env: Optional[Mapping[str, str]] = None,
    *,
    stream: Optional[IO[str]] = None,
) -> Optional[int]:
    """Route request events to ``stream`` when the environment requests a level.

    Idempotent: a second call adjusts the level but never adds a second
    handler. Returns the applied level, or ``None`` when nothing was changed.
    """
    level = resolve_api_log_level(env)
    if level is None:
        return None

    logger = logging.getLogger(API_LOGGER_NAME)
    logger.setLevel(level)
    # Connection-pool chatter drowns the per-attempt request events.
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if not any(getattr(handler, _HANDLER_MARK, False) for handler in logger.handlers):
        handler = logging.StreamHandler(stream)
        handler.setFormatter(RequestEventFormatter())
        setattr(handler, _HANDLER_MARK, True)
        logger.addHandler(handler)
        logger.propagate = False
    return level


def remove_api_handlers() -> None:
    """Detach handlers installed by ``configure_api_logging`` and restore propagation."""
    logger = logging.getLogger(API_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
    logger.propagate = True


__all__ = [
    "RequestEventFormatter",
    "configure_api_logging",
    "remove_api_handlers",
    "resolve_api_log_level",
]
