"""Structured logging helpers with correlation, session, and request metadata."""

from __future__ import annotations

import hashlib
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from facts_fulfillment.core.config import settings

if TYPE_CHECKING:  # pragma: no cover - typing only
    from facts_fulfillment.core.models import RequestContext

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_log_session_id: ContextVar[Optional[str]] = ContextVar("log_session_id", default=None)
_request_context: ContextVar[Optional["RequestContext"]] = ContextVar(
    "request_context", default=None
)

LEVEL_NAME = str(getattr(settings, "FACTS_LOG_LEVEL", "info")).upper()
LOG_LEVEL = getattr(logging, LEVEL_NAME, logging.INFO)

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent


def _resolve_logs_dir() -> Path:
    """Select a writable logs directory honoring configuration overrides."""

    configured_dir = getattr(settings, "FACTS_LOG_DIR", None)
    candidates = []
    if configured_dir:
        candidates.append(Path(configured_dir))

    data_dir = Path(getattr(settings, "DATA_DIR", Path("/data")))
    # Precedence: explicit override → repo root logs → DATA_DIR/logs → package-local logs
    candidates.append(ROOT_DIR / "logs")
    candidates.append(data_dir / "logs")
    candidates.append(BASE_DIR / "logs")

    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            continue
        return candidate

    raise PermissionError("Unable to create a writable logs directory")


LOGS_DIR = _resolve_logs_dir()
LOG_SCHEMA_VERSION = str(getattr(settings, "FACTS_LOG_SCHEMA_VERSION", "1.0.0"))
LOG_FILE_PATH = LOGS_DIR / "facts_fulfillment.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class CorrelationIdFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Attach correlation, session, and request path metadata to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        record.log_session_id = get_log_session_id() or "-"
        request_ctx = get_request_context()
        record.path = request_ctx.path if request_ctx is not None else "-"
        return True


def pseudonymize_session_id(session_id: str) -> str:
    """Return a short, stable digest of ``session_id`` safe to write to logs."""

    return hashlib.sha256(session_id.encode("utf-8")).hexdigest()[:16]


def bind_correlation_id(value: Optional[str]) -> Token[Optional[str]]:
    """Bind ``value`` to the correlation id context variable."""

    return _correlation_id.set(value)


def reset_correlation_id(token: Token[Optional[str]]) -> None:
    """Reset the correlation id context variable to a previous state."""

    _correlation_id.reset(token)


def get_correlation_id() -> Optional[str]:
    """Return the current correlation id if bound."""

    return _correlation_id.get()


def bind_log_session_id(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the pseudonymized session identifier for downstream logging."""

    return _log_session_id.set(value)


def reset_log_session_id(token: Token[Optional[str]]) -> None:
    """Reset the pseudonymized session identifier context variable."""

    _log_session_id.reset(token)


def get_log_session_id() -> Optional[str]:
    """Return the current pseudonymized session identifier if bound."""

    return _log_session_id.get()


def bind_request_context(value: Optional["RequestContext"]) -> Token[Optional["RequestContext"]]:
    """Bind the inbound request metadata for the current task."""

    return _request_context.set(value)


def reset_request_context(token: Token[Optional["RequestContext"]]) -> None:
    """Reset the request metadata context variable."""

    _request_context.reset(token)


def get_request_context() -> Optional["RequestContext"]:
    """Return the current request metadata if bound."""

    return _request_context.get()


@contextmanager
def correlation_id_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds a correlation id."""

    token = bind_correlation_id(value)
    try:
        yield
    finally:
        reset_correlation_id(token)


@contextmanager
def log_session_id_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds a pseudonymized session id."""

    token = bind_log_session_id(value)
    try:
        yield
    finally:
        reset_log_session_id(token)


def _shared_handlers_installed(root: logging.Logger) -> bool:
    return any(isinstance(handler.formatter, VersionedJsonFormatter) for handler in root.handlers)


def _ensure_handlers() -> None:
    root = logging.getLogger()
    if _shared_handlers_installed(root):
        return

    formatter = VersionedJsonFormatter(
        " ".join(
            [
                "%(asctime)s",
                "%(levelname)s",
                "%(name)s",
                "%(message)s",
                "%(correlation_id)s",
                "%(log_session_id)s",
                "%(path)s",
            ]
        ),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "correlation_id": "cid",
            "log_session_id": "session",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )
    correlation_filter = CorrelationIdFilter()

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.addFilter(correlation_filter)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    file_handler = RotatingFileHandler(
        LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.addFilter(correlation_filter)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger that propagates to the shared JSON handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    _ensure_handlers()
    return logger


__all__ = [
    "CorrelationIdFilter",
    "VersionedJsonFormatter",
    "bind_correlation_id",
    "bind_log_session_id",
    "bind_request_context",
    "reset_correlation_id",
    "reset_log_session_id",
    "reset_request_context",
    "get_correlation_id",
    "get_log_session_id",
    "get_request_context",
    "correlation_id_context",
    "log_session_id_context",
    "pseudonymize_session_id",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
]
