# 📄 File: toollender/shared/utils/logging.py

# 🧭 Purpose (Layman Explanation):
# Decides how ToolLender writes its diary: plain lines or JSON, which events get
# recorded (offline fallbacks, background refreshes, new tools), and which
# signed-in member an entry belongs to.

# 🧪 Purpose (Technical Summary):
# Root logger configuration from Settings, a JSON formatter built on
# python-json-logger, a text formatter, a contextvar-backed member/correlation
# scope, and a StructuredLogger wrapper whose keyword arguments travel as
# ``extra_fields`` into both formatters.

# 🔗 Dependencies:
# - python-json-logger: JSON log formatting
# - logging: Python standard logging
# - contextvars: per-task member and correlation ids

# 🔄 Connected Modules / Calls From:
# Used by: repositories, cache synchronizer, remote store adapters, account service,
# container startup

import logging
import socket
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from toollender.shared.config.settings import get_settings

user_id_var: ContextVar[str] = ContextVar('user_id', default='')
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')

SERVICE_NAME = 'toollender'

# Keyword arguments the stdlib logger understands itself
_LOGGER_KWARGS = ('exc_info', 'stack_info', 'stacklevel')

# Chatty third-party loggers kept at WARNING
_QUIET_LOGGERS = ('httpx', 'hpack', 'aiohttp', 'asyncio')

_logging_configured = False
_loggers_cache: Dict[str, "StructuredLogger"] = {}


def _context_fields() -> Dict[str, str]:
    fields = {}
    if correlation_id_var.get():
        fields['correlation_id'] = correlation_id_var.get()
    if user_id_var.get():
        fields['user_id'] = user_id_var.get()
    return fields


class ContextualFormatter(logging.Formatter):
    """
    Text formatter appending the member/correlation scope and any
    structured fields as ``key=value`` pairs.
    """

    def format(self, record):
        record.timestamp = datetime.now(timezone.utc).isoformat()
        line = super().format(record)
        fields = {**_context_fields(), **(getattr(record, 'extra_fields', None) or {})}
        if fields:
            line += ' | ' + ' '.join(f"{k}={v}" for k, v in fields.items())
        return line


class JSONFormatter(JsonFormatter):
    """One JSON object per record, structured fields nested under ``extra``."""

    def __init__(self):
        super().__init__('%(levelname)s %(name)s %(message)s')
        self.hostname = socket.gethostname()

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = log_record.pop('levelname', record.levelname)
        log_record['logger'] = log_record.pop('name', record.name)
        log_record.update(
            timestamp=datetime.now(timezone.utc).isoformat(),
            service=SERVICE_NAME,
            hostname=self.hostname,
            **_context_fields(),
        )
        extra_fields = log_record.pop('extra_fields', None)
        if extra_fields:
            log_record['extra'] = extra_fields


class PerformanceLogger:
    """Cache and remote store timing events."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_cache_operation(
        self,
        operation: str,
        cache_type: str,
        key: str,
        hit: bool = None,
        duration_ms: float = None,
        extra: Dict = None
    ):
        """Log a cache hit, miss, refresh or fallback."""
        fields = {'event_type': 'cache_operation', 'operation': operation,
                  'cache_type': cache_type, 'cache_key': key, **(extra or {})}
        if hit is not None:
            fields['cache_hit'] = hit
        if duration_ms is not None:
            fields['duration_ms'] = duration_ms
        self.logger.debug(f"Cache {operation} {cache_type} - {key}", extra={'extra_fields': fields})

    def log_remote_call(
        self,
        operation: str,
        collection: str,
        mode: str,
        duration_ms: float,
        success: bool,
        extra: Dict = None
    ):
        fields = {'event_type': 'remote_call', 'operation': operation, 'collection': collection,
                  'mode': mode, 'duration_ms': duration_ms, 'success': success, **(extra or {})}
        self.logger.log(
            logging.DEBUG if success else logging.WARNING,
            f"Remote {operation} {collection} ({mode}) - {duration_ms:.2f}ms",
            extra={'extra_fields': fields},
        )


class StructuredLogger:
    """
    Wrapper around a stdlib logger.

    Keyword arguments other than the logger's own (``exc_info`` and friends)
    are collected into ``extra_fields``, e.g.
    ``logger.warning("Cache write failed", cache_key="tools")``.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.performance = PerformanceLogger(self.logger)

    def debug(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.DEBUG, message, extra, **kwargs)

    def info(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.INFO, message, extra, **kwargs)

    def warning(self, message: str, extra: Dict = None, **kwargs):
        self._log(logging.WARNING, message, extra, **kwargs)

    def error(self, message: str, extra: Dict = None, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, extra, exc_info=exc_info, **kwargs)

    def _log(self, level: int, message: str, extra: Dict = None, **kwargs):
        log_kwargs = {k: kwargs.pop(k) for k in _LOGGER_KWARGS if k in kwargs}
        fields = {**(extra or {}), **kwargs}
        if fields:
            log_kwargs['extra'] = {'extra_fields': fields}
        self.logger.log(level, message, **log_kwargs)

    def log_business_event(
        self,
        event_type: str,
        description: str,
        entity_id: str = None,
        entity_type: str = None,
        extra: Dict = None
    ):
        """Log a data change (tool created, association added, account deleted)."""
        fields: Dict[str, Any] = {'event_type': 'business_event',
                                  'business_event_type': event_type, **(extra or {})}
        if entity_id:
            fields['entity_id'] = entity_id
        if entity_type:
            fields['entity_type'] = entity_type
        self.info(description, extra=fields)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger from Settings, once per process.

    Records go to stdout and, when LOG_FILE is set, to that file as well.
    Arguments override the matching LOG_* setting.
    """
    global _logging_configured

    if not _logging_configured:
        settings = get_settings()
        level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
        if (log_format or settings.LOG_FORMAT).lower() == 'json':
            formatter = JSONFormatter()
        else:
            formatter = ContextualFormatter('%(timestamp)s - %(name)s - %(levelname)s - %(message)s')

        handlers = [logging.StreamHandler(sys.stdout)]
        log_file = log_file or settings.LOG_FILE
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file))

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        _logging_configured = True

    return logging.getLogger("startup")


def get_logger(name: str) -> StructuredLogger:
    """Return the cached StructuredLogger for ``name``."""
    if name not in _loggers_cache:
        _loggers_cache[name] = StructuredLogger(name)
    return _loggers_cache[name]


@contextmanager
def log_context(user_id: str = None, correlation_id: str = None):
    """
    Tag every record logged inside the block with a member id and a
    correlation id (a fresh uuid4 unless given).
    """
    user_token = user_id_var.set(user_id or '')
    correlation_token = correlation_id_var.set(correlation_id or str(uuid4()))
    try:
        yield
    finally:
        user_id_var.reset(user_token)
        correlation_id_var.reset(correlation_token)


def log_startup_event(service_name: str, version: str, extra: Dict = None):
    get_logger('startup').info(
        f"Service {service_name} starting up",
        extra={'event_type': 'service_startup', 'service_name': service_name,
               'version': version, **(extra or {})},
    )


def log_shutdown_event(service_name: str, extra: Dict = None):
    get_logger('shutdown').info(
        f"Service {service_name} shutting down",
        extra={'event_type': 'service_shutdown', 'service_name': service_name, **(extra or {})},
    )
