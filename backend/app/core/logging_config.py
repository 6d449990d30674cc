"""
Structured logging configuration with request context and sensitive data masking
"""
import json
import logging
import re
import sys
from contextvars import ContextVar
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import get_settings

# Context variables for request context
request_context: ContextVar[Dict[str, Any]] = ContextVar('request_context', default={})

# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName',
})

_ROTATION_WHEN = {'midnight', 'W0', 'W1', 'W2', 'W3', 'W4', 'W5', 'W6'}


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages"""

    SENSITIVE_PATTERNS = [
        (r'password["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', r'password": "***"'),
        (r'token["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', r'token": "***"'),
        (r'secret["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', r'secret": "***"'),
        (r'Bearer\s+([^\s"]+)', r'Bearer ***'),
        (r'x-twilio-signature["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', r'x-twilio-signature": "***"'),
    ]

    def __init__(self, enabled: bool = True):
        super().__init__()
        self.enabled = enabled

    def _mask(self, value: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            value = re.sub(pattern, replacement, value, flags=re.IGNORECASE)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.enabled:
            return True

        if isinstance(record.msg, str):
            record.msg = self._mask(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                self._mask(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True


class ContextualFormatter(logging.Formatter):
    """JSON formatter that merges request context and extra= fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_dict = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'message': record.getMessage(),
        }

        ctx = request_context.get({})
        if ctx:
            log_dict.update(ctx)

        if record.exc_info:
            log_dict['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value, default=str)
                log_dict[key] = value
            except (TypeError, ValueError):
                log_dict[key] = str(value)

        return json.dumps(log_dict, ensure_ascii=False, default=str)


class LoggingConfig:
    """Centralized logging configuration"""

    _configured = False
    _log_metrics: Dict[str, int] = dict.fromkeys(
        ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'), 0
    )

    @classmethod
    def _resolve_log_path(cls, raw_path: str) -> Path:
        log_path = Path(raw_path)
        if not log_path.is_absolute():
            project_root = Path(__file__).resolve().parent.parent.parent.parent
            log_path = project_root / log_path
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return log_path

    @classmethod
    def configure(cls, module_levels: Optional[Dict[str, str]] = None):
        """Configure logging for the application"""
        if cls._configured:
            return

        settings = get_settings()

        levels = {
            "sqlalchemy.engine": "INFO" if settings.log_sqlalchemy else "WARNING",
            "sqlalchemy.pool": "WARNING",
            "uvicorn.access": "INFO" if settings.log_uvicorn_access else "WARNING",
            "uvicorn.error": "INFO",
            "app": settings.log_level,
            "root": settings.log_level,
        }

        if settings.log_module_levels:
            try:
                levels.update(json.loads(settings.log_module_levels))
            except (json.JSONDecodeError, TypeError):
                pass

        if module_levels:
            levels.update(module_levels)

        if settings.log_format.lower() == "json":
            formatter = ContextualFormatter(datefmt='%Y-%m-%d %H:%M:%S')
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        sensitive_filter = SensitiveDataFilter(enabled=not settings.log_sensitive_data)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(sensitive_filter)
        handlers = [console_handler]

        if settings.log_file_enabled:
            when = settings.log_file_rotation
            if when not in _ROTATION_WHEN:
                when = 'midnight'
            file_handler = TimedRotatingFileHandler(
                filename=str(cls._resolve_log_path(settings.log_file_path)),
                when=when,
                interval=1,
                backupCount=settings.log_file_retention,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.addFilter(sensitive_filter)
            handlers.append(file_handler)

        logging.basicConfig(
            level=getattr(logging, levels.get("root", "INFO").upper()),
            handlers=handlers,
            force=True
        )

        for module, level in levels.items():
            if module == "root":
                continue
            logger = logging.getLogger(module)
            logger.setLevel(getattr(logging, level.upper()))
            if module.startswith(("sqlalchemy", "uvicorn")):
                logger.propagate = False

        metrics_handler = cls._MetricsHandler()
        metrics_handler.setLevel(logging.DEBUG)
        logging.getLogger().addHandler(metrics_handler)

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger for a module"""
        if not cls._configured:
            cls.configure()
        return logging.getLogger(name)

    @classmethod
    def set_context(cls, **kwargs):
        """Set context variables for logging"""
        ctx = request_context.get({}).copy()
        ctx.update(kwargs)
        request_context.set(ctx)

    @classmethod
    def clear_context(cls):
        request_context.set({})

    @classmethod
    def get_metrics(cls) -> Dict[str, int]:
        """Get log counts by level"""
        return cls._log_metrics.copy()

    @classmethod
    def reset_metrics(cls):
        cls._log_metrics = dict.fromkeys(cls._log_metrics, 0)

    class _MetricsHandler(logging.Handler):
        """Counts emitted records by level"""

        def emit(self, record: logging.LogRecord):
            level = record.levelname
            if level in LoggingConfig._log_metrics:
                LoggingConfig._log_metrics[level] += 1
