import json
import logging
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from contextvars import ContextVar

# Context variables for correlation
operation_var: ContextVar[Optional[str]] = ContextVar('operation', default=None)
tab_var: ContextVar[Optional[str]] = ContextVar('tab', default=None)
track_id_var: ContextVar[Optional[str]] = ContextVar('track_id', default=None)


class SecretMasker:
    """Masks sensitive information in log messages."""

    def __init__(self):
        """Initialize secret masker with patterns."""
        self.patterns = [
            # API tokens and keys
            r'(?i)(token|key|secret|password|auth)[\s]*[:=][\s]*["\']?([a-zA-Z0-9\-_\.]{10,})["\']?',
            # Signed stream URLs carry their signature in a query parameter
            r'(?i)(sig|signature|lsig)[\s]*[:=][\s]*["\']?([a-zA-Z0-9\-_\.%]{10,})["\']?',
            # Authorization headers
            r'(?i)(authorization|bearer)[\s]*[:=][\s]*["\']?([a-zA-Z0-9\-_\.]{50,})["\']?',
            # Cookies passed through to the extractor
            r'(?i)(cookie|cookies)[\s]*[:=][\s]*["\']?([a-zA-Z0-9\-_\.]{20,})["\']?',
        ]

        self.compiled_patterns = [re.compile(pattern) for pattern in self.patterns]

    def mask_secrets(self, text: str) -> str:
        """Mask sensitive information in text."""
        if not text:
            return text

        masked_text = text

        for pattern in self.compiled_patterns:
            def replace_match(match):
                prefix = match.group(1)
                secret = match.group(2)
                # Keep first 4 and last 4 characters, mask the rest
                if len(secret) > 8:
                    masked_secret = secret[:4] + '*' * (len(secret) - 8) + secret[-4:]
                else:
                    masked_secret = '*' * len(secret)
                return f"{prefix}: {masked_secret}"

            masked_text = pattern.sub(replace_match, masked_text)

        return masked_text

    def mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive information in dictionary."""
        if not data:
            return data

        masked_data = {}

        for key, value in data.items():
            if isinstance(value, str):
                masked_data[key] = self.mask_secrets(value)
            elif isinstance(value, dict):
                masked_data[key] = self.mask_dict(value)
            elif isinstance(value, list):
                masked_data[key] = [self.mask_dict(item) if isinstance(item, dict)
                                    else self.mask_secrets(item) if isinstance(item, str)
                                    else item for item in value]
            else:
                masked_data[key] = value

        return masked_data


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self):
        super().__init__()
        self.masker = SecretMasker()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        operation = operation_var.get()
        tab = tab_var.get()
        track_id = track_id_var.get()

        log_entry = {
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': self.mask_secrets(record.getMessage()),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if operation:
            log_entry['operation'] = operation
        if tab:
            log_entry['tab'] = tab
        if track_id:
            log_entry['trackId'] = track_id

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if hasattr(record, 'fields') and record.fields:
            log_entry['fields'] = self.masker.mask_dict(record.fields)

        return json.dumps(log_entry, ensure_ascii=False)

    def mask_secrets(self, text: str) -> str:
        """Mask secrets in text."""
        return self.masker.mask_secrets(text)


class CorrelationContext:
    """Context manager for correlation data."""

    def __init__(self, operation: Optional[str] = None,
                 tab: Optional[str] = None,
                 track_id: Optional[str] = None):
        self.operation = operation
        self.tab = tab
        self.track_id = track_id
        self._tokens = []

    def __enter__(self):
        """Set correlation context."""
        if self.operation is not None:
            self._tokens.append((operation_var, operation_var.set(self.operation)))
        if self.tab is not None:
            self._tokens.append((tab_var, tab_var.set(self.tab)))
        if self.track_id is not None:
            self._tokens.append((track_id_var, track_id_var.set(self.track_id)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore correlation context."""
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


def setup_logging(level: str = 'INFO',
                  log_file: Optional[str] = None) -> logging.Logger:
    """Setup structured logging on the package logger."""
    logger = logging.getLogger('tubefeed')
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    formatter = StructuredFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = 'tubefeed') -> logging.Logger:
    """Get logger with structured formatting."""
    return logging.getLogger(name)


def log_with_fields(logger: logging.Logger, level: str, message: str,
                    fields: Optional[Dict[str, Any]] = None, **kwargs):
    """Log message with additional fields."""
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno,
        '', 0, message, (), None
    )

    if fields:
        record.fields = dict(fields)
    if kwargs:
        if not hasattr(record, 'fields'):
            record.fields = {}
        record.fields.update(kwargs)

    logger.handle(record)


def log_page_loaded(logger: logging.Logger, label: str, item_count: int,
                    has_more: bool, **kwargs):
    """Log a fetched page."""
    log_with_fields(logger, 'INFO', 'Page loaded', {
        'label': label,
        'item_count': item_count,
        'has_more': has_more,
        **kwargs
    })


def log_track_resolved(logger: logging.Logger, track_id: str, stream_count: int, **kwargs):
    """Log stream resolution outcome for one track."""
    with CorrelationContext(track_id=track_id):
        log_with_fields(logger, 'INFO', 'Track resolved', {
            'stream_count': stream_count,
            **kwargs
        })


def log_error(logger: logging.Logger, message: str, error: Exception, **kwargs):
    """Log error with exception details."""
    log_with_fields(logger, 'ERROR', message, {
        'error_type': type(error).__name__,
        'error_message': str(error),
        **kwargs
    })
