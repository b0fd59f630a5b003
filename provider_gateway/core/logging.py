import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

NOISY_HTTP_LOGGERS = (
    "openai",
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Attributes every LogRecord carries; anything else was passed through `extra=`
STANDARD_LOG_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
        "correlation_id",
    }
)


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def get_extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the structured metadata attached to a record via `extra=`."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in STANDARD_LOG_RECORD_ATTRIBUTES and not key.startswith("_")
    }


class ConversationLogger:
    """Logger with correlation ID support"""

    @staticmethod
    @contextmanager
    def correlation_context(request_id: str) -> Generator[None, None, None]:
        """Tag every record created inside the block with `request_id`."""
        old_factory = logging.getLogRecordFactory()

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            record.correlation_id = request_id
            return record

        logging.setLogRecordFactory(record_factory)
        try:
            yield
        finally:
            logging.setLogRecordFactory(old_factory)


class CorrelationFormatter(logging.Formatter):
    """Prefixes the correlation ID and appends structured `extra` fields."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        if hasattr(record, "correlation_id"):
            formatted = f"[{record.correlation_id[:8]}] {formatted}"

        extra = get_extra_fields(record)
        if extra:
            # repr() never raises for ordinary values; fall back for odd objects
            parts = []
            for key, value in extra.items():
                try:
                    parts.append(f"{key}={value!r}")
                except Exception:
                    parts.append(f"{key}=<unrepresentable {type(value).__name__}>")
            formatted = f"{formatted} | {' '.join(parts)}"
        return formatted


class HttpRequestLogDowngradeFilter(logging.Filter):
    """Downgrade noisy third-party HTTP logs to DEBUG."""

    def __init__(self, *prefixes: str) -> None:
        super().__init__()
        self.prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno == logging.INFO:
            for prefix in self.prefixes:
                if record.name.startswith(prefix):
                    record.levelno = logging.DEBUG
                    record.levelname = logging.getLevelName(logging.DEBUG)
                    break
        return True


def configure_root_logging(log_level: str | None = None) -> None:
    """Install the gateway's handler on the root logger.

    Args:
        log_level: Level name; defaults to the LOG_LEVEL setting. Invalid
            names fall back to INFO.
    """
    if log_level is None:
        from provider_gateway.core.config.config import get_config

        log_level = get_config().log_level

    level = log_level.split()[0].upper() if log_level.strip() else "INFO"
    if level not in VALID_LEVELS:
        level = "INFO"

    handler = logging.StreamHandler()
    handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))
    handler.setFormatter(
        CorrelationFormatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s", datefmt="%H:%M:%S")
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    # Configure uvicorn to be quieter
    for uvicorn_logger in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        logging.getLogger(uvicorn_logger).setLevel(logging.WARNING)

    set_noisy_http_logger_levels(level)

    logging.getLogger(__name__).debug("Root logging configured", extra={"level": level})
