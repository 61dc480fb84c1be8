"""
Process logging configuration.

Development: readable text lines. Production: one JSON object per line,
rendered by structlog for every stdlib log record, with request IDs and
sensitive values redacted.
"""
import logging
import re
import sys
from typing import Any

import structlog

from app.core.config import settings

EMAIL_PATTERN = re.compile(r"^([^@\s])[^@\s]*@([^@\s]+\.[^@\s]+)$")

# Telegram bot tokens travel in the request path: /bot<id>:<secret>/sendMessage
BOT_TOKEN_PATTERN = re.compile(r"/bot\d+:[\w-]+")

# Keys whose values are always replaced, matched as substrings of the lowercased key
SENSITIVE_KEYS = (
    "password",
    "token",
    "api_key",
    "x-api-key",
    "secret",
    "authorization",
    "cookie",
    "session_id",
)

REDACTED = "***REDACTED***"

# Chatty at INFO: SQL echo, pool events and one line per outbound request (with the bot URL)
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "httpcore")

# Bookkeeping keys, only scrubbed for bot tokens
PASSTHROUGH_KEYS = frozenset({"event", "logger", "level", "timestamp", "request_id"})


def setup_logging() -> None:
    """
    Configure logging for the application.

    In production: JSON format with timestamps and request IDs
    In development: Readable text format
    """
    log_level = getattr(logging, settings.LOG_LEVEL)

    if settings.DEBUG:
        configure_development_logging(log_level)
    else:
        configure_production_logging(log_level)


def configure_development_logging(level: int) -> None:
    """Configure logging for development (readable format)."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout,
        force=True,
    )

    quiet_noisy_loggers()


def configure_production_logging(level: int) -> None:
    """Configure logging for production (JSON format)."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive_data,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Render plain stdlib records (including the structured logger's) as JSON too
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(ensure_ascii=False),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    quiet_noisy_loggers()


def quiet_noisy_loggers() -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def redact_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    structlog processor masking secrets before a record is rendered.

    Values under SENSITIVE_KEYS are replaced outright. Other string values
    go through redact_string(). Bookkeeping keys keep their value apart
    from bot tokens, which are scrubbed everywhere.
    """
    redacted = {}

    for key, value in event_dict.items():
        if key in PASSTHROUGH_KEYS:
            redacted[key] = mask_bot_tokens(value) if isinstance(value, str) else value
        elif isinstance(key, str) and any(s in key.lower() for s in SENSITIVE_KEYS):
            redacted[key] = REDACTED
        elif not isinstance(value, str):
            redacted[key] = value
        else:
            redacted[key] = redact_string(value)

    return redacted


def mask_bot_tokens(value: str) -> str:
    return BOT_TOKEN_PATTERN.sub("/bot***", value)


def redact_string(value: str) -> str:
    """Mask an email address or a long token-like string; scrub bot tokens from anything else."""
    if match := EMAIL_PATTERN.match(value):
        return f"{match.group(1)}***@{match.group(2)}"

    # Long unbroken alphanumeric runs are most likely keys
    if len(value) > 20 and value.replace("_", "").replace("-", "").isalnum():
        return f"{value[:8]}...{value[-4:]}"

    return mask_bot_tokens(value)
