"""
Centralized Structured Logging

JSON-formatted logs with run_id correlation.
Strategic logging: study boundaries, generation attempts, retries and failures only.
Provider errors can echo request URLs, so API keys are scrubbed from every record.
"""

import logging
import json
import re
import sys
from datetime import datetime, timezone

# Extra fields copied from the LogRecord into the JSON payload
EXTRA_FIELDS = (
    "run_id",
    "event",
    "mode",
    "depth",
    "model",
    "attempt",
    "max_attempts",
    "delay_s",
    "status_code",
    "retryable",
    "duration_ms",
)

REDACTED = "***"

# Google API keys and `key=` query parameters
_SECRET_PATTERNS = (
    re.compile(r"AIza[0-9A-Za-z_\-]{20,}"),
    re.compile(r"(?<=[?&]key=)[^&\s\"']+"),
)


def redact_secrets(text: str) -> str:
    """Mask anything that looks like a Google API key."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(REDACTED, text)
    return text


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured, machine-parseable output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }

        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = redact_secrets(self.formatException(record.exc_info))

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Configure root logger with JSON formatter.
    Call once at application startup.
    """
    root = logging.getLogger()

    # Avoid duplicate handlers on uvicorn reload
    if any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    root.setLevel(level)
    root.addHandler(handler)

    for noisy in ("httpx", "httpcore", "urllib3", "google", "langchain_google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance."""
    return logging.getLogger(name)
