"""Structured Logging — JSON log lines for the auth pages, identity client and read routes.

Invariants:
    - Every line carries timestamp (the record's creation time), level, logger, message
    - Known extras (user_id, email, error_code, path, operation, attempt,
      status_code) are copied onto the line only when set
    - An email extra is masked to its first character plus domain
    - httpx/httpcore request chatter held at WARNING: the identity client
      already logs each call with its operation name
    - setup_logging replaces the handler it installed earlier, never stacks

Design Decisions:
    - Stdlib logging plus one formatter; LOG_FORMAT=text for local runs
"""

import json
import logging
from datetime import datetime, timezone

LOGGED_EXTRAS = (
    "user_id", "email", "error_code", "path",
    "operation", "attempt", "status_code",
)
QUIET_LOGGERS = ("httpx", "httpcore")

_installed_handler: logging.Handler | None = None


def mask_email(email: str) -> str:
    local, sep, domain = email.partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in LOGGED_EXTRAS:
            value = getattr(record, key, None)
            if value is None:
                continue
            entry[key] = mask_email(str(value)) if key == "email" else value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the process log handler (called from the lifespan)."""
    global _installed_handler
    root = logging.getLogger()
    if _installed_handler is not None:
        root.removeHandler(_installed_handler)

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _installed_handler = handler
    return handler
