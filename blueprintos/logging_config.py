"""
Structured Logging Configuration

Every record carries the request id, the Host the request was addressed to
and the calling user, copied from context variables by ``RequestContextFilter``.
Messages are masked after formatting, so emails and credentials passed as
``%s`` arguments never reach the output.

JSON in production and staging, one readable line per record in development.
"""

import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar
from typing import Any

from blueprintos.config import settings

# ── Context variables for request tracking ──
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")
workspace_host_ctx: ContextVar[str] = ContextVar("workspace_host", default="-")
user_id_ctx: ContextVar[str] = ContextVar("user_id", default="-")

CONTEXT_FIELDS = {
    "request_id": request_id_ctx,
    "workspace_host": workspace_host_ctx,
    "user_id": user_id_ctx,
}


def generate_request_id() -> str:
    return str(uuid.uuid4())[:8]


# ═══════════════════════════════════════════
#  PII Masking
# ═══════════════════════════════════════════

# signup payloads, identity provider headers and token responses
SENSITIVE_KEYS = (
    "password",
    "access_token",
    "refresh_token",
    "token",
    "secret",
    "service_key",
    "apikey",
    "api_key",
    "authorization",
)

_EMAIL_PATTERN = re.compile(r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.I)
_JWT_PATTERN = re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+")
_KEYS = "|".join(SENSITIVE_KEYS)
# "key": "value" and 'key': 'value'
_QUOTED_PATTERN = re.compile(r"""(["']?(?:%s)["']?\s*[:=]\s*)(?:"[^"]*"|'[^']*')""" % _KEYS, re.I)
# key=value in query strings and form bodies
_PAIR_PATTERN = re.compile(r"((?:%s)=)[^\s&,;]+" % _KEYS, re.I)


def _mask_email(match: re.Match) -> str:
    local = match.group(1)
    domain = match.group(2)
    if len(local) <= 2:
        return f"{local[0]}***@{domain}"
    return f"{local[0]}***{local[-1]}@{domain}"


def mask_pii(text: str) -> str:
    """Mask emails, bearer tokens, JWTs and sensitive key/value pairs."""
    text = _BEARER_PATTERN.sub(r"\1***", text)
    text = _JWT_PATTERN.sub("***.jwt", text)
    text = _QUOTED_PATTERN.sub(r'\1"***"', text)
    text = _PAIR_PATTERN.sub(r"\1***", text)
    return _EMAIL_PATTERN.sub(_mask_email, text)


class RequestContextFilter(logging.Filter):
    """Copies the request context onto the record; never drops anything."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in CONTEXT_FIELDS.items():
            if not hasattr(record, name):
                setattr(record, name, var.get("-"))
        return True


# ═══════════════════════════════════════════
#  Formatters
# ═══════════════════════════════════════════

class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S.000Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_pii(record.getMessage()),
        }
        for name, var in CONTEXT_FIELDS.items():
            log_entry[name] = getattr(record, name, var.get("-"))

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = mask_pii(self.formatException(record.exc_info))

        # Remove empty context
        log_entry = {k: v for k, v in log_entry.items() if v and v != "-"}

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """Readable formatter for development."""

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | [%(request_id)s %(workspace_host)s] %(message)s"

    def format(self, record: logging.LogRecord) -> str:
        # records that bypassed the handler filter
        RequestContextFilter().filter(record)
        return mask_pii(super().format(record))


# ═══════════════════════════════════════════
#  Setup
# ═══════════════════════════════════════════

def setup_logging() -> None:
    """Configure application-wide logging."""
    root = logging.getLogger()

    # Clear existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    if settings.is_production or settings.is_staging:
        handler.setFormatter(JSONFormatter())
        root.setLevel(logging.INFO)
    else:
        handler.setFormatter(
            HumanFormatter(HumanFormatter.FORMAT, datefmt="%H:%M:%S")
        )
        root.setLevel(logging.DEBUG)

    root.addHandler(handler)

    # Quiet noisy third-party loggers
    for name in ("uvicorn.access", "httpcore", "httpx", "openai", "urllib3", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
