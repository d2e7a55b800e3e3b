import logging
import json
import re
from typing import Optional

from opentelemetry import trace

from .config import get_config

SENSITIVE_KEYS = {
    "authorization",
    "proxy-authorization",
    "api_key",
    "apikey",
    "api-key",
    "password",
    "secret",
    "token",
    "access_token",
    "refresh_token",
    "id_token",
    "set-cookie",
    "cookie",
}

_BEARER = re.compile(r"bearer\s+[A-Za-z0-9._\-]+", re.IGNORECASE)
_EMAIL = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")


def configure_logging(name: str, level: Optional[str] = None):
    level = (level or get_config().log_level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level: {level!r}")
    logger = logging.getLogger(name)
    if not logger.handlers:
        logging.basicConfig(level=level, format='%(message)s')
    return logger


def _get_trace_fields() -> dict:
    """Extract standard trace fields from current OpenTelemetry span."""
    fields = {}
    try:
        span = trace.get_current_span()
        ctx = span.get_span_context() if span else None
        if ctx and ctx.is_valid:
            trace_id_hex = format(ctx.trace_id, '032x')
            span_id_hex = format(ctx.span_id, '016x')
            trace_flags = format(ctx.trace_flags, '02x')
            fields["trace_id"] = trace_id_hex
            fields["span_id"] = span_id_hex
            fields["traceparent"] = f"00-{trace_id_hex}-{span_id_hex}-{trace_flags}"
    except Exception:
        # Best-effort enrichment; ignore errors
        pass
    return fields


def _scrub_value(v):
    if isinstance(v, str):
        if _BEARER.search(v):
            return "[REDACTED]"
        if _EMAIL.search(v):
            return "[REDACTED_EMAIL]"
    return v


def _scrub(obj):
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if str(k).lower() in SENSITIVE_KEYS:
                out[k] = "[REDACTED]"
            else:
                out[k] = _scrub(v)
        return out
    elif isinstance(obj, list):
        return [_scrub(i) for i in obj]
    else:
        return _scrub_value(obj)


def log_json(level: int, event: str, **kwargs):
    # Auto-enrich with trace fields unless explicitly provided
    for k, v in _get_trace_fields().items():
        kwargs.setdefault(k, v)
    payload = _scrub({"event": event, **kwargs})
    logging.getLogger("jsontools").log(level, json.dumps(payload, default=str))
