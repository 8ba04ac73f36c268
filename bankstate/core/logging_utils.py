"""Logging setup and structured logging for status server transitions."""

import logging
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging (standalone runner). Inside a host, the host owns logging config."""
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, level=level)
    # uvicorn logs every connection at INFO; keep only problems
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def _ensure_trace_id(extra: dict) -> str:
    trace_id = extra.get("trace_id")
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        extra["trace_id"] = trace_id
    return trace_id


def log_server_transition(
    from_state: str,
    to_state: str,
    reason: str,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log status server transition: trace_id, from_state, to_state, reason (+ host/port when known)."""
    extra = dict(extra or {})
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["from_state"] = from_state
    extra["to_state"] = to_state
    extra["reason"] = reason
    msg = "server_transition " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))
    logger.info(msg)
