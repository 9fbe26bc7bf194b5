from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from swimcoach.models import SessionPlan


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter.

    Fields passed via `extra` with a `ctx_` prefix are grouped under `context`.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }
        extra = {k: v for k, v in record.__dict__.items() if k.startswith("ctx_")}
        if extra:
            log_entry["context"] = extra
        return json.dumps(log_entry, default=str)


def plan_context(plan: "SessionPlan", **fields: Any) -> dict[str, Any]:
    """`extra` dict describing a planner decision: template, phase, readiness, lineage."""
    context = {
        "ctx_template_id": plan.derived_from_template.template_id,
        "ctx_session_type": plan.session.type,
        "ctx_phase": plan.phase,
        "ctx_readiness": plan.readiness.status,
        "ctx_total_m": plan.session.total_distance_m,
        "ctx_generation": plan.lineage.generation,
    }
    context.update({f"ctx_{k}": v for k, v in fields.items()})
    return context


def log_plan_event(
    logger: logging.Logger,
    event: str,
    plan: "SessionPlan",
    level: int = logging.DEBUG,
    **fields: Any,
) -> None:
    if logger.isEnabledFor(level):
        logger.log(level, event, extra=plan_context(plan, **fields))


def setup_logging(level: str = "INFO", formatter: logging.Formatter | None = None) -> None:
    """Configure structured JSON logging to stdout. Safe to call repeatedly."""
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter or JSONFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Reduce noise from third-party libraries
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)
