"""
Structured logging for the Books Service.

Every event carries the service name, the request id bound by the HTTP
middleware and, when a span is recording, its trace and span ids.
Output is JSON except in the ``local`` environment, where events are
rendered for a terminal.
"""

import logging
import sys
import uuid
from typing import Any, Callable, Dict, List, Optional

import structlog
from opentelemetry import trace

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def service_name_processor(service_name: str) -> Processor:
    """Stamp each event with the owning service."""

    def add_service_name(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return add_service_name


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        event_dict["span_id"] = f"{span_context.span_id:016x}"
    return event_dict


def build_processors(service_name: str, env: str = "production") -> List[Processor]:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if env == "local"
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        service_name_processor(service_name),
        add_trace_context,
        renderer,
    ]


def configure_logging(service_name: str, log_level: str = "info", env: str = "production") -> None:
    """Configure structlog and the stdlib root logger for a service."""
    structlog.configure(
        processors=build_processors(service_name, env),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request id (generated when absent) to the current context."""
    request_id = request_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
