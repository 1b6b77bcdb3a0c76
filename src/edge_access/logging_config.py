"""
Structured logging for edge_access.

Host applications call `configure_logging` once at startup; library modules
only ever call `get_logger`. Without configuration structlog falls back to
its default dev renderer, which is fine for tests and local runs.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, TextIO

import structlog


def add_component(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the edge_access sub-package that emitted them."""
    logger_name = event_dict.get("logger", "")
    if logger_name.startswith("edge_access."):
        event_dict["component"] = logger_name.split(".")[1]
    return event_dict


def configure_logging(log_level: str = "info", json_logs: bool = True, stream: TextIO = sys.stdout) -> None:
    """Configure structlog on top of the standard library logging module."""
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_component,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
