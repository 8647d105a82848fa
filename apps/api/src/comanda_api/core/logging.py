"""Structured JSON logging for the relay.

Loguru owns every record: stdlib loggers are intercepted, the active
OpenTelemetry span is stamped on by a patcher, and a single sink renders
one JSON document per line.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from loguru import logger
from opentelemetry import trace

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "google.auth", "urllib3")


def _stamp_trace_context(record: dict[str, Any]) -> None:
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        record["extra"]["trace_id"] = format(span_context.trace_id, "032x")
        record["extra"]["span_id"] = format(span_context.span_id, "016x")


class JsonLineSink:
    """Loguru sink that writes each record as a JSON line."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def __call__(self, message: Any) -> None:
        record = message.record
        document: dict[str, Any] = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name.lower(),
            "message": record["message"],
            "logger": record["name"],
            **record["extra"],
        }
        if record["exception"] is not None:
            document["exception"] = repr(record["exception"].value)

        # stdout is looked up per write; it may be swapped after configuration.
        stream = self._stream or sys.stdout
        stream.write(json.dumps(document, default=str) + "\n")
        stream.flush()


class InterceptHandler(logging.Handler):
    """Forward stdlib records (uvicorn, SQLAlchemy, firebase_admin) into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so Loguru reports the real caller.
        frame, depth = logging.currentframe(), 0
        while frame is not None and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(stdlib_logger=record.name).log(
            level, record.getMessage()
        )


def configure_logging(
    *,
    service_name: str,
    environment: str,
    version: str,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Replace Loguru's handlers with the JSON sink and capture stdlib logging."""

    logger.configure(
        handlers=[
            {
                "sink": JsonLineSink(stream),
                "level": level.upper(),
                "backtrace": False,
                "diagnose": False,
            }
        ],
        extra={"service": service_name, "environment": environment, "version": version},
        patcher=_stamp_trace_context,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["InterceptHandler", "JsonLineSink", "QUIET_LOGGERS", "configure_logging"]
