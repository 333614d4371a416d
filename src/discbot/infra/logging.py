"""Root logger bootstrap.

``setup_logging`` installs one stdout handler shared by the root and
uvicorn loggers. Records are rendered as JSON lines by default or as
coloured lines for local runs, and carry ``trace_id``/``span_id`` of
the active span (empty outside a span).
"""

from __future__ import annotations

import logging
import sys

from opentelemetry import trace

from discbot.configs.system import LoggingConfig

_TRACE_FIELDS = ("trace_id", "span_id")
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
_JSON_RENAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger"}

_DEV_FORMAT = "%(levelprefix)s %(asctime)s %(name)s  %(message)s"
_DEV_DATEFMT = "%H:%M:%S"


class TraceContextFilter(logging.Filter):
    """Stamp each record with the ids of the current span."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        valid = ctx is not None and ctx.is_valid
        record.trace_id = format(ctx.trace_id, "032x") if valid else ""
        record.span_id = format(ctx.span_id, "016x") if valid else ""
        return True


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.json_output:
        from pythonjsonlogger.json import JsonFormatter

        return JsonFormatter(
            fmt=_JSON_FORMAT,
            rename_fields=_JSON_RENAMES,
            defaults=dict.fromkeys(_TRACE_FIELDS, ""),
        )

    from uvicorn.logging import DefaultFormatter

    return DefaultFormatter(fmt=_DEV_FORMAT, datefmt=_DEV_DATEFMT, use_colors=True)


def setup_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """Configure the root logger; call once before the app starts.

    Returns the installed handler. Calling again replaces it.
    """
    config = config or LoggingConfig()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    handler.setFormatter(build_formatter(config))

    root = logging.getLogger()
    root.setLevel(config.level.upper())
    root.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    # Client libraries log every request at INFO.
    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
