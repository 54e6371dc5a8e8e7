"""
Logging for the Zoom client.

Every module logs through get_logger() under the ``zoom_dispatch`` namespace,
and only at DEBUG level:

    throttle_rule_registered   a rule was added or replaced
    request_throttled          a rule rejected a request
    request_dispatched         Zoom answered a request with 2xx
    error_map_ignored          a malformed error map was treated as empty
    zoom_client_initialized    a ZoomAPI finished wiring its governor

These events never stand in for an exception; failures are always raised.
Nothing is rendered until the application configures logging, either on its
own or through setup_logging() (``ZOOM_CONFIGURE_LOGGING=true`` makes ZoomAPI
call it).
"""
import logging
import sys
from typing import Any, Optional, TextIO

import structlog
from pythonjsonlogger import jsonlogger

CLIENT_LOGGER = "zoom_dispatch"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

# Context keys bound by LogContext that belong to the current request
REQUEST_CONTEXT_PREFIX = "zoom_"


def group_request_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """
    Processor collecting ``zoom_*`` context vars under a single ``request`` key.

    ``zoom_action`` and ``zoom_path`` become ``{"request": {"action": ..., "path": ...}}``.
    """
    request = {
        key[len(REQUEST_CONTEXT_PREFIX):]: event_dict.pop(key)
        for key in [k for k in event_dict if k.startswith(REQUEST_CONTEXT_PREFIX)]
    }
    if request:
        event_dict["request"] = request
    return event_dict


def setup_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Render the client's events as JSON lines.

    Only the ``zoom_dispatch`` logger tree is configured; the application's
    root logger is left alone.

    Args:
        debug: Show the client's DEBUG events (and httpx request logs)
        stream: Output stream (defaults to stdout)

    Returns:
        The configured ``zoom_dispatch`` stdlib logger
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"}
    ))

    client_logger = logging.getLogger(CLIENT_LOGGER)
    client_logger.handlers = [handler]
    client_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    client_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            group_request_context,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return client_logger


def setup_logging_from_settings(settings) -> Optional[logging.Logger]:
    """Configure logging when the client Settings ask for it."""
    if not settings.configure_logging:
        return None
    return setup_logging(debug=settings.debug)


def get_logger(name: str) -> Any:
    """Get a structured logger, typically for __name__."""
    return structlog.get_logger(name)


class LogContext:
    """
    Binds ``zoom_*`` request context to every client log line inside the block.

    Values shadowed by a nested block come back on exit, so an endpoint that
    calls other endpoints keeps its own action once the inner call returns.
    """

    def __init__(self, **kwargs):
        self.context = {
            key if key.startswith(REQUEST_CONTEXT_PREFIX) else REQUEST_CONTEXT_PREFIX + key: value
            for key, value in kwargs.items()
        }
        self._bound = None

    def __enter__(self):
        self._bound = structlog.contextvars.bound_contextvars(**self.context)
        self._bound.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._bound.__exit__(exc_type, exc_val, exc_tb)
        self._bound = None
