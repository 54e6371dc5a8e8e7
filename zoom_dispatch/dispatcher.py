"""
Shared dispatch core every endpoint method sends its requests through.

Sequence for one request:
1. Validate the descriptor
2. Ask the governor for admission (rejections raise ThrottledError)
3. Await the injected transport
4. Return the response, post-processed when the descriptor asks for it
5. Translate error responses with the descriptor's error map
"""
import asyncio
import time
import weakref
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

from zoom_dispatch.exceptions import DescriptorError, ThrottledError, TransportError
from zoom_dispatch.governor import Delay, Governor, Reject
from zoom_dispatch.logging_config import LogContext, get_logger
from zoom_dispatch.monitoring import (
    zoom_requests_total,
    zoom_request_duration,
    throttle_decisions_total,
    record_error,
    status_label,
)
from zoom_dispatch.rules import HTTP_METHODS
from zoom_dispatch.translator import ErrorMap, ErrorTranslator, build_error_map

logger = get_logger(__name__)


@dataclass(frozen=True)
class Response:
    """Response produced by a transport."""
    status_code: int
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True, eq=False)
class RequestDescriptor:
    """
    Everything the dispatcher needs to send one request.

    params and error_map are frozen on construction. A descriptor is single
    use: the dispatcher refuses to send the same instance twice.
    """
    path: str
    method: str
    params: Optional[Mapping[str, Any]] = None
    error_map: ErrorMap = field(default_factory=dict)
    post_processor: Optional[Callable[[Response], Any]] = None
    action: Optional[str] = None

    def __post_init__(self):
        if self.params is not None:
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(self, "error_map", build_error_map(self.error_map))


Transport = Callable[[str, str, Optional[Mapping[str, Any]]], Awaitable[Response]]


class Dispatcher:
    """Sends request descriptors through the governor and the injected transport."""

    def __init__(self, transport: Transport, governor: Governor = None, translator: ErrorTranslator = None):
        """
        Args:
            transport: Async callable ``(method, path, params) -> Response``
            governor: Shared admission governor; a private one is created if omitted
            translator: Error translator for non-2xx responses
        """
        self.transport = transport
        self.governor = governor if governor is not None else Governor()
        self.translator = translator if translator is not None else ErrorTranslator()
        self._sent = weakref.WeakSet()

    def _validate(self, descriptor: RequestDescriptor) -> None:
        if not isinstance(descriptor, RequestDescriptor):
            raise DescriptorError(f"Expected a RequestDescriptor, got {type(descriptor).__name__}")
        if not isinstance(descriptor.path, str) or not descriptor.path.startswith("/"):
            raise DescriptorError(f"Request path must be a string starting with '/': {descriptor.path!r}")
        if not isinstance(descriptor.method, str) or descriptor.method.upper() not in HTTP_METHODS:
            raise DescriptorError(f"Unsupported HTTP method: {descriptor.method!r}")
        if descriptor in self._sent:
            raise DescriptorError("Request descriptors cannot be sent twice")

    async def send(self, descriptor: RequestDescriptor) -> Any:
        """
        Send one request.

        Args:
            descriptor: Request to send

        Returns:
            The post-processor's result if one was supplied, else the Response

        Raises:
            DescriptorError: Descriptor is malformed or was already sent
            ThrottledError: A throttle rule rejected the request
            TransportError: The transport failed before producing a response
            TranslatedError: Zoom answered with a non-2xx status
        """
        self._validate(descriptor)
        self._sent.add(descriptor)
        method = descriptor.method.upper()

        with LogContext(method=method, path=descriptor.path):
            decision = self.governor.admit(method, descriptor.path)
            if isinstance(decision, Reject):
                throttle_decisions_total.labels(decision="reject").inc()
                record_error("ThrottledError")
                logger.debug("request_throttled", rule=decision.rule.key, retry_after_ms=decision.retry_after_ms)
                raise ThrottledError(
                    f"Too many {method} requests matching {decision.rule.path_template}; "
                    f"retry in {decision.retry_after_ms} ms",
                    retry_after_ms=decision.retry_after_ms,
                    method=method,
                    path=descriptor.path,
                    rule=decision.rule,
                )
            if isinstance(decision, Delay):
                throttle_decisions_total.labels(decision="delay").inc()
                await asyncio.sleep(decision.duration_ms / 1000.0)
            else:
                throttle_decisions_total.labels(decision="allow").inc()

            response = await self._call_transport(method, descriptor)

            if response.ok:
                logger.debug("request_dispatched", status=response.status_code)
                if descriptor.post_processor is not None:
                    return descriptor.post_processor(response)
                return response

            error = self.translator.translate(response.status_code, response.body, descriptor.error_map)
            record_error(f"TranslatedError.{error.category.value}")
            raise error

    async def _call_transport(self, method: str, descriptor: RequestDescriptor) -> Response:
        start_time = time.perf_counter()
        try:
            response = await self.transport(method, descriptor.path, descriptor.params)
        except TransportError:
            record_error("TransportError")
            raise
        except (OSError, asyncio.TimeoutError) as e:
            record_error("TransportError")
            raise TransportError(
                f"Could not reach Zoom for {method} {descriptor.path}: {e}",
                method=method,
                path=descriptor.path,
            ) from e
        finally:
            zoom_request_duration.labels(method=method).observe(time.perf_counter() - start_time)

        response = _coerce_response(response)
        zoom_requests_total.labels(method=method, status=status_label(response.status_code)).inc()
        return response


def _coerce_response(raw: Any) -> Response:
    """Accept a Response or a ``{status_code, body, headers}`` mapping."""
    if isinstance(raw, Response):
        return raw
    if isinstance(raw, Mapping) and "status_code" in raw:
        return Response(
            status_code=int(raw["status_code"]),
            body=raw.get("body"),
            headers=dict(raw.get("headers") or {}),
        )
    raise TypeError(f"Transport returned {type(raw).__name__}, expected Response")


def with_body(response: Response, body: Any) -> Response:
    """Copy of a response with its body replaced; handy inside post-processors."""
    return replace(response, body=body)
