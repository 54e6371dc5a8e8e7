"""
Base class for groups of related Zoom endpoints.
"""
from typing import Any, Callable, Dict, Mapping, Optional

from zoom_dispatch.dispatcher import Dispatcher, RequestDescriptor, Response
from zoom_dispatch.exceptions import ErrorCode, ParameterError
from zoom_dispatch.logging_config import LogContext


class EndpointCategory:
    """Endpoint methods for one area of the API, sharing the client's dispatcher."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    @staticmethod
    def require(**params: Any) -> None:
        """
        Fail when a required parameter is missing.

        Raises:
            ParameterError: With code MISSING_PARAM
        """
        for name, value in params.items():
            if value is None or value == "":
                raise ParameterError(f"{name} is a required parameter", code=ErrorCode.MISSING_PARAM)

    async def visit_endpoint(
        self,
        path: str,
        method: str,
        params: Optional[Mapping[str, Any]] = None,
        error_map: Optional[Dict[int, Any]] = None,
        post_processor: Optional[Callable[[Response], Any]] = None,
        action: Optional[str] = None,
    ) -> Any:
        """
        Build a fresh descriptor and send it through the dispatcher.

        Returns:
            The response body, or whatever the post-processor produced if it
            did not return a Response
        """
        descriptor = RequestDescriptor(
            path=path,
            method=method,
            params=params,
            error_map=error_map or {},
            post_processor=post_processor,
            action=action,
        )
        with LogContext(action=action or f"{method} {path}"):
            result = await self.dispatcher.send(descriptor)
        if isinstance(result, Response):
            return result.body
        return result
