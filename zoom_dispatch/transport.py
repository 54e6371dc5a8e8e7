"""
Default HTTP transport for the dispatcher, built on httpx.
"""
import httpx
from aiolimiter import AsyncLimiter
from typing import Any, Mapping, Optional

from zoom_dispatch.config import Settings
from zoom_dispatch.dispatcher import Response
from zoom_dispatch.exceptions import TransportError
from zoom_dispatch.logging_config import get_logger

logger = get_logger(__name__)

# Verbs whose params travel in the query string rather than a JSON body
QUERY_METHODS = frozenset({"GET", "DELETE", "HEAD", "OPTIONS"})


class HttpxTransport:
    """
    Sends requests to the Zoom API over a shared httpx.AsyncClient.

    Pacing with account_rate_limit happens here, below the governor: it spaces
    requests out instead of rejecting them, matching Zoom's per-second
    account limits.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.zoom.us/v2",
        timeout: float = 30.0,
        account_rate_limit: Optional[int] = None,
        client: httpx.AsyncClient = None,
    ):
        """
        Args:
            access_token: OAuth bearer token
            base_url: Zoom API base URL
            timeout: Request timeout in seconds
            account_rate_limit: Requests per second to pace to, None to disable
            client: Pre-built httpx client (tests pass one with a mock transport)
        """
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json"
        }
        self._client = client if client is not None else httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None
        self._limiter = AsyncLimiter(max_rate=account_rate_limit, time_period=1) if account_rate_limit else None

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpxTransport":
        """Build a transport from client settings."""
        return cls(
            access_token=settings.require_access_token(),
            base_url=settings.api_base_url,
            timeout=settings.request_timeout,
            account_rate_limit=settings.account_rate_limit,
        )

    async def __call__(self, method: str, path: str, params: Optional[Mapping[str, Any]] = None) -> Response:
        """
        Send one request.

        Returns:
            Response with the decoded JSON body (or text when the body is not JSON)

        Raises:
            TransportError: On connection failures and timeouts
        """
        if self._limiter is not None:
            async with self._limiter:
                pass

        kwargs = {"headers": self.headers}
        if params is not None:
            if method.upper() in QUERY_METHODS:
                kwargs["params"] = {key: _query_value(value) for key, value in params.items()}
            else:
                kwargs["json"] = dict(params)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out calling Zoom: {method} {path}", method=method, path=path) from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error calling Zoom: {method} {path}: {e}", method=method, path=path) from e

        return Response(
            status_code=response.status_code,
            body=_decode_body(response),
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()


def _query_value(value: Any) -> Any:
    # httpx renders booleans as "True"/"False"; Zoom expects lower case
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
