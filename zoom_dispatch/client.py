"""
Top-level Zoom API client.
"""
from typing import Optional

from zoom_dispatch.config import ONE_DAY_MS, Settings, load_settings
from zoom_dispatch.dispatcher import Dispatcher, Transport
from zoom_dispatch.endpoints import CloudRecording, Meeting
from zoom_dispatch.governor import Governor
from zoom_dispatch.logging_config import get_logger, setup_logging_from_settings
from zoom_dispatch.rules import ThrottleRule
from zoom_dispatch.transport import HttpxTransport
from zoom_dispatch.window import WindowCounter

logger = get_logger(__name__)


class ZoomAPI:
    """
    Zoom API client.

    Owns one governor and one dispatcher for its whole lifetime; every endpoint
    category shares them, so throttle counts are global to the client.

    Example:
        async with ZoomAPI(settings=load_settings()) as api:
            meeting = await api.meeting.get(meeting_id=12345)
    """

    def __init__(
        self,
        transport: Transport = None,
        settings: Settings = None,
        counter: Optional[WindowCounter] = None,
    ):
        """
        Args:
            transport: Async ``(method, path, params) -> Response`` callable;
                an HttpxTransport is built from settings when omitted
            settings: Client settings (loaded from the environment if omitted)
            counter: Window counter, injectable for deterministic clocks
        """
        self.settings = settings if settings is not None else load_settings()
        setup_logging_from_settings(self.settings)
        self._owned_transport = None
        if transport is None:
            transport = self._owned_transport = HttpxTransport.from_settings(self.settings)

        self.governor = Governor(counter=counter)
        self.dispatcher = Dispatcher(transport, governor=self.governor)

        if self.settings.enable_default_rules:
            self._register_default_rules()

        self.meeting = Meeting(self.dispatcher)
        self.cloud_recording = CloudRecording(self.dispatcher)
        logger.debug("zoom_client_initialized", rules=len(self.governor.registry))

    def _register_default_rules(self) -> None:
        limit = self.settings.daily_meeting_write_limit
        self.add_rule("POST", "/users/:userId/meetings", ONE_DAY_MS, limit)
        self.add_rule("PATCH", "/meetings/:meetingId", ONE_DAY_MS, limit)

    def add_rule(self, method: str, path_template: str, window_duration_ms: int, max_requests_per_window: int) -> ThrottleRule:
        """
        Register or overwrite a throttle rule.

        Args:
            method: HTTP verb, e.g. 'GET'
            path_template: Path with placeholders, e.g. '/meetings/:meetingId'
            window_duration_ms: Window length in milliseconds
            max_requests_per_window: Requests admitted per window

        Raises:
            RuleError: If the template or limits are malformed
        """
        return self.governor.add_rule(method, path_template, window_duration_ms, max_requests_per_window)

    async def aclose(self) -> None:
        """Release the HTTP transport if the client created it."""
        if self._owned_transport is not None:
            await self._owned_transport.aclose()

    async def __aenter__(self) -> "ZoomAPI":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
