"""
Pytest configuration and fixtures.
"""
import pytest

from zoom_dispatch.client import ZoomAPI
from zoom_dispatch.config import Settings
from zoom_dispatch.dispatcher import Dispatcher, Response
from zoom_dispatch.governor import Governor
from zoom_dispatch.window import WindowCounter


# ============================================
# TEST DOUBLES
# ============================================

class FakeClock:
    """Manually advanced time source, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubTransport:
    """
    Records every request. Queued responses (or exceptions) are returned in
    order; once the queue is empty the request itself is echoed back as a
    200 response body.
    """

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, *items) -> None:
        self.responses.extend(items)

    async def __call__(self, method, path, params=None):
        request = {
            "method": method,
            "path": path,
            "params": None if params is None else dict(params),
        }
        self.calls.append(request)
        if self.responses:
            item = self.responses.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        return Response(status_code=200, body=request)


# ============================================
# CORE FIXTURES
# ============================================

@pytest.fixture
def fake_clock():
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def window_counter(fake_clock):
    return WindowCounter(clock=fake_clock)


@pytest.fixture
def governor(window_counter):
    """Governor driven by the fake clock."""
    return Governor(counter=window_counter)


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def dispatcher(stub_transport, governor):
    return Dispatcher(stub_transport, governor=governor)


# ============================================
# CLIENT FIXTURES
# ============================================

@pytest.fixture
def test_settings():
    """Settings isolated from the environment and .env files."""
    return Settings(
        _env_file=None,
        access_token="test-access-token",
        enable_default_rules=False,
        account_rate_limit=None,
    )


@pytest.fixture
def api(stub_transport, test_settings, window_counter):
    """Client whose requests are echoed back by the stub transport."""
    return ZoomAPI(transport=stub_transport, settings=test_settings, counter=window_counter)
