"""
Tests for the throttle retry helper.
"""
from unittest.mock import AsyncMock

import pytest

from zoom_dispatch.exceptions import ThrottledError, TranslatedError, ErrorCategory
from zoom_dispatch.utils import retry_throttled


def throttled(retry_after_ms=0):
    return ThrottledError("throttled", retry_after_ms=retry_after_ms)


@pytest.mark.unit
class TestRetryThrottled:
    """Test retrying after throttle rejections."""

    @pytest.mark.asyncio
    async def test_retries_until_admitted(self):
        call = AsyncMock(side_effect=[throttled(), throttled(), "ok"])

        result = await retry_throttled(max_attempts=3)(call)()

        assert result == "ok"
        assert call.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_with_last_error(self):
        call = AsyncMock(side_effect=throttled())

        with pytest.raises(ThrottledError):
            await retry_throttled(max_attempts=2)(call)()

        assert call.await_count == 2

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self):
        call = AsyncMock(side_effect=TranslatedError("nope", ErrorCategory.UNMAPPED, 500))

        with pytest.raises(TranslatedError):
            await retry_throttled(max_attempts=5)(call)()

        assert call.await_count == 1

    @pytest.mark.asyncio
    async def test_waits_for_retry_after(self, api, fake_clock):
        slept = []

        async def fake_sleep(seconds):
            slept.append(seconds)
            fake_clock.advance(seconds)

        api.add_rule("GET", "/meetings/:id", 2000, 1)
        get_meeting = retry_throttled(max_attempts=2, sleep=fake_sleep)(api.meeting.get)

        await get_meeting(meeting_id=1)
        ret = await get_meeting(meeting_id=1)

        assert slept == [2.0]
        assert ret["path"] == "/meetings/1"
