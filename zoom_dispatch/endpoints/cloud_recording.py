"""
Cloud recording endpoints.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from zoom_dispatch.dispatcher import Response, with_body
from zoom_dispatch.endpoints.base import EndpointCategory
from zoom_dispatch.endpoints.helpers import (
    double_encode_if_needed,
    format_date,
    months_ago,
    sanitize_int,
    to_bool,
)
from zoom_dispatch.exceptions import ErrorCode, ParameterError

MAX_PAGE_SIZE = 300
TRASH_TYPES = frozenset({"meeting_recordings", "recording_file"})


def _extract_meetings(response: Response) -> Response:
    body = response.body if isinstance(response.body, dict) else {}
    return with_body(response, body.get("meetings", []))


class CloudRecording(EndpointCategory):
    """List cloud recordings of meetings and users."""

    async def list_meeting_recordings(self, meeting_id: Union[int, str]) -> Dict:
        """
        Get all recordings of a meeting.

        Args:
            meeting_id: Zoom meeting ID or UUID; UUIDs with slashes are
                double-encoded

        Returns:
            Zoom recording object for the meeting
        """
        if meeting_id is None or meeting_id == "":
            raise ParameterError("Meeting ID is a required parameter", code=ErrorCode.INVALID_MEETING_ID)

        return await self.visit_endpoint(
            path=f"/meetings/{double_encode_if_needed(meeting_id)}/recordings",
            method="GET",
            action="get all recordings of a meeting",
            error_map={
                400: {
                    1010: "We could not find the user on this account",
                },
                404: {
                    1001: "We could not find that user",
                    3301: f"There are no recordings for the meeting {meeting_id}",
                },
            },
        )

    async def list_user_recordings(
        self,
        user_id: str,
        page_size: Optional[Union[int, str]] = None,
        next_page_token: Optional[str] = None,
        search_trash: Any = False,
        trash_type: Optional[str] = None,
        start_date: Optional[Union[date, datetime, str]] = None,
        end_date: Optional[Union[date, datetime, str]] = None,
    ) -> List[Dict]:
        """
        List all cloud recordings of a user.

        Args:
            user_id: Zoom user ID or email address
            page_size: Records per call, below 300 (Zoom's default page is 300)
            next_page_token: Token for the next page of a large result set
            search_trash: If truthy, list recordings from the trash
            trash_type: 'meeting_recordings' or 'recording_file'
            start_date: Query start, within the last 6 months (defaults to 6 months ago)
            end_date: Query end

        Returns:
            List of meetings with recordings
        """
        self.require(user_id=user_id)

        params = {
            "page_size": MAX_PAGE_SIZE,
            "trash": to_bool(search_trash, "search_trash"),
            "from": format_date(months_ago(6)),
        }

        if page_size is not None:
            try:
                params["page_size"] = sanitize_int(page_size)
            except ValueError:
                raise ParameterError(
                    "We encountered an error with the page size value while trying to retrieve user recordings",
                    code=ErrorCode.INVALID_PAGE_SIZE,
                )
            if params["page_size"] >= MAX_PAGE_SIZE:
                raise ParameterError(
                    f"We requested {page_size} recordings from Zoom but it can only give us {MAX_PAGE_SIZE} at a time",
                    code=ErrorCode.INVALID_PAGE_SIZE,
                )
            if params["page_size"] < 1:
                raise ParameterError("Page size must be at least 1", code=ErrorCode.INVALID_PAGE_SIZE)

        if start_date:
            params["from"] = format_date(start_date, "Start")
        if end_date:
            params["to"] = format_date(end_date, "End")

        if trash_type:
            if trash_type not in TRASH_TYPES:
                raise ParameterError(
                    f"trash_type must be one of {sorted(TRASH_TYPES)}, got {trash_type!r}",
                    code=ErrorCode.INVALID_PARAM_TYPE,
                )
            params["trash_type"] = trash_type

        if next_page_token:
            params["next_page_token"] = next_page_token

        return await self.visit_endpoint(
            path=f"/users/{user_id}/recordings",
            method="GET",
            params=params,
            post_processor=_extract_meetings,
            action="list all cloud recordings of a user",
            error_map={
                404: {
                    1001: f"We could not find the user {user_id} on this account",
                },
            },
        )
