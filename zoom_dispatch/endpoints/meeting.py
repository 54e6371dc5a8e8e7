"""
Meeting endpoints.
"""
from typing import Any, Dict, List, Optional, Union

from zoom_dispatch.endpoints.base import EndpointCategory
from zoom_dispatch.endpoints.helpers import to_bool
from zoom_dispatch.exceptions import ErrorCode, ParameterError, TranslatedError

# (status, code) pairs Zoom uses when an alternative host is not a valid user
ALT_HOST_NOT_FOUND = {(400, 1010), (404, 1001)}


class Meeting(EndpointCategory):
    """Create, read, update and delete Zoom meetings."""

    async def get(
        self,
        meeting_id: Union[int, str],
        occurrence_id: Optional[Union[int, str]] = None,
        show_all_occurrences: Any = False,
    ) -> Dict:
        """
        Get info on a meeting.

        Args:
            meeting_id: Zoom meeting ID
            occurrence_id: ID of one occurrence of a recurring meeting
            show_all_occurrences: If truthy, include past occurrences

        Returns:
            Zoom meeting object
        """
        self.require(meeting_id=meeting_id)
        params = {"show_previous_occurrences": to_bool(show_all_occurrences, "show_all_occurrences")}
        if occurrence_id:
            params["occurrence_id"] = str(occurrence_id)

        return await self.visit_endpoint(
            path=f"/meetings/{meeting_id}",
            method="GET",
            params=params,
            action="get info on a meeting",
            error_map={
                400: {
                    1010: "The user could not be found on this account",
                    3000: "We could not access webinar info",
                },
                404: {
                    1001: "We could not find the meeting because the user does not exist",
                    3001: f"Meeting {meeting_id} could not be found or has expired",
                },
            },
        )

    async def create(self, user_id: str, meeting_obj: Dict) -> Dict:
        """
        Create a new meeting.

        Args:
            user_id: Zoom user ID or email address of the host
            meeting_obj: Meeting details as accepted by Zoom

        Returns:
            The created Zoom meeting object
        """
        self.require(user_id=user_id, meeting_obj=meeting_obj)
        return await self.visit_endpoint(
            path=f"/users/{user_id}/meetings",
            method="POST",
            params=meeting_obj,
            action="create a new meeting",
            error_map={
                300: f"User {user_id} has reached the maximum limit for creating and updating meetings",
                404: {
                    1001: f"User {user_id} either does not exist or does not belong to this account",
                },
            },
        )

    async def update(
        self,
        meeting_id: Union[int, str],
        meeting_obj: Dict,
        occurrence_id: Optional[Union[int, str]] = None,
    ) -> Any:
        """
        Update a meeting.

        Args:
            meeting_id: Zoom meeting ID
            meeting_obj: Fields to change
            occurrence_id: Only update this occurrence of a recurring meeting
        """
        self.require(meeting_id=meeting_id)
        if meeting_obj is None:
            raise ParameterError("meeting_obj is a required parameter", code=ErrorCode.MISSING_PARAM)

        path = f"/meetings/{meeting_id}"
        if occurrence_id:
            path += f"?occurrence_id={occurrence_id}"

        return await self.visit_endpoint(
            path=path,
            method="PATCH",
            params=meeting_obj,
            action="update the details of a meeting",
            error_map={
                300: "We cannot create or update any more meetings today. Please try again tomorrow",
                400: {
                    1010: "We could not find the user on this account",
                    3000: "We could not access meeting information",
                    3003: f"You cannot update the meeting {meeting_id} since you are not the meeting host",
                },
                404: {
                    1001: "We could not update the meeting because the user does not exist",
                    3001: f"A meeting with the ID {meeting_id} could not be found or has expired",
                },
            },
        )

    async def delete(
        self,
        meeting_id: Union[int, str],
        occurrence_id: Optional[Union[int, str]] = None,
        notify_hosts: Any = False,
    ) -> Any:
        """
        Delete a meeting.

        Args:
            meeting_id: Zoom meeting ID
            occurrence_id: Only delete this occurrence of a recurring meeting
            notify_hosts: If truthy, email a cancellation to the hosts
        """
        self.require(meeting_id=meeting_id)
        params = {"schedule_for_reminder": to_bool(notify_hosts, "notify_hosts")}
        if occurrence_id:
            params["occurrence_id"] = str(occurrence_id)

        return await self.visit_endpoint(
            path=f"/meetings/{meeting_id}",
            method="DELETE",
            params=params,
            action="delete a meeting",
            error_map={
                400: {
                    1010: f"We could not delete meeting {meeting_id} because the user does not belong to this account",
                    3000: f"We could not access meeting information for meeting {meeting_id}",
                    3002: f"We could not delete the meeting {meeting_id} since it is still in progress",
                    3003: f"You cannot delete the meeting {meeting_id} since you are not the meeting host",
                    3007: f"You cannot delete the meeting {meeting_id} since it has already ended",
                    3018: "You are not allowed to delete your Personal Meeting ID",
                    3037: "You are not allowed to delete a Personal Meeting Conference",
                },
                404: {
                    1001: f"We could not delete the meeting {meeting_id} because the user does not exist",
                    3001: f"A meeting with the ID {meeting_id} could not be found or has expired",
                },
            },
        )

    async def list_past_instances(self, meeting_id: Union[int, str]) -> Any:
        """Get the list of ended instances of a meeting."""
        self.require(meeting_id=meeting_id)
        return await self.visit_endpoint(
            path=f"/past_meetings/{meeting_id}/instances",
            method="GET",
            action="get the list of ended meeting instances",
            error_map={
                404: f"We could not find a meeting with the ID {meeting_id}",
            },
        )

    async def add_alt_hosts(self, meeting_id: Union[int, str], alt_hosts: List[str]) -> List[str]:
        """
        Add alternative hosts to a meeting, skipping ones already listed.

        Hosts are added one at a time so an unknown user does not block the rest.

        Args:
            meeting_id: Zoom meeting ID
            alt_hosts: Emails or user IDs to add

        Returns:
            One status per host: 'success' (added or already listed) or
            'no_user' (Zoom does not know the user). Other errors are raised.
        """
        self.require(meeting_id=meeting_id, alt_hosts=alt_hosts)
        if isinstance(alt_hosts, str) or not all(isinstance(host, str) for host in alt_hosts):
            raise ParameterError("alt_hosts must be a list of strings", code=ErrorCode.INVALID_PARAM_TYPE)

        meeting = await self.get(meeting_id)
        settings = (meeting or {}).get("settings") or {}
        current = [host.strip() for host in (settings.get("alternative_hosts") or "").split(";") if host.strip()]
        known = {host.lower() for host in current}

        statuses = []
        for host in alt_hosts:
            if host.lower() in known:
                statuses.append("success")
                continue
            try:
                await self.update(meeting_id, {"settings": {"alternative_hosts": ";".join(current + [host])}})
            except TranslatedError as e:
                if (e.cause_status, e.cause_code) in ALT_HOST_NOT_FOUND:
                    statuses.append("no_user")
                    continue
                raise
            current.append(host)
            known.add(host.lower())
            statuses.append("success")
        return statuses

    async def add_alt_host(self, meeting_id: Union[int, str], alt_host: str) -> str:
        """Add one alternative host; returns 'success' or 'no_user'."""
        self.require(alt_host=alt_host)
        statuses = await self.add_alt_hosts(meeting_id, [alt_host])
        return statuses[0]
