"""
Endpoint categories of the Zoom client.
"""
from zoom_dispatch.endpoints.base import EndpointCategory
from zoom_dispatch.endpoints.meeting import Meeting
from zoom_dispatch.endpoints.cloud_recording import CloudRecording

__all__ = [
    'EndpointCategory',
    'Meeting',
    'CloudRecording'
]
