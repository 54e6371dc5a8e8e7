"""
Custom exceptions raised by the Zoom client.
"""
from enum import Enum
from typing import Any, Optional


class ZoomClientError(Exception):
    """Base exception for Zoom client errors."""
    pass


class ConfigurationError(ZoomClientError):
    """Configuration or environment variable errors."""
    pass


class RuleError(ZoomClientError):
    """Malformed throttle rule or path template."""
    pass


class DescriptorError(RuleError):
    """Request descriptor is missing a path or method."""
    pass


class ThrottledError(ZoomClientError):
    """Request rejected by a throttle rule before reaching the network."""
    def __init__(self, message: str, retry_after_ms: int, method: str = None, path: str = None, rule: Any = None):
        self.retry_after_ms = retry_after_ms
        self.method = method
        self.path = path
        self.rule = rule
        super().__init__(message)

    @property
    def retry_after(self) -> float:
        """Retry-after hint in seconds."""
        return self.retry_after_ms / 1000.0


class TransportError(ZoomClientError):
    """Network-level failure; there is no response to translate."""
    def __init__(self, message: str, method: str = None, path: str = None):
        self.method = method
        self.path = path
        super().__init__(message)


class ErrorCategory(str, Enum):
    """How a provider error was matched against the per-call error map."""
    MAPPED = "mapped"
    UNMAPPED_CODE = "unmapped_code"
    UNMAPPED = "unmapped"


class TranslatedError(ZoomClientError):
    """Zoom answered with an error status; message comes from the error map."""
    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        cause_status: int,
        cause_code: Optional[int] = None,
        body: Any = None,
    ):
        self.message = message
        self.category = category
        self.cause_status = cause_status
        self.cause_code = cause_code
        self.body = body
        super().__init__(message)

    def __repr__(self):
        return (
            f"<TranslatedError(category='{self.category.value}', status={self.cause_status}, "
            f"code={self.cause_code}, message='{self.message}')>"
        )


class ErrorCode(str, Enum):
    """Codes attached to parameter validation failures."""
    MISSING_PARAM = "MISSING_PARAM"
    INVALID_PARAM_TYPE = "INVALID_PARAM_TYPE"
    INVALID_MEETING_ID = "INVALID_MEETING_ID"
    INVALID_PAGE_SIZE = "INVALID_PAGE_SIZE"
    INVALID_DATE = "INVALID_DATE"


class ParameterError(ZoomClientError):
    """Endpoint parameters failed validation before a request was built."""
    def __init__(self, message: str, code: ErrorCode):
        self.code = code
        super().__init__(message)
