"""
Translation of Zoom error responses into TranslatedError.

Endpoint methods describe their known failures with an error map keyed by
HTTP status. An entry is either one message for the whole status or a table of
messages keyed by Zoom's application error code:

    {
        300: "We cannot create or update any more meetings today",
        404: {1001: "User does not exist", 3001: "Meeting not found"},
    }
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from zoom_dispatch.exceptions import ErrorCategory, TranslatedError
from zoom_dispatch.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Message:
    """Error map entry used verbatim for every error code of a status."""
    message: str

    def resolve(self, code: Optional[int]) -> Optional[str]:
        return self.message


@dataclass(frozen=True)
class ByCode:
    """Error map entry with one message per Zoom error code."""
    messages: Mapping[int, str]

    def resolve(self, code: Optional[int]) -> Optional[str]:
        if code is None:
            return None
        return self.messages.get(code)


ErrorMapEntry = Union[Message, ByCode]
ErrorMap = Mapping[int, ErrorMapEntry]

STATUS_DESCRIPTIONS = {
    300: "Zoom refused the request because an account limit was reached",
    400: "Zoom rejected the request as invalid",
    401: "Zoom rejected the credentials used for this request",
    403: "Zoom denied access to this resource",
    404: "Zoom could not find the requested resource",
    409: "Zoom reported a conflict with the current state of the resource",
    429: "Zoom rate limit exceeded",
}


def build_error_map(raw: Optional[Mapping[int, Any]]) -> ErrorMap:
    """
    Convert a plain ``{status: str | {code: str}}`` table into tagged entries.

    Raises:
        TypeError: If an entry is neither a string nor a mapping
    """
    entries = {}
    for status, value in (raw or {}).items():
        if isinstance(value, (Message, ByCode)):
            entries[int(status)] = value
        elif isinstance(value, str):
            entries[int(status)] = Message(value)
        elif isinstance(value, Mapping):
            entries[int(status)] = ByCode(MappingProxyType({int(code): msg for code, msg in value.items()}))
        else:
            raise TypeError(f"Error map entry for status {status} must be a string or mapping, got {type(value).__name__}")
    return MappingProxyType(entries)


def _coerce_error_map(error_map: Any) -> ErrorMap:
    """Accept tagged or plain error maps; an unusable map counts as empty."""
    if not error_map:
        return {}
    if isinstance(error_map, Mapping) and all(isinstance(v, (Message, ByCode)) for v in error_map.values()):
        return error_map
    try:
        return build_error_map(error_map)
    except (AttributeError, TypeError, ValueError) as e:
        logger.debug("error_map_ignored", reason=str(e))
        return {}


def _coerce_status(status: Any) -> Optional[int]:
    if isinstance(status, bool):
        return None
    try:
        return int(status)
    except (TypeError, ValueError):
        return None


def extract_error_code(body: Any) -> Optional[int]:
    """Pull Zoom's numeric ``code`` out of an error body, if there is one."""
    if not isinstance(body, Mapping):
        return None
    code = body.get("code")
    if isinstance(code, bool):
        return None
    if isinstance(code, int):
        return code
    if isinstance(code, str):
        code = code.strip()
        # isdigit() also accepts superscripts that int() refuses
        if code.isascii() and code.isdigit():
            return int(code)
    return None


def _provider_message(body: Any) -> Optional[str]:
    if isinstance(body, Mapping) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    return None


def describe_status(status: int) -> str:
    if status in STATUS_DESCRIPTIONS:
        return STATUS_DESCRIPTIONS[status]
    if status >= 500:
        return "Zoom encountered an internal error"
    return f"Zoom responded with status {status}"


class ErrorTranslator:
    """Maps (status, error code) pairs onto messages from a per-call error map."""

    def translate(self, status: int, body: Any, error_map: Optional[ErrorMap]) -> TranslatedError:
        """
        Build the error for a failed response. Never raises.

        Args:
            status: HTTP status code of the response
            body: Decoded response body
            error_map: Per-call error map, tagged or as a plain ``{status: str | {code: str}}`` table

        Returns:
            TranslatedError categorised as MAPPED, UNMAPPED_CODE or UNMAPPED
        """
        code = extract_error_code(body)
        status_code = _coerce_status(status)
        entry = None
        if status_code is not None:
            entry = _coerce_error_map(error_map).get(status_code)

        if entry is None:
            message = f"Zoom responded with status {status}"
            if code is not None:
                message += f" and error code {code}"
            return self._error(message, ErrorCategory.UNMAPPED, status, code, body)

        mapped = entry.resolve(code)
        if mapped is not None:
            return TranslatedError(mapped, ErrorCategory.MAPPED, status, code, body)

        message = describe_status(status_code)
        if code is not None:
            message += f" (error code {code})"
        return self._error(message, ErrorCategory.UNMAPPED_CODE, status, code, body)

    def _error(self, message: str, category: ErrorCategory, status: int, code: Optional[int], body: Any) -> TranslatedError:
        detail = _provider_message(body)
        if detail:
            message = f"{message}: {detail}"
        return TranslatedError(message, category, status, code, body)
