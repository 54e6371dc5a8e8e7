"""
Zoom REST API client with rule-based throttling and error translation.
"""
from zoom_dispatch.client import ZoomAPI
from zoom_dispatch.config import Settings, load_settings
from zoom_dispatch.dispatcher import Dispatcher, RequestDescriptor, Response
from zoom_dispatch.exceptions import (
    ConfigurationError,
    DescriptorError,
    ErrorCategory,
    ErrorCode,
    ParameterError,
    RuleError,
    ThrottledError,
    TranslatedError,
    TransportError,
    ZoomClientError,
)
from zoom_dispatch.governor import Allow, Decision, Delay, Governor, Reject
from zoom_dispatch.rules import RuleRegistry, ThrottleRule
from zoom_dispatch.translator import ByCode, ErrorTranslator, Message
from zoom_dispatch.transport import HttpxTransport
from zoom_dispatch.utils import retry_throttled
from zoom_dispatch.window import WindowCounter

__version__ = "0.1.0"

__all__ = [
    'ZoomAPI',
    'Settings',
    'load_settings',
    'Dispatcher',
    'RequestDescriptor',
    'Response',
    'HttpxTransport',
    'Governor',
    'Decision',
    'Allow',
    'Delay',
    'Reject',
    'RuleRegistry',
    'ThrottleRule',
    'WindowCounter',
    'ErrorTranslator',
    'Message',
    'ByCode',
    'retry_throttled',
    'ZoomClientError',
    'ConfigurationError',
    'RuleError',
    'DescriptorError',
    'ThrottledError',
    'TransportError',
    'TranslatedError',
    'ErrorCategory',
    'ErrorCode',
    'ParameterError',
]
