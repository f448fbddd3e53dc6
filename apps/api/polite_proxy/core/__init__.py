"""Core configuration, errors, and shared constants."""

from polite_proxy.core.config import Settings, get_settings
from polite_proxy.core.constants import (
    CORS_HEADERS,
    JSON_HEADERS,
    MESSAGE_MAX_LENGTH,
    MESSAGES_TABLE,
)
from polite_proxy.core.errors import (
    ErrorKind,
    PipelineStage,
    PipelineError,
    AuthError,
    ValidationError,
    UpstreamError,
    StorageError,
    ConfigError,
)

__all__ = [
    "Settings",
    "get_settings",
    "CORS_HEADERS",
    "JSON_HEADERS",
    "MESSAGE_MAX_LENGTH",
    "MESSAGES_TABLE",
    "ErrorKind",
    "PipelineStage",
    "PipelineError",
    "AuthError",
    "ValidationError",
    "UpstreamError",
    "StorageError",
    "ConfigError",
]
