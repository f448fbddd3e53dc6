"""Pydantic request/response schemas."""

from polite_proxy.schemas.messages import (
    SubmitMessageRequest,
    StoredMessage,
    SubmitMessageResponse,
    ErrorResponse,
)

__all__ = [
    "SubmitMessageRequest",
    "StoredMessage",
    "SubmitMessageResponse",
    "ErrorResponse",
]
