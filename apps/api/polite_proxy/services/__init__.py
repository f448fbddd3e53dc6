from .message_validator import parse_json_body, validate_submit_payload
from .submit_message import (
    SubmitMessagePipeline,
    resolve_principal,
    rewrite_message,
    save_message,
)

__all__ = [
    "parse_json_body",
    "validate_submit_payload",
    "SubmitMessagePipeline",
    "resolve_principal",
    "rewrite_message",
    "save_message",
]
