"""Validate the submit-message payload. Reports the first violation only."""

import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from polite_proxy.core import ValidationError
from polite_proxy.schemas import SubmitMessageRequest

INVALID_BODY_MESSAGE = "Invalid request body"


def parse_json_body(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError(INVALID_BODY_MESSAGE, cause=e) from e


def _first_error_message(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return INVALID_BODY_MESSAGE
    ctx_error = (errors[0].get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    return errors[0].get("msg") or INVALID_BODY_MESSAGE


def validate_submit_payload(body: Any) -> SubmitMessageRequest:
    """Check a parsed JSON body; the message text is returned unaltered."""
    if not isinstance(body, dict):
        raise ValidationError(INVALID_BODY_MESSAGE)
    try:
        return SubmitMessageRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(_first_error_message(e), cause=e) from e
