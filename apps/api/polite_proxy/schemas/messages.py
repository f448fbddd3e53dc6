from pydantic import BaseModel, ConfigDict, Field, field_validator

from polite_proxy.core import MESSAGE_MAX_LENGTH


class SubmitMessageRequest(BaseModel):
    """Body of POST /submit-message. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    # Default None + validate_default so a missing field reports the same error as ""
    message: str = Field(default=None, validate_default=True)

    @field_validator("message", mode="before")
    @classmethod
    def validate_message(cls, value):
        if value is None or value == "":
            raise ValueError("Message cannot be empty")
        if not isinstance(value, str):
            raise ValueError("Message must be a string")
        if len(value) > MESSAGE_MAX_LENGTH:
            raise ValueError(f"Message exceeds maximum length of {MESSAGE_MAX_LENGTH} characters")
        return value


class StoredMessage(BaseModel):
    """Row of the messages table as returned by the store. Extra columns pass through."""

    model_config = ConfigDict(extra="allow")

    id: str
    content: str
    user_id: str
    created_at: str


class SubmitMessageResponse(BaseModel):
    data: StoredMessage


class ErrorResponse(BaseModel):
    error: str
