"""Error taxonomy for the submit-message pipeline.

Every stage fails with exactly one PipelineError subclass. The ``kind``
decides the HTTP status; ``message`` is what the stage reports and
``public_message`` is what the caller is allowed to see.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    AUTH = "auth"
    VALIDATION = "validation"
    UPSTREAM = "upstream"
    STORAGE = "storage"
    CONFIG = "config"
    INTERNAL = "internal"


class PipelineStage(str, Enum):
    """Pipeline stage identifiers for error reporting."""
    CONFIG = "config"
    AUTHENTICATE = "authenticate"
    VALIDATE = "validate"
    REWRITE = "rewrite"
    PERSIST = "persist"


INTERNAL_ERROR_MESSAGE = "Internal server error"

ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.AUTH: 401,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.STORAGE: 500,
    ErrorKind.CONFIG: 500,
    ErrorKind.INTERNAL: 500,
}

# Kinds whose message is echoed to the caller verbatim
_PUBLIC_KINDS = frozenset({ErrorKind.AUTH, ErrorKind.VALIDATION, ErrorKind.UPSTREAM, ErrorKind.STORAGE})


class PipelineError(Exception):
    """Pipeline error with kind and stage context."""

    kind: ErrorKind = ErrorKind.INTERNAL
    stage: Optional[PipelineStage] = None

    def __init__(
        self,
        message: str,
        stage: Optional[PipelineStage] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        if stage is not None:
            self.stage = stage
        self.cause = cause
        prefix = f"[{self.stage.value}] " if self.stage else ""
        super().__init__(f"{prefix}{message}")

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]

    @property
    def public_message(self) -> str:
        if self.kind in _PUBLIC_KINDS:
            return self.message
        return INTERNAL_ERROR_MESSAGE


class AuthError(PipelineError):
    """Missing or invalid bearer credential."""
    kind = ErrorKind.AUTH
    stage = PipelineStage.AUTHENTICATE


class ValidationError(PipelineError):
    """Request payload violates the message schema."""
    kind = ErrorKind.VALIDATION
    stage = PipelineStage.VALIDATE


class UpstreamError(PipelineError):
    """Generation service failed or returned no usable text."""
    kind = ErrorKind.UPSTREAM
    stage = PipelineStage.REWRITE


class StorageError(PipelineError):
    """Insert into the messages table failed. Message is always the generic one."""
    kind = ErrorKind.STORAGE
    stage = PipelineStage.PERSIST


class ConfigError(PipelineError):
    """Required configuration is missing. Raised at startup, not per request."""
    kind = ErrorKind.CONFIG
    stage = PipelineStage.CONFIG
