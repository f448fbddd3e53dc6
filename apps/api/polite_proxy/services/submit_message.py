"""
Submit-message pipeline

Orchestrates: authenticate → validate → rewrite → persist.

Each stage either returns a typed value or raises exactly one PipelineError
subclass; nothing is written unless the rewrite succeeded, and the original
text is never passed to the store. There is no retry and no idempotency key:
two identical submissions produce two rows.
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from polite_proxy.core import AuthError, StorageError, UpstreamError
from polite_proxy.prompts import build_rewrite_messages
from polite_proxy.providers import (
    ChatProvider,
    ChatServiceError,
    IdentityProvider,
    IdentityServiceError,
    MessageStore,
    Principal,
    StorageServiceError,
)
from polite_proxy.schemas import StoredMessage
from .message_validator import parse_json_body, validate_submit_payload

logger = logging.getLogger(__name__)

MISSING_AUTH_MESSAGE = "Missing authorization header"
UNAUTHORIZED_MESSAGE = "Unauthorized"
SAVE_FAILED_MESSAGE = "Failed to save message"

_BEARER_PREFIX = "Bearer "


async def resolve_principal(authorization: str | None, identity: IdentityProvider) -> Principal:
    if not authorization:
        raise AuthError(MISSING_AUTH_MESSAGE)
    if not authorization.startswith(_BEARER_PREFIX):
        logger.info("Rejected authorization header without Bearer scheme")
        raise AuthError(UNAUTHORIZED_MESSAGE)
    token = authorization[len(_BEARER_PREFIX):].strip()
    if not token:
        raise AuthError(UNAUTHORIZED_MESSAGE)
    try:
        return await identity.get_user(token)
    except IdentityServiceError as e:
        logger.info("Token verification failed: %s", e)
        raise AuthError(UNAUTHORIZED_MESSAGE, cause=e) from e


async def rewrite_message(message: str, chat: ChatProvider) -> str:
    """Rewrite through the chat provider. The result is final; it is not re-validated."""
    try:
        return await chat.complete(build_rewrite_messages(message))
    except ChatServiceError as e:
        raise UpstreamError(str(e), cause=e) from e


async def save_message(store: MessageStore, user_id: str, content: str) -> StoredMessage:
    try:
        row = await store.insert_message(user_id, content)
        return StoredMessage.model_validate(row)
    except (StorageServiceError, PydanticValidationError) as e:
        logger.error("Database insert error: %s", e)
        raise StorageError(SAVE_FAILED_MESSAGE, cause=e) from e


class SubmitMessagePipeline:
    """One request, one AI call, one insert. Holds only injected collaborators."""

    def __init__(self, identity: IdentityProvider, chat: ChatProvider, store: MessageStore):
        self.identity = identity
        self.chat = chat
        self.store = store

    async def run(self, authorization: str | None, raw_body: bytes) -> StoredMessage:
        principal = await resolve_principal(authorization, self.identity)
        logger.debug("submit_message authenticated user_id=%s", principal.id)

        payload = validate_submit_payload(parse_json_body(raw_body))
        logger.debug("submit_message validated length=%s", len(payload.message))

        polite_message = await rewrite_message(payload.message, self.chat)
        logger.debug("submit_message rewritten length=%s", len(polite_message))

        stored = await save_message(self.store, principal.id, polite_message)
        logger.info("submit_message persisted id=%s user_id=%s", stored.id, principal.id)
        return stored
