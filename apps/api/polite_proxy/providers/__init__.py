from .chat import (
    ChatServiceError,
    ChatResponseFormatError,
    ChatProvider,
    OpenAIChatProvider,
    extract_text_content,
    is_gpt5_model,
)
from .identity import IdentityServiceError, IdentityProvider, Principal, SupabaseAuthProvider
from .storage import StorageServiceError, MessageStore, SupabaseMessageStore

__all__ = [
    "ChatServiceError",
    "ChatResponseFormatError",
    "ChatProvider",
    "OpenAIChatProvider",
    "extract_text_content",
    "is_gpt5_model",
    "IdentityServiceError",
    "IdentityProvider",
    "Principal",
    "SupabaseAuthProvider",
    "StorageServiceError",
    "MessageStore",
    "SupabaseMessageStore",
]
