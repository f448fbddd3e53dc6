from abc import ABC, abstractmethod
from typing import Any

import httpx

from polite_proxy.core import MESSAGES_TABLE, Settings


class StorageServiceError(Exception):
    """Raised when the storage API rejects or fails an insert. Message is for logs only."""


class MessageStore(ABC):
    @abstractmethod
    async def insert_message(self, user_id: str, content: str) -> dict[str, Any]:
        """Insert one row and return it as stored (with id and created_at)."""
        pass


class SupabaseMessageStore(MessageStore):
    """
    Inserts through Supabase's REST API (PostgREST) with the secret key.
    The secret key bypasses row-level security, so callers must only pass
    already-sanitized content.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        supabase_url: str,
        api_key: str,
        table: str = MESSAGES_TABLE,
    ):
        self.client = client
        self.url = f"{supabase_url.rstrip('/')}/rest/v1/{table}"
        self.api_key = api_key

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "SupabaseMessageStore":
        return cls(client, settings.supabase_base_url, settings.secret_key)

    async def insert_message(self, user_id: str, content: str) -> dict[str, Any]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
            # Single-object response instead of a one-element array
            "Accept": "application/vnd.pgrst.object+json",
        }
        try:
            r = await self.client.post(
                self.url,
                json={"content": content, "user_id": user_id},
                headers=headers,
            )
        except httpx.RequestError as e:
            raise StorageServiceError(f"Storage API unavailable: {e}") from e
        if not r.is_success:
            raise StorageServiceError(f"Storage API returned {r.status_code}: {r.text[:500]}")
        try:
            row = r.json()
        except ValueError as e:
            raise StorageServiceError("Storage API returned invalid JSON.") from e
        if not isinstance(row, dict):
            raise StorageServiceError(f"Storage API returned {type(row).__name__}, expected a row object.")
        return row
