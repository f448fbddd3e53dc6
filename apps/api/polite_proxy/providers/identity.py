from abc import ABC, abstractmethod

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from polite_proxy.core import Settings


class IdentityServiceError(Exception):
    """Raised when a token cannot be verified (rejected, unreachable service, bad payload)."""


class Principal(BaseModel):
    """Authenticated caller resolved from a bearer token. Not persisted here."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str | None = None
    user_metadata: dict = {}

    @field_validator("user_metadata", mode="before")
    @classmethod
    def metadata_or_empty(cls, value):
        return {} if value is None else value


class IdentityProvider(ABC):
    @abstractmethod
    async def get_user(self, token: str) -> Principal:
        pass


class SupabaseAuthProvider(IdentityProvider):
    """Verifies access tokens against Supabase Auth (GET /auth/v1/user)."""

    def __init__(self, client: httpx.AsyncClient, supabase_url: str, api_key: str):
        self.client = client
        self.base_url = f"{supabase_url.rstrip('/')}/auth/v1"
        self.api_key = api_key

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "SupabaseAuthProvider":
        return cls(client, settings.supabase_base_url, settings.secret_key)

    async def get_user(self, token: str) -> Principal:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {token}",
        }
        try:
            r = await self.client.get(f"{self.base_url}/user", headers=headers)
        except httpx.RequestError as e:
            raise IdentityServiceError(f"Auth service unavailable: {e}") from e
        if not r.is_success:
            raise IdentityServiceError(f"Auth service returned {r.status_code}: {r.text[:200]}")
        try:
            data = r.json()
        except ValueError as e:
            raise IdentityServiceError("Auth service returned invalid JSON.") from e
        if not isinstance(data, dict) or not data.get("id"):
            raise IdentityServiceError("Auth service returned no user.")
        try:
            return Principal.model_validate({**data, "id": str(data["id"])})
        except ValidationError as e:
            raise IdentityServiceError(f"Auth service returned a malformed user: {e}") from e
