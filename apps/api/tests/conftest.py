import uuid
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio

from polite_proxy.app import create_app
from polite_proxy.core import Settings
from polite_proxy.providers import (
    ChatProvider,
    IdentityProvider,
    IdentityServiceError,
    MessageStore,
    Principal,
)

VALID_TOKEN = "valid-user-jwt"
USER_ID = "8f14e45f-ceea-467a-9af0-2b1c5d3e6a70"
POLITE_REPLY = "Hola, ¿cómo puedo ayudarte?"


class FakeIdentityProvider(IdentityProvider):
    def __init__(self):
        self.tokens: list[str] = []

    async def get_user(self, token: str) -> Principal:
        self.tokens.append(token)
        if token != VALID_TOKEN:
            raise IdentityServiceError("Auth service returned 401: invalid JWT")
        return Principal(id=USER_ID, email="ana@example.com")


class FakeChatProvider(ChatProvider):
    def __init__(self, reply: str = POLITE_REPLY, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeMessageStore(MessageStore):
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.rows: list[dict] = []

    async def insert_message(self, user_id: str, content: str) -> dict:
        self.calls.append((user_id, content))
        if self.error is not None:
            raise self.error
        row = {
            "id": str(uuid.uuid4()),
            "content": content,
            "user_id": user_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.rows.append(row)
        return row


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url="https://project.supabase.co/",
        secret_key="sb_secret_test",
        openai_api_key="sk-test",
        openai_model="gpt-5-mini",
    )


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def chat() -> FakeChatProvider:
    return FakeChatProvider()


@pytest.fixture
def store() -> FakeMessageStore:
    return FakeMessageStore()


@pytest.fixture
def app(settings, identity, chat, store):
    return create_app(settings, identity=identity, chat=chat, store=store)


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
