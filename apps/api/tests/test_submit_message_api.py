import httpx
import pytest

from polite_proxy.app import create_app
from polite_proxy.providers import ChatResponseFormatError, ChatServiceError, StorageServiceError

from .conftest import POLITE_REPLY, USER_ID

CORS_ORIGIN = "Access-Control-Allow-Origin"
CORS_HEADERS_NAME = "Access-Control-Allow-Headers"


def _assert_cors(response):
    assert response.headers[CORS_ORIGIN] == "*"
    assert response.headers[CORS_HEADERS_NAME] == "authorization, x-client-info, apikey, content-type"


@pytest.mark.asyncio
class TestSubmitMessageSuccess:
    async def test_stores_rewritten_text_only(self, client, auth_headers, chat, store):
        response = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["content"] == POLITE_REPLY
        assert data["user_id"] == USER_ID
        assert data["id"] and data["created_at"]
        assert store.calls == [(USER_ID, POLITE_REPLY)]
        assert all("hola tonto" not in content for _, content in store.calls)
        assert chat.calls[0][-1] == {"role": "user", "content": "hola tonto"}
        _assert_cors(response)
        assert response.headers["content-type"].startswith("application/json")

    async def test_message_at_limit(self, client, auth_headers):
        response = await client.post("/submit-message", json={"message": "x" * 1000}, headers=auth_headers)
        assert response.status_code == 200

    async def test_duplicate_submissions_create_distinct_rows(self, client, auth_headers, store):
        first = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)
        second = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)

        assert first.status_code == second.status_code == 200
        assert first.json()["data"]["id"] != second.json()["data"]["id"]
        assert len(store.rows) == 2

    async def test_rewritten_text_is_not_revalidated(self, client, auth_headers, chat, store):
        chat.reply = "y" * 1500
        response = await client.post("/submit-message", json={"message": "hola"}, headers=auth_headers)
        assert response.status_code == 200
        assert store.calls[0][1] == "y" * 1500


@pytest.mark.asyncio
class TestSubmitMessageAuth:
    async def test_missing_authorization_header(self, client, identity, chat, store):
        response = await client.post("/submit-message", json={"message": "hola"})

        assert response.status_code == 401
        assert response.json() == {"error": "Missing authorization header"}
        assert identity.tokens == [] and chat.calls == [] and store.calls == []
        _assert_cors(response)

    async def test_invalid_token(self, client, chat, store):
        response = await client.post(
            "/submit-message", json={"message": "hola"}, headers={"Authorization": "Bearer forged"}
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert chat.calls == [] and store.calls == []

    async def test_non_bearer_scheme(self, client):
        response = await client.post(
            "/submit-message", json={"message": "hola"}, headers={"Authorization": "Basic dXNlcjpwYXNz"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    async def test_authentication_runs_before_validation(self, client):
        response = await client.post("/submit-message", json={"message": ""})
        assert response.status_code == 401
        assert response.json() == {"error": "Missing authorization header"}


@pytest.mark.asyncio
class TestSubmitMessageValidation:
    @pytest.mark.parametrize("body", [{}, {"message": ""}, {"text": "hola"}])
    async def test_missing_or_empty_message(self, client, auth_headers, chat, body):
        response = await client.post("/submit-message", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Message cannot be empty"}
        assert chat.calls == []
        _assert_cors(response)

    async def test_message_too_long(self, client, auth_headers, chat):
        response = await client.post("/submit-message", json={"message": "x" * 1001}, headers=auth_headers)

        assert response.status_code == 400
        assert "1000" in response.json()["error"]
        assert chat.calls == []

    async def test_invalid_json(self, client, auth_headers):
        response = await client.post(
            "/submit-message",
            content=b"{message: hola",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    async def test_non_string_message(self, client, auth_headers):
        response = await client.post("/submit-message", json={"message": ["hola"]}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Message must be a string"}


@pytest.mark.asyncio
class TestSubmitMessageFailures:
    async def test_generation_failure_is_502_and_nothing_is_written(self, client, auth_headers, chat, store):
        chat.error = ChatServiceError("Rate limit reached for gpt-5-mini")

        response = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)

        assert response.status_code == 502
        assert response.json() == {"error": "Rate limit reached for gpt-5-mini"}
        assert store.calls == []

    async def test_unusable_output_is_502(self, client, auth_headers, chat, store):
        chat.error = ChatResponseFormatError("AI did not return a valid response")

        response = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)

        assert response.status_code == 502
        assert response.json() == {"error": "AI did not return a valid response"}
        assert store.calls == []

    async def test_storage_failure_is_500_without_retry(self, client, auth_headers, chat, store):
        store.error = StorageServiceError("Storage API returned 500: permission denied for table messages")

        response = await client.post("/submit-message", json={"message": "hola tonto"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to save message"}
        assert len(store.calls) == 1
        assert len(chat.calls) == 1
        assert store.rows == []

    async def test_unexpected_exception_is_internal_error(self, client, auth_headers, chat, store):
        chat.error = RuntimeError("boom")

        response = await client.post("/submit-message", json={"message": "hola"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert store.calls == []
        _assert_cors(response)


@pytest.mark.asyncio
class TestSubmitMessageMethods:
    async def test_preflight_has_no_side_effects(self, client, identity, chat, store):
        response = await client.options(
            "/submit-message",
            headers={"Origin": "https://chat.example.com", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.text == "ok"
        _assert_cors(response)
        assert identity.tokens == [] and chat.calls == [] and store.calls == []

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE", "PROPFIND"])
    async def test_other_methods_not_allowed(self, client, auth_headers, identity, method):
        response = await client.request(method, "/submit-message", headers=auth_headers)

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert identity.tokens == []
        _assert_cors(response)

    async def test_head_not_allowed(self, client, identity):
        response = await client.head("/submit-message")

        assert response.status_code == 405
        assert identity.tokens == []
        _assert_cors(response)

    async def test_unknown_paths_keep_default_404(self, client):
        response = await client.get("/nope")
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}


@pytest.mark.asyncio
async def test_health(client, identity):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert identity.tokens == []


def test_injected_providers_need_no_shared_client(app):
    assert app.state.http_client is None


@pytest.mark.asyncio
async def test_default_providers_share_one_client(settings, identity):
    app = create_app(settings, identity=identity)
    client = app.state.http_client
    pipeline = app.state.pipeline

    assert isinstance(client, httpx.AsyncClient)
    assert pipeline.chat.client is client
    assert pipeline.store.client is client
    await client.aclose()
