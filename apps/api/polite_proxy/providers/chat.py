import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

import httpx

from polite_proxy.core import Settings

logger = logging.getLogger(__name__)

FAILED_TO_PROCESS_MESSAGE = "Failed to process message with AI"
INVALID_RESPONSE_MESSAGE = "AI did not return a valid response"

# GPT-5 models reject temperature and expect max_completion_tokens instead of max_tokens
_GPT5_MODEL_PREFIX = "gpt-5"


class ChatServiceError(Exception):
    """Raised when the chat API fails. The message is safe to return to the caller."""


class ChatResponseFormatError(ChatServiceError):
    """Raised when the chat API answered but no plain text could be recovered."""


def is_gpt5_model(model: str) -> bool:
    return model.startswith(_GPT5_MODEL_PREFIX)


# -----------------------------------------------------------------------------
# Content extraction: string | list of parts | object with "text"
# -----------------------------------------------------------------------------

def _text_from_string(content: str) -> str:
    return content.strip()


def _part_text(part: Any) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, dict):
        if isinstance(part.get("text"), str):
            return part["text"]
        if isinstance(part.get("value"), str):
            return part["value"]
    return ""


def _text_from_parts(content: list) -> str:
    return "".join(_part_text(part) for part in content).strip()


def _text_from_object(content: dict) -> str:
    text = content.get("text")
    return text.strip() if isinstance(text, str) else ""


_CONTENT_EXTRACTORS: tuple[tuple[type, Callable[[Any], str]], ...] = (
    (str, _text_from_string),
    (list, _text_from_parts),
    (dict, _text_from_object),
)


def extract_text_content(content: Any) -> str:
    """Plain text from the content shapes different model families return; "" if none."""
    for content_type, extractor in _CONTENT_EXTRACTORS:
        if isinstance(content, content_type):
            return extractor(content)
    return ""


def _upstream_error_message(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError:
        return FAILED_TO_PROCESS_MESSAGE
    error = data.get("error") if isinstance(data, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    if isinstance(message, str) and message.strip():
        return message
    return FAILED_TO_PROCESS_MESSAGE


class ChatProvider(ABC):
    @abstractmethod
    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send one chat request and return the assistant's plain text."""
        pass


class OpenAIChatProvider(ChatProvider):
    """Official OpenAI chat completions API. One call per request, no retry."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str,
        temperature: float,
        max_tokens: int,
        base_url: str = "https://api.openai.com/v1",
    ):
        self.client = client
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "OpenAIChatProvider":
        return cls(
            client,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            base_url=settings.openai_base_url,
        )

    def build_payload(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        payload: dict[str, Any] = {"model": self.model, "messages": messages}
        if is_gpt5_model(self.model):
            payload["max_completion_tokens"] = self.max_tokens
        else:
            payload["temperature"] = self.temperature
            payload["max_tokens"] = self.max_tokens
        return payload

    async def complete(self, messages: list[dict[str, str]]) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            r = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=self.build_payload(messages),
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error("OpenAI API request failed: %s", e)
            raise ChatServiceError(FAILED_TO_PROCESS_MESSAGE) from e

        if not r.is_success:
            logger.error("OpenAI API error %s: %s", r.status_code, r.text[:1000])
            raise ChatServiceError(_upstream_error_message(r.text))

        try:
            data = r.json()
        except ValueError as e:
            logger.error("OpenAI API returned invalid JSON: %s", r.text[:500])
            raise ChatServiceError(FAILED_TO_PROCESS_MESSAGE) from e

        choices = data.get("choices") if isinstance(data, dict) else None
        choice = choices[0] if isinstance(choices, list) and choices else None
        if not isinstance(choice, dict):
            choice = {}
        message = choice.get("message")
        text = extract_text_content(message.get("content") if isinstance(message, dict) else None)
        if not text:
            text = extract_text_content(choice.get("content"))
        if not text:
            logger.error(
                "Unexpected OpenAI payload shape: has_choices=%s choice_keys=%s",
                isinstance(choices, list),
                sorted(choice.keys()),
            )
            raise ChatResponseFormatError(INVALID_RESPONSE_MESSAGE)
        return text
