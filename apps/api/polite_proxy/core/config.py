import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from polite_proxy.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Load .env from apps/api so it works regardless of CWD
_env_file = Path(__file__).resolve().parent.parent.parent / ".env"

DEFAULT_OPENAI_MODEL = "gpt-5-mini"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_file, extra="ignore")

    # Storage (Supabase); SECRET_KEY bypasses row-level security
    supabase_url: str
    secret_key: str

    # Generation service (OpenAI chat completions)
    openai_api_key: str
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_temperature: float = 0.7
    openai_max_tokens: int = 500
    openai_base_url: str = "https://api.openai.com/v1"

    # None => no client-side timeout on upstream calls
    http_timeout_seconds: float | None = None

    log_level: str = "INFO"

    @field_validator("supabase_url", "secret_key", "openai_api_key")
    @classmethod
    def require_value(cls, value: str) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError("must not be empty")
        return trimmed

    @field_validator("openai_model", mode="before")
    @classmethod
    def default_model_when_blank(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_OPENAI_MODEL
        return value

    @property
    def supabase_base_url(self) -> str:
        return self.supabase_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        names = sorted({str(err["loc"][0]).upper() for err in e.errors() if err.get("loc")})
        logger.error("Server misconfigured: missing %s", ", ".join(names) or "required settings")
        raise ConfigError("Server configuration error", cause=e) from e
