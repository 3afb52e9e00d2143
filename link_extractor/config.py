from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    record_store_url: str = Field(default="https://my.living-apps.de/rest", alias="RECORD_STORE_URL")
    record_store_app_id: str = Field(alias="RECORD_STORE_APP_ID")
    record_store_session_cookie: str = Field(default="", alias="RECORD_STORE_SESSION_COOKIE")
    http_timeout_seconds: float = Field(default=15, alias="HTTP_TIMEOUT_SECONDS")

    openai_api_key: str = Field(default="", alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-5", alias="OPENAI_MODEL")
    openai_timeout_seconds: float = Field(default=30, alias="OPENAI_TIMEOUT_SECONDS")
    use_mock_ai: bool = Field(default=False, alias="USE_MOCK_AI")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_required_runtime(self) -> "Settings":
        if not self.record_store_url.strip():
            raise ValueError("RECORD_STORE_URL is required")
        if not self.record_store_app_id.strip():
            raise ValueError("RECORD_STORE_APP_ID is required")
        if (not self.use_mock_ai) and (not self.openai_api_key.strip()):
            raise ValueError("OPENAI_API_KEY is required unless USE_MOCK_AI is enabled")
        if self.http_timeout_seconds < 1:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be >= 1")
        if self.openai_timeout_seconds < 1:
            raise ValueError("OPENAI_TIMEOUT_SECONDS must be >= 1")
        self.record_store_url = self.record_store_url.rstrip("/")
        self.log_level = self.log_level.upper()
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
