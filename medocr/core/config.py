from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from ``MEDOCR_*`` env vars and an optional ``.env``."""

    model_config = SettingsConfigDict(env_prefix="MEDOCR_", env_file=".env", extra="ignore")

    APP_NAME: str = Field(default="medocr-pipeline")
    APP_VERSION: str = Field(default="0.1.0")
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")
    LOG_JSON: bool = Field(default=False)

    # Google Cloud Vision (REST)
    VISION_API_KEY: SecretStr | None = Field(default=None)
    VISION_BASE_URL: str = Field(default="https://vision.googleapis.com")
    VISION_TIMEOUT_SECONDS: float = Field(default=30.0)

    # OpenAI-compatible chat completions
    OPENAI_API_KEY: SecretStr | None = Field(default=None)
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1")
    OPENAI_MODEL: str = Field(default="gpt-4-turbo-preview")
    OPENAI_TEMPERATURE: float = Field(default=0.3)
    OPENAI_MAX_TOKENS: int = Field(default=2048)
    LLM_TIMEOUT_SECONDS: float = Field(default=60.0)

    OCR_CONFIDENCE_THRESHOLD: float = Field(default=0.80, ge=0.0, le=1.0)
    OCR_LANGUAGES: str = Field(default="en,ar")

    # Declared for operators; no retry loop consumes it.
    AI_RETRY_ATTEMPTS: int = Field(default=3, ge=0)

    OUTPUT_DIR: Path = Field(default=Path("./output"))

    DATABASE_URL: str | None = Field(default=None)
    REDIS_URL: str | None = Field(default=None)

    @property
    def ocr_languages(self) -> list[str]:
        return [lang.strip() for lang in self.OCR_LANGUAGES.split(",") if lang.strip()]

    def masked(self) -> dict[str, object]:
        """Settings as a JSON-friendly dict with secrets hidden."""
        data = self.model_dump(mode="json")
        for key in ("VISION_API_KEY", "OPENAI_API_KEY"):
            data[key] = "***" if getattr(self, key) is not None else None
        for key in ("DATABASE_URL", "REDIS_URL"):
            if data.get(key):
                data[key] = "***"
        return data


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
