"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    openai_api_key: SecretStr = Field(
        validation_alias=AliasChoices("openai_api_key", "gemini_api_key"),
    )
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None

    source_provider: Literal["codecommit", "github"] = "codecommit"
    aws_region: str = "eu-west-2"
    github_owner: str | None = None
    github_token: SecretStr | None = None

    output_csv_file: Path = Path("repositories_summary.csv")
    readme_path: str = "README.md"
    max_attempts: int = Field(default=4, ge=1)
    initial_backoff_seconds: float = Field(default=2.0, ge=0)
    pace_delay_seconds: float = Field(default=1.0, ge=0)
    max_repositories: int | None = Field(default=None, ge=1)
    max_readme_tokens: int | None = Field(default=30_000, ge=1)
    log_level: str = "INFO"

    @field_validator("openai_api_key")
    @classmethod
    def _key_must_not_be_blank(cls, v: SecretStr) -> SecretStr:
        stripped = v.get_secret_value().strip()
        if not stripped:
            msg = "OPENAI_API_KEY (or GEMINI_API_KEY) must not be blank."
            raise ValueError(msg)
        return SecretStr(stripped)

    @model_validator(mode="after")
    def _github_needs_owner(self) -> Settings:
        if self.source_provider == "github" and not self.github_owner:
            msg = "GITHUB_OWNER must be set when SOURCE_PROVIDER is 'github'."
            raise ValueError(msg)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
