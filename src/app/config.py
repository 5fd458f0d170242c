from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.adapters.roster_client import DEFAULT_ROSTER_URL


class Settings(BaseSettings):
    """Central application configuration."""

    app_name: str = Field(default="Hospital Front Desk Assistant")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Practitioner roster
    roster_url: str = Field(
        default=DEFAULT_ROSTER_URL,
        validation_alias=AliasChoices("ROSTER_URL", "DOCTORS_API_URL"),
    )
    roster_timeout: float = Field(default=10.0, gt=0)
    roster_refresh_enabled: bool = Field(default=True)
    roster_refresh_seconds: float = Field(default=900.0, gt=0)

    # Session cookie
    session_cookie_name: str = Field(default="sessionId")
    session_cookie_max_age: int = Field(default=5 * 60, gt=0)

    # NLU
    intent_similarity_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    allowed_origins: List[str] = Field(
        default_factory=list,
        validation_alias="ALLOWED_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
