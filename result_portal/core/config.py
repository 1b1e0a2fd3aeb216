"""Application configuration."""

from pathlib import Path
from typing import Annotated, Any, Literal, Self

from pydantic import AnyUrl, BeforeValidator, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "result-portal"
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    FRONTEND_HOST: str = "http://localhost:5173"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Result feed
    RESULT_LINKS_URL: str = "http://localhost:5173/result-links.json"
    FEED_TIMEOUT_SEC: float = 15.0
    FEED_USER_AGENT: str = "result-portal/0.1"

    # Countdown
    COUNTDOWN_TICK_SEC: float = 1.0

    # Selection store
    SELECTION_STORE_BACKEND: Literal["memory", "file", "redis"] = "file"
    SELECTION_STORE_PATH: Path = Path("data/selection.json")
    REDIS_URL: str = "redis://localhost:6379/0"

    # Share action
    SHARE_TITLE: str = "HS 2025 Result Link"
    SHARE_TEXT: str = "Check out the HS 2025 result here!"
    SHARE_URL: str | None = None

    @model_validator(mode="after")
    def _set_default_share_url(self) -> Self:
        if not self.SHARE_URL:
            self.SHARE_URL = self.FRONTEND_HOST
        return self


settings = Settings()
