from __future__ import annotations

import os
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "oauthlink"
    ENV: str = "dev"
    DATABASE_URL: str | None = None
    BACKEND_URL: str = "http://localhost:8000"
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"

    # Outbound calls to token and profile endpoints
    OAUTH_HTTP_TIMEOUT: float = 10.0

    # Spotify
    SPOTIFY_CLIENT_ID: str | None = None
    SPOTIFY_CLIENT_SECRET: str | None = None
    SPOTIFY_REDIRECT_URI: str | None = None  # defaults to {BACKEND_URL}/auth/oauth/spotify/callback
    SPOTIFY_SCOPES: str = "user-read-email"  # space or comma separated
    SPOTIFY_SHOW_DIALOG: bool = False

    # Google
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REDIRECT_URI: str | None = None

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        if self.ENV.lower() == "prod":
            problems: list[str] = []
            if not self.DATABASE_URL:
                problems.append("DATABASE_URL is missing")
            for provider in ("SPOTIFY", "GOOGLE"):
                client_id = getattr(self, f"{provider}_CLIENT_ID")
                client_secret = getattr(self, f"{provider}_CLIENT_SECRET")
                if bool(client_id) != bool(client_secret):
                    problems.append(f"{provider} credentials are incomplete")
            if problems:
                raise ValueError("Invalid production settings: " + ", ".join(problems))
        return self

    @property
    def spotify_scopes(self) -> list[str]:
        return [s for s in self.SPOTIFY_SCOPES.replace(",", " ").split() if s]

    def redirect_uri_for(self, provider: str) -> str:
        explicit = getattr(self, f"{provider.upper()}_REDIRECT_URI", None)
        if explicit:
            return explicit
        return f"{self.BACKEND_URL.rstrip('/')}/auth/oauth/{provider}/callback"


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storage/dev.db"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()
