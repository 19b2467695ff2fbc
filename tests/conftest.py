from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from oauthlink.db.base_class import Base  # noqa: E402
from oauthlink.models import models  # noqa: E402,F401 - registers tables
from oauthlink.models.schemas import LinkedAuthRecord, SpotifyConfig  # noqa: E402
from oauthlink.services.identity_store import SQLAlchemyIdentityStore  # noqa: E402
from oauthlink.services.oauth.request import RequestExecutor  # noqa: E402

SPOTIFY_TOKEN_PAYLOAD = {
    "access_token": "T",
    "token_type": "bearer",
    "scope": "s",
    "expires_in": 3600,
    "refresh_token": "R",
}

SPOTIFY_PROFILE_PAYLOAD = {
    "id": "u1",
    "display_name": "Test User",
    "email": "u1@example.com",
    "type": "user",
    "uri": "spotify:user:u1",
    "followers": {"href": None, "total": 3},
    "images": [],
}


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def identity_store(session_factory):
    return SQLAlchemyIdentityStore(session_factory)


class RecordingStore:
    """Identity store double that records connect calls."""

    def __init__(self, user_id: int = 42, error: Exception | None = None):
        self.user_id = user_id
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def connect(self, provider_id: str, provider_user_id: str) -> LinkedAuthRecord:
        self.calls.append((provider_id, provider_user_id))
        if self.error is not None:
            raise self.error
        return LinkedAuthRecord(
            user_id=self.user_id,
            provider_id=provider_id,
            provider_user_id=provider_user_id,
            is_new_user=True,
        )


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def spotify_config():
    return SpotifyConfig(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="https://app.example.com/callback",
        scope=["user-read-email", "user-read-private"],
        show_dialog=True,
    )


def make_executor(handler) -> RequestExecutor:
    """Executor whose HTTP calls are answered by ``handler(request)``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RequestExecutor(client=client)


def spotify_handler(token_status: int = 200, token_body=None, profile_status: int = 200, profile_body=None, seen=None):
    """MockTransport handler emulating Spotify's token and profile endpoints."""
    token_body = SPOTIFY_TOKEN_PAYLOAD if token_body is None else token_body
    profile_body = SPOTIFY_PROFILE_PAYLOAD if profile_body is None else profile_body

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.url.path == "/api/token":
            return httpx.Response(token_status, json=token_body)
        if request.url.path == "/v1/me":
            return httpx.Response(profile_status, json=profile_body)
        return httpx.Response(404, text="not found")

    return handler


@pytest.fixture
def executor_factory():
    return make_executor


@pytest.fixture
def spotify_endpoints():
    return spotify_handler


@pytest.fixture
def token_payload():
    return dict(SPOTIFY_TOKEN_PAYLOAD)


@pytest.fixture
def profile_payload():
    return dict(SPOTIFY_PROFILE_PAYLOAD)


@pytest.fixture
def store_factory():
    return RecordingStore
