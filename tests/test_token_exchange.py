"""Tests for authorization code exchange."""
import base64
from unittest.mock import AsyncMock
from urllib.parse import parse_qs

import httpx
import pytest

from oauthlink.models.schemas import TokenSet
from oauthlink.services.oauth import (
    OAuthProviderResponseError,
    OAuthTokenError,
    OAuthTransportError,
    RequestExecutor,
    TokenExchangeClient,
)
from oauthlink.services.oauth.token_exchange import code_fingerprint

TOKEN_URL = "https://accounts.example.com/api/token"


def _client(executor, credentials_in_body=False) -> TokenExchangeClient:
    return TokenExchangeClient(
        token_url=TOKEN_URL,
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="https://app.example.com/callback",
        executor=executor,
        credentials_in_body=credentials_in_body,
        provider_id="spotify",
    )


@pytest.mark.asyncio
async def test_exchange_maps_token_response(executor_factory, token_payload):
    executor = executor_factory(lambda request: httpx.Response(200, json=token_payload))

    tokens = await _client(executor).exchange("code1")

    assert tokens == TokenSet(
        access_token="T",
        token_type="bearer",
        scope="s",
        access_token_expires_in=3600,
        refresh_token="R",
    )


@pytest.mark.asyncio
async def test_exchange_sends_form_body_and_basic_auth(executor_factory, token_payload):
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=token_payload)

    await _client(executor_factory(handler)).exchange("code1")

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == TOKEN_URL
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    scheme, encoded = request.headers["Authorization"].split(" ", 1)
    assert scheme == "Basic"
    assert base64.b64decode(encoded).decode() == "client-id:client-secret"
    form = parse_qs(request.content.decode())
    assert form == {
        "code": ["code1"],
        "grant_type": ["authorization_code"],
        "redirect_uri": ["https://app.example.com/callback"],
    }


@pytest.mark.asyncio
async def test_exchange_credentials_in_body_variant(executor_factory, token_payload):
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=token_payload)

    await _client(executor_factory(handler), credentials_in_body=True).exchange("code1")

    request = seen[0]
    assert "Authorization" not in request.headers
    form = parse_qs(request.content.decode())
    assert form["client_id"] == ["client-id"]
    assert form["client_secret"] == ["client-secret"]


@pytest.mark.asyncio
async def test_exchange_uses_redirect_override(executor_factory, token_payload):
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=token_payload)

    await _client(executor_factory(handler)).exchange("code1", redirect_uri="https://other.example.com/cb")

    assert parse_qs(seen[0].content.decode())["redirect_uri"] == ["https://other.example.com/cb"]


@pytest.mark.asyncio
async def test_exchange_optional_fields_absent(executor_factory):
    executor = executor_factory(
        lambda request: httpx.Response(200, json={"access_token": "T", "token_type": "Bearer"})
    )

    tokens = await _client(executor).exchange("code1")

    assert tokens.refresh_token is None
    assert tokens.access_token_expires_in is None
    assert tokens.scope is None


@pytest.mark.asyncio
async def test_exchange_http_400_carries_status_and_body(executor_factory):
    body = '{"error":"invalid_grant","error_description":"Invalid authorization code"}'
    executor = executor_factory(lambda request: httpx.Response(400, text=body))

    with pytest.raises(OAuthTokenError) as exc_info:
        await _client(executor).exchange("bad-code")

    err = exc_info.value
    assert err.status_code == 400
    assert err.body == body
    assert isinstance(err.cause, OAuthProviderResponseError)
    assert err.__cause__ is err.cause
    assert err.code == "OAU200"
    assert str(err).startswith("exchange failed")


@pytest.mark.asyncio
async def test_exchange_missing_access_token_is_token_error(executor_factory):
    executor = executor_factory(lambda request: httpx.Response(200, json={"token_type": "bearer"}))

    with pytest.raises(OAuthTokenError) as exc_info:
        await _client(executor).exchange("code1")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_exchange_transport_failure_not_retried():
    executor = RequestExecutor()
    executor.execute = AsyncMock(side_effect=OAuthTransportError("Failed to connect to OAuth provider"))

    with pytest.raises(OAuthTokenError) as exc_info:
        await _client(executor).exchange("code1")

    assert isinstance(exc_info.value.cause, OAuthTransportError)
    assert executor.execute.await_count == 1


@pytest.mark.asyncio
async def test_exchange_never_logs_code_or_tokens(executor_factory, token_payload, caplog):
    executor = executor_factory(lambda request: httpx.Response(200, json=token_payload))

    with caplog.at_level("DEBUG"):
        tokens = await _client(executor).exchange("super-secret-code")

    assert "super-secret-code" not in caplog.text
    assert code_fingerprint("super-secret-code") in caplog.text
    assert "client-secret" not in caplog.text
    assert "access_token='T'" not in repr(tokens)
    assert "refresh_token" not in repr(tokens)
