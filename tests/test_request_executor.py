"""
Tests for the request executor.

Tests cover:
- Success with raw JSON and with a pydantic response model
- Non-2xx responses surfaced verbatim
- Malformed bodies (non-JSON, wrong shape)
- Transport failures and timeouts
- Authorization header helpers
"""
import base64

import httpx
import pytest

from oauthlink.models.schemas import TokenResponse
from oauthlink.services.oauth import (
    OAuthMalformedResponseError,
    OAuthProviderResponseError,
    OAuthTimeoutError,
    OAuthTransportError,
    RequestExecutor,
)
from oauthlink.services.oauth.request import authorization_headers, basic_credentials


def _request() -> httpx.Request:
    return httpx.Request("GET", "https://provider.example.com/resource")


@pytest.mark.asyncio
async def test_execute_returns_parsed_json(executor_factory):
    executor = executor_factory(lambda request: httpx.Response(200, json={"id": "u1", "n": 1}))

    result = await executor.execute(_request())

    assert result == {"id": "u1", "n": 1}


@pytest.mark.asyncio
async def test_execute_validates_response_model(executor_factory, token_payload):
    executor = executor_factory(lambda request: httpx.Response(200, json=token_payload))

    result = await executor.execute(_request(), response_model=TokenResponse)

    assert isinstance(result, TokenResponse)
    assert result.access_token == "T"
    assert result.expires_in == 3600


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 401, 403, 500, 503])
async def test_non_2xx_raises_provider_error_with_raw_body(executor_factory, status):
    body = '{"error": "invalid_grant", "error_description": "Invalid authorization code"}'
    executor = executor_factory(lambda request: httpx.Response(status, text=body))

    with pytest.raises(OAuthProviderResponseError) as exc_info:
        await executor.execute(_request())

    assert exc_info.value.status_code == status
    assert exc_info.value.body == body
    assert exc_info.value.code == "OAU102"


@pytest.mark.asyncio
async def test_redirect_status_is_not_success(executor_factory):
    executor = executor_factory(
        lambda request: httpx.Response(302, headers={"Location": "https://elsewhere"}, text="")
    )

    with pytest.raises(OAuthProviderResponseError) as exc_info:
        await executor.execute(_request())

    assert exc_info.value.status_code == 302


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(executor_factory):
    executor = executor_factory(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(OAuthMalformedResponseError):
        await executor.execute(_request())


@pytest.mark.asyncio
async def test_empty_success_body_is_malformed(executor_factory):
    executor = executor_factory(lambda request: httpx.Response(204))

    with pytest.raises(OAuthMalformedResponseError):
        await executor.execute(_request())


@pytest.mark.asyncio
async def test_wrong_shape_is_malformed(executor_factory):
    executor = executor_factory(lambda request: httpx.Response(200, json={"token_type": "bearer"}))

    with pytest.raises(OAuthMalformedResponseError) as exc_info:
        await executor.execute(_request(), response_model=TokenResponse)

    assert "access_token" in exc_info.value.details["fields"]


@pytest.mark.asyncio
async def test_connection_error_raises_transport_error(executor_factory):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    executor = executor_factory(handler)

    with pytest.raises(OAuthTransportError) as exc_info:
        await executor.execute(_request())

    assert not isinstance(exc_info.value, OAuthTimeoutError)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_timeout_raises_timeout_error(executor_factory):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    executor = executor_factory(handler)

    with pytest.raises(OAuthTimeoutError) as exc_info:
        await executor.execute(_request())

    assert isinstance(exc_info.value, OAuthTransportError)


@pytest.mark.asyncio
async def test_executor_without_client_opens_its_own(monkeypatch):
    """Without an injected client a short-lived AsyncClient with the configured timeout is used."""
    created = {}
    original = httpx.AsyncClient

    def fake_client(*args, **kwargs):
        created.update(kwargs)
        return original(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"ok": True})))

    monkeypatch.setattr(httpx, "AsyncClient", fake_client)

    executor = RequestExecutor(timeout=3.5)
    result = await executor.execute(_request())

    assert result == {"ok": True}
    assert created["timeout"] == 3.5


def test_basic_credentials_encoding():
    encoded = basic_credentials("client-id", "client-secret")
    assert base64.b64decode(encoded).decode() == "client-id:client-secret"


def test_authorization_headers():
    assert authorization_headers("bearer", "abc") == {"Authorization": "Bearer abc"}
    assert authorization_headers("basic", "xyz") == {"Authorization": "Basic xyz"}
    with pytest.raises(ValueError):
        authorization_headers("digest", "xyz")  # type: ignore[arg-type]
