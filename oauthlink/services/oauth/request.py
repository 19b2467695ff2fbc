"""Single chokepoint for outbound calls to OAuth providers.

Classifies every response into success or one of three failures:
- OAuthTransportError: the request never got an HTTP answer
- OAuthProviderResponseError: non-2xx status (body kept verbatim)
- OAuthMalformedResponseError: 2xx but the body is not the expected JSON shape
"""
import base64
import logging
import time
from typing import Any, Literal, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from oauthlink import metrics
from oauthlink.core.config import settings

from .exceptions import (
    OAuthMalformedResponseError,
    OAuthProviderResponseError,
    OAuthTimeoutError,
    OAuthTransportError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def basic_credentials(client_id: str, client_secret: str) -> str:
    """Base64 of ``client_id:client_secret`` for HTTP Basic auth."""
    return base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")


def authorization_headers(scheme: Literal["basic", "bearer"], token: str) -> dict[str, str]:
    if scheme == "basic":
        return {"Authorization": f"Basic {token}"}
    if scheme == "bearer":
        return {"Authorization": f"Bearer {token}"}
    raise ValueError(f"Unsupported authorization scheme: {scheme}")


def _without_query(url: httpx.URL) -> str:
    """URL for logs and errors; query strings may carry codes or tokens."""
    return f"{url.scheme}://{url.netloc.decode('ascii')}{url.path}"


class RequestExecutor:
    """
    Issues HTTP requests to providers and classifies the responses.

    Pass ``client`` to share a connection pool (or a mock transport) across
    calls; otherwise a short-lived client is opened per request.
    No retries are attempted here.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float | None = None):
        self._client = client
        self.timeout = timeout if timeout is not None else settings.OAUTH_HTTP_TIMEOUT

    async def _send(self, request: httpx.Request) -> httpx.Response:
        if self._client is not None:
            return await self._client.send(request)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.send(request)

    async def execute(
        self,
        request: httpx.Request,
        response_model: type[ModelT] | None = None,
        endpoint: str = "provider",
    ) -> ModelT | Any:
        """
        Send ``request`` and return the parsed JSON body.

        Args:
            request: Fully built httpx request
            response_model: Optional pydantic model the body must validate against
            endpoint: Short label used in logs and metrics ("token", "userinfo")

        Returns:
            Validated ``response_model`` instance, or the decoded JSON

        Raises:
            OAuthTransportError: Network failure or timeout
            OAuthProviderResponseError: Non-2xx response
            OAuthMalformedResponseError: Body is not JSON or fails validation
        """
        started = time.perf_counter()
        try:
            response = await self._send(request)
        except httpx.TimeoutException as e:
            logger.error(f"{endpoint} request timed out | method={request.method} url={_without_query(request.url)}")
            metrics.oauth_request_failed(endpoint, "timeout")
            raise OAuthTimeoutError(f"Timed out calling {request.url.host}") from e
        except httpx.RequestError as e:
            logger.error(f"{endpoint} request failed: {e.__class__.__name__} | url={_without_query(request.url)}")
            metrics.oauth_request_failed(endpoint, "transport")
            raise OAuthTransportError(f"Failed to connect to OAuth provider: {e.__class__.__name__}") from e
        finally:
            metrics.oauth_request_observed(endpoint, time.perf_counter() - started)

        logger.info(
            f"{endpoint} response | method={request.method} "
            f"host={request.url.host} status={response.status_code}"
        )

        if not response.is_success:
            logger.warning(f"{endpoint} rejected | status={response.status_code} response={response.text[:500]}")
            metrics.oauth_request_failed(endpoint, "status")
            raise OAuthProviderResponseError(
                status_code=response.status_code,
                body=response.text,
                url=_without_query(request.url),
            )

        try:
            body = response.json()
        except ValueError as e:
            metrics.oauth_request_failed(endpoint, "malformed")
            raise OAuthMalformedResponseError(f"{endpoint} response is not valid JSON") from e

        if response_model is None:
            return body

        try:
            return response_model.model_validate(body)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) or "<root>" for err in e.errors()})
            metrics.oauth_request_failed(endpoint, "malformed")
            raise OAuthMalformedResponseError(
                f"{endpoint} response has unexpected shape",
                details={"fields": fields},
            ) from e
