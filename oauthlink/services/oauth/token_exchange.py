"""Authorization code → token set exchange."""
import hashlib
import logging

import httpx

from oauthlink.models.schemas import TokenResponse, TokenSet

from .exceptions import OAuthRequestError, OAuthTokenError
from .request import RequestExecutor, authorization_headers, basic_credentials

logger = logging.getLogger(__name__)


def code_fingerprint(code: str) -> str:
    """Short stable digest of an authorization code, safe to log."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()[:12]


class TokenExchangeClient:
    """
    Trades an authorization code for tokens at the provider's token endpoint.

    Client credentials go in an HTTP Basic header by default. Providers that
    expect them in the form body are configured with ``credentials_in_body=True``.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        executor: RequestExecutor,
        credentials_in_body: bool = False,
        provider_id: str | None = None,
    ):
        self.token_url = token_url
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.executor = executor
        self.credentials_in_body = credentials_in_body
        self.provider_id = provider_id

    def build_request(self, code: str, redirect_uri: str | None = None) -> httpx.Request:
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri or self.redirect_uri,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        if self.credentials_in_body:
            data["client_id"] = self.client_id
            data["client_secret"] = self.client_secret
        else:
            headers.update(authorization_headers("basic", basic_credentials(self.client_id, self.client_secret)))
        return httpx.Request("POST", self.token_url, data=data, headers=headers)

    async def exchange(self, code: str, redirect_uri: str | None = None) -> TokenSet:
        """
        Exchange authorization code for access token.

        Args:
            code: Authorization code from OAuth callback
            redirect_uri: Must match the one sent on the authorization leg;
                defaults to the configured redirect URI

        Returns:
            Token set parsed from the provider response

        Raises:
            OAuthTokenError: If token exchange fails for any reason
        """
        fingerprint = code_fingerprint(code)
        logger.info(
            f"Token exchange attempt | "
            f"provider={self.provider_id or 'oauth'} "
            f"code_hash={fingerprint} "
            f"client_id={self.client_id}"
        )
        request = self.build_request(code, redirect_uri)
        try:
            payload = await self.executor.execute(request, response_model=TokenResponse, endpoint="token")
        except OAuthRequestError as e:
            logger.error(f"Token exchange failed | code_hash={fingerprint} error={e.code}")
            raise OAuthTokenError(e, provider_id=self.provider_id) from e

        logger.info(f"Token exchange SUCCESS | code_hash={fingerprint}")
        return TokenSet.from_response(payload)
