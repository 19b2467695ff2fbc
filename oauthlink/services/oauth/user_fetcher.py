"""Provider profile lookup with a bearer token."""
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from oauthlink.models.schemas import ProviderUser

from .exceptions import OAuthMalformedResponseError, OAuthRequestError, OAuthUserInfoError
from .request import RequestExecutor, authorization_headers

logger = logging.getLogger(__name__)


class ProviderUserFetcher:
    """Fetches the signed-in user's profile and extracts its stable id."""

    def __init__(
        self,
        user_info_url: str,
        executor: RequestExecutor,
        id_field: str = "id",
        provider_id: str | None = None,
    ):
        self.user_info_url = user_info_url
        self.executor = executor
        self.id_field = id_field
        self.provider_id = provider_id

    def _to_provider_user(self, payload: Any) -> ProviderUser:
        if not isinstance(payload, dict):
            raise OAuthMalformedResponseError("userinfo response is not a JSON object")
        try:
            return ProviderUser(id=payload.get(self.id_field), data=payload)
        except ValidationError as e:
            raise OAuthMalformedResponseError(
                f"userinfo response has no usable '{self.id_field}'",
                details={"fields": [self.id_field]},
            ) from e

    async def fetch_user(self, access_token: str) -> ProviderUser:
        """
        Fetch user information using access token.

        Raises:
            OAuthUserInfoError: If the request fails or the profile has no id
        """
        request = httpx.Request(
            "GET",
            self.user_info_url,
            headers={"Accept": "application/json", **authorization_headers("bearer", access_token)},
        )
        try:
            payload = await self.executor.execute(request, endpoint="userinfo")
            user = self._to_provider_user(payload)
        except OAuthRequestError as e:
            logger.error(f"User info fetch failed | provider={self.provider_id} error={e.code}")
            raise OAuthUserInfoError(e, provider_id=self.provider_id) from e

        logger.info(f"User info fetched | provider={self.provider_id} provider_user_id={user.id}")
        return user
