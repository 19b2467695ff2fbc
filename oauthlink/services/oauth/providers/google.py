"""Google OAuth 2.0 / OpenID Connect implementation."""
from collections.abc import Mapping

from oauthlink.models.schemas import GoogleConfig

from ..linker import IdentityStore
from ..request import RequestExecutor
from .base import OAuthProvider, ProviderSpec

PROVIDER_ID = "google"


def _google_params(config: GoogleConfig) -> Mapping[str, str | None]:
    return {"access_type": config.access_type, "prompt": config.prompt}


GOOGLE = ProviderSpec(
    provider_id=PROVIDER_ID,
    authorization_url="https://accounts.google.com/o/oauth2/v2/auth",
    token_url="https://oauth2.googleapis.com/token",
    user_info_url="https://www.googleapis.com/oauth2/v2/userinfo",
    # Minimal scopes for authentication; request more incrementally when needed
    default_scopes=("openid", "email"),
    credentials_in_body=True,
    config_class=GoogleConfig,
    authorization_params=_google_params,
)


def google(
    store: IdentityStore,
    config: GoogleConfig,
    executor: RequestExecutor | None = None,
) -> OAuthProvider:
    return OAuthProvider(GOOGLE, config, store, executor)
