"""Spotify Accounts service (authorization code flow)."""
from collections.abc import Mapping

from oauthlink.models.schemas import SpotifyConfig

from ..linker import IdentityStore
from ..request import RequestExecutor
from .base import OAuthProvider, ProviderSpec

PROVIDER_ID = "spotify"


def _spotify_params(config: SpotifyConfig) -> Mapping[str, str | None]:
    return {"show_dialog": "true" if config.show_dialog else "false"}


SPOTIFY = ProviderSpec(
    provider_id=PROVIDER_ID,
    authorization_url="https://accounts.spotify.com/authorize",
    token_url="https://accounts.spotify.com/api/token",
    # https://developer.spotify.com/documentation/web-api/reference/get-current-users-profile
    user_info_url="https://api.spotify.com/v1/me",
    config_class=SpotifyConfig,
    authorization_params=_spotify_params,
)


def spotify(
    store: IdentityStore,
    config: SpotifyConfig,
    executor: RequestExecutor | None = None,
) -> OAuthProvider:
    return OAuthProvider(SPOTIFY, config, store, executor)
