"""Factory function for creating configured OAuth service."""
import logging

from oauthlink.core.config import BaseAppSettings, settings as default_settings
from oauthlink.models.schemas import GoogleConfig, SpotifyConfig

from .linker import IdentityStore
from .providers import google, spotify
from .request import RequestExecutor
from .service import OAuthService

logger = logging.getLogger(__name__)


def create_oauth_service(
    store: IdentityStore,
    executor: RequestExecutor | None = None,
    settings: BaseAppSettings | None = None,
) -> OAuthService:
    """
    Factory function to create configured OAuth service.

    Registers every provider whose client ID and secret are configured.

    Args:
        store: Identity store used to link accounts
        executor: Shared request executor (one is created if omitted)
        settings: Settings to read credentials from (module settings by default)

    Returns:
        Configured OAuthService instance
    """
    settings = settings or default_settings
    executor = executor or RequestExecutor(timeout=settings.OAUTH_HTTP_TIMEOUT)
    service = OAuthService()

    if settings.SPOTIFY_CLIENT_ID and settings.SPOTIFY_CLIENT_SECRET:
        config = SpotifyConfig(
            client_id=settings.SPOTIFY_CLIENT_ID,
            client_secret=settings.SPOTIFY_CLIENT_SECRET,
            redirect_uri=settings.redirect_uri_for("spotify"),
            scope=settings.spotify_scopes,
            show_dialog=settings.SPOTIFY_SHOW_DIALOG,
        )
        service.register_provider("spotify", spotify(store, config, executor))
        logger.info("Spotify OAuth provider enabled")
    else:
        logger.warning("Spotify OAuth not configured (missing client ID/secret)")

    if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET:
        config = GoogleConfig(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.redirect_uri_for("google"),
        )
        service.register_provider("google", google(store, config, executor))
        logger.info("Google OAuth provider enabled")
    else:
        logger.warning("Google OAuth not configured (missing client ID/secret)")

    return service
