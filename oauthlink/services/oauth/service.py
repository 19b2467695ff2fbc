"""OAuth Service: registry of configured providers.

Responsibilities:
- Keep one OAuthProvider per provider name
- Route authorization / callback calls to the right provider
"""
import logging

from oauthlink.models.schemas import OAuthCallbackResult

from .exceptions import ProviderNotRegisteredError
from .providers import OAuthProvider

logger = logging.getLogger(__name__)


class OAuthService:
    """Registry that routes flow operations to the named provider."""

    def __init__(self):
        self._providers: dict[str, OAuthProvider] = {}

    def register_provider(self, name: str, provider: OAuthProvider) -> None:
        """
        Register an OAuth provider.

        Args:
            name: Provider identifier (e.g., "spotify")
            provider: OAuthProvider instance
        """
        self._providers[name] = provider
        logger.info(f"Registered OAuth provider: {name}")

    def get_provider(self, name: str) -> OAuthProvider:
        """
        Get registered OAuth provider.

        Raises:
            ProviderNotRegisteredError: If provider not registered
        """
        if name not in self._providers:
            raise ProviderNotRegisteredError(name)
        return self._providers[name]

    @property
    def providers(self) -> list[str]:
        return list(self._providers)

    def get_authorization_url(self, provider_name: str, redirect_uri: str | None = None) -> tuple[str, str]:
        return self.get_provider(provider_name).get_authorization_url(redirect_uri)

    async def validate_callback(
        self,
        provider_name: str,
        code: str,
        redirect_uri: str | None = None,
        timeout: float | None = None,
    ) -> OAuthCallbackResult:
        provider = self.get_provider(provider_name)
        return await provider.validate_callback(code, redirect_uri=redirect_uri, timeout=timeout)
