"""OAuth 2.0 Authorization Code Grant client core.

Provider-agnostic flow with providers described as configuration data.

Components:
- state: CSRF state tokens
- urls: authorization URL building
- request: outbound call execution and response classification
- token_exchange / user_fetcher / linker: the three callback steps
- providers: flow orchestrator plus Spotify and Google definitions

Providers:
- Spotify
- Google (OAuth 2.0 + OpenID Connect)
"""
from .exceptions import (
    ConflictingBindingError,
    InvalidUrlError,
    LinkError,
    OAuthFlowError,
    OAuthLinkError,
    OAuthMalformedResponseError,
    OAuthProviderError,
    OAuthProviderResponseError,
    OAuthRequestError,
    OAuthTimeoutError,
    OAuthTokenError,
    OAuthTransportError,
    OAuthUserInfoError,
    ProviderNotRegisteredError,
    StoreUnavailableError,
)
from .factory import create_oauth_service
from .linker import AccountLinker, IdentityStore
from .providers import GOOGLE, SPOTIFY, OAuthProvider, ProviderSpec, google, spotify
from .request import RequestExecutor
from .service import OAuthService
from .state import generate_state
from .token_exchange import TokenExchangeClient
from .urls import build_url, join_scopes
from .user_fetcher import ProviderUserFetcher

__all__ = [
    # Exceptions
    "ConflictingBindingError",
    "InvalidUrlError",
    "LinkError",
    "OAuthFlowError",
    "OAuthLinkError",
    "OAuthMalformedResponseError",
    "OAuthProviderError",
    "OAuthProviderResponseError",
    "OAuthRequestError",
    "OAuthTimeoutError",
    "OAuthTokenError",
    "OAuthTransportError",
    "OAuthUserInfoError",
    "ProviderNotRegisteredError",
    "StoreUnavailableError",
    # Components
    "AccountLinker",
    "IdentityStore",
    "ProviderUserFetcher",
    "RequestExecutor",
    "TokenExchangeClient",
    "build_url",
    "generate_state",
    "join_scopes",
    # Providers
    "OAuthProvider",
    "ProviderSpec",
    "GOOGLE",
    "SPOTIFY",
    "google",
    "spotify",
    # Service
    "OAuthService",
    # Factory
    "create_oauth_service",
]
