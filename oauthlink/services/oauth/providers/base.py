"""OAuth 2.0 authorization code flow, shared by every provider.

A provider is described by a ``ProviderSpec`` (endpoints, id field, scope
convention, credential placement, extra authorization parameters) and driven
by ``OAuthProvider``. Adding a provider means adding a spec, not a subclass.
"""
import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from oauthlink import metrics
from oauthlink.core.exceptions import ConfigurationError
from oauthlink.models.schemas import OAuthCallbackResult, ProviderConfig

from ..exceptions import OAuthFlowError, OAuthTimeoutError
from ..linker import AccountLinker, IdentityStore
from ..request import RequestExecutor
from ..state import generate_state
from ..token_exchange import TokenExchangeClient
from ..urls import build_url, join_scopes
from ..user_fetcher import ProviderUserFetcher

logger = logging.getLogger(__name__)


def _no_extra_params(config: ProviderConfig) -> Mapping[str, str | None]:
    return {}


@dataclass(frozen=True)
class ProviderSpec:
    """Static description of one OAuth provider."""

    provider_id: str
    authorization_url: str
    token_url: str
    user_info_url: str
    default_scopes: tuple[str, ...] = ()
    scope_delimiter: str = " "
    user_id_field: str = "id"
    credentials_in_body: bool = False
    config_class: type[ProviderConfig] = ProviderConfig
    authorization_params: Callable[[ProviderConfig], Mapping[str, str | None]] = field(
        default=_no_extra_params
    )


class OAuthProvider:
    """
    Runs the authorization code flow for a single provider.

    Two operations are exposed:
    - get_authorization_url: outbound leg, returns (url, state)
    - validate_callback: exchange code → fetch profile → link account

    The state returned by get_authorization_url is NOT stored here. The caller
    keeps it with the session and must reject callbacks whose state differs
    before calling validate_callback.
    """

    def __init__(
        self,
        spec: ProviderSpec,
        config: ProviderConfig,
        store: IdentityStore,
        executor: RequestExecutor | None = None,
    ):
        """
        Initialize OAuth provider.

        Args:
            spec: Provider endpoints and conventions
            config: Client credentials, redirect URI and scopes
            store: Identity store used to link accounts
            executor: Request executor; a default one is created if omitted
        """
        if not isinstance(config, spec.config_class):
            raise ConfigurationError(f"{spec.provider_id} config ({spec.config_class.__name__})")
        self.spec = spec
        self.config = config
        self.executor = executor or RequestExecutor()
        self.token_client = TokenExchangeClient(
            token_url=spec.token_url,
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            executor=self.executor,
            credentials_in_body=spec.credentials_in_body,
            provider_id=spec.provider_id,
        )
        self.user_fetcher = ProviderUserFetcher(
            user_info_url=spec.user_info_url,
            executor=self.executor,
            id_field=spec.user_id_field,
            provider_id=spec.provider_id,
        )
        self.linker = AccountLinker(store)

    @property
    def provider_id(self) -> str:
        return self.spec.provider_id

    def get_authorization_url(self, redirect_uri: str | None = None) -> tuple[str, str]:
        """
        Generate authorization URL for OAuth flow.

        Args:
            redirect_uri: Overrides the configured redirect URI for this flow

        Returns:
            (authorization URL, state token)
        """
        state = generate_state()
        params = {
            "client_id": self.config.client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri or self.config.redirect_uri,
            "scope": join_scopes(self.spec.default_scopes, self.config.scope, self.spec.scope_delimiter) or None,
            "state": state,
            **self.spec.authorization_params(self.config),
        }
        url = build_url(self.spec.authorization_url, params)
        logger.info(f"Authorization URL issued | provider={self.provider_id}")
        return url, state

    async def _run_callback(self, code: str, redirect_uri: str | None) -> OAuthCallbackResult:
        tokens = await self.token_client.exchange(code, redirect_uri)
        provider_user = await self.user_fetcher.fetch_user(tokens.access_token)
        record = await self.linker.link(self.provider_id, provider_user.id)
        return OAuthCallbackResult(
            **dict(record),
            provider_user=provider_user,
            tokens=tokens,
        )

    async def _run_with_timeout(
        self, code: str, redirect_uri: str | None, timeout: float | None
    ) -> OAuthCallbackResult:
        if timeout is None:
            return await self._run_callback(code, redirect_uri)
        task = asyncio.ensure_future(self._run_callback(code, redirect_uri))
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        finally:
            if not task.done():
                task.cancel()
        if task in done:
            # errors raised by the steps, TimeoutError included, pass through as-is
            return task.result()
        metrics.oauth_callback(self.provider_id, "timeout")
        logger.error(f"OAuth callback timed out | provider={self.provider_id} timeout={timeout}")
        raise OAuthTimeoutError(f"{self.provider_id} callback exceeded {timeout}s")

    async def validate_callback(
        self,
        code: str,
        redirect_uri: str | None = None,
        timeout: float | None = None,
    ) -> OAuthCallbackResult:
        """
        Complete the flow for an authorization code.

        1. Exchange code for tokens
        2. Fetch user info from provider
        3. Link the external identity to a local account

        Steps run in order and the first failure aborts the flow, so an
        account is only linked once tokens and profile are both in hand.

        Args:
            code: Authorization code from the callback (state already verified by caller)
            redirect_uri: Redirect URI used on the authorization leg, if overridden
            timeout: Upper bound in seconds for the whole callback

        Raises:
            OAuthTokenError: Token exchange failed
            OAuthUserInfoError: Profile fetch failed
            OAuthLinkError: Account linking failed
            OAuthTimeoutError: ``timeout`` elapsed
        """
        try:
            result = await self._run_with_timeout(code, redirect_uri, timeout)
        except OAuthFlowError as e:
            metrics.oauth_callback(self.provider_id, e.step)
            raise

        metrics.oauth_callback(self.provider_id, "success")
        logger.info(f"OAuth callback complete | provider={self.provider_id} user_id={result.user_id}")
        return result
