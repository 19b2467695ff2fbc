"""OAuth service exceptions.

Request-level errors (transport, provider rejection, malformed body) are raised
by the request executor. Each callback step wraps them in a flow error naming
the step that failed, keeping the original as ``cause``.
"""
from __future__ import annotations

from typing import Any

from oauthlink.core.exceptions import OAuthLinkBaseException


class OAuthProviderError(OAuthLinkBaseException):
    """Raised when OAuth provider communication fails."""

    default_code = "OAU000"


# Request executor ----------------------------------------------------------


class OAuthRequestError(OAuthProviderError):
    """Raised by the request executor for any failed outbound call."""


class OAuthTransportError(OAuthRequestError):
    """Connection-level failure: DNS, refused/reset connection, timeout."""

    default_code = "OAU100"


class OAuthTimeoutError(OAuthTransportError):
    """The provider did not answer in time."""

    default_code = "OAU101"


class OAuthProviderResponseError(OAuthRequestError):
    """Provider answered with a non-2xx status. The body is kept verbatim."""

    default_code = "OAU102"

    def __init__(self, status_code: int, body: str, url: str | None = None):
        super().__init__(
            message=f"Provider returned HTTP {status_code}",
            details={"status_code": status_code, "url": url},
        )
        self.status_code = status_code
        self.body = body
        self.url = url


class OAuthMalformedResponseError(OAuthRequestError):
    """Provider answered 2xx with a body that does not have the expected shape."""

    default_code = "OAU103"


# Flow steps ----------------------------------------------------------------


class OAuthFlowError(OAuthProviderError):
    """A callback step failed. ``cause`` holds the underlying error."""

    step = "flow"

    def __init__(self, cause: Exception, provider_id: str | None = None):
        super().__init__(
            message=f"{self.step} failed: {cause}",
            details={"step": self.step, "provider": provider_id, "cause_code": getattr(cause, "code", None)},
        )
        self.cause = cause
        self.provider_id = provider_id

    @property
    def status_code(self) -> int | None:
        return getattr(self.cause, "status_code", None)

    @property
    def body(self) -> str | None:
        return getattr(self.cause, "body", None)


class OAuthTokenError(OAuthFlowError):
    """Raised when token exchange fails."""

    default_code = "OAU200"
    step = "exchange"


class OAuthUserInfoError(OAuthFlowError):
    """Raised when fetching user info fails."""

    default_code = "OAU201"
    step = "fetch"


class OAuthLinkError(OAuthFlowError):
    """Raised when binding the external identity to a local account fails."""

    default_code = "OAU202"
    step = "link"


# Misc ----------------------------------------------------------------------


class InvalidUrlError(OAuthProviderError, ValueError):
    """Base URL cannot be used to build an authorization URL."""

    default_code = "OAU300"

    def __init__(self, url: str, reason: str = "missing scheme or host"):
        super().__init__(message=f"Invalid URL {url!r}: {reason}", details={"url": url})
        self.url = url


class ProviderNotRegisteredError(OAuthProviderError, ValueError):
    """Requested provider has not been registered with the service."""

    default_code = "OAU301"

    def __init__(self, name: str):
        super().__init__(message=f"OAuth provider '{name}' not registered", details={"provider": name})


# Identity store ------------------------------------------------------------


class LinkError(OAuthLinkBaseException):
    """Raised by identity stores when a binding cannot be resolved."""

    default_code = "LNK000"


class StoreUnavailableError(LinkError):
    """The identity store could not be reached or failed mid-operation."""

    default_code = "LNK100"

    def __init__(self, reason: str | None = None):
        message = "Identity store unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message=message, details={"reason": reason})


class ConflictingBindingError(LinkError):
    """External identity is already bound in a way the store refuses to change."""

    default_code = "LNK101"

    def __init__(self, provider_id: str, provider_user_id: str, detail: Any = None):
        super().__init__(
            message=f"Conflicting binding for {provider_id} user {provider_user_id}",
            details={"provider": provider_id, "provider_user_id": provider_user_id, "detail": detail},
        )
        self.provider_id = provider_id
        self.provider_user_id = provider_user_id
