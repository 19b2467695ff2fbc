"""Binding of external identities to local accounts."""
import inspect
import logging
from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from oauthlink.models.schemas import LinkedAuthRecord

from .exceptions import LinkError, OAuthLinkError

logger = logging.getLogger(__name__)


@runtime_checkable
class IdentityStore(Protocol):
    """
    Storage that owns local accounts and their provider bindings.

    ``connect`` returns the account bound to ``(provider_id, provider_user_id)``,
    creating the account and binding atomically when absent. Implementations
    may be sync or async and report failures as ``LinkError`` subclasses.
    """

    def connect(
        self, provider_id: str, provider_user_id: str
    ) -> LinkedAuthRecord | Awaitable[LinkedAuthRecord]: ...


class AccountLinker:
    def __init__(self, store: IdentityStore):
        self.store = store

    async def link(self, provider_id: str, provider_user_id: str) -> LinkedAuthRecord:
        """
        Resolve the local account for an external identity.

        Raises:
            OAuthLinkError: Store reported a LinkError (unavailable, conflict)
        """
        try:
            record = self.store.connect(provider_id, provider_user_id)
            if inspect.isawaitable(record):
                record = await record
        except LinkError as e:
            logger.error(f"Account link failed | provider={provider_id} provider_user_id={provider_user_id} error={e.code}")
            raise OAuthLinkError(e, provider_id=provider_id) from e

        if record.is_new_user:
            logger.info(f"New account linked | provider={provider_id} user_id={record.user_id}")
        else:
            logger.info(f"Existing account resolved | provider={provider_id} user_id={record.user_id}")
        return record
