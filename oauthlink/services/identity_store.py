"""SQLAlchemy-backed identity store.

Implements the ``connect`` contract used by the account linker: return the user
bound to an external identity, or create user + binding in one transaction.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from oauthlink.db.session import SessionLocal, session_scope
from oauthlink.models.models import LinkedAccount, User, utcnow
from oauthlink.models.schemas import LinkedAuthRecord
from oauthlink.services.oauth.exceptions import ConflictingBindingError, StoreUnavailableError

logger = logging.getLogger(__name__)


class SQLAlchemyIdentityStore:
    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self.session_factory = session_factory

    @staticmethod
    def _find(db: Session, provider_id: str, provider_user_id: str) -> LinkedAccount | None:
        return db.query(LinkedAccount).filter(
            LinkedAccount.provider_id == provider_id,
            LinkedAccount.provider_user_id == provider_user_id,
        ).first()

    def _connect(self, provider_id: str, provider_user_id: str) -> LinkedAuthRecord:
        with session_scope(self.session_factory) as db:
            link = self._find(db, provider_id, provider_user_id)
            if link:
                link.user.last_login = utcnow()
                return LinkedAuthRecord(
                    user_id=link.user_id,
                    provider_id=provider_id,
                    provider_user_id=provider_user_id,
                    is_new_user=False,
                )

            user = User(last_login=utcnow())
            db.add(user)
            db.flush()
            db.add(LinkedAccount(user_id=user.id, provider_id=provider_id, provider_user_id=provider_user_id))
            db.flush()
            logger.info(f"Created user {user.id} for {provider_id} identity")
            return LinkedAuthRecord(
                user_id=user.id,
                provider_id=provider_id,
                provider_user_id=provider_user_id,
                is_new_user=True,
            )

    def connect(self, provider_id: str, provider_user_id: str) -> LinkedAuthRecord:
        """
        Get the user bound to an external identity, creating one if absent.

        Raises:
            ConflictingBindingError: Binding could not be created nor found
            StoreUnavailableError: Database unreachable or failed mid-transaction
        """
        try:
            return self._connect(provider_id, provider_user_id)
        except IntegrityError as e:
            # A concurrent callback may have created the binding first
            logger.warning(f"Binding insert conflicted for {provider_id}; re-reading")
            try:
                with session_scope(self.session_factory) as db:
                    link = self._find(db, provider_id, provider_user_id)
                    if link:
                        return LinkedAuthRecord(
                            user_id=link.user_id,
                            provider_id=provider_id,
                            provider_user_id=provider_user_id,
                            is_new_user=False,
                        )
            except SQLAlchemyError as retry_error:
                raise StoreUnavailableError(retry_error.__class__.__name__) from retry_error
            raise ConflictingBindingError(provider_id, provider_user_id, detail=str(e.orig)) from e
        except SQLAlchemyError as e:
            logger.error(f"Identity store failure: {e.__class__.__name__}")
            raise StoreUnavailableError(e.__class__.__name__) from e

    def get_linked_accounts(self, user_id: int) -> list[LinkedAuthRecord]:
        with session_scope(self.session_factory) as db:
            links = db.query(LinkedAccount).filter(LinkedAccount.user_id == user_id).all()
            return [
                LinkedAuthRecord(
                    user_id=link.user_id,
                    provider_id=link.provider_id,
                    provider_user_id=link.provider_user_id,
                )
                for link in links
            ]
