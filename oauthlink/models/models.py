from __future__ import annotations

import datetime as dt

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from oauthlink.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class User(Base):
    id: Mapped[int] = mapped_column(primary_key=True)
    last_login: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    linked_accounts: Mapped[list["LinkedAccount"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )


class LinkedAccount(Base):
    """
    Binding of an external provider identity to a local user.

    One row per (provider_id, provider_user_id); the pair is globally unique.
    No tokens are stored here.
    """

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)
    provider_id: Mapped[str] = mapped_column(String(50))
    provider_user_id: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    user: Mapped[User] = relationship(back_populates="linked_accounts")

    __table_args__ = (
        UniqueConstraint("provider_id", "provider_user_id", name="uq_linked_account_provider_user"),
    )

    def __repr__(self) -> str:
        return (
            f"<LinkedAccount(id={self.id}, user_id={self.user_id}, "
            f"provider={self.provider_id})>"
        )
