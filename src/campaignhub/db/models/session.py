"""User session model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin, PortableUUID


class UserSession(Base, CreatedAtMixin):
    """Refresh-token session issued by the authentication collaborator.

    Session rows are removed physically on logout or expiry.
    """

    __tablename__ = "user_sessions"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_user_session_user", "user_id"),)

    def __repr__(self) -> str:
        return f"<UserSession(id={self.id}, user={self.user_id})>"
