"""AI usage ledger model."""

from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin, PortableUUID


class AiGenerationType(str, Enum):
    """Kind of AI generation billed on the ledger."""

    COPY_GENERATION = "COPY_GENERATION"
    STRATEGY_BRAINSTORM = "STRATEGY_BRAINSTORM"
    IMAGE_GENERATION = "IMAGE_GENERATION"


class AiLog(Base, CreatedAtMixin):
    """Append-only token usage record.

    A permanent ledger: never soft-deleted and never filtered by the
    soft-delete middleware.
    """

    __tablename__ = "ai_logs"

    id: Mapped[UUID] = mapped_column(PortableUUID(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    # Plain column, no FK: ledger rows outlive their workspace
    workspace_id: Mapped[UUID] = mapped_column(PortableUUID(), nullable=False)

    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)

    input_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    output_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_ai_log_workspace", "workspace_id"),
        Index("idx_ai_log_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<AiLog(id={self.id}, type={self.type}, total_tokens={self.total_tokens})>"
