"""SQLAlchemy ORM model for user signatures."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Index, Integer, String, Text, false, func, text
from sqlalchemy.orm import Mapped, mapped_column

from coursemail.core.strings import get_string
from coursemail.db.base import Base
from coursemail.db.models.mixins import OwnedByUserMixin, SoftDeleteMixin


class Signature(OwnedByUserMixin, SoftDeleteMixin, Base):
    """
    A reusable block of rich content a user appends to outgoing messages.

    Among a user's non-deleted signatures exactly one is the default
    (none when the user has no signatures). signature_service maintains
    this after every write; the partial index below only guards titles.
    """

    __tablename__ = "signatures"
    __table_args__ = (
        # Titles are unique per owner among active signatures only
        Index(
            "uq_signature_user_title_active",
            "user_id",
            "title",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index("idx_signatures_user_default", "user_id", "is_default"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(125), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    is_default: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )

    @property
    def display_title(self) -> str:
        """Title as shown in selection lists, marking the default."""
        if self.is_default:
            return f"{self.title}{get_string('default_suffix')}"
        return self.title
