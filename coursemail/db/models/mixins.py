"""Composable persistence concerns shared by user-owned records."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


class OwnedByUserMixin:
    """Record belongs to exactly one user."""

    @declared_attr
    def user_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id


class SoftDeleteMixin:
    """Record is retired by stamping ``deleted_at`` instead of being removed."""

    deleted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, when: datetime | None = None) -> None:
        self.deleted_at = when or datetime.now(timezone.utc)

    @classmethod
    def not_deleted(cls):
        """Filter clause selecting rows that are still active."""
        return cls.deleted_at.is_(None)
