"""SQLAlchemy ORM models for users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Integer, String, false, func, text, true
from sqlalchemy.orm import Mapped, mapped_column

from coursemail.db.base import Base


class User(Base):
    """
    A person who can compose messages and own signatures.

    Users are provisioned by the LMS; this service only reads them.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # IANA timezone used for date/time fields on forms
    timezone: Mapped[str] = mapped_column(
        String(64), server_default=text("'UTC'"), default="UTC", nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, server_default=true(), default=True, nullable=False
    )
    is_site_admin: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )
    # Bumped to revoke outstanding session tokens
    token_version: Mapped[int] = mapped_column(
        Integer, server_default=text("1"), default=1, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
