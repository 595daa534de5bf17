"""SQLAlchemy ORM models for messages (drafts) and alternate sender emails."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    false,
    func,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column

from coursemail.db.base import Base
from coursemail.db.enums import MessageType
from coursemail.db.models.mixins import OwnedByUserMixin, SoftDeleteMixin


class AlternateEmail(OwnedByUserMixin, SoftDeleteMixin, Base):
    """
    An extra sender address a user may compose from.

    Scoped to one course, or to every course when course_id is NULL.
    Only validated addresses are offered on the compose form.
    """

    __tablename__ = "alternate_emails"
    __table_args__ = (
        Index("idx_alternate_emails_user_course", "user_id", "course_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    is_validated: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class Message(OwnedByUserMixin, SoftDeleteMixin, Base):
    """
    A composed message. Rows with is_draft = TRUE seed compose sessions.

    Recipient selections are stored as "<kind>_<id>" keys, exactly as the
    compose form submits them; expansion into addresses happens elsewhere.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_user_course", "user_id", "course_id", "is_draft"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    # 0 = user's own address, -1 = no-reply, otherwise alternate_emails.id
    alternate_email_id: Mapped[int] = mapped_column(
        Integer, server_default=text("0"), default=0, nullable=False
    )
    subject: Mapped[str] = mapped_column(String(255), server_default=text("''"), default="", nullable=False)
    body: Mapped[str] = mapped_column(Text, server_default=text("''"), default="", nullable=False)
    additional_emails: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    # 0 = no signature
    signature_id: Mapped[int] = mapped_column(
        Integer, server_default=text("0"), default=0, nullable=False
    )
    message_type: Mapped[str] = mapped_column(
        String(20),
        server_default=text(f"'{MessageType.EMAIL.value}'"),
        default=MessageType.EMAIL.value,
        nullable=False,
    )
    to_send_at: Mapped[datetime | None] = mapped_column(nullable=True)
    send_receipt: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )
    send_to_mentors: Mapped[bool] = mapped_column(
        Boolean, server_default=false(), default=False, nullable=False
    )
    is_draft: Mapped[bool] = mapped_column(
        Boolean, server_default=true(), default=True, nullable=False
    )
    included_entity_keys: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    excluded_entity_keys: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=False
    )
