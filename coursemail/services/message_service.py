"""Message service: draft lookups for resuming a compose session."""

from __future__ import annotations

from urllib.parse import urlencode

from sqlalchemy.orm import Session

from coursemail.core.config import settings
from coursemail.db.enums import NO_SIGNATURE_ID
from coursemail.db.models import Message
from coursemail.schemas.compose import ComposeDraft
from coursemail.utils.datetime_parsing import ensure_utc


def find_user_draft(
    db: Session,
    draft_id: int,
    user_id: int,
    course_id: int,
) -> Message | None:
    """Get an unsent, non-deleted draft owned by user_id in course_id."""
    return (
        db.query(Message)
        .filter(
            Message.id == draft_id,
            Message.user_id == user_id,
            Message.course_id == course_id,
            Message.is_draft.is_(True),
            Message.not_deleted(),
        )
        .first()
    )


def to_compose_draft(message: Message) -> ComposeDraft:
    """Project a draft row onto the read model the compose builder consumes."""
    return ComposeDraft(
        id=message.id,
        alternate_email_id=message.alternate_email_id or 0,
        subject=message.subject or "",
        body=message.body or "",
        additional_emails=[e for e in (message.additional_emails or []) if e],
        signature_id=message.signature_id or NO_SIGNATURE_ID,
        message_type=message.message_type,
        scheduled_send_at=ensure_utc(message.to_send_at),
        send_receipt=bool(message.send_receipt),
        send_to_mentors=bool(message.send_to_mentors),
        included_recipient_keys=list(message.included_entity_keys or []),
        excluded_recipient_keys=list(message.excluded_entity_keys or []),
    )


def get_create_signature_url(course_id: int) -> str:
    """Frontend URL of the signature editor, returning to the course afterwards."""
    base = settings.FRONTEND_URL.rstrip("/")
    return f"{base}/signatures?{urlencode({'courseid': course_id})}"
