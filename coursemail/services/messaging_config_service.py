"""Messaging configuration: block-level defaults with course-level overrides.

Block defaults come from settings. A course may override any key in
OVERRIDABLE_FIELDS; overrides are stored as text rows and coerced on read.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from coursemail.core.config import settings
from coursemail.core.structured_logging import build_log_context
from coursemail.db.enums import ALL_MESSAGE_TYPES, MessageType
from coursemail.db.models import CourseConfigOverride
from coursemail.schemas.config import CourseMessagingConfig

logger = logging.getLogger(__name__)

# field name -> value type
OVERRIDABLE_FIELDS: dict[str, type] = {
    "default_message_type": str,
    "message_types_available": str,
    "allow_additional_email_input": bool,
    "allow_mentor_copy": bool,
    "default_receipt_preference": bool,
    "allow_students": bool,
}

_MESSAGE_TYPES_AVAILABLE_VALUES = {ALL_MESSAGE_TYPES, *(t.value for t in MessageType)}


def get_block_defaults() -> dict[str, Any]:
    """Block-level messaging settings before any course override."""
    return {
        "default_message_type": settings.MESSAGING_DEFAULT_MESSAGE_TYPE,
        "message_types_available": settings.MESSAGING_MESSAGE_TYPES_AVAILABLE,
        "allow_additional_email_input": settings.MESSAGING_ALLOW_ADDITIONAL_EMAILS,
        "allow_mentor_copy": settings.MESSAGING_ALLOW_MENTOR_COPY,
        "default_receipt_preference": settings.MESSAGING_RECEIPT_DEFAULT,
        "allow_students": settings.MESSAGING_ALLOW_STUDENTS,
    }


def get_editor_options(course_id: int) -> dict[str, Any]:
    """Rich text editor constraints, passed through to the body field."""
    return {
        "context_course_id": course_id,
        "subdirs": True,
        "maxfiles": settings.EDITOR_MAX_FILES,
        "maxbytes": settings.EDITOR_MAX_BYTES,
        "accepted_types": settings.split_types(settings.EDITOR_ACCEPTED_TYPES),
        "trusttext": False,
    }


def get_attachment_options() -> dict[str, Any]:
    """Attachment constraints, passed through to the attachments field."""
    return {
        "subdirs": True,
        "maxbytes": settings.ATTACHMENT_MAX_BYTES,
        "maxfiles": settings.ATTACHMENT_MAX_FILES,
        "accepted_types": settings.split_types(settings.ATTACHMENT_ACCEPTED_TYPES),
    }


def _serialize(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _deserialize(name: str, raw: str) -> Any:
    if OVERRIDABLE_FIELDS[name] is bool:
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return raw


def _validate_override(name: str, value: Any) -> None:
    if name not in OVERRIDABLE_FIELDS:
        raise ValueError(f"Unknown messaging setting: {name}")
    expected = OVERRIDABLE_FIELDS[name]
    if not isinstance(value, expected):
        raise ValueError(f"Setting {name} must be of type {expected.__name__}")
    if name == "default_message_type" and not MessageType.has_value(value):
        raise ValueError(f"Invalid default message type: {value}")
    if name == "message_types_available" and value not in _MESSAGE_TYPES_AVAILABLE_VALUES:
        raise ValueError(f"Invalid message types available: {value}")


def get_course_overrides(db: Session, course_id: int) -> dict[str, Any]:
    """Stored overrides for a course, coerced to their value types.

    Rows whose name is no longer overridable are ignored.
    """
    rows = (
        db.query(CourseConfigOverride)
        .filter(CourseConfigOverride.course_id == course_id)
        .all()
    )
    return {
        row.name: _deserialize(row.name, row.value)
        for row in rows
        if row.name in OVERRIDABLE_FIELDS
    }


def resolve_course_config(db: Session, course_id: int) -> CourseMessagingConfig:
    """Effective configuration for a course: block defaults, then course overrides."""
    values = get_block_defaults()
    values.update(get_course_overrides(db, course_id))
    return CourseMessagingConfig(
        **values,
        editor_options=get_editor_options(course_id),
        attachment_options=get_attachment_options(),
    )


def set_course_overrides(
    db: Session,
    course_id: int,
    overrides: dict[str, Any],
) -> CourseMessagingConfig:
    """
    Upsert course-level overrides and return the resulting configuration.

    Raises:
        ValueError: unknown setting name or invalid value (nothing is written)
    """
    for name, value in overrides.items():
        _validate_override(name, value)

    existing = {
        row.name: row
        for row in db.query(CourseConfigOverride)
        .filter(CourseConfigOverride.course_id == course_id)
        .all()
    }
    for name, value in overrides.items():
        row = existing.get(name)
        if row:
            row.value = _serialize(value)
        else:
            db.add(CourseConfigOverride(course_id=course_id, name=name, value=_serialize(value)))
    db.commit()

    logger.info(
        "Course messaging overrides updated: %s",
        sorted(overrides),
        extra=build_log_context(course_id=course_id),
    )
    return resolve_course_config(db, course_id)


def reset_course_config(db: Session, course_id: int) -> int:
    """Drop every override for a course so block defaults apply. Returns rows removed."""
    removed = (
        db.query(CourseConfigOverride)
        .filter(CourseConfigOverride.course_id == course_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info(
        "Course messaging overrides reset",
        extra=build_log_context(course_id=course_id),
    )
    return removed
