"""Alternate sender email lookups."""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from coursemail.db.models import AlternateEmail


def list_for_course_user(db: Session, course_id: int, user_id: int) -> list[AlternateEmail]:
    """Validated, non-deleted alternates usable by user_id in course_id.

    Includes alternates scoped to the course and those with no course scope.
    """
    return (
        db.query(AlternateEmail)
        .filter(
            AlternateEmail.user_id == user_id,
            AlternateEmail.is_validated.is_(True),
            AlternateEmail.not_deleted(),
            or_(
                AlternateEmail.course_id == course_id,
                AlternateEmail.course_id.is_(None),
            ),
        )
        .order_by(AlternateEmail.id)
        .all()
    )


def get_flat_mapping_for_course_user(db: Session, course_id: int, user_id: int) -> dict[int, str]:
    """alternate email id -> address."""
    return {alt.id: alt.email for alt in list_for_course_user(db, course_id, user_id)}
