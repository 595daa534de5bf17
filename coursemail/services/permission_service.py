"""Permission service: course capability checks.

Resolution: site admin -> everything; otherwise the union of the role
defaults of the user's active enrollments in the course.
Missing capability: defaults to False (deny).
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from coursemail.core.permissions import (
    CAPABILITY_REGISTRY,
    get_role_default_capabilities,
    is_valid_capability,
)
from coursemail.db.models import Enrollment, Role, User
from coursemail.services import messaging_config_service

# Roles that may send only when a course turns "allow students" on
STUDENT_ROLES = {"student"}


def get_course_role_shortnames(db: Session, user_id: int, course_id: int) -> set[str]:
    rows = (
        db.query(Role.shortname)
        .join(Enrollment, Enrollment.role_id == Role.id)
        .filter(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
            Enrollment.is_active.is_(True),
        )
        .all()
    )
    return {row[0] for row in rows}


def get_effective_capabilities(db: Session, user: User, course_id: int) -> set[str]:
    """All capabilities user holds in course_id."""
    if user.is_site_admin:
        return set(CAPABILITY_REGISTRY.keys())

    effective: set[str] = set()
    for shortname in get_course_role_shortnames(db, user.id, course_id):
        effective |= get_role_default_capabilities(shortname)
    return effective


def user_has_capability(db: Session, capability: str, user: User, course_id: int) -> bool:
    """
    Check a single capability.

    Raises:
        ValueError: capability is not registered
    """
    if not is_valid_capability(capability):
        raise ValueError(f"Unknown capability: {capability}")
    return capability in get_effective_capabilities(db, user, course_id)


def user_can_send_unrestricted(db: Session, user: User, course_id: int) -> bool:
    """Can send through a hard-set capability, not through the student allowance."""
    return user_has_capability(db, "cansend", user, course_id)


def user_can_send(db: Session, user: User, course_id: int) -> bool:
    """Can compose in this course at all (capability, or students allowed by config)."""
    if user_can_send_unrestricted(db, user, course_id):
        return True

    roles = get_course_role_shortnames(db, user.id, course_id)
    if not roles & STUDENT_ROLES:
        return False
    config = messaging_config_service.resolve_course_config(db, course_id)
    return config.allow_students
