"""Course directory: roles, groups and users selectable as recipients."""

from __future__ import annotations

from sqlalchemy.orm import Session

from coursemail.core.config import settings
from coursemail.db.enums import RecipientKind
from coursemail.db.models import Course, CourseGroup, Enrollment, Role, User
from coursemail.schemas.compose import CourseDirectory, RecipientEntity
from coursemail.services import alternate_email_service


def get_course(db: Session, course_id: int) -> Course | None:
    return db.query(Course).filter(Course.id == course_id).first()


def list_course_roles(db: Session, course_id: int) -> list[RecipientEntity]:
    """Roles held by at least one active participant, ordered by role id."""
    roles = (
        db.query(Role)
        .join(Enrollment, Enrollment.role_id == Role.id)
        .filter(
            Enrollment.course_id == course_id,
            Enrollment.is_active.is_(True),
        )
        .distinct()
        .order_by(Role.id)
        .all()
    )
    return [
        RecipientEntity(kind=RecipientKind.ROLE, id=role.id, display_name=role.name)
        for role in roles
    ]


def list_course_groups(db: Session, course_id: int) -> list[RecipientEntity]:
    groups = (
        db.query(CourseGroup)
        .filter(CourseGroup.course_id == course_id)
        .order_by(CourseGroup.name, CourseGroup.id)
        .all()
    )
    return [
        RecipientEntity(kind=RecipientKind.GROUP, id=group.id, display_name=group.name)
        for group in groups
    ]


def list_course_users(db: Session, course_id: int) -> list[RecipientEntity]:
    """Active users with an active enrollment, each listed once, by name."""
    users = (
        db.query(User)
        .join(Enrollment, Enrollment.user_id == User.id)
        .filter(
            Enrollment.course_id == course_id,
            Enrollment.is_active.is_(True),
            User.is_active.is_(True),
        )
        .distinct()
        .order_by(User.display_name, User.id)
        .all()
    )
    return [
        RecipientEntity(kind=RecipientKind.USER, id=user.id, display_name=user.display_name)
        for user in users
    ]


def get_course_directory(db: Session, course_id: int, user: User) -> CourseDirectory:
    """Everything the compose form needs to know about the course and the actor's senders."""
    return CourseDirectory(
        roles=list_course_roles(db, course_id),
        groups=list_course_groups(db, course_id),
        users=list_course_users(db, course_id),
        alternate_emails=alternate_email_service.get_flat_mapping_for_course_user(
            db, course_id, user.id
        ),
        noreply_address=settings.NOREPLY_ADDRESS,
    )
