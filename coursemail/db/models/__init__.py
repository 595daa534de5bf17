"""SQLAlchemy ORM models."""

from coursemail.db.models.auth import User
from coursemail.db.models.courses import (
    Course,
    CourseConfigOverride,
    CourseGroup,
    Enrollment,
    GroupMember,
    Role,
)
from coursemail.db.models.messages import AlternateEmail, Message
from coursemail.db.models.signatures import Signature

__all__ = [
    "AlternateEmail",
    "Course",
    "CourseConfigOverride",
    "CourseGroup",
    "Enrollment",
    "GroupMember",
    "Message",
    "Role",
    "Signature",
    "User",
]
