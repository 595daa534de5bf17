"""Pydantic schemas for API request/response models."""

from coursemail.schemas.compose import (
    ComposeActor,
    ComposeCourse,
    ComposeDraft,
    ComposeField,
    ComposeSessionView,
    ComposeSubmission,
    ComposeValidationResult,
    CourseDirectory,
    FieldKind,
    FieldOption,
    RecipientEntity,
    SignatureOption,
)
from coursemail.schemas.config import CourseConfigUpdate, CourseMessagingConfig
from coursemail.schemas.signature import (
    SignatureCreate,
    SignatureErrorResponse,
    SignatureListItem,
    SignatureRead,
    SignatureUpdate,
)

__all__ = [
    "ComposeActor",
    "ComposeCourse",
    "ComposeDraft",
    "ComposeField",
    "ComposeSessionView",
    "ComposeSubmission",
    "ComposeValidationResult",
    "CourseDirectory",
    "FieldKind",
    "FieldOption",
    "RecipientEntity",
    "SignatureOption",
    "CourseConfigUpdate",
    "CourseMessagingConfig",
    "SignatureCreate",
    "SignatureErrorResponse",
    "SignatureListItem",
    "SignatureRead",
    "SignatureUpdate",
]
