"""Pydantic schemas for course messaging configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CourseMessagingConfig(BaseModel):
    """
    Effective messaging configuration for one course.

    Block-level defaults with any course-level overrides applied.
    editor_options and attachment_options are opaque bundles handed to the
    rendering layer unchanged.
    """
    model_config = ConfigDict(frozen=True)

    default_message_type: str
    message_types_available: str
    allow_additional_email_input: bool
    allow_mentor_copy: bool
    default_receipt_preference: bool
    allow_students: bool = False
    editor_options: dict[str, Any] = Field(default_factory=dict)
    attachment_options: dict[str, Any] = Field(default_factory=dict)


class CourseConfigUpdate(BaseModel):
    """Course-level overrides. Omitted fields keep their current value."""
    default_message_type: str | None = Field(None, pattern="^(message|email)$")
    message_types_available: str | None = Field(None, pattern="^(all|message|email)$")
    allow_additional_email_input: bool | None = None
    allow_mentor_copy: bool | None = None
    default_receipt_preference: bool | None = None
    allow_students: bool | None = None
