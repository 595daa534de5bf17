"""Pydantic schemas for compose sessions.

Everything here is an immutable value object: the builder's inputs
(actor, course, directory, draft) and its output (the session view).
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from coursemail.db.enums import NO_ALTERNATE_SENDER_ID, NO_SIGNATURE_ID, MessageType, RecipientKind
from coursemail.utils.datetime_parsing import ensure_utc


# =============================================================================
# Builder inputs
# =============================================================================

class RecipientEntity(BaseModel):
    """A role, group or user that can be included in or excluded from an audience."""
    model_config = ConfigDict(frozen=True)

    kind: RecipientKind
    id: int
    display_name: str

    @property
    def key(self) -> str:
        return f"{self.kind.value}_{self.id}"


class CourseDirectory(BaseModel):
    """Course participants visible to the actor, plus the actor's alternate senders."""
    model_config = ConfigDict(frozen=True)

    roles: list[RecipientEntity] = Field(default_factory=list)
    groups: list[RecipientEntity] = Field(default_factory=list)
    users: list[RecipientEntity] = Field(default_factory=list)
    # alternate_emails.id -> address
    alternate_emails: dict[int, str] = Field(default_factory=dict)
    # Label of the synthetic no-reply sender option
    noreply_address: str


class SignatureOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    is_default: bool = False


class ComposeActor(BaseModel):
    """The composing user with capabilities already resolved."""
    model_config = ConfigDict(frozen=True)

    user_id: int
    timezone: str = "UTC"
    can_select_alternate: bool = False
    can_send_unrestricted: bool = False
    signatures: list[SignatureOption] = Field(default_factory=list)


class ComposeCourse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    short_name: str
    full_name: str
    # Where a user without signatures is sent to create one
    create_signature_url: str


class ComposeDraft(BaseModel):
    """Read model of a saved draft message."""
    model_config = ConfigDict(frozen=True)

    id: int
    alternate_email_id: int = NO_ALTERNATE_SENDER_ID
    subject: str = ""
    body: str = ""
    additional_emails: list[str] = Field(default_factory=list)
    signature_id: int = NO_SIGNATURE_ID
    message_type: str = MessageType.EMAIL.value
    scheduled_send_at: datetime | None = None
    send_receipt: bool = False
    send_to_mentors: bool = False
    included_recipient_keys: list[str] = Field(default_factory=list)
    excluded_recipient_keys: list[str] = Field(default_factory=list)

    @field_validator("scheduled_send_at")
    @classmethod
    def scheduled_as_utc(cls, value: datetime | None) -> datetime | None:
        # Naive values are taken as UTC so comparisons with an aware now work
        return ensure_utc(value)

    def is_scheduled_in_future(self, now: datetime) -> bool:
        return self.scheduled_send_at is not None and self.scheduled_send_at > now


# =============================================================================
# Session view
# =============================================================================

class FieldKind(str, Enum):
    SELECT = "select"
    AUTOCOMPLETE = "autocomplete"
    TEXT = "text"
    EDITOR = "editor"
    FILEMANAGER = "filemanager"
    DATE_TIME = "date_time"
    RADIO = "radio"
    HIDDEN = "hidden"


class FieldOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: bool | int | str
    label: str


class ComposeField(BaseModel):
    """
    One compose-form field.

    Hidden fields are submitted with their fixed ``default`` and are never
    editable. ``settings`` carries kind-specific extras (editor options,
    date range, call-to-action) for the rendering layer.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind
    label: str = ""
    visible: bool = True
    editable: bool = True
    required: bool = False
    options: list[FieldOption] = Field(default_factory=list)
    default: Any = None
    settings: dict[str, Any] = Field(default_factory=dict)

    def option_values(self) -> list[bool | int | str]:
        return [option.value for option in self.options]


class ComposeSessionView(BaseModel):
    """Complete description of a compose form for one actor in one course."""
    model_config = ConfigDict(frozen=True)

    course_id: int
    draft_id: int | None = None
    fields: list[ComposeField]
    substitution_codes: list[str] = Field(default_factory=list)

    def field(self, name: str) -> ComposeField:
        for item in self.fields:
            if item.name == name:
                return item
        raise KeyError(name)


# =============================================================================
# Submission
# =============================================================================

class ComposeSubmission(BaseModel):
    """Values submitted from a compose form."""
    from_email_id: int = NO_ALTERNATE_SENDER_ID
    included_entity_ids: list[str] = Field(default_factory=list)
    excluded_entity_ids: list[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""
    additional_emails: str = ""
    signature_id: int = NO_SIGNATURE_ID
    message_type: str | None = None
    to_send_at: datetime | None = None
    receipt: bool = False
    mentor_copy: bool = False


class ComposeValidationResult(BaseModel):
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
