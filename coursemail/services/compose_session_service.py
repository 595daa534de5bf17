"""Compose session builder.

``build_session`` turns an actor, a course, the course's messaging config,
the course directory and an optional draft into a ``ComposeSessionView``:
every compose-form field with its visibility, options and default. It reads
nothing but its arguments, so identical inputs (including ``now``) give an
identical view.

``assemble_session`` gathers those inputs from the database collaborators.
``validate_submission`` checks a submitted form and returns field -> message.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from coursemail.core.strings import get_string
from coursemail.core.structured_logging import build_log_context
from coursemail.db.enums import (
    ALL_MESSAGE_TYPES,
    NO_ALTERNATE_SENDER_ID,
    NO_SIGNATURE_ID,
    NOREPLY_SENDER_ID,
    MessageType,
)
from coursemail.db.models import Course, Message, User
from coursemail.schemas.compose import (
    ComposeActor,
    ComposeCourse,
    ComposeDraft,
    ComposeField,
    ComposeSessionView,
    ComposeSubmission,
    CourseDirectory,
    FieldKind,
    FieldOption,
    SignatureOption,
)
from coursemail.schemas.config import CourseMessagingConfig
from coursemail.services import (
    course_directory_service,
    message_service,
    messaging_config_service,
    permission_service,
    signature_service,
)
from coursemail.utils.datetime_parsing import ensure_utc, rebuild_from_components, resolve_timezone
from coursemail.utils.normalization import split_email_list

logger = logging.getLogger(__name__)

SEND_AT_STEP_MINUTES = 15

# Placeholders the body may contain; rendered at delivery time
USER_SUBSTITUTION_CODES = [
    "firstname",
    "middlename",
    "lastname",
    "fullname",
    "alternatename",
    "email",
]
COURSE_SUBSTITUTION_CODES = [
    "coursefullname",
    "courseshortname",
    "courseidnumber",
    "coursesummary",
    "coursestartdate",
    "courseenddate",
    "courselink",
]

# =============================================================================
# Field helpers
# =============================================================================

def _hidden(name: str, value) -> ComposeField:
    return ComposeField(
        name=name,
        kind=FieldKind.HIDDEN,
        visible=False,
        editable=False,
        default=value,
    )


def _yes_no_options() -> list[FieldOption]:
    return [
        FieldOption(value=True, label=get_string("yes")),
        FieldOption(value=False, label=get_string("no")),
    ]


def substitution_codes() -> list[str]:
    return [f"[:{code}:]" for code in USER_SUBSTITUTION_CODES + COURSE_SUBSTITUTION_CODES]


# =============================================================================
# Fields
# =============================================================================

def _sender_field(
    actor: ComposeActor,
    directory: CourseDirectory,
    draft: ComposeDraft | None,
) -> ComposeField:
    if not actor.can_select_alternate:
        return _hidden("from_email_id", NO_ALTERNATE_SENDER_ID)

    options = [
        FieldOption(value=alt_id, label=address)
        for alt_id, address in directory.alternate_emails.items()
    ]
    options.append(FieldOption(value=NOREPLY_SENDER_ID, label=directory.noreply_address))
    return ComposeField(
        name="from_email_id",
        kind=FieldKind.SELECT,
        label=get_string("from"),
        options=options,
        default=draft.alternate_email_id if draft else NO_ALTERNATE_SENDER_ID,
    )


def recipient_options(directory: CourseDirectory) -> list[FieldOption]:
    """Merged role/group/user options keyed "<kind>_<id>".

    Role and group labels carry their kind, e.g. "Student (Role)".
    """
    merged: dict[str, str] = {}
    for entities in (directory.roles, directory.groups, directory.users):
        for entity in entities:
            if entity.kind.value == "user":
                label = entity.display_name
            else:
                label = f"{entity.display_name} ({entity.kind.value.capitalize()})"
            merged[entity.key] = label
    return [FieldOption(value=key, label=label) for key, label in merged.items()]


def _recipient_fields(
    directory: CourseDirectory,
    draft: ComposeDraft | None,
) -> list[ComposeField]:
    # Included and excluded may overlap; recipient expansion decides precedence.
    options = recipient_options(directory)
    return [
        ComposeField(
            name="included_entity_ids",
            kind=FieldKind.AUTOCOMPLETE,
            label=get_string("included_ids_label"),
            options=options,
            default=list(draft.included_recipient_keys) if draft else [],
            settings={
                "multiple": True,
                "noselectionstring": get_string("no_included_recipients"),
            },
        ),
        ComposeField(
            name="excluded_entity_ids",
            kind=FieldKind.AUTOCOMPLETE,
            label=get_string("excluded_ids_label"),
            options=options,
            default=list(draft.excluded_recipient_keys) if draft else [],
            settings={
                "multiple": True,
                "noselectionstring": get_string("no_excluded_recipients"),
            },
        ),
    ]


def _subject_field(draft: ComposeDraft | None) -> ComposeField:
    return ComposeField(
        name="subject",
        kind=FieldKind.TEXT,
        label=get_string("subject"),
        default=draft.subject if draft else "",
    )


def _additional_emails_field(
    config: CourseMessagingConfig,
    draft: ComposeDraft | None,
) -> ComposeField:
    if not config.allow_additional_email_input:
        return _hidden("additional_emails", "")

    return ComposeField(
        name="additional_emails",
        kind=FieldKind.TEXT,
        label=get_string("additional_emails"),
        default=", ".join(draft.additional_emails) if draft else "",
    )


def _body_field(config: CourseMessagingConfig, draft: ComposeDraft | None) -> ComposeField:
    return ComposeField(
        name="message_editor",
        kind=FieldKind.EDITOR,
        label=get_string("body"),
        default=draft.body if draft else "",
        settings={"editor_options": config.editor_options},
    )


def _attachments_field(config: CourseMessagingConfig) -> ComposeField:
    return ComposeField(
        name="attachments",
        kind=FieldKind.FILEMANAGER,
        label=get_string("attachments"),
        settings={"attachment_options": config.attachment_options},
    )


def _signature_field(
    actor: ComposeActor,
    course: ComposeCourse,
    draft: ComposeDraft | None,
) -> ComposeField:
    if not actor.signatures:
        # Nothing to choose from; point the user at the signature editor instead
        return ComposeField(
            name="signature_id",
            kind=FieldKind.HIDDEN,
            label=get_string("signature"),
            visible=False,
            editable=False,
            default=NO_SIGNATURE_ID,
            settings={
                "call_to_action": {
                    "message": get_string("no_signatures_create", link=get_string("create_new")),
                    "label": get_string("create_new"),
                    "url": course.create_signature_url,
                }
            },
        )

    options = [FieldOption(value=NO_SIGNATURE_ID, label=get_string("none"))]
    default_id = NO_SIGNATURE_ID
    for signature in actor.signatures:
        label = signature.title
        if signature.is_default:
            label += get_string("default_suffix")
            default_id = signature.id
        options.append(FieldOption(value=signature.id, label=label))

    return ComposeField(
        name="signature_id",
        kind=FieldKind.SELECT,
        label=get_string("signature"),
        options=options,
        default=draft.signature_id if draft else default_id,
    )


def _message_type_field(
    config: CourseMessagingConfig,
    draft: ComposeDraft | None,
) -> ComposeField:
    if config.message_types_available != ALL_MESSAGE_TYPES:
        return _hidden("message_type", config.default_message_type)

    return ComposeField(
        name="message_type",
        kind=FieldKind.SELECT,
        label=get_string("select_message_type"),
        options=[
            FieldOption(
                value=MessageType.MESSAGE.value,
                label=get_string("message_type_message"),
            ),
            FieldOption(
                value=MessageType.EMAIL.value,
                label=get_string("message_type_email"),
            ),
        ],
        default=draft.message_type if draft else config.default_message_type,
    )


def _send_at_field(
    actor: ComposeActor,
    draft: ComposeDraft | None,
    now: datetime,
) -> ComposeField:
    tz = resolve_timezone(actor.timezone)
    current_year = now.astimezone(tz).year
    scheduled = draft is not None and draft.is_scheduled_in_future(now)

    return ComposeField(
        name="to_send_at",
        kind=FieldKind.DATE_TIME,
        label=get_string("send_at"),
        required=scheduled,
        default=rebuild_from_components(draft.scheduled_send_at, tz) if scheduled else None,
        settings={
            "start_year": current_year,
            "stop_year": current_year + 1,
            "step_minutes": SEND_AT_STEP_MINUTES,
            "timezone": tz.key,
            "optional": not scheduled,
        },
    )


def _receipt_field(config: CourseMessagingConfig, draft: ComposeDraft | None) -> ComposeField:
    return ComposeField(
        name="receipt",
        kind=FieldKind.RADIO,
        label=get_string("receipt"),
        options=_yes_no_options(),
        default=draft.send_receipt if draft else config.default_receipt_preference,
    )


def _mentor_copy_field(
    actor: ComposeActor,
    config: CourseMessagingConfig,
    draft: ComposeDraft | None,
) -> ComposeField:
    if not (actor.can_send_unrestricted and config.allow_mentor_copy):
        return _hidden("mentor_copy", False)

    return ComposeField(
        name="mentor_copy",
        kind=FieldKind.RADIO,
        label=get_string("mentor_copy"),
        options=_yes_no_options(),
        default=draft.send_to_mentors if draft else False,
    )


# =============================================================================
# Builder
# =============================================================================

def build_session(
    actor: ComposeActor,
    course: ComposeCourse,
    config: CourseMessagingConfig,
    directory: CourseDirectory,
    draft: ComposeDraft | None = None,
    *,
    now: datetime | None = None,
) -> ComposeSessionView:
    """Describe the compose form for actor in course, resuming draft if given."""
    now = ensure_utc(now) if now else datetime.now(timezone.utc)

    fields = [
        _sender_field(actor, directory, draft),
        *_recipient_fields(directory, draft),
        _subject_field(draft),
        _additional_emails_field(config, draft),
        _body_field(config, draft),
        _attachments_field(config),
        _signature_field(actor, course, draft),
        _message_type_field(config, draft),
        _send_at_field(actor, draft, now),
        _receipt_field(config, draft),
        _mentor_copy_field(actor, config, draft),
    ]
    return ComposeSessionView(
        course_id=course.id,
        draft_id=draft.id if draft else None,
        fields=fields,
        substitution_codes=substitution_codes(),
    )


def build_actor(db: Session, user: User, course_id: int) -> ComposeActor:
    """Resolve the actor's capabilities and signature options for course_id."""
    return ComposeActor(
        user_id=user.id,
        timezone=user.timezone,
        can_select_alternate=permission_service.user_has_capability(
            db, "allowalternate", user, course_id
        ),
        can_send_unrestricted=permission_service.user_can_send_unrestricted(
            db, user, course_id
        ),
        signatures=[
            SignatureOption(id=sig.id, title=sig.title, is_default=sig.is_default)
            for sig in signature_service.list_active(db, user.id)
        ],
    )


def assemble_session(
    db: Session,
    user: User,
    course: Course,
    draft: Message | None = None,
    *,
    now: datetime | None = None,
) -> ComposeSessionView:
    """Gather collaborator state for user in course and build the session view.

    ``draft`` must already be verified as the user's draft in this course.
    """
    view = build_session(
        actor=build_actor(db, user, course.id),
        course=ComposeCourse(
            id=course.id,
            short_name=course.short_name,
            full_name=course.full_name,
            create_signature_url=message_service.get_create_signature_url(course.id),
        ),
        config=messaging_config_service.resolve_course_config(db, course.id),
        directory=course_directory_service.get_course_directory(db, course.id, user),
        draft=message_service.to_compose_draft(draft) if draft else None,
        now=now,
    )
    logger.debug(
        "Compose session built",
        extra=build_log_context(
            user_id=user.id,
            course_id=course.id,
            draft_id=draft.id if draft else None,
        ),
    )
    return view


# =============================================================================
# Validation
# =============================================================================

def is_valid_email(address: str) -> bool:
    """Bare addr-spec only; display-name forms like "Bob<bob@x.org>" are rejected."""
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_submission(submission: ComposeSubmission) -> dict[str, str]:
    """
    Check a submitted compose form.

    Returns field name -> message; empty when valid. Included and excluded
    recipients may overlap.
    """
    errors: dict[str, str] = {}

    included = [key for key in submission.included_entity_ids if key and key.strip()]
    if not included:
        errors["included_entity_ids"] = get_string("no_included_recipients_validation")

    tokens = split_email_list(submission.additional_emails)
    if any(not is_valid_email(token) for token in tokens):
        errors["additional_emails"] = get_string("invalid_additional_emails_validation")

    return errors
