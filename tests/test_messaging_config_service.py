"""Tests for block defaults and course-level messaging overrides."""

import pytest

from coursemail.core.config import settings
from coursemail.db.models import Course, CourseConfigOverride
from coursemail.services import messaging_config_service


def test_resolve_uses_block_defaults_without_overrides(db, test_course):
    config = messaging_config_service.resolve_course_config(db, test_course.id)

    assert config.default_message_type == settings.MESSAGING_DEFAULT_MESSAGE_TYPE
    assert config.message_types_available == settings.MESSAGING_MESSAGE_TYPES_AVAILABLE
    assert config.allow_additional_email_input is settings.MESSAGING_ALLOW_ADDITIONAL_EMAILS
    assert config.editor_options["context_course_id"] == test_course.id
    assert config.attachment_options["maxbytes"] == settings.ATTACHMENT_MAX_BYTES


def test_overrides_apply_to_one_course_only(db, test_course):
    other = Course(short_name="OTHER", full_name="Other course")
    db.add(other)
    db.flush()

    config = messaging_config_service.set_course_overrides(
        db,
        test_course.id,
        {"message_types_available": "email", "allow_mentor_copy": True},
    )

    assert config.message_types_available == "email"
    assert config.allow_mentor_copy is True
    untouched = messaging_config_service.resolve_course_config(db, other.id)
    assert untouched.message_types_available == settings.MESSAGING_MESSAGE_TYPES_AVAILABLE


def test_overrides_are_upserted(db, test_course):
    messaging_config_service.set_course_overrides(db, test_course.id, {"allow_students": True})
    messaging_config_service.set_course_overrides(db, test_course.id, {"allow_students": False})

    rows = db.query(CourseConfigOverride).filter_by(course_id=test_course.id).all()
    assert [(r.name, r.value) for r in rows] == [("allow_students", "0")]
    assert messaging_config_service.get_course_overrides(db, test_course.id) == {
        "allow_students": False
    }


@pytest.mark.parametrize(
    "overrides",
    [
        {"no_such_setting": True},
        {"allow_students": "yes"},
        {"default_message_type": "fax"},
        {"message_types_available": "both"},
    ],
)
def test_invalid_overrides_raise_and_write_nothing(db, test_course, overrides):
    with pytest.raises(ValueError):
        messaging_config_service.set_course_overrides(db, test_course.id, overrides)

    assert db.query(CourseConfigOverride).count() == 0


def test_stale_override_rows_are_ignored(db, test_course):
    db.add(CourseConfigOverride(course_id=test_course.id, name="retired_setting", value="1"))
    db.flush()

    assert messaging_config_service.get_course_overrides(db, test_course.id) == {}


def test_reset_removes_overrides(db, test_course):
    messaging_config_service.set_course_overrides(
        db, test_course.id, {"default_receipt_preference": True, "allow_mentor_copy": True}
    )

    removed = messaging_config_service.reset_course_config(db, test_course.id)

    assert removed == 2
    config = messaging_config_service.resolve_course_config(db, test_course.id)
    assert config.default_receipt_preference is settings.MESSAGING_RECEIPT_DEFAULT
