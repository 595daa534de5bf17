"""Tests for the course directory and alternate sender lookups."""

from coursemail.db.enums import RecipientKind
from coursemail.db.models import AlternateEmail, Course, CourseGroup, Enrollment, GroupMember
from coursemail.services import course_directory_service


def test_directory_lists_roles_groups_and_active_users(db, test_user, test_course, roles, make_user):
    make_user("Ada Lovelace", course=test_course, role=roles["student"])
    inactive = make_user("Ghost", course=test_course, role=roles["student"])
    inactive.is_active = False
    lab_b = CourseGroup(course_id=test_course.id, name="Lab B")
    lab_b.members.append(GroupMember(user_id=test_user.id))
    db.add(lab_b)
    db.add(CourseGroup(course_id=test_course.id, name="Lab A"))
    db.flush()

    directory = course_directory_service.get_course_directory(db, test_course.id, test_user)

    assert [r.display_name for r in directory.roles] == ["Teacher", "Student"]
    assert all(r.kind == RecipientKind.ROLE for r in directory.roles)
    assert [g.display_name for g in directory.groups] == ["Lab A", "Lab B"]
    assert [u.display_name for u in directory.users] == ["Ada Lovelace", "Terry Teacher"]


def test_user_with_two_roles_listed_once(db, test_user, test_course, roles):
    db.add(Enrollment(course_id=test_course.id, user_id=test_user.id, role_id=roles["teacher"].id))
    db.flush()

    users = course_directory_service.list_course_users(db, test_course.id)

    assert [u.id for u in users] == [test_user.id]


def test_alternate_emails_only_validated_active_and_in_scope(db, test_user, test_course):
    other = Course(short_name="OTHER", full_name="Other")
    db.add(other)
    db.flush()
    keep_course = AlternateEmail(user_id=test_user.id, course_id=test_course.id, email="dept@example.com", is_validated=True)
    keep_global = AlternateEmail(user_id=test_user.id, course_id=None, email="me@example.org", is_validated=True)
    unvalidated = AlternateEmail(user_id=test_user.id, course_id=test_course.id, email="new@example.com")
    wrong_course = AlternateEmail(user_id=test_user.id, course_id=other.id, email="other@example.com", is_validated=True)
    deleted = AlternateEmail(user_id=test_user.id, course_id=test_course.id, email="old@example.com", is_validated=True)
    deleted.mark_deleted()
    db.add_all([keep_course, keep_global, unvalidated, wrong_course, deleted])
    db.flush()

    directory = course_directory_service.get_course_directory(db, test_course.id, test_user)

    assert directory.alternate_emails == {
        keep_course.id: "dept@example.com",
        keep_global.id: "me@example.org",
    }


def test_get_course_missing_returns_none(db):
    assert course_directory_service.get_course(db, 404) is None
