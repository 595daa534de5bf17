"""Tests for compose session, validation and course config endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from coursemail.core.deps import COOKIE_NAME
from coursemail.core.security import create_session_token
from coursemail.db.models import AlternateEmail, Message
from coursemail.services import signature_service


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_compose_session_for_editing_teacher(authed_client: AsyncClient, db, test_user, test_course):
    db.add(AlternateEmail(user_id=test_user.id, course_id=test_course.id, email="dept@example.com", is_validated=True))
    db.commit()
    signature_service.create_signature(db, test_user.id, "Work", "<p>A</p>")

    response = await authed_client.get(f"/courses/{test_course.id}/compose")

    assert response.status_code == 200
    data = response.json()
    fields = {f["name"]: f for f in data["fields"]}
    assert data["course_id"] == test_course.id
    assert data["draft_id"] is None
    assert fields["from_email_id"]["visible"] is True
    assert [o["label"] for o in fields["from_email_id"]["options"]][0] == "dept@example.com"
    assert fields["signature_id"]["kind"] == "select"
    assert [o["label"] for o in fields["included_entity_ids"]["options"]] == [
        "Teacher (Role)",
        "Terry Teacher",
    ]


@pytest.mark.asyncio
async def test_compose_session_unknown_course(authed_client: AsyncClient):
    response = await authed_client.get("/courses/9999/compose")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_compose_session_forbidden_for_student(client: AsyncClient, db, make_user, test_course, roles):
    student = make_user("Sam Student", course=test_course, role=roles["student"])
    db.commit()
    token = create_session_token(user_id=student.id, token_version=student.token_version)
    client.cookies.set(COOKIE_NAME, token)

    response = await client.get(f"/courses/{test_course.id}/compose")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_compose_session_resumes_draft(authed_client: AsyncClient, db, test_user, test_course):
    scheduled = (datetime.now(timezone.utc) + timedelta(days=2)).replace(microsecond=0)
    draft = Message(
        user_id=test_user.id,
        course_id=test_course.id,
        subject="Midterm",
        body="<p>Bring a pencil</p>",
        additional_emails=[],
        included_entity_keys=["user_1"],
        excluded_entity_keys=[],
        to_send_at=scheduled,
    )
    db.add(draft)
    db.commit()

    response = await authed_client.get(
        f"/courses/{test_course.id}/compose", params={"draft_id": draft.id}
    )

    assert response.status_code == 200
    data = response.json()
    fields = {f["name"]: f for f in data["fields"]}
    assert data["draft_id"] == draft.id
    assert fields["subject"]["default"] == "Midterm"
    assert fields["included_entity_ids"]["default"] == ["user_1"]
    assert fields["to_send_at"]["required"] is True
    assert datetime.fromisoformat(fields["to_send_at"]["default"]) == scheduled


@pytest.mark.asyncio
async def test_compose_session_foreign_draft_not_found(authed_client: AsyncClient, db, make_user, test_course):
    other = make_user("Olive Other")
    draft = Message(
        user_id=other.id,
        course_id=test_course.id,
        additional_emails=[],
        included_entity_keys=[],
        excluded_entity_keys=[],
    )
    db.add(draft)
    db.commit()

    response = await authed_client.get(
        f"/courses/{test_course.id}/compose", params={"draft_id": draft.id}
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_validate_reports_field_errors(authed_client: AsyncClient, test_course):
    response = await authed_client.post(
        f"/courses/{test_course.id}/compose/validate",
        json={"included_entity_ids": [], "additional_emails": "a@example.com, nope"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert set(data["errors"]) == {"included_entity_ids", "additional_emails"}


@pytest.mark.asyncio
async def test_validate_accepts_good_submission(authed_client: AsyncClient, test_course):
    response = await authed_client.post(
        f"/courses/{test_course.id}/compose/validate",
        json={"included_entity_ids": ["role_2"], "excluded_entity_ids": ["role_2"]},
    )

    assert response.json() == {"valid": True, "errors": {}}


# =============================================================================
# Course config
# =============================================================================

@pytest.mark.asyncio
async def test_config_update_hides_message_type(authed_client: AsyncClient, test_course):
    response = await authed_client.put(
        f"/courses/{test_course.id}/config",
        json={"message_types_available": "message", "default_message_type": "message"},
    )

    assert response.status_code == 200
    assert response.json()["message_types_available"] == "message"

    session = (await authed_client.get(f"/courses/{test_course.id}/compose")).json()
    field = next(f for f in session["fields"] if f["name"] == "message_type")
    assert field["kind"] == "hidden"
    assert field["default"] == "message"


@pytest.mark.asyncio
async def test_config_update_rejects_bad_value(authed_client: AsyncClient, test_course):
    response = await authed_client.put(
        f"/courses/{test_course.id}/config", json={"default_message_type": "fax"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_config_update_requires_canconfig(client: AsyncClient, db, make_user, test_course, roles):
    teacher = make_user("Nell", course=test_course, role=roles["teacher"])
    db.commit()
    token = create_session_token(user_id=teacher.id, token_version=teacher.token_version)
    client.cookies.set(COOKIE_NAME, token)

    response = await client.put(
        f"/courses/{test_course.id}/config",
        json={"allow_mentor_copy": True},
        headers={"X-Requested-With": "XMLHttpRequest"},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_config_reset(authed_client: AsyncClient, test_course):
    await authed_client.put(
        f"/courses/{test_course.id}/config", json={"allow_mentor_copy": True}
    )

    response = await authed_client.delete(f"/courses/{test_course.id}/config")

    assert response.status_code == 204
    config = (await authed_client.get(f"/courses/{test_course.id}/config")).json()
    assert config["allow_mentor_copy"] is False
