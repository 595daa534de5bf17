"""Tests for the /me/signatures endpoints."""

import pytest
from httpx import AsyncClient

from coursemail.services import signature_service


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient):
    response = await client.get("/me/signatures")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_first_signature_is_default(authed_client: AsyncClient):
    response = await authed_client.post(
        "/me/signatures", json={"title": "Work", "body": "<p>Regards</p>"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Work"
    assert data["is_default"] is True
    assert data["display_title"] == "Work (default)"


@pytest.mark.asyncio
async def test_create_without_csrf_header_rejected(authed_client: AsyncClient):
    response = await authed_client.post(
        "/me/signatures",
        json={"title": "Work", "body": "<p>A</p>"},
        headers={"X-Requested-With": ""},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_blank_title_returns_field_errors(authed_client: AsyncClient):
    response = await authed_client.post(
        "/me/signatures", json={"title": "  ", "body": "<p>A</p>"}
    )

    assert response.status_code == 422
    assert response.json() == {"errors": {"title": "A signature title is required."}}


@pytest.mark.asyncio
async def test_create_duplicate_title_conflicts(authed_client: AsyncClient):
    await authed_client.post("/me/signatures", json={"title": "Work", "body": "<p>A</p>"})

    response = await authed_client.post(
        "/me/signatures", json={"title": "Work", "body": "<p>B</p>"}
    )

    assert response.status_code == 409
    assert "title" in response.json()["errors"]


@pytest.mark.asyncio
async def test_list_marks_default(authed_client: AsyncClient):
    await authed_client.post("/me/signatures", json={"title": "Work", "body": "<p>A</p>"})
    await authed_client.post("/me/signatures", json={"title": "Home", "body": "<p>B</p>"})

    response = await authed_client.get("/me/signatures")

    assert response.status_code == 200
    assert [item["display_title"] for item in response.json()] == ["Work (default)", "Home"]


@pytest.mark.asyncio
async def test_patch_moves_default(authed_client: AsyncClient):
    first = (await authed_client.post("/me/signatures", json={"title": "Work", "body": "<p>A</p>"})).json()
    second = (await authed_client.post("/me/signatures", json={"title": "Home", "body": "<p>B</p>"})).json()

    response = await authed_client.patch(
        f"/me/signatures/{second['id']}", json={"is_default": True}
    )

    assert response.status_code == 200
    assert response.json()["is_default"] is True
    first_now = (await authed_client.get(f"/me/signatures/{first['id']}")).json()
    assert first_now["is_default"] is False


@pytest.mark.asyncio
async def test_other_users_signature_is_not_found(authed_client: AsyncClient, db, make_user):
    other = make_user("Olive Other")
    sig = signature_service.create_signature(db, other.id, "Private", "<p>Mine</p>")

    assert (await authed_client.get(f"/me/signatures/{sig.id}")).status_code == 404
    assert (
        await authed_client.patch(f"/me/signatures/{sig.id}", json={"title": "Stolen"})
    ).status_code == 404
    assert (await authed_client.delete(f"/me/signatures/{sig.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_default_promotes_sibling(authed_client: AsyncClient):
    first = (await authed_client.post("/me/signatures", json={"title": "Work", "body": "<p>A</p>"})).json()
    second = (await authed_client.post("/me/signatures", json={"title": "Home", "body": "<p>B</p>"})).json()

    response = await authed_client.delete(f"/me/signatures/{first['id']}")

    assert response.status_code == 204
    assert (await authed_client.get(f"/me/signatures/{first['id']}")).status_code == 404
    listed = (await authed_client.get("/me/signatures")).json()
    assert listed == [{"id": second["id"], "display_title": "Home (default)"}]
