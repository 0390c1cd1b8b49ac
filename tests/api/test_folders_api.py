"""Folder endpoints."""

from httpx import AsyncClient


async def test_folder_crud(client: AsyncClient, staff_headers: dict[str, str]) -> None:
    created = await client.post(
        "/api/v1/folders",
        json={"number": 1, "label": "F1", "title": "Audits 2024"},
        headers=staff_headers,
    )
    assert created.status_code == 201
    folder_id = created.json()["id"]

    updated = await client.put(
        f"/api/v1/folders/{folder_id}",
        json={"description": "Top shelf"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["description"] == "Top shelf"
    assert updated.json()["title"] == "Audits 2024"

    listing = await client.get("/api/v1/folders", headers=staff_headers)
    assert [f["label"] for f in listing.json()] == ["F1"]
    assert listing.json()[0]["document_count"] == 0

    deleted = await client.delete(f"/api/v1/folders/{folder_id}", headers=staff_headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/folders/{folder_id}", headers=staff_headers)
    assert missing.status_code == 404


async def test_duplicate_label_conflicts(
    client: AsyncClient, student_headers: dict[str, str]
) -> None:
    body = {"number": 1, "label": "F1"}
    first = await client.post("/api/v1/folders", json=body, headers=student_headers)
    second = await client.post("/api/v1/folders", json=body, headers=student_headers)
    assert first.status_code == 201
    assert second.status_code == 409


async def test_student_cannot_delete_folder(
    client: AsyncClient, student_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/v1/folders", json={"number": 1, "label": "F1"}, headers=student_headers
    )
    response = await client.delete(
        f"/api/v1/folders/{created.json()['id']}", headers=student_headers
    )
    assert response.status_code == 403


async def test_request_body_validation(
    client: AsyncClient, staff_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/folders", json={"number": 0, "label": ""}, headers=staff_headers
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"
