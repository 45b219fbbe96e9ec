"""HTTP layer: identity, role gate and error mapping."""

import uuid

import pytest_asyncio

OWNER = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}
CAROL = {"X-User-Id": "carol"}


@pytest_asyncio.fixture
async def project(client):
    response = await client.post("/projects", json={"name": "Apollo"}, headers=OWNER)
    assert response.status_code == 201
    return response.json()


async def add(client, project_id, user_id, role, headers=OWNER):
    return await client.post(
        f"/projects/{project_id}/contributors",
        json={"user_id": user_id, "role": role},
        headers=headers,
    )


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}


async def test_missing_identity_is_401(client):
    response = await client.get("/projects")
    assert response.status_code == 401


async def test_create_project_makes_caller_owner(client, project):
    assert project["owner_id"] == "alice"
    assert project["status"] == "ACTIVE"

    response = await client.get(f"/projects/{project['id']}/contributors", headers=OWNER)

    assert response.status_code == 200
    assert [(c["user_id"], c["role"]) for c in response.json()] == [("alice", "OWNER")]


async def test_create_project_rejects_client_supplied_owner(client):
    response = await client.post(
        "/projects", json={"name": "Sneaky", "owner_id": "bob"}, headers=OWNER,
    )
    assert response.status_code == 422


async def test_stranger_is_denied_project_details(client, project):
    response = await client.get(f"/projects/{project['id']}", headers=BOB)

    assert response.status_code == 403
    assert (await client.get("/projects", headers=BOB)).json() == []


async def test_reader_can_read_but_not_write(client, project):
    await add(client, project["id"], "bob", "READ")

    assert (await client.get(f"/projects/{project['id']}", headers=BOB)).status_code == 200
    response = await client.put(f"/projects/{project['id']}", json={"name": "Hijack"}, headers=BOB)
    assert response.status_code == 403


async def test_writer_cannot_manage_contributors(client, project):
    await add(client, project["id"], "bob", "WRITE")

    response = await add(client, project["id"], "carol", "READ", headers=BOB)

    assert response.status_code == 403


async def test_admin_can_manage_contributors(client, project):
    await add(client, project["id"], "bob", "ADMIN")

    response = await add(client, project["id"], "carol", "READ", headers=BOB)

    assert response.status_code == 201
    assert response.json()["role"] == "READ"


async def test_duplicate_member_is_409(client, project):
    await add(client, project["id"], "bob", "READ")

    response = await add(client, project["id"], "bob", "WRITE")

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "CONTRIBUTOR.ALREADY_MEMBER"


async def test_owner_role_cannot_be_granted(client, project):
    response = await add(client, project["id"], "bob", "OWNER")

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "CONTRIBUTOR.INVALID_ROLE"


async def test_owner_row_is_protected(client, project):
    contributors = (await client.get(f"/projects/{project['id']}/contributors", headers=OWNER)).json()
    owner_id = contributors[0]["id"]

    update = await client.put(
        f"/projects/{project['id']}/contributors/{owner_id}/role",
        json={"role": "READ"},
        headers=OWNER,
    )
    remove = await client.delete(
        f"/projects/{project['id']}/contributors/{owner_id}", headers=OWNER,
    )

    assert update.status_code == 400
    assert update.json()["detail"]["code"] == "CONTRIBUTOR.CANNOT_MODIFY_OWNER"
    assert remove.status_code == 400
    assert remove.json()["detail"]["code"] == "CONTRIBUTOR.CANNOT_REMOVE_OWNER"


async def test_role_change_and_last_admin_guard(client, project):
    bob = (await add(client, project["id"], "bob", "WRITE")).json()

    promoted = await client.put(
        f"/projects/{project['id']}/contributors/{bob['id']}/role",
        json={"role": "ADMIN"},
        headers=OWNER,
    )
    assert promoted.status_code == 200
    assert promoted.json()["role"] == "ADMIN"

    blocked = await client.delete(f"/projects/{project['id']}/contributors/{bob['id']}", headers=OWNER)
    assert blocked.status_code == 400
    assert blocked.json()["detail"]["code"] == "CONTRIBUTOR.CANNOT_REMOVE_LAST_ADMIN"

    await add(client, project["id"], "carol", "ADMIN")
    removed = await client.delete(f"/projects/{project['id']}/contributors/{bob['id']}", headers=OWNER)
    assert removed.status_code == 204


async def test_unknown_contributor_is_404(client, project):
    response = await client.delete(
        f"/projects/{project['id']}/contributors/{uuid.uuid4()}", headers=OWNER,
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "CONTRIBUTOR.NOT_FOUND"


async def test_archive_requires_admin_and_keeps_access(client, project):
    await add(client, project["id"], "bob", "WRITE")

    denied = await client.put(f"/projects/{project['id']}/archive", headers=BOB)
    archived = await client.put(f"/projects/{project['id']}/archive", headers=OWNER)

    assert denied.status_code == 403
    assert archived.json()["status"] == "ARCHIVED"
    assert (await client.get(f"/projects/{project['id']}", headers=BOB)).status_code == 200


async def test_search_is_scoped_to_caller(client, project):
    await client.post("/projects", json={"name": "Apollo Private"}, headers=CAROL)

    response = await client.get("/projects/search", params={"query": "apollo"}, headers=OWNER)

    assert [p["name"] for p in response.json()] == ["Apollo"]


async def test_delete_project(client, project):
    response = await client.delete(f"/projects/{project['id']}", headers=OWNER)

    assert response.status_code == 204
    assert (await client.get("/projects", headers=OWNER)).json() == []


async def test_dashboard_endpoints(client, project):
    await add(client, project["id"], "bob", "READ")

    summary = (await client.get("/dashboard/summary", headers=BOB)).json()
    rows = (await client.get("/dashboard/projects", headers=BOB)).json()

    assert summary["total_projects"] == 1
    assert summary["contributors_by_role"]["READ"] == 1
    assert rows[0]["project"]["id"] == project["id"]
    assert rows[0]["user_role"] == "READ"
    assert rows[0]["contributor_count"] == 2
