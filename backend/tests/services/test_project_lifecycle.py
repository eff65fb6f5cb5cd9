"""Project Lifecycle — create, list, update, cascade delete and membership over HTTP.

Invariants:
    - Owner comes from the principal, never from the payload
    - Deleting a project removes every task that references it
    - AddMember twice leaves one membership and answers 409
    - RemoveMember of a non-member succeeds and changes nothing
"""

from uuid import uuid4


async def test_create_sets_owner_from_principal(client, alice, bob, as_user):
    res = await client.post(
        "/api/projects",
        json={"title": "Launch Week", "owner": str(bob.id), "members": [str(bob.id)]},
        headers=as_user(alice),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert data["ownerId"] == str(alice.id)
    assert data["owner"]["name"] == "Alice"
    assert data["members"] == []
    assert data["status"] == "active"
    assert data["color"] == "#3B82F6"
    assert body["tasksCreated"] == 0


async def test_create_with_embedded_tasks(client, alice, as_user):
    res = await client.post(
        "/api/projects",
        json={
            "title": "Launch Week",
            "tasks": [
                {"title": "Draft copy"},
                {"title": "Ship it", "status": "done"},
            ],
        },
        headers=as_user(alice),
    )
    body = res.json()
    assert body["tasksCreated"] == 2
    assert body["tasksFailed"] == 0
    assert body["data"]["taskCount"] == 2

    tasks = (await client.get(
        "/api/tasks", params={"project": body["data"]["id"]}, headers=as_user(alice),
    )).json()["data"]
    by_title = {t["title"]: t for t in tasks}
    assert by_title["Draft copy"]["stage"] == "planning"
    assert by_title["Draft copy"]["status"] == "todo"
    assert by_title["Draft copy"]["createdById"] == str(alice.id)
    assert by_title["Ship it"]["completedAt"] is not None


async def test_embedded_task_with_bad_status_is_counted_as_failed(client, alice, as_user):
    res = await client.post(
        "/api/projects",
        json={
            "title": "Launch Week",
            "tasks": [{"title": "Good"}, {"title": "Bad", "status": "archived"}],
        },
        headers=as_user(alice),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["tasksCreated"] == 1
    assert body["tasksFailed"] == 1
    assert body["data"]["taskCount"] == 1


async def test_invalid_embedded_drafts_fail_alone(client, alice, as_user):
    res = await client.post(
        "/api/projects",
        json={
            "title": "Launch Week",
            "tasks": [
                {"title": "Good"},
                {"title": "Bad", "priority": "urgent"},
                {"title": ""},
                {"title": "Wordy", "description": "x" * 501},
            ],
        },
        headers=as_user(alice),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["tasksCreated"] == 1
    assert body["tasksFailed"] == 3
    assert body["data"]["taskCount"] == 1

    listed = (await client.get("/api/projects", headers=as_user(alice))).json()
    assert listed["count"] == 1


async def test_create_without_title_is_400(client, alice, as_user):
    res = await client.post("/api/projects", json={}, headers=as_user(alice))
    assert res.status_code == 400
    assert res.json()["success"] is False


async def test_get_missing_project_is_404(client, alice, as_user):
    res = await client.get(f"/api/projects/{uuid4()}", headers=as_user(alice))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_search_is_case_insensitive_substring(client, alice, as_user, create_project):
    await create_project(alice, "Launch Week")
    await create_project(alice, "Budget", description="Prepare the launch budget")
    await create_project(alice, "Retro")

    res = await client.get(
        "/api/projects", params={"search": "launch"}, headers=as_user(alice),
    )
    titles = sorted(p["title"] for p in res.json()["data"])
    assert titles == ["Budget", "Launch Week"]


async def test_search_treats_wildcards_literally(client, alice, as_user, create_project):
    await create_project(alice, "50% off sale")
    await create_project(alice, "Regular sale")

    res = await client.get(
        "/api/projects", params={"search": "%"}, headers=as_user(alice),
    )
    assert [p["title"] for p in res.json()["data"]] == ["50% off sale"]


async def test_list_pagination_envelope(client, alice, as_user, create_project):
    for i in range(3):
        await create_project(alice, f"Project {i}")

    res = await client.get(
        "/api/projects", params={"page": 2, "limit": 2, "sort": "title"},
        headers=as_user(alice),
    )
    body = res.json()
    assert [p["title"] for p in body["data"]] == ["Project 2"]
    assert body["pagination"] == {
        "currentPage": 2, "totalPages": 2, "totalProjects": 3, "limit": 2,
    }


async def test_list_filters_by_status(client, alice, as_user, create_project):
    await create_project(alice, "Live")
    await create_project(alice, "Parked", status="on-hold")

    res = await client.get(
        "/api/projects", params={"status": "on-hold"}, headers=as_user(alice),
    )
    assert [p["title"] for p in res.json()["data"]] == ["Parked"]


async def test_unknown_sort_field_is_400(client, alice, as_user):
    res = await client.get(
        "/api/projects", params={"sort": "-secret"}, headers=as_user(alice),
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"] == {"field": "sort"}


async def test_limit_above_maximum_is_400(client, alice, as_user):
    res = await client.get(
        "/api/projects", params={"limit": 1000}, headers=as_user(alice),
    )
    assert res.status_code == 400


async def test_owner_can_update(client, alice, as_user, create_project):
    project = await create_project(alice)
    res = await client.put(
        f"/api/projects/{project['id']}",
        json={"title": "Launch Month", "priority": "high"},
        headers=as_user(alice),
    )
    assert res.status_code == 200
    assert res.json()["data"]["title"] == "Launch Month"
    assert res.json()["data"]["priority"] == "high"


async def test_non_owner_cannot_update(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    res = await client.put(
        f"/api/projects/{project['id']}", json={"title": "Mine now"},
        headers=as_user(bob),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "FORBIDDEN"


async def test_admin_can_update_any_project(client, admin, alice, as_user, create_project):
    project = await create_project(alice)
    res = await client.put(
        f"/api/projects/{project['id']}", json={"status": "completed"},
        headers=as_user(admin),
    )
    assert res.status_code == 200
    assert res.json()["data"]["status"] == "completed"


async def test_update_cannot_change_owner(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    res = await client.put(
        f"/api/projects/{project['id']}", json={"owner": str(bob.id)},
        headers=as_user(alice),
    )
    assert res.status_code == 400
    got = await client.get(f"/api/projects/{project['id']}", headers=as_user(alice))
    assert got.json()["data"]["ownerId"] == str(alice.id)


async def test_only_admin_transfers_ownership(client, admin, alice, bob, as_user, create_project):
    project = await create_project(alice)
    url = f"/api/projects/{project['id']}/owner"

    denied = await client.patch(url, json={"userId": str(bob.id)}, headers=as_user(alice))
    assert denied.status_code == 403

    res = await client.patch(url, json={"userId": str(bob.id)}, headers=as_user(admin))
    assert res.status_code == 200
    assert res.json()["data"]["ownerId"] == str(bob.id)


async def test_transfer_to_inactive_user_is_404(
    client, admin, alice, inactive_user, as_user, create_project,
):
    project = await create_project(alice)
    res = await client.patch(
        f"/api/projects/{project['id']}/owner",
        json={"userId": str(inactive_user.id)}, headers=as_user(admin),
    )
    assert res.status_code == 404


async def test_delete_cascades_to_tasks(client, alice, as_user, create_project, create_task):
    project = await create_project(alice)
    other = await create_project(alice, "Other")
    await create_task(alice, project["id"], "One")
    await create_task(alice, project["id"], "Two")
    survivor = await create_task(alice, other["id"], "Keep me")

    res = await client.delete(f"/api/projects/{project['id']}", headers=as_user(alice))
    assert res.status_code == 200
    assert res.json()["data"] == {}
    assert res.json()["deletedTasks"] == 2

    remaining = (await client.get(
        "/api/tasks", params={"project": project["id"]}, headers=as_user(alice),
    )).json()["data"]
    assert remaining == []
    kept = await client.get(f"/api/tasks/{survivor['id']}", headers=as_user(alice))
    assert kept.status_code == 200


async def test_non_owner_cannot_delete(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    res = await client.delete(f"/api/projects/{project['id']}", headers=as_user(bob))
    assert res.status_code == 403


async def test_add_member_twice_conflicts(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    url = f"/api/projects/{project['id']}/members"

    first = await client.post(url, json={"userId": str(bob.id)}, headers=as_user(alice))
    assert first.status_code == 200
    second = await client.post(url, json={"userId": str(bob.id)}, headers=as_user(alice))
    assert second.status_code == 409

    members = (await client.get(
        f"/api/projects/{project['id']}", headers=as_user(alice),
    )).json()["data"]["members"]
    assert [m["id"] for m in members] == [str(bob.id)]


async def test_re_adding_deactivated_member_conflicts(
    client, admin, alice, bob, as_user, create_project,
):
    project = await create_project(alice)
    url = f"/api/projects/{project['id']}/members"
    await client.post(url, json={"userId": str(bob.id)}, headers=as_user(alice))
    await client.delete(f"/api/users/{bob.id}", headers=as_user(admin))

    res = await client.post(url, json={"userId": str(bob.id)}, headers=as_user(alice))
    assert res.status_code == 409


async def test_add_inactive_member_is_404(
    client, alice, inactive_user, as_user, create_project,
):
    project = await create_project(alice)
    res = await client.post(
        f"/api/projects/{project['id']}/members",
        json={"userId": str(inactive_user.id)}, headers=as_user(alice),
    )
    assert res.status_code == 404


async def test_non_owner_cannot_add_members(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    res = await client.post(
        f"/api/projects/{project['id']}/members",
        json={"userId": str(bob.id)}, headers=as_user(bob),
    )
    assert res.status_code == 403


async def test_remove_non_member_is_noop(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    res = await client.delete(
        f"/api/projects/{project['id']}/members/{bob.id}", headers=as_user(alice),
    )
    assert res.status_code == 200
    assert res.json()["data"]["members"] == []


async def test_remove_member(client, alice, bob, as_user, create_project):
    project = await create_project(alice)
    await client.post(
        f"/api/projects/{project['id']}/members",
        json={"userId": str(bob.id)}, headers=as_user(alice),
    )
    res = await client.delete(
        f"/api/projects/{project['id']}/members/{bob.id}", headers=as_user(alice),
    )
    assert res.json()["data"]["members"] == []


async def test_my_projects_includes_owned_and_member_of(
    client, alice, bob, admin, as_user, create_project,
):
    owned = await create_project(bob, "Bob's own")
    joined = await create_project(alice, "Alice's")
    await create_project(admin, "Not Bob's")
    await client.post(
        f"/api/projects/{joined['id']}/members",
        json={"userId": str(bob.id)}, headers=as_user(alice),
    )

    res = await client.get("/api/projects/my-projects", headers=as_user(bob))
    ids = {p["id"] for p in res.json()["data"]}
    assert ids == {owned["id"], joined["id"]}


async def test_stats_counts_by_status(client, alice, as_user, create_project):
    await create_project(alice, "A")
    await create_project(alice, "B")
    await create_project(alice, "C", status="completed")

    res = await client.get("/api/projects/stats", headers=as_user(alice))
    assert res.json()["data"] == {
        "total": 3, "byStatus": {"active": 2, "completed": 1},
    }


async def test_project_routes_require_principal(client):
    res = await client.get("/api/projects")
    assert res.status_code == 401
