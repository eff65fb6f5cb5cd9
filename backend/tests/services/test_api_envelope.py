"""API Envelope — health probes and the shared failure shape."""


async def test_liveness(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_uses_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy"}


async def test_validation_failure_envelope(client, alice, as_user):
    res = await client.post(
        "/api/projects", json={"title": "x" * 101}, headers=as_user(alice),
    )
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert "title" in body["message"]
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"][0]["field"] == "title"


async def test_malformed_path_id_is_400(client, alice, as_user):
    res = await client.get("/api/tasks/not-a-uuid", headers=as_user(alice))
    assert res.status_code == 400


async def test_forbidden_envelope(client, alice, as_user):
    res = await client.post("/api/tasks/maintenance/purge-orphans", headers=as_user(alice))
    body = res.json()
    assert body == {
        "success": False,
        "message": body["error"]["message"],
        "error": {
            "code": "FORBIDDEN",
            "message": "Not authorized to purge this tasks",
            "category": "authorization",
            "severity": "warning",
            "timestamp": body["error"]["timestamp"],
        },
    }
