"""API Routes — health probe and dump analysis over HTTP.

Invariants:
    - POST /api/v1/analysis accepts every dump shape the loader accepts
    - Unrecognizable dump roots map to 400 with the structured error envelope
    - The analysis endpoint never writes artifacts to disk
    - Missing or non-JSON bodies map to 400 VALIDATION_ERROR with field details
    - Unexpected failures answer INTERNAL_ERROR without leaking the exception text
"""

from builders import agency_dump
from clusterlint import __version__
from clusterlint.api.routes import analysis


async def test_health_check(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "service": "clusterlint", "version": __version__}


async def test_analysis_of_healthy_dump(client, healthy_dump):
    res = await client.post("/api/v1/analysis", json=healthy_dump)
    assert res.status_code == 200
    body = res.json()
    assert body["infected"] is False
    assert len(body["checks"]) == 18
    assert body["artifacts"] == []


async def test_analysis_accepts_list_form(client):
    res = await client.post("/api/v1/analysis", json=[agency_dump(current_coordinators=["C9"])])
    assert res.status_code == 200
    body = res.json()
    assert body["infected"] is True
    assert body["findings"]["zombieCoordinators"] == ["C9"]
    [artifact] = body["artifacts"]
    assert artifact["filename"] == "zombie-coordinators.json"
    assert artifact["task"] == "remove-zombie-coordinators"


async def test_analysis_does_not_write_files(client, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    res = await client.post("/api/v1/analysis", json=agency_dump(current_coordinators=["C9"]))
    assert res.status_code == 200
    assert list(tmp_path.iterdir()) == []


async def test_unrecognizable_root_is_400(client):
    res = await client.post("/api/v1/analysis", json=42)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "SNAPSHOT_FORMAT_ERROR"
    assert error["category"] == "validation"


async def test_empty_list_is_400(client):
    res = await client.post("/api/v1/analysis", json=[])
    assert res.status_code == 400


async def test_missing_body_is_400_with_details(client):
    res = await client.post("/api/v1/analysis")
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["category"] == "validation"
    assert error["details"][0]["field"] == "body"


async def test_non_json_body_is_400(client):
    res = await client.post(
        "/api/v1/analysis", content=b"{not json", headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_unexpected_failure_hides_internals(unraised_client, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr(analysis, "analyze_payload", explode)
    res = await unraised_client.post("/api/v1/analysis", json={})
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["category"] == "internal"
    assert "secret" not in res.text
