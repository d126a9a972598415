def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"


def test_not_found_uses_detail_shape(client):
    r = client.get("/api/jobs/12345")
    assert r.status_code == 404
    assert r.json() == {"detail": "Job not found"}


def test_validation_errors_are_bad_requests(client):
    r = client.get("/api/jobs", params={"page": 0})
    assert r.status_code == 400
    assert isinstance(r.json()["detail"], list)
