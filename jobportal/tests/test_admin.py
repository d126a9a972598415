from jobportal import crud, lifecycle, models
from jobportal.config import settings


def test_admin_routes_require_admin(client, make_user):
    _, worker_headers = make_user("worker")
    assert client.get("/api/admin/users").status_code == 401
    r = client.get("/api/admin/users", headers=worker_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied. Admin role required."


def test_list_users_with_filters(client, make_user):
    _, headers = make_user("admin")
    make_user("worker", city="Pune")
    make_user("worker")
    make_user("employer")

    data = client.get("/api/admin/users", params={"role": "worker"}, headers=headers).json()
    assert len(data["users"]) == 2
    assert data["pagination"]["totalUsers"] == 2

    data = client.get("/api/admin/users", params={"search": "employer"}, headers=headers).json()
    assert [u["email"] for u in data["users"]] == ["employer4@example.com"]

    data = client.get("/api/admin/users", params={"role": "all", "limit": 3}, headers=headers).json()
    assert data["pagination"]["totalUsers"] == 4
    assert data["pagination"]["totalPages"] == 2


def test_create_update_and_block_user(client, make_user):
    _, headers = make_user("admin")
    r = client.post(
        "/api/admin/users",
        json={"name": "Meera", "email": "meera@example.com", "password": "secret123", "city": "Pune"},
        headers=headers,
    )
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["role"] == "worker"
    assert user["city"] == "Pune"

    r = client.put(f"/api/admin/users/{user['id']}", json={"verified": True, "city": "Goa"}, headers=headers)
    assert r.json()["user"]["verified"] is True
    assert r.json()["user"]["city"] == "Goa"

    r = client.put(f"/api/admin/users/{user['id']}/block", headers=headers)
    assert r.json()["user"]["isBlocked"] is True
    assert r.json()["msg"] == "User blocked successfully"
    r = client.put(f"/api/admin/users/{user['id']}/block", headers=headers)
    assert r.json()["user"]["isBlocked"] is False


def test_update_unknown_user(client, make_user):
    _, headers = make_user("admin")
    assert client.put("/api/admin/users/999", json={"city": "Goa"}, headers=headers).status_code == 404


def test_delete_user_removes_stored_files(client, db_session, make_user, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    (tmp_path / "resumes").mkdir()
    (tmp_path / "resumes" / "cv.pdf").write_bytes(b"%PDF")
    _, headers = make_user("admin")
    worker, _ = make_user("worker", resume="resumes/cv.pdf", profile_photo="photos/missing.png")

    r = client.delete(f"/api/admin/users/{worker.id}", headers=headers)
    assert r.status_code == 200
    assert crud.get_user(db_session, worker.id) is None
    assert not (tmp_path / "resumes" / "cv.pdf").exists()


def test_admin_job_management(client, db_session, make_user, make_job):
    _, headers = make_user("admin")
    employer, _ = make_user("employer")
    job = make_job(employer)
    make_job(employer, title="Roofer", category="Roofing", status="closed")

    data = client.get("/api/admin/jobs", params={"status": "closed"}, headers=headers).json()
    assert [j["title"] for j in data["jobs"]] == ["Roofer"]
    data = client.get("/api/admin/jobs", params={"category": "all"}, headers=headers).json()
    assert data["pagination"]["totalJobs"] == 2

    r = client.put(f"/api/admin/jobs/{job.id}", json={"status": "reviewing"}, headers=headers)
    assert r.json()["job"]["status"] == "reviewing"
    assert client.delete(f"/api/admin/jobs/{job.id}", headers=headers).status_code == 200
    assert client.delete(f"/api/admin/jobs/{job.id}", headers=headers).status_code == 404


def test_admin_application_override_sends_no_notification(client, db_session, make_user, make_job):
    _, headers = make_user("admin")
    employer, _ = make_user("employer")
    worker, _ = make_user("worker")
    job = make_job(employer)
    application = lifecycle.apply_job(db_session, worker.id, job.id)

    data = client.get("/api/admin/applications", headers=headers).json()
    assert data["count"] == 1

    r = client.put(f"/api/admin/applications/{application.id}", json={"status": "accepted"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["application"]["status"] == "accepted"
    assert db_session.query(models.Notification).count() == 0

    r = client.put(f"/api/admin/applications/{application.id}", json={"status": "hired"}, headers=headers)
    assert r.status_code == 400

    assert client.delete(f"/api/admin/applications/{application.id}", headers=headers).status_code == 200
    assert client.delete(f"/api/admin/applications/{application.id}", headers=headers).status_code == 404


def test_deleting_worker_removes_their_applications_and_notifications(client, db_session, make_user, make_job):
    _, admin_headers = make_user("admin")
    employer, employer_headers = make_user("employer")
    worker, _ = make_user("worker")
    stays, _ = make_user("worker")
    job = make_job(employer)
    gone = lifecycle.apply_job(db_session, worker.id, job.id)
    kept = lifecycle.apply_job(db_session, stays.id, job.id)
    lifecycle.update_application_status(db_session, gone.id, "reviewed", employer.id)

    assert client.delete(f"/api/admin/users/{worker.id}", headers=admin_headers).status_code == 200

    assert crud.get_application(db_session, gone.id) is None
    assert db_session.query(models.Notification).filter_by(user_id=worker.id).count() == 0
    r = client.get("/api/applications/employer", headers=employer_headers)
    assert r.status_code == 200
    assert [a["id"] for a in r.json()["applications"]] == [kept.id]


def test_deleting_employer_keeps_snapshots_of_their_jobs(client, db_session, make_user, make_job):
    _, admin_headers = make_user("admin")
    employer, _ = make_user("employer")
    worker, worker_headers = make_user("worker")
    job = make_job(employer)
    lifecycle.apply_job(db_session, worker.id, job.id)

    assert client.delete(f"/api/admin/users/{employer.id}", headers=admin_headers).status_code == 200

    assert crud.get_job(db_session, job.id) is None
    apps = client.get("/api/applications", headers=worker_headers).json()["applications"]
    assert apps[0]["jobData"]["title"] == "Plumber"


def test_admin_creates_job_without_notifying_workers(client, db_session, make_user):
    admin, headers = make_user("admin")
    make_user("worker")
    payload = {
        "title": "Gardener",
        "description": "Weekly garden upkeep",
        "category": "Gardening",
        "city": "Pune",
        "pincode": "411001",
        "salary": 12000,
        "requirements": ["own tools"],
    }

    r = client.post("/api/admin/jobs", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    job = r.json()["job"]
    assert job["employerId"] == admin.id
    assert job["status"] == "open"
    assert job["requirements"] == ["own tools"]
    assert db_session.query(models.Notification).count() == 0
    assert [j["title"] for j in client.get("/api/jobs").json()["jobs"]] == ["Gardener"]


def test_admin_job_create_validation_and_guard(client, make_user):
    _, admin_headers = make_user("admin")
    _, employer_headers = make_user("employer")
    payload = {"title": "Gardener", "description": "Weekly", "category": "Gardening", "city": "Pune"}

    assert client.post("/api/admin/jobs", json=payload, headers=admin_headers).status_code == 400
    payload["pincode"] = "411001"
    assert client.post("/api/admin/jobs", json=payload, headers=employer_headers).status_code == 403
