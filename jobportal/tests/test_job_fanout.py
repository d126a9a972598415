from jobportal import crud, lifecycle, models
from jobportal.events import EventDispatcher, JobPosted
from jobportal.notifications import notify_workers_of_job
from jobportal.schemas import JobCreate

JOB = {
    "title": "Carpenter",
    "description": "Build custom wardrobes",
    "category": "Carpentry",
    "city": "Nagpur",
    "pincode": "440001",
    "salary": 25000,
    "requirements": ["own tools"],
}


def _job_notifications(db, job_id):
    return (
        db.query(models.Notification)
        .filter(models.Notification.type == "job_posted", models.Notification.related_id == job_id)
        .all()
    )


def test_posting_a_job_notifies_every_worker(client, db_session, make_user):
    _, employer_headers = make_user("employer")
    workers = [make_user("worker")[0] for _ in range(3)]
    make_user("admin")

    r = client.post("/api/jobs", json=JOB, headers=employer_headers)
    assert r.status_code == 201, r.text
    job_id = r.json()["job"]["id"]

    notes = _job_notifications(db_session, job_id)
    assert len(notes) == 3
    assert sorted(n.user_id for n in notes) == sorted(w.id for w in workers)
    for n in notes:
        assert n.priority == "low"
        assert n.title == "New Job Posted"
        assert n.related_model == "Job"
        assert n.message == 'A new job "Carpenter" has been posted in Nagpur. Check it out!'


def test_only_employers_can_post(client, db_session, make_user):
    _, worker_headers = make_user("worker")
    r = client.post("/api/jobs", json=JOB, headers=worker_headers)
    assert r.status_code == 403
    assert db_session.query(models.Job).count() == 0


def test_redelivered_event_does_not_duplicate(db_session, session_factory, make_user, make_job):
    employer, _ = make_user("employer")
    for _ in range(2):
        make_user("worker")
    job = make_job(employer)
    event = JobPosted(job_id=job.id, employer_id=employer.id, title=job.title, city=job.city)

    assert notify_workers_of_job(session_factory, event) == 2
    assert notify_workers_of_job(session_factory, event) == 0
    assert len(_job_notifications(db_session, job.id)) == 2


def test_fanout_writes_in_batches(db_session, session_factory, make_user, make_job):
    employer, _ = make_user("employer")
    workers = [make_user("worker")[0] for _ in range(5)]
    job = make_job(employer)
    event = JobPosted(job_id=job.id, employer_id=employer.id, title=job.title, city=job.city)

    assert notify_workers_of_job(session_factory, event, batch_size=2) == 5
    assert {n.user_id for n in _job_notifications(db_session, job.id)} == {w.id for w in workers}


def test_one_failed_write_does_not_stop_the_others(db_session, session_factory, make_user, make_job, monkeypatch):
    employer, _ = make_user("employer")
    workers = [make_user("worker")[0] for _ in range(3)]
    job = make_job(employer)
    unlucky = workers[1].id
    original = crud.add_notification

    def flaky(db, **fields):
        if fields["user_id"] == unlucky:
            raise RuntimeError("write failed")
        return original(db, **fields)

    monkeypatch.setattr(crud, "add_notification", flaky)
    event = JobPosted(job_id=job.id, employer_id=employer.id, title=job.title, city=job.city)

    assert notify_workers_of_job(session_factory, event) == 2
    assert {n.user_id for n in _job_notifications(db_session, job.id)} == {workers[0].id, workers[2].id}

    # a later redelivery fills the gap
    monkeypatch.setattr(crud, "add_notification", original)
    assert notify_workers_of_job(session_factory, event) == 1
    assert len(_job_notifications(db_session, job.id)) == 3


def test_job_creation_survives_a_failed_fanout(client, db_session, make_user, monkeypatch):
    _, employer_headers = make_user("employer")
    make_user("worker")

    def broken(db):
        raise RuntimeError("user store unavailable")

    monkeypatch.setattr(crud, "list_worker_ids", broken)

    r = client.post("/api/jobs", json=JOB, headers=employer_headers)
    assert r.status_code == 201
    assert db_session.query(models.Job).count() == 1
    assert db_session.query(models.Notification).count() == 0


def test_dispatcher_runs_inline_without_background_tasks(db_session, session_factory, make_user, make_job):
    employer, _ = make_user("employer")
    worker, _ = make_user("worker")
    job = make_job(employer)

    EventDispatcher(session_factory).publish(
        JobPosted(job_id=job.id, employer_id=employer.id, title=job.title, city=job.city)
    )
    assert [n.user_id for n in _job_notifications(db_session, job.id)] == [worker.id]


def test_post_job_takes_the_create_payload(db_session, session_factory, make_user):
    employer, _ = make_user("employer")
    worker, _ = make_user("worker")
    payload = JobCreate.model_validate({**JOB, "status": "reviewing"})

    job = lifecycle.post_job(db_session, EventDispatcher(session_factory), employer.id, payload)

    assert job.employer_id == employer.id
    assert job.status == "reviewing"
    assert job.requirements == ["own tools"]
    assert [n.user_id for n in _job_notifications(db_session, job.id)] == [worker.id]
