from jobportal import models
from jobportal.notifications import emit


def _seed(db, user_id, n, **kwargs):
    for i in range(n):
        emit(db, models.NotificationType.SYSTEM_ALERT, f"Alert {i}", f"Message {i}", user_id, **kwargs)


def test_list_is_newest_first_with_pagination(client, db_session, make_user):
    worker, headers = make_user("worker")
    _seed(db_session, worker.id, 5)

    r = client.get("/api/notifications", params={"limit": 2}, headers=headers)
    assert r.status_code == 200
    data = r.json()
    assert [n["title"] for n in data["notifications"]] == ["Alert 4", "Alert 3"]
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 3,
        "totalNotifications": 5,
        "hasNext": True,
        "hasPrev": False,
    }
    assert data["unreadCount"] == 5

    last = client.get("/api/notifications", params={"limit": 2, "page": 3}, headers=headers).json()
    assert [n["title"] for n in last["notifications"]] == ["Alert 0"]
    assert last["pagination"]["hasNext"] is False
    assert last["pagination"]["hasPrev"] is True


def test_notification_fields(client, db_session, make_user):
    worker, headers = make_user("worker")
    emit(
        db_session,
        models.NotificationType.APPLICATION_STATUS_UPDATE,
        "Application Accepted",
        "Congratulations!",
        worker.id,
        9,
        models.RelatedKind.APPLICATION,
        models.Priority.HIGH,
    )

    n = client.get("/api/notifications", headers=headers).json()["notifications"][0]
    assert n["type"] == "application_status_update"
    assert n["recipient"] == "user"
    assert n["userId"] == worker.id
    assert n["relatedId"] == 9
    assert n["relatedModel"] == "Application"
    assert n["priority"] == "high"
    assert n["isRead"] is False


def test_users_only_see_their_own(client, db_session, make_user):
    worker, headers = make_user("worker")
    other, _ = make_user("worker")
    _seed(db_session, other.id, 3)

    data = client.get("/api/notifications", headers=headers).json()
    assert data["notifications"] == []
    assert data["unreadCount"] == 0


def test_mark_read_and_filter(client, db_session, make_user):
    worker, headers = make_user("worker")
    _seed(db_session, worker.id, 3)
    first = client.get("/api/notifications", headers=headers).json()["notifications"][0]

    r = client.put(f"/api/notifications/{first['id']}/read", headers=headers)
    assert r.status_code == 200
    assert r.json()["notification"]["isRead"] is True

    unread = client.get("/api/notifications", params={"isRead": "false"}, headers=headers).json()
    assert len(unread["notifications"]) == 2
    assert unread["unreadCount"] == 2
    read = client.get("/api/notifications", params={"isRead": "true"}, headers=headers).json()
    assert [n["id"] for n in read["notifications"]] == [first["id"]]


def test_cannot_mark_someone_elses_notification(client, db_session, make_user):
    _, headers = make_user("worker")
    other, _ = make_user("worker")
    _seed(db_session, other.id, 1)
    foreign = db_session.query(models.Notification).one()

    r = client.put(f"/api/notifications/{foreign.id}/read", headers=headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Notification not found"


def test_mark_all_read(client, db_session, make_user):
    worker, headers = make_user("worker")
    other, _ = make_user("worker")
    _seed(db_session, worker.id, 3)
    _seed(db_session, other.id, 2)

    r = client.put("/api/notifications/mark-all-read", headers=headers)
    assert r.status_code == 200
    assert r.json()["updated"] == 3
    assert client.get("/api/notifications", headers=headers).json()["unreadCount"] == 0

    still_unread = (
        db_session.query(models.Notification)
        .filter(models.Notification.user_id == other.id, models.Notification.is_read.is_(False))
        .count()
    )
    assert still_unread == 2


def test_notifications_require_login(client):
    assert client.get("/api/notifications").status_code == 401
