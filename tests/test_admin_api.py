from datetime import datetime, timedelta, timezone

import pytest

from quotevault.models.activity import ActivityModel, ActivityType
from quotevault.utils.text import new_object_id


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)


def log_view(activity_crud, user, quote, when):
    return activity_crud.create(ActivityModel(
        user_id=user.id, quote_id=quote.id, type=ActivityType.VIEW, timestamp=when,
    ))


@pytest.mark.parametrize("method, path", [
    ("get", "/api/admin/users"),
    ("get", "/api/admin/stats"),
    ("get", "/api/admin/activity"),
    ("get", "/api/admin/quotes/export"),
])
def test_regular_users_are_forbidden(client, user, auth_headers, method, path):
    response = getattr(client, method)(path, headers=auth_headers(user))

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "AUTHORIZATION_ERROR"


def test_admin_routes_require_a_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_list_users(client, make_user, admin, admin_headers):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for index in range(3):
        make_user(f"reader{index}@example.com", created_at=base + timedelta(days=index))

    response = client.get("/api/admin/users?page=1&limit=2", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"] == {"total": 4, "page": 1, "limit": 2, "pages": 2}
    # newest first: the admin was created just now
    assert [u["email"] for u in data["users"]] == ["admin@example.com", "reader2@example.com"]
    assert all("password_hash" not in u for u in data["users"])


def test_list_users_search_and_role_filter(client, user, admin, admin_headers):
    by_name = client.get("/api/admin/users", params={"search": "test user"}, headers=admin_headers).json()["data"]
    assert [u["id"] for u in by_name["users"]] == [user.id]

    by_role = client.get("/api/admin/users?role=admin", headers=admin_headers).json()["data"]
    assert [u["id"] for u in by_role["users"]] == [admin.id]


def test_list_users_cannot_filter_on_password_hash(client, user, admin, admin_headers):
    response = client.get("/api/admin/users?password_hash=nothing", headers=admin_headers)

    assert response.json()["data"]["pagination"]["total"] == 2


def test_get_user_with_recent_activity(client, user, quotes, activity_crud, admin_headers):
    now = datetime.now(timezone.utc)
    for minutes in range(12):
        log_view(activity_crud, user, quotes[0], now - timedelta(minutes=minutes))

    response = client.get(f"/api/admin/users/{user.id}", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "user@example.com"
    assert "password_hash" not in data["user"]
    assert len(data["recent_activity"]) == 10
    assert data["streak"]["current_streak"] >= 1


def test_get_user_bad_ids(client, admin_headers):
    invalid = client.get("/api/admin/users/not-an-id", headers=admin_headers)
    assert invalid.status_code == 400
    assert invalid.json()["error"]["code"] == "VALIDATION_ERROR"

    missing = client.get(f"/api/admin/users/{new_object_id()}", headers=admin_headers)
    assert missing.status_code == 404


def test_promote_user(client, user, user_crud, admin_headers):
    response = client.put(
        f"/api/admin/users/{user.id}",
        headers=admin_headers,
        json={"role": "admin", "display_name": "Promoted"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "admin"
    stored = user_crud.get_by_id(user.id)
    assert stored.role == "admin"
    assert stored.display_name == "Promoted"


def test_update_user_rejects_unknown_role(client, user, admin_headers):
    response = client.put(f"/api/admin/users/{user.id}", headers=admin_headers, json={"role": "superuser"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_admin_cannot_demote_themselves(client, admin, user_crud, admin_headers):
    response = client.put(f"/api/admin/users/{admin.id}", headers=admin_headers, json={"role": "user"})

    assert response.status_code == 400
    assert user_crud.get_by_id(admin.id).role == "admin"


def test_update_missing_user(client, admin_headers):
    response = client.put(f"/api/admin/users/{new_object_id()}", headers=admin_headers, json={"role": "user"})

    assert response.status_code == 404


def test_delete_user_removes_activity(client, user, quotes, user_crud, activity_crud, admin_headers):
    log_view(activity_crud, user, quotes[0], datetime.now(timezone.utc))

    response = client.delete(f"/api/admin/users/{user.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {"user_id": user.id, "activities_removed": 1}
    assert user_crud.get_by_id(user.id) is None
    assert activity_crud.list_for_user(user.id) == []
    # quotes the user added stay
    assert client.get(f"/api/quotes/{quotes[2].id}").status_code == 200


def test_admin_cannot_delete_themselves(client, admin, user_crud, admin_headers):
    response = client.delete(f"/api/admin/users/{admin.id}", headers=admin_headers)

    assert response.status_code == 400
    assert user_crud.get_by_id(admin.id) is not None


def test_delete_missing_user(client, admin_headers):
    assert client.delete(f"/api/admin/users/{new_object_id()}", headers=admin_headers).status_code == 404


def test_system_stats(client, user, quotes, activity_crud, admin_headers):
    log_view(activity_crud, user, quotes[0], datetime.now(timezone.utc))

    response = client.get("/api/admin/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()["data"]["stats"]
    assert stats["total_users"] == 2
    assert stats["total_quotes"] == 3
    assert stats["quotes_served"]["daily"] == 1
    assert stats["top_quotes"][0]["author"] == "John Lennon"
    assert stats["popular_cache"]["ttl_seconds"] == 60


def test_activity_log_across_users(client, user, admin, quotes, activity_crud, admin_headers):
    base = datetime(2024, 3, 1, tzinfo=timezone.utc)
    log_view(activity_crud, user, quotes[0], base)
    log_view(activity_crud, admin, quotes[1], base + timedelta(days=1))
    activity_crud.create(ActivityModel(
        user_id=user.id, quote_id=quotes[1].id, type=ActivityType.SHARE, timestamp=base + timedelta(days=2),
    ))

    everything = client.get("/api/admin/activity", headers=admin_headers).json()["data"]
    assert everything["pagination"]["total"] == 3
    assert [a["type"] for a in everything["activities"]] == ["share", "view", "view"]
    assert everything["activities"][0]["user"] == {
        "id": user.id,
        "email": "user@example.com",
        "display_name": "Test User",
    }

    views = client.get(
        f"/api/admin/activity?type=view&user_id={user.id}", headers=admin_headers,
    ).json()["data"]
    assert [a["quote_id"] for a in views["activities"]] == [quotes[0].id]

    since = client.get("/api/admin/activity?timestamp[gte]=2024-03-02", headers=admin_headers).json()["data"]
    assert since["pagination"]["total"] == 2


def test_import_quotes(client, admin, quote_crud, admin_headers):
    response = client.post("/api/admin/quotes/import", headers=admin_headers, json={"quotes": [
        {"text": "Stay hungry, stay foolish.", "author": "Steve Jobs", "tags": ["Life"]},
        {"text": "No author here."},
        {"text": "Well begun is half done.", "author": "Aristotle"},
    ]})

    assert response.status_code == 200
    results = response.json()["data"]["results"]
    assert results["total"] == 3
    assert results["imported"] == 2
    assert len(results["errors"]) == 1
    error = results["errors"][0]
    assert error["index"] == 1
    assert error["message"] == "Validation Error"
    assert error["errors"][0]["field"] == "author"

    stored = quote_crud.all()
    assert {q.author for q in stored} == {"Steve Jobs", "Aristotle"}
    assert all(q.added_by == admin.id for q in stored)
    assert quote_crud.get_by_tag("life")[0].author == "Steve Jobs"


def test_import_clears_popular_cache(client, app, quotes, admin_headers):
    client.get("/api/quotes/popular")
    assert app.state.popular_quotes.get_cache_stats()["size"] == 1

    client.post("/api/admin/quotes/import", headers=admin_headers, json={"quotes": [
        {"text": "Well begun is half done.", "author": "Aristotle"},
    ]})

    assert app.state.popular_quotes.get_cache_stats()["size"] == 0


@pytest.mark.parametrize("body", [{"quotes": []}, {"quotes": "not a list"}, {}])
def test_import_rejects_bad_payload(client, admin_headers, body):
    response = client.post("/api/admin/quotes/import", headers=admin_headers, json=body)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_export_quotes(client, quotes, admin_headers):
    response = client.get("/api/admin/quotes/export", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 3
    assert [q["author"] for q in data["quotes"]] == ["Eleanor Roosevelt", "John Lennon", "Steve Jobs"]
