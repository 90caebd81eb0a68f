from datetime import date

import pytest

from conftest import daily_history
from devguard.api import create_app
from devguard.errors import StoreUnavailable
from devguard.fallback import InMemoryActivitySource
from devguard.service import MetricsService


@pytest.fixture
def client(service):
    app = create_app(service)
    app.config["TESTING"] = True
    return app.test_client()


def _add_developer(client, name="Quinn"):
    response = client.post("/api/developers", json={"name": name, "email": f"{name.lower()}@devguard.ai", "role": "SRE"})
    assert response.status_code == 201
    return response.get_json()


def test_developer_routes(client):
    created = _add_developer(client)
    assert created["name"] == "Quinn"

    listing = client.get("/api/developers").get_json()
    assert [d["id"] for d in listing] == [created["id"]]

    deleted = client.delete(f"/api/developers/{created['id']}")
    assert deleted.status_code == 200
    assert deleted.get_json()["deleted"]["id"] == created["id"]
    assert client.delete(f"/api/developers/{created['id']}").status_code == 404


def test_add_developer_bad_body(client):
    response = client.post("/api/developers", data="nope", content_type="text/plain")
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_activity_and_metrics(client):
    dev = _add_developer(client)
    for offset in range(9):
        response = client.post(
            "/api/activity",
            json={
                "developer_id": dev["id"],
                "activity_date": f"2025-03-{offset + 1:02d}",
                "work_hours": 10,
                "meetings": 3,
                "pending_tasks": 5,
                "commits": 1,
            },
        )
        assert response.status_code == 201

    payload = client.get(f"/api/metrics/{dev['id']}").get_json()
    assert payload["developer"]["id"] == dev["id"]
    assert len(payload["activities"]) == 9
    assert payload["activities"][0]["activity_date"] == "2025-03-09"
    assert payload["latestMetric"]["riskLevel"] == "High"
    assert 0.0 <= payload["latestMetric"]["score"] <= 1.0

    activity_id = payload["activities"][0]["id"]
    assert client.delete(f"/api/activity/{activity_id}").status_code == 200
    assert client.delete(f"/api/activity/{activity_id}").status_code == 404
    assert len(client.get("/api/activities").get_json()) == 8


def test_activity_requires_date(client):
    dev = _add_developer(client)
    response = client.post("/api/activity", json={"developer_id": dev["id"]})
    assert response.status_code == 400


def test_metrics_unknown_developer_is_404(client):
    response = client.get("/api/metrics/999")
    assert response.status_code == 404
    assert "not found" in response.get_json()["error"]


def test_metrics_store_failure_is_503(store, monkeypatch):
    dev = store.add_developer("Rae", "rae@devguard.ai", "QA")

    def _fail(*_args, **_kwargs):
        raise StoreUnavailable("activity store unavailable")

    monkeypatch.setattr(store, "list_activity", _fail)
    client = create_app(MetricsService(store)).test_client()
    response = client.get(f"/api/metrics/{dev.id}")
    assert response.status_code == 503
    assert response.get_json() == {"error": "activity store unavailable"}


def test_dashboard_redirects_to_metrics(client):
    response = client.get("/api/dashboard/3")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/api/metrics/3")


def test_insight_routes(client):
    dev = _add_developer(client)
    response = client.post("/api/insights", json={"developer_id": dev["id"], "insight_text": "Heavy week", "severity": "high"})
    assert response.status_code == 201
    insight = response.get_json()
    assert insight["severity"] == "High"

    bad = client.post("/api/insights", json={"developer_id": dev["id"], "insight_text": "x", "severity": "Extreme"})
    assert bad.status_code == 400

    assert len(client.get("/api/insights").get_json()) == 1
    assert len(client.get(f"/api/insights/{dev['id']}").get_json()) == 1
    assert client.delete(f"/api/insights/{insight['id']}").status_code == 200
    assert client.get("/api/insights").get_json() == []


def test_trends_and_overview(client, store):
    dev = store.add_developer("Sam", "sam@devguard.ai", "Backend")
    for record in daily_history(dev.id, 10, work_hours=8, commits=2):
        store.log_activity(record)

    summary = client.get(f"/api/trends?developer_id={dev.id}&range=week").get_json()
    assert len(summary["series"]) == 7
    assert summary["trajectory"]["commits"]["label"] == "Stable"

    export = client.get("/api/trends?range=month&format=csv")
    assert export.status_code == 200
    assert export.mimetype == "text/csv"
    assert export.get_data(as_text=True).splitlines()[0] == "Date,Commits,PRs,Tasks,Meetings,WorkHours"
    assert f"DevGuard_Intelligence_{date.today().isoformat()}.csv" in export.headers["Content-Disposition"]

    assert client.get("/api/trends?range=year").status_code == 400
    assert client.get("/api/overview").get_json()["total_commits"] == 20
    assert client.get("/api/overview").get_json()["source"] == "store"
    assert "X-DevGuard-Fallback" not in client.get("/api/activities").headers


def test_activity_rejects_non_scalar_developer_id(client):
    response = client.post("/api/activity", json={"developer_id": [1], "activity_date": "2025-03-01"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "developer_id must be an integer"}

    response = client.post("/api/activity", json={"developer_id": True, "activity_date": "2025-03-01"})
    assert response.status_code == 400


def test_insight_rejects_non_scalar_developer_id(client):
    response = client.post("/api/insights", json={"developer_id": {"x": 1}, "insight_text": "x", "severity": "Low"})
    assert response.status_code == 400
    assert response.get_json() == {"error": "developer_id must be an integer"}

    missing = client.post("/api/insights", json={"insight_text": "x", "severity": "Low"})
    assert missing.status_code == 400
    assert missing.get_json() == {"error": "developer_id is required"}


def test_fallback_responses_are_marked(store, monkeypatch):
    dev = store.add_developer("Tess", "tess@devguard.ai", "Backend")

    def _fail(*_args, **_kwargs):
        raise StoreUnavailable("activity store unavailable")

    monkeypatch.setattr(store, "list_all_activities", _fail)
    fallback = InMemoryActivitySource(days=3, today=date(2025, 3, 10))
    client = create_app(MetricsService(store, fallback=fallback)).test_client()

    activities = client.get("/api/activities")
    assert activities.status_code == 200
    assert activities.headers["X-DevGuard-Fallback"] == "true"
    assert len(activities.get_json()) == 12

    trends = client.get("/api/trends?range=week")
    assert trends.status_code == 200
    assert trends.headers["X-DevGuard-Fallback"] == "true"
    assert trends.get_json()["source"] == "fallback"

    export = client.get("/api/trends?range=week&format=csv")
    assert export.headers["X-DevGuard-Fallback"] == "true"

    scoped = client.get(f"/api/trends?developer_id={dev.id}")
    assert scoped.status_code == 503
    assert "X-DevGuard-Fallback" not in scoped.headers

    overview = client.get("/api/overview")
    assert overview.status_code == 200
    assert overview.headers["X-DevGuard-Fallback"] == "true"
    assert overview.get_json()["source"] == "fallback"
    assert overview.get_json()["total_developers"] == 4
