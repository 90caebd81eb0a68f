"""Flask REST routes over the metrics service."""

from __future__ import annotations

from datetime import date

from flask import Flask, Response, jsonify, redirect, request, url_for

from devguard.errors import DeveloperNotFound, RecordNotFound, StoreUnavailable
from devguard.log import LOGGER
from devguard.schema import ActivityRecord
from devguard.service import FALLBACK_SOURCE, MetricsService
from devguard.trends import export_csv

FALLBACK_HEADER = "X-DevGuard-Fallback"


def _body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("request body must be a JSON object")
    return payload


def _developer_id(payload: dict) -> int:
    value = payload.get("developer_id")
    if value in (None, ""):
        raise ValueError("developer_id is required")
    if isinstance(value, bool):
        raise ValueError("developer_id must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError("developer_id must be an integer") from exc


def _activity_from_body(payload: dict) -> ActivityRecord:
    developer_id = _developer_id(payload)
    if not payload.get("activity_date"):
        raise ValueError("activity_date is required")
    return ActivityRecord(
        developer_id=developer_id,
        activity_date=date.fromisoformat(str(payload["activity_date"])[:10]),
        work_hours=payload.get("work_hours") or 0,
        commits=payload.get("commits") or 0,
        pull_requests=payload.get("pull_requests") or 0,
        tasks_completed=payload.get("tasks_completed") or 0,
        pending_tasks=payload.get("pending_tasks") or 0,
        meetings=payload.get("meetings") or 0,
    )


def _mark_source(response: Response, source: str) -> Response:
    if source == FALLBACK_SOURCE:
        response.headers[FALLBACK_HEADER] = "true"
    return response


def _developer_filter(value):
    if value in (None, "", "all"):
        return None
    return int(value)


def create_app(service: MetricsService) -> Flask:
    """Build the API application around an already-wired service."""

    app = Flask(__name__)

    @app.errorhandler(DeveloperNotFound)
    @app.errorhandler(RecordNotFound)
    def _not_found(exc):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(StoreUnavailable)
    def _unavailable(exc):
        return jsonify({"error": str(exc)}), 503

    @app.errorhandler(ValueError)
    def _bad_request(exc):
        return jsonify({"error": str(exc)}), 400

    @app.after_request
    def _cors(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Access-Control-Expose-Headers"] = FALLBACK_HEADER
        return response

    # developers

    @app.get("/api/developers")
    def list_developers():
        return jsonify([developer.to_dict() for developer in service.list_developers()])

    @app.post("/api/developers")
    def add_developer():
        payload = _body()
        developer = service.add_developer(payload.get("name"), payload.get("email"), payload.get("role") or "")
        return jsonify(developer.to_dict()), 201

    @app.delete("/api/developers/<int:developer_id>")
    def delete_developer(developer_id: int):
        deleted = service.delete_developer(developer_id)
        return jsonify({"message": "Developer deleted successfully", "deleted": deleted.to_dict()})

    # activity

    @app.post("/api/activity")
    def log_activity():
        record = service.log_activity(_activity_from_body(_body()))
        return jsonify(record.to_dict()), 201

    @app.delete("/api/activity/<int:activity_id>")
    def delete_activity(activity_id: int):
        deleted = service.delete_activity(activity_id)
        return jsonify({"message": "Activity deleted successfully", "deleted": deleted.to_dict()})

    @app.get("/api/activities")
    def list_activities():
        records, source = service.activity_feed()
        return _mark_source(jsonify([record.to_dict() for record in records]), source)

    # metrics

    @app.get("/api/metrics/<int:developer_id>")
    def developer_metrics(developer_id: int):
        bundle = service.developer_metrics(developer_id)
        return jsonify(bundle.to_dict())

    @app.get("/api/dashboard/<int:developer_id>")
    def dashboard(developer_id: int):
        return redirect(url_for("developer_metrics", developer_id=developer_id))

    # insights

    @app.get("/api/insights")
    def list_insights():
        return jsonify([insight.to_dict() for insight in service.list_insights()])

    @app.get("/api/insights/<int:developer_id>")
    def list_developer_insights(developer_id: int):
        return jsonify([insight.to_dict() for insight in service.list_insights(developer_id)])

    @app.post("/api/insights")
    def save_insight():
        payload = _body()
        insight = service.save_insight(_developer_id(payload), payload.get("insight_text"), payload.get("severity"))
        return jsonify(insight.to_dict()), 201

    @app.delete("/api/insights/<int:insight_id>")
    def delete_insight(insight_id: int):
        deleted = service.delete_insight(insight_id)
        return jsonify({"message": "Insight deleted successfully", "deleted": deleted.to_dict()})

    # trends

    @app.get("/api/trends")
    def trends():
        developer_id = _developer_filter(request.args.get("developer_id"))
        range_name = request.args.get("range", "week")
        if request.args.get("format") == "csv":
            series, source = service.trend_series(developer_id, range_name)
            filename = f"DevGuard_Intelligence_{date.today().isoformat()}.csv"
            response = Response(
                export_csv(series),
                mimetype="text/csv",
                headers={"Content-Disposition": f"attachment; filename={filename}"},
            )
            return _mark_source(response, source)
        summary = service.trend_summary(developer_id, range_name)
        return _mark_source(jsonify(summary), summary["source"])

    @app.get("/api/overview")
    def overview():
        payload = service.team_overview()
        return _mark_source(jsonify(payload), payload["source"])

    LOGGER.debug("API routes registered: %d", len(list(app.url_map.iter_rules())))
    return app
