from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import parse_date_arg
from ..container import Container
from ..core.exceptions import ValidationError
from ..reports.service import round_hours


def _retention_days(raw, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValidationError("retention_days must be a whole number of days")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("retention_days must be a whole number of days")


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/timecards/<worker_id>/<work_date>/submit", methods=["POST"], endpoint="api_timecard_submit")
    def api_timecard_submit(worker_id: str, work_date: str):
        record = container.approval_service.submit(worker_id, parse_date_arg(work_date, "date"))
        return jsonify({"success": True, "timecard": record.to_dict()})

    @app.route("/api/timecards/<worker_id>/<work_date>/approve", methods=["POST"], endpoint="api_timecard_approve")
    def api_timecard_approve(worker_id: str, work_date: str):
        approver_id = str(_body().get("approver_id") or "")
        record = container.approval_service.approve(approver_id, worker_id, parse_date_arg(work_date, "date"))
        return jsonify({"success": True, "timecard": record.to_dict()})

    @app.route("/api/timecards/<worker_id>/<work_date>/reject", methods=["POST"], endpoint="api_timecard_reject")
    def api_timecard_reject(worker_id: str, work_date: str):
        approver_id = str(_body().get("approver_id") or "")
        record = container.approval_service.reject(approver_id, worker_id, parse_date_arg(work_date, "date"))
        return jsonify({"success": True, "timecard": record.to_dict()})

    @app.route("/api/timecards/archive", methods=["POST"], endpoint="api_timecard_archive")
    def api_timecard_archive():
        data = _body()
        as_of = parse_date_arg(data.get("as_of"), "as_of")
        retention_days = _retention_days(data.get("retention_days"), container.retention_days)
        archived = container.approval_service.archive(as_of, retention_days)
        return jsonify(
            {
                "success": True,
                "archived": [{"worker_id": w, "date": d.isoformat()} for w, d in archived],
            }
        )

    @app.route("/api/timecards/pending", methods=["GET"], endpoint="api_timecard_pending")
    def api_timecard_pending():
        limit = request.args.get("limit", 200, type=int)
        items = []
        for item in container.approval_service.pending(limit=limit):
            entry = item.record.to_dict()
            if item.summary is not None:
                entry["total_hours"] = str(round_hours(item.summary.total_hours))
                entry["entry_count"] = item.summary.entry_count
                entry["anomalies"] = [a.to_dict() for a in item.summary.anomalies]
            items.append(entry)
        return jsonify({"success": True, "pending": items})
