from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import EventKind
from ..core.exceptions import ValidationError
from ..geo.model import GeoPoint


def register(app: Flask, container: Container) -> None:
    @app.route("/api/events/<kind>", methods=["POST"], endpoint="api_record_event")
    def api_record_event(kind: str):
        """Capture flow posts one worker action (photo + location already taken)."""

        try:
            event_kind = EventKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown event kind: {kind}")

        data = request.get_json(silent=True) or {}
        try:
            location = GeoPoint.from_dict(data.get("location"))
        except (KeyError, TypeError, ValueError):
            raise ValidationError("location needs numeric latitude and longitude")

        event = container.timeclock_service.record(
            str(data.get("worker_id") or ""),
            event_kind,
            job_site_id=data.get("job_site_id"),
            task_id=data.get("task_id"),
            location=location,
            photo_ref=data.get("photo_ref"),
        )
        return jsonify({"success": True, "event": event.to_dict()}), 201

    @app.route("/api/workers/<worker_id>/status", methods=["GET"], endpoint="api_worker_status")
    def api_worker_status(worker_id: str):
        status = container.timeclock_service.today_status(worker_id)
        return jsonify({"success": True, "status": status.to_dict()})

    @app.route("/api/job-sites", methods=["GET"], endpoint="api_job_sites")
    def api_job_sites():
        sites = container.job_sites_repo.load_job_sites()
        return jsonify(
            {
                "success": True,
                "job_sites": [
                    {
                        "job_site_id": s.job_site_id,
                        "name": s.name,
                        "address": s.address,
                        "location": s.location.to_dict() if s.location else None,
                        "proximity_radius_meters": s.proximity_radius_meters,
                        "tasks": [{"task_id": t.task_id, "name": t.name} for t in s.tasks],
                    }
                    for s in sites
                ],
            }
        )
