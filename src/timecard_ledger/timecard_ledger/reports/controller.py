from __future__ import annotations

from flask import Flask, request

from ..aggregation.engine import summarize_weeks
from ..common.http import parse_date_arg
from ..container import Container
from .model import ReportOptions
from .service import to_csv, to_json


def register(app: Flask, container: Container) -> None:
    def _build_report():
        start = parse_date_arg(request.args.get("start"), "start")
        end = parse_date_arg(request.args.get("end"), "end")
        worker_id = request.args.get("worker_id") or None
        options = ReportOptions(
            start=start,
            end=end,
            worker_id=worker_id,
            include_tier=request.args.get("tier") == "1",
            include_anomalies=request.args.get("anomalies") == "1",
        )
        result = container.aggregation_service.summaries_between(start, end, worker_id=worker_id)
        summaries = result.days
        if request.args.get("group") == "week":
            summaries = summarize_weeks(result.days, week_start=container.aggregation_service.week_start)
            options = ReportOptions(
                worker_id=worker_id,
                include_anomalies=options.include_anomalies,
                include_weekly_overtime=True,
            )
        return start, end, container.report_projection.project(summaries, options), result.errors

    @app.route("/api/reports/days.json", methods=["GET"], endpoint="api_report_json")
    def api_report_json():
        _, _, report, errors = _build_report()
        body = to_json(report, errors=[{"event_id": e.event_id, "reason": e.reason} for e in errors])
        return app.response_class(body, mimetype="application/json")

    @app.route("/api/reports/days.csv", methods=["GET"], endpoint="api_report_csv")
    def api_report_csv():
        start, end, report, _ = _build_report()
        filename = f"timecard_report_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return app.response_class(
            to_csv(report).encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
