from datetime import timedelta
from types import SimpleNamespace

import pytest

from src.timecard_ledger.timecard_ledger.aggregation.service import AggregationService
from src.timecard_ledger.timecard_ledger.approvals.service import ApprovalService
from src.timecard_ledger.timecard_ledger.events import service as timeclock_module
from src.timecard_ledger.timecard_ledger.events.service import TimeclockService
from src.timecard_ledger.timecard_ledger.geo.model import GeoPoint
from src.timecard_ledger.timecard_ledger.jobsites.model import JobSite
from src.timecard_ledger.timecard_ledger.main import create_app
from src.timecard_ledger.timecard_ledger.reports.service import ReportProjection
from tests.helpers import DAY, InMemoryEvents, at, shift

SITE_POINT = GeoPoint(37.7749, -122.4194)


class InMemoryJobSites:
    def __init__(self, sites):
        self.sites = list(sites)

    def load_job_sites(self):
        return list(self.sites)

    def get_by_id(self, job_site_id):
        return next((s for s in self.sites if s.job_site_id == job_site_id), None)


class InMemoryApprovals:
    def __init__(self, events):
        self.events = events
        self.records = {}
        self.cutoffs = []

    def load_approval(self, worker_id, work_date):
        return self.records.get((worker_id, work_date))

    def save_approval(self, record, *, expected_version, actor_id=None, at=None):
        current = self.records.get(record.key)
        if (current.version if current else 0) != expected_version:
            return False
        self.records[record.key] = record
        self.events.stamp_group_status(
            worker_id=record.worker_id, work_date=record.date, status=record.status, actor_id=actor_id, at=at
        )
        return True

    def list_by_status(self, status, *, limit=200):
        return [r for r in self.records.values() if r.status == status][:limit]

    def list_decided_before(self, cutoff):
        self.cutoffs.append(cutoff)
        return []


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    events = InMemoryEvents(shift(8, 17) + shift(6, 19, day=DAY + timedelta(days=1)))
    approvals = InMemoryApprovals(events)
    job_sites = InMemoryJobSites([JobSite(job_site_id="1", name="Downtown Office Complex", location=SITE_POINT)])
    aggregation = AggregationService(events, approvals)
    container = SimpleNamespace(
        events_repo=events,
        job_sites_repo=job_sites,
        approvals_repo=approvals,
        aggregation_service=aggregation,
        timeclock_service=TimeclockService(events, job_sites, aggregation, approvals=approvals),
        approval_service=ApprovalService(approvals, events, aggregation=aggregation),
        report_projection=ReportProjection(),
        retention_days=90,
    )

    app = create_app(container)
    client = app.test_client()
    client.container = container
    return client


def test_clock_in_out_of_range_returns_422_with_distance(client):
    resp = client.post(
        "/api/events/clock_in",
        json={"worker_id": "w9", "job_site_id": "1", "location": {"latitude": 37.7849, "longitude": -122.4194}},
    )

    assert resp.status_code == 422
    body = resp.get_json()
    assert body["error"] == "OutOfRangeError"
    assert body["distance_meters"] > 1000


def test_unknown_event_kind_is_400(client):
    resp = client.post("/api/events/coffee_break", json={"worker_id": "w1"})

    assert resp.status_code == 400


def test_submit_approve_and_double_approve(client):
    assert client.post(f"/api/timecards/w1/{DAY.isoformat()}/submit").status_code == 200

    pending = client.get("/api/timecards/pending").get_json()["pending"]
    assert [p["worker_id"] for p in pending] == ["w1"]
    assert pending[0]["total_hours"] == "9.00"

    ok = client.post(f"/api/timecards/w1/{DAY.isoformat()}/approve", json={"approver_id": "sup-1"})
    assert ok.status_code == 200
    assert ok.get_json()["timecard"]["status"] == "approved"

    again = client.post(f"/api/timecards/w1/{DAY.isoformat()}/approve", json={"approver_id": "sup-2"})
    assert again.status_code == 409
    assert again.get_json()["from"] == "approved"


def test_report_csv_has_total_row(client):
    end = DAY + timedelta(days=1)
    resp = client.get(f"/api/reports/days.csv?start={DAY.isoformat()}&end={end.isoformat()}")

    assert resp.status_code == 200
    text = resp.data.decode("utf-8-sig")
    lines = text.split("\r\n")
    assert lines[1].startswith(f"{DAY.isoformat()},w1,9.00,8.00,1.00,0.00,2,")
    assert lines[2].startswith(f"{end.isoformat()},w1,13.00,8.00,4.00,1.00,2,")
    assert lines[3].startswith("TOTAL,,22.00,16.00,5.00,1.00,4,")


def test_report_requires_dates(client):
    assert client.get("/api/reports/days.json").status_code == 400


def test_clock_in_on_approved_day_is_409_and_events_stay_approved(client, monkeypatch):
    monkeypatch.setattr(timeclock_module, "now_utc", lambda: at(DAY, 18))
    client.post(f"/api/timecards/w1/{DAY.isoformat()}/submit")
    client.post(f"/api/timecards/w1/{DAY.isoformat()}/approve", json={"approver_id": "sup-1"})

    resp = client.post(
        "/api/events/clock_in",
        json={"worker_id": "w1", "job_site_id": "1", "location": {"latitude": 37.7749, "longitude": -122.4194}},
    )

    assert resp.status_code == 409
    assert resp.get_json()["status"] == "approved"
    events = client.container.events_repo.load_group("w1", DAY)
    assert len(events) == 2
    assert {e.status.value for e in events} == {"approved"}


def test_archive_honours_explicit_zero_retention(client):
    resp = client.post("/api/timecards/archive", json={"as_of": DAY.isoformat(), "retention_days": 0})

    assert resp.status_code == 200
    assert client.container.approvals_repo.cutoffs == [DAY]


def test_archive_defaults_retention_when_omitted(client):
    client.post("/api/timecards/archive", json={"as_of": DAY.isoformat()})

    assert client.container.approvals_repo.cutoffs == [DAY - timedelta(days=90)]


@pytest.mark.parametrize("value", ["ninety", -1, 2.5, True])
def test_archive_rejects_bad_retention(client, value):
    resp = client.post("/api/timecards/archive", json={"as_of": DAY.isoformat(), "retention_days": value})

    assert resp.status_code == 400


def test_week_csv_includes_weekly_overtime(client):
    end = DAY + timedelta(days=1)
    resp = client.get(f"/api/reports/days.csv?start={DAY.isoformat()}&end={end.isoformat()}&group=week")

    header = resp.data.decode("utf-8-sig").split("\r\n")[0]
    assert "weekly_overtime_hours" in header
