from __future__ import annotations

from dataclasses import dataclass

from .aggregation.service import AggregationService
from .approvals.mysql_approval_repository import MySQLApprovalRepository
from .approvals.service import ApprovalService
from .core.constants import DEFAULT_RETENTION_DAYS
from .core.enums import WeekStart
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.service import TimeclockService
from .jobsites.mysql_job_site_repository import MySQLJobSiteRepository
from .overtime.classifier import OvertimeClassifier
from .reports.service import ReportProjection


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    events_repo: MySQLEventRepository
    job_sites_repo: MySQLJobSiteRepository
    approvals_repo: MySQLApprovalRepository

    aggregation_service: AggregationService
    timeclock_service: TimeclockService
    approval_service: ApprovalService
    report_projection: ReportProjection

    retention_days: int = DEFAULT_RETENTION_DAYS


def build_container(
    *,
    db_config: dict,
    week_start: str = WeekStart.MONDAY.value,
    worker_timezone: str = "UTC",
    retention_days: int = DEFAULT_RETENTION_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    events_repo = MySQLEventRepository(conn)
    job_sites_repo = MySQLJobSiteRepository(conn)
    approvals_repo = MySQLApprovalRepository(conn)

    aggregation_service = AggregationService(
        events_repo,
        approvals_repo,
        classifier=OvertimeClassifier(),
        week_start=WeekStart(week_start),
        worker_timezone=worker_timezone,
    )
    timeclock_service = TimeclockService(
        events_repo,
        job_sites_repo,
        aggregation_service,
        approvals=approvals_repo,
        worker_timezone=worker_timezone,
    )
    approval_service = ApprovalService(approvals_repo, events_repo, aggregation=aggregation_service)

    return Container(
        conn=conn,
        events_repo=events_repo,
        job_sites_repo=job_sites_repo,
        approvals_repo=approvals_repo,
        aggregation_service=aggregation_service,
        timeclock_service=timeclock_service,
        approval_service=approval_service,
        report_projection=ReportProjection(),
        retention_days=int(retention_days),
    )
