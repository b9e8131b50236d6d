from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..geo.model import GeoPoint
from .model import JobSite, Task
from .repository import JobSiteRepository


class MySQLJobSiteRepository(JobSiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, job_site_id: Optional[str] = None) -> list[JobSite]:
        where = "WHERE s.job_site_id=%s" if job_site_id else ""
        params = (job_site_id,) if job_site_id else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.job_site_id, s.name, s.address, s.latitude, s.longitude,
                       s.proximity_radius_meters, t.task_id, t.name AS task_name
                FROM job_sites s
                LEFT JOIN job_site_tasks t ON t.job_site_id = s.job_site_id
                {where}
                ORDER BY s.sort_order, s.job_site_id, t.task_id
                """,
                params,
            )
            rows = fetchall(cur)

        sites: dict[str, dict] = {}
        for r in rows:
            site = sites.get(r["job_site_id"])
            if site is None:
                location = None
                if r.get("latitude") is not None and r.get("longitude") is not None:
                    location = GeoPoint(latitude=float(r["latitude"]), longitude=float(r["longitude"]))
                site = {
                    "job_site_id": str(r["job_site_id"]),
                    "name": r["name"],
                    "address": r.get("address"),
                    "location": location,
                    "proximity_radius_meters": float(r["proximity_radius_meters"]),
                    "tasks": [],
                }
                sites[r["job_site_id"]] = site
            if r.get("task_id") is not None:
                site["tasks"].append(Task(task_id=str(r["task_id"]), name=r["task_name"]))

        return [JobSite(**{**s, "tasks": tuple(s["tasks"])}) for s in sites.values()]

    def load_job_sites(self) -> Sequence[JobSite]:
        return self._load()

    def get_by_id(self, job_site_id: str) -> Optional[JobSite]:
        found = self._load(job_site_id)
        return found[0] if found else None
