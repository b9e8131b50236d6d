from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import DEFAULT_PROXIMITY_RADIUS_METERS
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class Task:
    task_id: str
    name: str


@dataclass(frozen=True)
class JobSite:
    """A named work location with its geofence."""

    job_site_id: str
    name: str
    location: Optional[GeoPoint]
    proximity_radius_meters: float = DEFAULT_PROXIMITY_RADIUS_METERS
    address: Optional[str] = None
    tasks: tuple[Task, ...] = field(default_factory=tuple)

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.task_id == task_id:
                return task
        return None
