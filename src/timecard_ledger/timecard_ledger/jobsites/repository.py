from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import JobSite


class JobSiteRepository(Protocol):
    def load_job_sites(self) -> Sequence[JobSite]:
        """Catalog order matters: geofence lookup is first-match."""

        raise NotImplementedError

    def get_by_id(self, job_site_id: str) -> Optional[JobSite]:
        raise NotImplementedError
