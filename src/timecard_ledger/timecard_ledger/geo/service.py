"""Great-circle distance and job-site geofence checks.

Coordinates are signed decimal degrees; distances are meters. The haversine
formula on a spherical earth is accurate enough for geofence radii well under
50 km, so no ellipsoid correction is applied.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import OutOfRangeError, ValidationError
from ..jobsites.model import JobSite
from .model import GeoPoint


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude are required")
    if not -90 <= latitude <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationError("Longitude must be between -180 and 180")


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_within_site(point: GeoPoint, site: JobSite) -> bool:
    if site.location is None:
        return False
    return distance_meters(point, site.location) <= site.proximity_radius_meters


def find_nearest_site(point: GeoPoint, sites: Iterable[JobSite]) -> Optional[JobSite]:
    """Return the first site (in catalog order) whose geofence contains ``point``.

    This is first-match, not nearest-by-distance: when geofences overlap, the
    earlier catalog entry wins even if a later one is closer.
    """

    for site in sites:
        if is_within_site(point, site):
            return site
    return None


def assert_within_site(point: GeoPoint, site: JobSite) -> float:
    """Gate a clock-in on the site geofence; returns the measured distance."""

    if site.location is None:
        raise ValidationError(f"Job site {site.name} has no location configured")

    distance = distance_meters(point, site.location)
    if distance > site.proximity_radius_meters:
        raise OutOfRangeError(
            distance,
            site_id=site.job_site_id,
            site_name=site.name,
            radius_meters=site.proximity_radius_meters,
        )
    return distance
