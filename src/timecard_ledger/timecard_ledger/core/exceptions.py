from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced job site, event group or record does not exist."""


class MalformedEventError(DomainError):
    """Raised when an event has a missing/unparseable timestamp or calendar date.

    Aggregation collects these instead of aborting the batch.
    """

    def __init__(self, event_id: object, reason: str):
        super().__init__(f"Malformed event {event_id!r}: {reason}")
        self.event_id = event_id
        self.reason = reason


class OutOfRangeError(DomainError):
    """Raised when a coordinate lies outside a job site's geofence."""

    def __init__(self, distance_meters: float, *, site_id: str | None = None, site_name: str | None = None, radius_meters: float | None = None):
        where = site_name or site_id or "job site"
        super().__init__(
            f"You are {round(distance_meters)} meters away from {where}. "
            "Please move closer to the job site to clock in."
        )
        self.distance_meters = distance_meters
        self.site_id = site_id
        self.radius_meters = radius_meters


class InvalidTransitionError(DomainError):
    """Raised on an illegal approval-state change; nothing is mutated."""

    def __init__(self, from_status, to_status):
        from_value = getattr(from_status, "value", from_status)
        to_value = getattr(to_status, "value", to_status)
        super().__init__(f"Cannot move timecard from {from_value} to {to_value}")
        self.from_status = from_status
        self.to_status = to_status


class ConcurrentModificationError(DomainError):
    """Raised when a compare-and-write loses a race; the caller should retry."""


class TimecardLockedError(DomainError):
    """Raised when an event is recorded on a day that is submitted, approved or archived."""

    def __init__(self, worker_id: str, work_date, status):
        status_value = getattr(status, "value", status)
        super().__init__(f"Timecard {worker_id}/{work_date} is {status_value}; no new events can be recorded")
        self.worker_id = worker_id
        self.work_date = work_date
        self.status = status
