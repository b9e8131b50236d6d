from __future__ import annotations

from datetime import date

from flask import Flask, jsonify

from ..core.exceptions import (
    ConcurrentModificationError,
    DomainError,
    InvalidTransitionError,
    MalformedEventError,
    NotFoundError,
    OutOfRangeError,
    TimecardLockedError,
    ValidationError,
)
from .datetime_utils import parse_iso_date


def parse_date_arg(value: str | None, field_name: str) -> date:
    if not value:
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date (YYYY-MM-DD)")


def error_payload(exc: DomainError) -> tuple[dict, int]:
    body = {"success": False, "error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, OutOfRangeError):
        body["distance_meters"] = round(exc.distance_meters, 1)
        return body, 422
    if isinstance(exc, InvalidTransitionError):
        body["from"] = getattr(exc.from_status, "value", exc.from_status)
        body["to"] = getattr(exc.to_status, "value", exc.to_status)
        return body, 409
    if isinstance(exc, ConcurrentModificationError):
        return body, 409
    if isinstance(exc, TimecardLockedError):
        body["status"] = getattr(exc.status, "value", exc.status)
        return body, 409
    if isinstance(exc, NotFoundError):
        return body, 404
    if isinstance(exc, (ValidationError, MalformedEventError)):
        return body, 400
    return body, 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        body, status = error_payload(exc)
        return jsonify(body), status
