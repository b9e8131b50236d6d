"""Day Ledger Reducer: folds one worker-day of events into worked hours.

The day is a three-state machine (idle, working, on lunch). Expected
transitions accumulate or subtract time; anything else is applied permissively
(the relevant marker is overwritten) and reported as an anomaly instead of
being rejected.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..common.datetime_utils import hours_between
from ..core.enums import AnomalyKind, EventKind, LedgerState
from ..events.model import TimeEvent
from .model import AnomalyFlag, DayLedger, state_for

logger = logging.getLogger(__name__)

# (state before the event, event kind) pairs that are normal.
EXPECTED_TRANSITIONS = {
    (LedgerState.IDLE, EventKind.CLOCK_IN),
    (LedgerState.WORKING, EventKind.CLOCK_OUT),
    (LedgerState.WORKING, EventKind.LUNCH_OUT),
    (LedgerState.ON_LUNCH, EventKind.LUNCH_IN),
}


def order_events(events: Iterable[TimeEvent]) -> list[TimeEvent]:
    # sorted() is stable: same-instant events keep input order.
    return sorted(events, key=lambda e: e.timestamp)


def reduce_day(events: Iterable[TimeEvent], *, finalized: bool = True) -> DayLedger:
    """Fold a worker-day's events.

    With ``finalized`` (historical day), an interval still open at the end of
    the day is left out of the total and flagged ``unterminated-day``. For a
    day in progress the open markers are kept on the ledger so callers can ask
    for ``projected_hours(as_of)``.
    """

    ordered = order_events(events)
    if not ordered:
        raise ValueError("reduce_day needs at least one event")

    worker_id = ordered[0].worker_id
    work_date = ordered[0].calendar_date

    hours = 0.0
    clock_in_at = None
    lunch_out_at = None
    anomalies: list[AnomalyFlag] = []

    for event in ordered:
        state = state_for(clock_in_at, lunch_out_at)
        if (state, event.kind) not in EXPECTED_TRANSITIONS:
            anomalies.append(
                AnomalyFlag(
                    kind=AnomalyKind.UNEXPECTED_TRANSITION,
                    event_id=event.event_id,
                    detail=f"{event.kind.value} while {state.value}",
                )
            )

        if event.kind == EventKind.CLOCK_IN:
            clock_in_at = event.timestamp
        elif event.kind == EventKind.CLOCK_OUT:
            if clock_in_at is not None:
                hours += hours_between(clock_in_at, event.timestamp)
                clock_in_at = None
        elif event.kind == EventKind.LUNCH_OUT:
            lunch_out_at = event.timestamp
        elif event.kind == EventKind.LUNCH_IN:
            if lunch_out_at is not None:
                hours -= hours_between(lunch_out_at, event.timestamp)
                lunch_out_at = None

    if finalized and (clock_in_at is not None or lunch_out_at is not None):
        open_state = state_for(clock_in_at, lunch_out_at)
        anomalies.append(
            AnomalyFlag(
                kind=AnomalyKind.UNTERMINATED_DAY,
                event_id=None,
                detail=f"day ended while {open_state.value}; open interval excluded",
            )
        )
        clock_in_at = None
        lunch_out_at = None

    if anomalies:
        logger.debug("Ledger %s/%s has %d anomalies", worker_id, work_date, len(anomalies))

    return DayLedger(
        worker_id=worker_id,
        work_date=work_date,
        raw_hours=hours,
        event_count=len(ordered),
        clock_in_at=clock_in_at,
        lunch_out_at=lunch_out_at,
        finalized=finalized,
        anomalies=tuple(anomalies),
    )


def current_state(events: Iterable[TimeEvent]) -> Optional[LedgerState]:
    """Live state of an in-progress day, or None when there are no events."""
    events = list(events)
    if not events:
        return None
    return reduce_day(events, finalized=False).state
