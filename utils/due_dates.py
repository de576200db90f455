# utils/due_dates.py
"""Due-date arithmetic for template tasks.

Every value is reduced to a plain calendar ``date`` before any arithmetic.
Timezone-aware datetimes are converted to UTC first; naive datetimes are
taken at face value. Nothing in this module looks at the local clock
except ``due_state`` when no ``today`` is passed, and then it takes the UTC date.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from dateutil import parser

logger = logging.getLogger(__name__)


def to_calendar_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def parse_date(x) -> Optional[date]:
    """Accept a date, datetime, ISO string or blank and return a calendar date."""
    if x is None:
        return None
    if isinstance(x, (date, datetime)):
        return to_calendar_date(x)
    s = str(x).strip()
    if not s:
        return None
    try:
        return to_calendar_date(parser.isoparse(s))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {x!r}") from e


def compute_due_date(meeting_date, secondary_date, offset_days: int, use_secondary: bool) -> date:
    meeting = to_calendar_date(meeting_date)
    if meeting is None:
        raise ValueError("A meeting date is required to compute due dates")
    base = meeting
    if use_secondary:
        secondary = to_calendar_date(secondary_date)
        if secondary is not None:
            base = secondary
        else:
            logger.info("No secondary date supplied; offset %+d falls back to meeting date %s",
                        offset_days, meeting)
    return base + timedelta(days=int(offset_days or 0))


def due_state(due, today: Optional[date] = None) -> Optional[str]:
    """Badge state for a due date: 'overdue', 'today', 'upcoming' or None."""
    due = to_calendar_date(due)
    if due is None:
        return None
    today = today or datetime.now(timezone.utc).date()
    if due < today:
        return "overdue"
    if due == today:
        return "today"
    return "upcoming"


def reschedule(tasks: Iterable, meeting_date, secondary_date=None) -> dict:
    """Recompute due dates for stored tasks after the anchor dates change.

    Tasks without an offset rule (``days_from_meeting is None``) keep their
    dates. Returns ``{task_id: new_due_date}`` for dates that actually moved.
    """
    changes = {}
    for t in tasks:
        offset = getattr(t, "days_from_meeting", None)
        if offset is None:
            continue
        new_due = compute_due_date(meeting_date, secondary_date, offset,
                                   bool(getattr(t, "based_on_secondary", False)))
        if new_due != to_calendar_date(getattr(t, "due_date", None)):
            changes[t.id] = new_due
    return changes
