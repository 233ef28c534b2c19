# binder.py
import logging
from dataclasses import dataclass, replace
from datetime import datetime

from grid import CalendarConfig, GridCell
from normalizer import add_month, as_zone, normalize

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldMap:
    """Names of the record fields holding an event's date, time and title."""
    date: str = "date"
    time: str = "time"
    title: str = "title"


@dataclass(frozen=True)
class NormalizedEvent:
    time: str
    title: str
    source: object = None


def month_bounds(config: CalendarConfig):
    """Query range for the configured month: [start, end_exclusive).

    Epoch seconds when dates are stored as timestamps, otherwise
    "YYYY-MM-DD HH:MM:SS" strings in the configured timezone.
    """
    zone = as_zone(config.timezone)
    start = datetime(config.year, config.month, 1, tzinfo=zone)
    nxt = add_month(start.date())
    end = datetime(nxt.year, nxt.month, 1, tzinfo=zone)
    if config.date_is_timestamp:
        return int(start.timestamp()), int(end.timestamp())
    return start.strftime("%Y-%m-%d %H:%M:%S"), end.strftime("%Y-%m-%d %H:%M:%S")


def bind_events(records, config: CalendarConfig, fields: FieldMap | None = None) -> dict[str, list[NormalizedEvent]]:
    """Group records by canonical date, each day ordered by time.

    Records only need a ``get(name)`` method. A record whose date cannot be
    read is skipped; an unreadable time becomes midnight. Range filtering is
    the caller's job.
    """
    if records is None:
        raise TypeError("records must be an iterable of event records, not None")
    fields = fields or FieldMap()

    by_date: dict[str, list[NormalizedEvent]] = {}
    for r in records:
        day = normalize(r.get(fields.date), "date", config.timezone)
        if day is None:
            log.debug("Skipping event with unreadable date %r", r.get(fields.date))
            continue
        at = normalize(r.get(fields.time), "time", config.timezone, anchor=day)
        by_date.setdefault(day.canonical_date(), []).append(
            NormalizedEvent(time=at.canonical_time(), title=r.get(fields.title), source=r)
        )

    # sorted() is stable, so equal times keep source order
    return {d: sorted(by_date[d], key=lambda e: e.time) for d in sorted(by_date)}


def merge_event_flags(grid: list[GridCell], events: dict, selected_date: str | None = None) -> list[GridCell]:
    """Copy of grid with has_events set (and is_selected re-checked when selected_date is given)."""
    merged = []
    for cell in grid:
        if not cell.in_month:
            merged.append(cell)
            continue
        changes = {"has_events": bool(events.get(cell.date))}
        if selected_date is not None:
            changes["is_selected"] = cell.date == selected_date
        merged.append(replace(cell, **changes))
    return merged
