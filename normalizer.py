# normalizer.py
import logging
import re
from datetime import date, datetime, time, timedelta, timezone as _timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

log = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"

# Anchor for bare "HH:MM" values when the caller has no companion date
_REFERENCE_DATE = date(1970, 1, 1)

_STRICT_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_STRICT_TIME = re.compile(r"^(\d{2}):(\d{2})$")
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


# ---------- Timezones ----------
def get_zone(name: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def resolve_timezone(*candidates) -> str:
    """Return the first non-empty, valid IANA id among candidates.

    Hosts pass them in precedence order: formatter timezone, application
    default, process default. Invalid ids are skipped; UTC if none is usable.
    """
    for name in candidates:
        name = (name or "").strip()
        if not name:
            continue
        if get_zone(name) is None:
            log.warning("Ignoring unknown timezone %r", name)
            continue
        return name
    return DEFAULT_TIMEZONE


def as_zone(tz) -> ZoneInfo:
    """ZoneInfo for tz, UTC when the name is unknown."""
    if isinstance(tz, ZoneInfo):
        return tz
    return get_zone(tz or DEFAULT_TIMEZONE) or ZoneInfo(DEFAULT_TIMEZONE)


# ---------- Canonical instant ----------
class CanonicalInstant:
    """A timezone-bound moment with the canonical string forms used for grouping."""

    __slots__ = ("moment",)

    def __init__(self, moment: datetime):
        self.moment = moment

    def canonical_date(self) -> str:
        return self.moment.strftime("%Y-%m-%d")

    def canonical_time(self) -> str:
        return self.moment.strftime("%H:%M")

    def __eq__(self, other):
        if not isinstance(other, CanonicalInstant):
            return NotImplemented
        return self.moment == other.moment

    def __hash__(self):
        return hash(self.moment)

    def __repr__(self):
        return f"CanonicalInstant({self.moment.isoformat()})"


def _midnight(d: date, zone: ZoneInfo) -> CanonicalInstant:
    return CanonicalInstant(datetime(d.year, d.month, d.day, tzinfo=zone))


def _bind(dt: datetime, zone: ZoneInfo) -> CanonicalInstant:
    # naive values are wall time in the configured zone
    if dt.tzinfo is None:
        return CanonicalInstant(dt.replace(tzinfo=zone))
    return CanonicalInstant(dt.astimezone(zone))


def _is_numeric(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    return isinstance(value, str) and bool(_NUMERIC.match(value.strip()))


def _from_epoch(value, zone: ZoneInfo) -> CanonicalInstant | None:
    try:
        seconds = float(value)
        moment = datetime.fromtimestamp(seconds, tz=_timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return CanonicalInstant(moment.astimezone(zone))


def _parse_iso_datetime(s: str) -> datetime | None:
    # allow-list: ISO 8601 date-time, "T" or space separated, optional offset/Z
    if len(s) < 16 or s[10] not in ("T", " ", "t"):
        return None
    if s[-1] in ("Z", "z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _parse_strict_date(s: str) -> date | None:
    m = _STRICT_DATE.match(s)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def _parse_strict_time(s: str) -> time | None:
    m = _STRICT_TIME.match(s)
    if not m:
        return None
    hh, mm = int(m.group(1)), int(m.group(2))
    if hh > 23 or mm > 59:
        return None
    return time(hh, mm)


def _parse_iso_time(s: str) -> time | None:
    # "HH:MM:SS" with optional fraction; offsets are not meaningful without a date
    if len(s) < 8 or s[2] != ":" or s[5] != ":":
        return None
    try:
        t = time.fromisoformat(s)
    except ValueError:
        return None
    return t.replace(tzinfo=None)


# ---------- Normalization ----------
def normalize_date(value, tz) -> CanonicalInstant | None:
    """Normalize a date-ish value; None means the value could not be read."""
    zone = as_zone(tz)
    if value is None:
        return None
    if _is_numeric(value):
        return _from_epoch(value, zone)
    if isinstance(value, datetime):
        return _bind(value, zone)
    if isinstance(value, date):
        return _midnight(value, zone)
    if not isinstance(value, str):
        return None

    s = value.strip()
    d = _parse_strict_date(s)
    if d is not None:
        return _midnight(d, zone)
    dt = _parse_iso_datetime(s)
    if dt is not None:
        return _bind(dt, zone)
    return None


def normalize_time(value, tz, anchor: CanonicalInstant | date | None = None) -> CanonicalInstant:
    """Normalize a time-ish value. Never fails: unreadable input is midnight of the anchor date."""
    zone = as_zone(tz)
    if isinstance(anchor, CanonicalInstant):
        anchor_date = anchor.moment.date()
    elif isinstance(anchor, date):
        anchor_date = anchor if not isinstance(anchor, datetime) else anchor.date()
    else:
        anchor_date = _REFERENCE_DATE

    found = None
    if value is None or value == "":
        pass
    elif _is_numeric(value):
        found = _from_epoch(value, zone)
    elif isinstance(value, datetime):
        found = _bind(value, zone)
    elif isinstance(value, time):
        found = _bind(datetime.combine(anchor_date, value.replace(tzinfo=None)), zone)
    elif isinstance(value, str):
        s = value.strip()
        t = _parse_strict_time(s) or _parse_iso_time(s)
        if t is not None:
            found = _bind(datetime.combine(anchor_date, t), zone)
        else:
            dt = _parse_iso_datetime(s)
            if dt is not None:
                found = _bind(dt, zone)

    if found is None:
        log.debug("Unreadable time %r, falling back to midnight of %s", value, anchor_date)
        return _midnight(anchor_date, zone)
    return found


def normalize(value, kind: str, tz, anchor=None) -> CanonicalInstant | None:
    if kind == "date":
        return normalize_date(value, tz)
    if kind == "time":
        return normalize_time(value, tz, anchor)
    raise ValueError(f"kind must be 'date' or 'time', got {kind!r}")


def parse_date(value, tz) -> str | None:
    """Canonical YYYY-MM-DD for value in tz, or None."""
    inst = normalize_date(value, tz)
    return inst.canonical_date() if inst else None


def now_in(tz) -> datetime:
    return datetime.now(as_zone(tz))


def add_month(d: date) -> date:
    """First day of the month after d's month."""
    first = d.replace(day=1)
    return (first + timedelta(days=32)).replace(day=1)
