# grid.py
from calendar import monthrange
from dataclasses import dataclass, field
from datetime import date

from normalizer import DEFAULT_TIMEZONE, now_in, parse_date, resolve_timezone

GRID_SIZE = 42  # 6 full weeks
MIN_YEAR = 1970
MAX_YEAR = 9998  # the month after December must still be a valid date
DEFAULT_DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


@dataclass(frozen=True)
class CalendarConfig:
    year: int
    month: int
    first_day_of_week: int = 0
    timezone: str = DEFAULT_TIMEZONE
    selected_date: str = ""
    today_date: str = ""
    celebrations: frozenset = field(default_factory=frozenset)
    date_is_timestamp: bool = False


@dataclass(frozen=True)
class GridCell:
    date: str = ""
    label: int | None = None
    in_month: bool = False
    is_today: bool = False
    is_selected: bool = False
    has_events: bool = False
    is_weekend: bool = False
    is_saturday: bool = False
    is_sunday: bool = False
    is_celebration: bool = False
    day_of_week: int = 0  # column in the grid, not the calendar weekday
    weekday: int = 0  # calendar weekday, 0=Sunday


# ---------- Config ----------
def _as_int(value, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def make_config(year=None, month=None, first_day_of_week=0, timezone=None,
                selected_date=None, today_date=None, celebrations=(),
                date_is_timestamp=False) -> CalendarConfig:
    """Build a CalendarConfig, silently correcting out-of-range values.

    - month is clamped to 1..12, year to 1970..9998
    - first_day_of_week outside 0..6 becomes 0 (Sunday)
    - missing or non-integer year/month default to "now" in the timezone
    - an unparsable selected_date becomes the first day of the month
    """
    tz = resolve_timezone(timezone)
    now = now_in(tz)

    y = max(MIN_YEAR, min(MAX_YEAR, _as_int(year, now.year)))
    m = max(1, min(12, _as_int(month, now.month)))

    fdow = _as_int(first_day_of_week, 0)
    if fdow < 0 or fdow > 6:
        fdow = 0

    today = parse_date(today_date, tz) if today_date is not None else None
    if today is None:
        today = now.date().isoformat()

    if selected_date is None:
        selected = today
    else:
        selected = parse_date(selected_date, tz) or f"{y:04d}-{m:02d}-01"

    marks = frozenset(s.strip() for s in (celebrations or ()) if s and s.strip())

    return CalendarConfig(
        year=y,
        month=m,
        first_day_of_week=fdow,
        timezone=tz,
        selected_date=selected,
        today_date=today,
        celebrations=marks,
        date_is_timestamp=bool(date_is_timestamp),
    )


# ---------- Grid ----------
def _weekday_flags(position: int, first_day_of_week: int) -> dict:
    actual = (position % 7 + first_day_of_week) % 7
    return {
        "day_of_week": position % 7,
        "weekday": actual,
        "is_weekend": actual in (0, 6),
        "is_saturday": actual == 6,
        "is_sunday": actual == 0,
    }


def is_celebration(day: str, celebrations) -> bool:
    return day in celebrations or day[5:] in celebrations


def build_grid(config: CalendarConfig) -> list[GridCell]:
    """Return the 42-cell month grid for config, padding cells included."""
    first = date(config.year, config.month, 1)
    days_in_month = monthrange(config.year, config.month)[1]
    start_weekday = (first.weekday() + 1) % 7  # Sunday-based
    padding = (start_weekday - config.first_day_of_week + 7) % 7

    cells = []
    for pos in range(padding):
        cells.append(GridCell(**_weekday_flags(pos, config.first_day_of_week)))

    for day in range(1, days_in_month + 1):
        d = f"{config.year:04d}-{config.month:02d}-{day:02d}"
        cells.append(GridCell(
            date=d,
            label=day,
            in_month=True,
            is_today=d == config.today_date,
            is_selected=d == config.selected_date,
            is_celebration=is_celebration(d, config.celebrations),
            **_weekday_flags(len(cells), config.first_day_of_week),
        ))

    while len(cells) < GRID_SIZE:
        cells.append(GridCell(**_weekday_flags(len(cells), config.first_day_of_week)))

    return cells


def weeks(grid: list[GridCell]) -> list[list[GridCell]]:
    return [grid[i:i + 7] for i in range(0, len(grid), 7)]


# ---------- Navigation ----------
def previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def ordered_day_names(day_names, first_day_of_week: int) -> list[str]:
    names = list(day_names)
    return names[first_day_of_week:] + names[:first_day_of_week]
