# calendar_ui.py
import calendar
import os

from flask import Blueprint, current_app, render_template, request

from binder import FieldMap, bind_events, merge_event_flags, month_bounds
from grid import DEFAULT_DAY_NAMES, build_grid, make_config, next_month, ordered_day_names, previous_month, weeks
from models import Event, db
from normalizer import resolve_timezone

calendar_ui = Blueprint("calendar_ui", __name__, url_prefix="/calendar")

WIDGET_ID = "calendar"
DEFAULT_OPTIONS = {"class": "calendar-widget shadow-sm p-4", "id": f"{WIDGET_ID}-container"}


def is_partial_request() -> bool:
    """True for in-page (AJAX / pjax) navigation requests."""
    return (request.headers.get("X-Requested-With") == "XMLHttpRequest"
            or "X-PJAX" in request.headers)


def app_timezone() -> str:
    cfg = current_app.config
    return resolve_timezone(cfg.get("CALENDAR_TIMEZONE"), cfg.get("APP_TIMEZONE"), os.environ.get("TZ"))


def field_map() -> FieldMap:
    cfg = current_app.config
    return FieldMap(
        date=cfg.get("CALENDAR_DATE_FIELD", "date"),
        time=cfg.get("CALENDAR_TIME_FIELD", "time"),
        title=cfg.get("CALENDAR_TITLE_FIELD", "title"),
    )


def month_events(config, fields: FieldMap):
    start, end = month_bounds(config)
    column = getattr(Event, fields.date)
    if config.date_is_timestamp:
        # epoch seconds stored in a text column must compare as numbers
        column = db.cast(column, db.Integer)
    return (Event.query
        .filter(column >= start, column < end)
        .order_by(getattr(Event, fields.time))
        .all())


def calendar_context(config, records, fields: FieldMap, day_names) -> dict:
    """Everything the calendar templates need for one render."""
    events = bind_events(records, config, fields)
    grid = merge_event_flags(build_grid(config), events, config.selected_date)

    prev_y, prev_m = previous_month(config.year, config.month)
    next_y, next_m = next_month(config.year, config.month)

    return dict(
        year=config.year, month=config.month,
        month_name=calendar.month_name[config.month],
        weeks=weeks(grid),
        events=events,
        selected_date=config.selected_date,
        selected_events=events.get(config.selected_date, []),
        day_names=ordered_day_names(day_names, config.first_day_of_week),
        first_day=config.first_day_of_week,
        prev_y=prev_y, prev_m=prev_m, next_y=next_y, next_m=next_m,
        widget_id=WIDGET_ID,
        options=DEFAULT_OPTIONS,
    )


@calendar_ui.route("/")
def calendar_month():
    cfg = current_app.config
    selected = request.args.get("date") or request.args.get("selectedDate")

    config = make_config(
        year=request.args.get("year"),
        month=request.args.get("month"),
        first_day_of_week=request.args.get("first_day", cfg.get("CALENDAR_FIRST_DAY_OF_WEEK", 0)),
        timezone=app_timezone(),
        selected_date=selected,
        celebrations=cfg.get("CALENDAR_CELEBRATIONS", ()),
        date_is_timestamp=cfg.get("CALENDAR_DATE_IS_TIMESTAMP", False),
    )
    fields = field_map()
    records = month_events(config, fields)
    current_app.logger.debug("calendar %04d-%02d: %d events in range", config.year, config.month, len(records))

    names = cfg.get("CALENDAR_DAY_NAMES") or DEFAULT_DAY_NAMES
    if len(names) != 7:
        names = DEFAULT_DAY_NAMES

    ctx = calendar_context(config, records, fields, names)
    if is_partial_request():
        return render_template("_calendar_widget.html", **ctx)
    return render_template("calendar_month.html", **ctx)
