import importlib

import pytest

from app import create_app
from calendar_ui import app_timezone
from models import Event, db

AJAX = {"X-Requested-With": "XMLHttpRequest"}


@pytest.fixture
def seeded(app):
    db.session.add_all([
        Event(starts_at="2025-05-15 14:30:00", title="Event 2"),
        Event(starts_at="2025-05-15 10:00:00", title="Event 1"),
        Event(starts_at="2025-05-20 09:00:00", title="Event 3"),
        Event(starts_at="2025-06-01 00:00:00", title="June Event"),
        Event(starts_at="2025-04-30 23:59:59", title="April Event"),
    ])
    db.session.commit()
    return app


def test_index_redirects(client):
    resp = client.get("/")
    assert resp.status_code == 302
    assert "/calendar/" in resp.headers["Location"]


def test_full_page(seeded, client):
    resp = client.get("/calendar/?year=2025&month=5&date=2025-05-15")
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "<html" in html
    assert "May 2025" in html
    assert 'class="calendar-widget shadow-sm p-4"' in html
    assert 'id="calendar-container"' in html
    # selected day events, ordered by time
    assert html.index("Event 1") < html.index("Event 2")
    assert "Event 3" not in html
    assert 'aria-current="date"' in html


def test_only_month_events_flagged(seeded, client):
    html = client.get("/calendar/?year=2025&month=5&date=2025-05-15", headers=AJAX).get_data(as_text=True)
    assert html.count("has-events") == 2
    assert "June Event" not in html
    assert "April Event" not in html


def test_ajax_returns_fragment(seeded, client):
    resp = client.get("/calendar/?year=2025&month=5&date=2025-05-20", headers=AJAX)
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "<html" not in html
    assert "calendar-grid" in html
    assert "Event 3" in html


def test_pjax_header(client):
    html = client.get("/calendar/?year=2025&month=5", headers={"X-PJAX": "true"}).get_data(as_text=True)
    assert "<html" not in html


def test_empty_day(seeded, client):
    html = client.get("/calendar/?year=2025&month=5&selectedDate=2025-05-16", headers=AJAX).get_data(as_text=True)
    assert "No events scheduled for this day." in html


def test_navigation_links_wrap_year(client):
    html = client.get("/calendar/?year=2025&month=1", headers=AJAX).get_data(as_text=True)
    assert "year=2024" in html
    assert "month=12" in html
    assert "year=2025" in html
    assert "month=2" in html


def test_bad_query_values_corrected(client):
    resp = client.get("/calendar/?year=2025&month=13&date=garbage", headers=AJAX)
    html = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "December 2025" in html
    # unparsable date selects the first of the month
    assert 'data-date="2025-12-01" aria-current="date"' in html

    assert client.get("/calendar/?month=abc&year=xyz").status_code == 200


def test_first_day_of_week(client):
    html = client.get("/calendar/?year=2025&month=5&first_day=1", headers=AJAX).get_data(as_text=True)
    assert html.index('<div class="day-name">Mon</div>') < html.index('<div class="day-name">Sun</div>')
    assert "first_day=1" in html


def test_celebration_marked(app, client):
    app.config["CALENDAR_CELEBRATIONS"] = ["05-15"]
    html = client.get("/calendar/?year=2025&month=5", headers=AJAX).get_data(as_text=True)
    assert html.count(" celebration") == 1


def test_timezone_precedence(app, monkeypatch):
    monkeypatch.delenv("TZ", raising=False)
    app.config.update(CALENDAR_TIMEZONE="Mars/Base", APP_TIMEZONE="Europe/Riga")
    assert app_timezone() == "Europe/Riga"

    app.config.update(CALENDAR_TIMEZONE="", APP_TIMEZONE="")
    monkeypatch.setenv("TZ", "Asia/Tokyo")
    assert app_timezone() == "Asia/Tokyo"

    monkeypatch.setenv("TZ", "bogus")
    assert app_timezone() == "UTC"


def test_cli_add_event(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["add-event", "2025-05-15", "09:05", " Standup "])
    assert result.exit_code == 0, result.output
    assert "Added event 2025-05-15 09:05:00 Standup" in result.output

    ev = Event.query.one()
    assert ev.starts_at == "2025-05-15 09:05:00"
    assert ev.title == "Standup"


def test_cli_add_event_rejects_bad_date(app):
    result = app.test_cli_runner().invoke(args=["add-event", "not-a-date", "09:00", "Nope"])
    assert result.exit_code != 0
    assert Event.query.count() == 0


def test_cli_init_db(app):
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert "Initialized the database." in result.output


def test_far_future_year_clamped(client):
    resp = client.get("/calendar/?year=10000&month=1", headers=AJAX)
    assert resp.status_code == 200
    assert "January 9998" in resp.get_data(as_text=True)

    resp = client.get("/calendar/?year=9999&month=12", headers=AJAX)
    assert resp.status_code == 200
    assert "December 9998" in resp.get_data(as_text=True)


def test_bad_first_day_setting(monkeypatch):
    import config

    monkeypatch.setenv("CALENDAR_FIRST_DAY_OF_WEEK", "Mon")
    importlib.reload(config)
    try:
        assert config.Config.CALENDAR_FIRST_DAY_OF_WEEK == "Mon"
        app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "CALENDAR_TIMEZONE": "UTC",
            "CALENDAR_FIRST_DAY_OF_WEEK": config.Config.CALENDAR_FIRST_DAY_OF_WEEK,
        })
        with app.app_context():
            db.create_all()
            html = app.test_client().get("/calendar/?year=2025&month=5", headers=AJAX).get_data(as_text=True)
            db.drop_all()
    finally:
        monkeypatch.delenv("CALENDAR_FIRST_DAY_OF_WEEK")
        importlib.reload(config)

    # falls back to a Sunday start
    assert html.index('<div class="day-name">Sun</div>') < html.index('<div class="day-name">Mon</div>')


def test_timestamp_mode_queries_numerically(app, client):
    app.config.update(CALENDAR_DATE_IS_TIMESTAMP=True)
    db.session.add_all([
        Event(starts_at="1747301400", title="Morning"),   # 2025-05-15 09:30 UTC
        Event(starts_at="1748736000", title="June Event"),  # 2025-06-01 00:00 UTC
        Event(starts_at="1746057599", title="April Event"),  # 2025-04-30 23:59:59 UTC
    ])
    db.session.commit()

    html = client.get("/calendar/?year=2025&month=5&date=2025-05-15", headers=AJAX).get_data(as_text=True)
    assert "09:30" in html
    assert "Morning" in html
    assert html.count("has-events") == 1
