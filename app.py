import os
import click
from flask import Flask, redirect, url_for
from models import db, Event
from config import Config
from calendar_ui import calendar_ui, app_timezone
from normalizer import normalize

def create_app(test_config=None):
    app = Flask(__name__, instance_relative_config=True, static_folder="static", template_folder="templates")
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    # Ensure instance dir exists (for SQLite)
    os.makedirs(app.instance_path, exist_ok=True)

    # SQLAlchemy
    db.init_app(app)

    # Blueprints
    app.register_blueprint(calendar_ui)

    @app.route("/")
    def index():
        return redirect(url_for("calendar_ui.calendar_month"))

    # CLI: init-db and add-event
    @app.cli.command("init-db")
    def init_db():
        with app.app_context():
            db.create_all()
            print("Initialized the database.")

    @app.cli.command("add-event")
    @click.argument("day")
    @click.argument("at")
    @click.argument("title")
    def add_event(day, at, title):
        """Store an event; DAY is YYYY-MM-DD (or ISO date-time), AT is HH:MM."""
        tz = app_timezone()
        d = normalize(day, "date", tz)
        if d is None:
            raise click.BadParameter(f"unreadable date {day!r}", param_hint="DAY")
        t = normalize(at, "time", tz, anchor=d)
        starts_at = f"{d.canonical_date()} {t.canonical_time()}:00"
        db.session.add(Event(starts_at=starts_at, title=title.strip()))
        db.session.commit()
        print(f"Added event {starts_at} {title.strip()}")

    return app
