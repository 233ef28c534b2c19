import os
BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _csv_env(name: str, default: str = "") -> list[str]:
    return [s.strip() for s in os.environ.get(name, default).split(",") if s.strip()]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    # store DB under the instance/ folder
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(BASE_DIR, 'instance', 'calendar.db')}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Timezone candidates, highest precedence first; TZ is the process default
    CALENDAR_TIMEZONE = os.environ.get("CALENDAR_TIMEZONE", "")
    APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "")

    # raw value; make_config corrects anything outside 0..6
    CALENDAR_FIRST_DAY_OF_WEEK = os.environ.get("CALENDAR_FIRST_DAY_OF_WEEK", "0")
    CALENDAR_CELEBRATIONS = _csv_env("CALENDAR_CELEBRATIONS")  # "12-25,2025-07-04"
    # epoch seconds in the date column instead of "YYYY-MM-DD HH:MM:SS" text
    CALENDAR_DATE_IS_TIMESTAMP = os.environ.get("CALENDAR_DATE_IS_TIMESTAMP", "false").lower() == "true"
    CALENDAR_DAY_NAMES = _csv_env("CALENDAR_DAY_NAMES", "Sun,Mon,Tue,Wed,Thu,Fri,Sat")

    # which Event attributes hold the date, time and title
    CALENDAR_DATE_FIELD = os.environ.get("CALENDAR_DATE_FIELD", "starts_at")
    CALENDAR_TIME_FIELD = os.environ.get("CALENDAR_TIME_FIELD", "starts_at")
    CALENDAR_TITLE_FIELD = os.environ.get("CALENDAR_TITLE_FIELD", "title")
