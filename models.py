# models.py
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


# --- Events ---
class Event(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    # "YYYY-MM-DD HH:MM:SS" in the calendar timezone, so range filters compare as text
    starts_at = db.Column(db.String(19), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    notes = db.Column(db.Text)

    def get(self, name, default=None):
        """Field access for the event binder."""
        return getattr(self, name, default)

    def __repr__(self):
        return f"<Event {self.starts_at} {self.title!r}>"
