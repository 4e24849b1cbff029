from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()


class Job(db.Model):
    """A booked job on the calendar."""
    __tablename__ = "jobs"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(256), nullable=False, default="Job")
    client_name = db.Column(db.String(128), nullable=True)
    site_address = db.Column(db.String(256), nullable=True)

    # Free-form status; normalized by the scheduling engine ('open' == 'scheduled')
    status = db.Column(db.String(32), nullable=True, default="scheduled")

    # Schedule. end_date is always derived from start_date + duration_days
    start_date = db.Column(db.Date, nullable=True, index=True)
    end_date = db.Column(db.Date, nullable=True)
    duration_days = db.Column(db.Integer, nullable=True)
    include_weekends = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Job {self.id} - {self.title} - {self.start_date}>"

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'client_name': self.client_name,
            'site_address': self.site_address,
            'status': self.status,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'duration_days': self.duration_days,
            'include_weekends': bool(self.include_weekends),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
