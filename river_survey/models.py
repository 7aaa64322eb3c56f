from datetime import datetime, timezone

from .extensions import db

RATING_MIN = 1
RATING_MAX = 5


def utcnow():
    """Naive UTC timestamp, the form every created_at is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SurveyResponse(db.Model):
    __tablename__ = "survey_responses"
    __table_args__ = (
        db.CheckConstraint(f"rating BETWEEN {RATING_MIN} AND {RATING_MAX}", name="ck_rating_range"),
    )

    id = db.Column(db.Integer, primary_key=True)
    concert_date = db.Column(db.Date, nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)
    feedback = db.Column(db.Text)
    created_at = db.Column(db.DateTime)  # NULL for legacy imports
    submission_token = db.Column(db.String(64), unique=True, index=True)

    def to_dict(self):
        created = None
        if self.created_at is not None:
            stamp = self.created_at
            if stamp.tzinfo is None:
                stamp = stamp.replace(tzinfo=timezone.utc)
            created = stamp.isoformat()
        return {
            "id": self.id,
            "concert_date": self.concert_date.isoformat(),
            "rating": self.rating,
            "feedback": self.feedback,
            "created_at": created,
        }

    def __repr__(self):
        return f"<SurveyResponse {self.id} {self.concert_date} rating={self.rating}>"
