import logging
import uuid

from .concerts import is_valid_date, parse_iso_date
from .models import RATING_MAX, RATING_MIN, utcnow
from .storage import SurveyStore

logger = logging.getLogger(__name__)

RATING_REQUIRED = "Please select a rating."
SUBMIT_FAILED = "Something went wrong. Please try again."


class SubmissionError(Exception):
    """Input rejected before anything was written."""


class UnknownConcertDate(SubmissionError):
    pass


def new_token():
    return uuid.uuid4().hex


def parse_rating(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        rating = int(str(value).strip())
    except ValueError:
        return None
    if RATING_MIN <= rating <= RATING_MAX:
        return rating
    return None


def clean_feedback(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def build_submission(concert_date, rating, feedback=None, token=None, now=None):
    """Validate one form post and return the row to insert."""
    if not is_valid_date(str(concert_date)):
        raise UnknownConcertDate(f"unknown concert date {concert_date!r}")
    parsed = parse_rating(rating)
    if parsed is None:
        raise SubmissionError(RATING_REQUIRED)
    token = (str(token).strip()[:64] if token else "") or None
    return {
        "concert_date": parse_iso_date(concert_date),
        "rating": parsed,
        "feedback": clean_feedback(feedback),
        "created_at": now or utcnow(),
        "submission_token": token,
    }


def submit(concert_date, rating, feedback=None, token=None, store=None):
    """Build and write one response. Returns True when recorded."""
    row = build_submission(concert_date, rating, feedback, token)
    result = (store or SurveyStore()).insert([row])
    if not result.ok:
        logger.error(f"Error submitting survey for {concert_date}: {result.error}")
        return False
    return True
