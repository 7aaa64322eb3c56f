# river_survey/reporting/aggregator.py
"""
Group survey responses by concert date and hour of submission.

Input rows are plain dicts in the shape the store returns
(``concert_date`` ISO date, ``rating`` 1..5, ``feedback`` or None,
``created_at`` ISO timestamp or None). Nothing here touches the database,
the clock, or the input list.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo

from ..models import RATING_MAX, RATING_MIN

logger = logging.getLogger(__name__)

RATING_BINS = RATING_MAX - RATING_MIN + 1


@dataclass(frozen=True)
class HourWindow:
    floor: int = 16
    ceiling: int = 21
    tz: str = "UTC"

    def hours(self):
        return list(range(self.floor, self.ceiling + 1))

    def clamp(self, hour: int) -> int:
        if hour > self.ceiling:
            return self.ceiling
        if hour < self.floor:
            return self.floor
        return hour


@dataclass
class HourBucket:
    total: int = 0
    ratings: List[int] = field(default_factory=lambda: [0] * RATING_BINS)
    feedback: List[str] = field(default_factory=list)
    responses: List[dict] = field(default_factory=list)


@dataclass
class DateSummary:
    concert_date: str
    total_responses: int = 0
    average_rating: float = 0.0
    rating_distribution: List[int] = field(default_factory=lambda: [0] * RATING_BINS)
    feedback: List[str] = field(default_factory=list)
    hourly: Dict[str, HourBucket] = field(default_factory=dict)

    def to_dict(self):
        return asdict(self)


def hour_key(hour: int) -> str:
    return f"{hour}:00"


def parse_timestamp(value) -> Optional[datetime]:
    """ISO string or datetime -> aware datetime; naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        stamp = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            stamp = datetime.fromisoformat(text)
        except ValueError:
            logger.warning(f"Unparseable created_at {value!r}, treating as unknown")
            return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


def date_key(value) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()[:10]


def bucket_hour(created_at, window: HourWindow) -> int:
    stamp = parse_timestamp(created_at)
    if stamp is None:
        # unknown submission time sorts as earliest
        return window.floor
    return window.clamp(stamp.astimezone(ZoneInfo(window.tz)).hour)


def aggregate(responses, window: Optional[HourWindow] = None) -> Dict[str, DateSummary]:
    """Build per-date summaries keyed by ISO concert date, in first-seen order."""
    window = window or HourWindow()
    summaries: Dict[str, DateSummary] = {}
    sums: Dict[str, int] = {}

    for response in responses:
        rating = response.get("rating")
        if not isinstance(rating, int) or not RATING_MIN <= rating <= RATING_MAX:
            logger.warning(f"Skipping response {response.get('id')} with rating {rating!r}")
            continue

        key = date_key(response.get("concert_date"))
        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = DateSummary(concert_date=key)
            sums[key] = 0

        hk = hour_key(bucket_hour(response.get("created_at"), window))
        bucket = summary.hourly.get(hk)
        if bucket is None:
            bucket = summary.hourly[hk] = HourBucket()

        index = rating - RATING_MIN
        feedback = response.get("feedback")

        summary.total_responses += 1
        sums[key] += rating
        summary.rating_distribution[index] += 1
        if feedback:
            summary.feedback.append(feedback)

        bucket.total += 1
        bucket.ratings[index] += 1
        if feedback:
            bucket.feedback.append(feedback)
        bucket.responses.append(response)

    for key, summary in summaries.items():
        summary.average_rating = sums[key] / summary.total_responses if summary.total_responses else 0.0

    return summaries


def sorted_newest_first(responses) -> List[dict]:
    """Drill-down order: newest submission first, unknown times last."""
    earliest = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(
        responses,
        key=lambda r: parse_timestamp(r.get("created_at")) or earliest,
        reverse=True,
    )
