# river_survey/reporting/render.py
"""View models for the admin report; templates only print what is built here."""
import math
from typing import Dict, List
from zoneinfo import ZoneInfo

from ..concerts import long_date_label
from .aggregator import (
    DateSummary,
    HourBucket,
    HourWindow,
    hour_key,
    parse_timestamp,
    sorted_newest_first,
)

RATING_EMOJIS = ["😞", "😐", "🙂", "😊", "😄"]


def rating_emoji(value) -> str:
    """Emoji for a 1..5 value; averages round half up and clamp to the table."""
    if value is None:
        return ""
    index = int(math.floor(float(value) + 0.5)) - 1
    index = max(0, min(index, len(RATING_EMOJIS) - 1))
    return RATING_EMOJIS[index]


def bar_width(count: int, total: int) -> float:
    if not total:
        return 0.0
    return count / total * 100


def hour_label(hour: int, window: HourWindow) -> str:
    label = f"{hour % 12 or 12}:00 {'PM' if hour >= 12 else 'AM'}"
    if hour == window.ceiling:
        label += "+"
    return label


def format_time(value, window: HourWindow) -> str:
    stamp = parse_timestamp(value)
    if stamp is None:
        return "Time not recorded"
    local = stamp.astimezone(ZoneInfo(window.tz))
    return f"{local.hour % 12 or 12}:{local.minute:02d} {'PM' if local.hour >= 12 else 'AM'}"


def _bars(counts: List[int], total: int):
    return [
        {"rating": i + 1, "emoji": RATING_EMOJIS[i], "count": c, "width": bar_width(c, total)}
        for i, c in enumerate(counts)
    ]


def hour_slots(summary: DateSummary, window: HourWindow):
    slots = []
    for hour in window.hours():
        key = hour_key(hour)
        bucket = summary.hourly.get(key) or HourBucket()
        slots.append({
            "hour": hour,
            "key": key,
            "label": hour_label(hour, window),
            "total": bucket.total,
            # empty buckets scale against 1
            "bars": _bars(bucket.ratings, bucket.total or 1),
            "submissions": len(bucket.responses),
        })
    return slots


def build_report(summaries: Dict[str, DateSummary], window: HourWindow):
    report = []
    for summary in summaries.values():
        report.append({
            "concert_date": summary.concert_date,
            "label": long_date_label(summary.concert_date),
            "total_responses": summary.total_responses,
            "average_rating": summary.average_rating,
            "average_display": f"{summary.average_rating:.1f}",
            "average_emoji": rating_emoji(summary.average_rating) if summary.total_responses else "",
            "bars": _bars(summary.rating_distribution, summary.total_responses),
            "hours": hour_slots(summary, window),
            "feedback": list(summary.feedback),
        })
    return report


def drill_down(summary: DateSummary, key: str, window: HourWindow):
    bucket = summary.hourly.get(key) or HourBucket()
    return [
        {
            "id": r.get("id"),
            "rating": r["rating"],
            "emoji": rating_emoji(r["rating"]),
            "time": format_time(r.get("created_at"), window),
            "feedback": r.get("feedback"),
            "created_at": r.get("created_at"),
        }
        for r in sorted_newest_first(bucket.responses)
    ]
