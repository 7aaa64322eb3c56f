from datetime import date
from typing import Optional

from flask import current_app


def concert_dates():
    return current_app.config["CONCERT_DATES"]


def is_valid_date(value: str) -> bool:
    return any(d == value for d, _ in concert_dates())


def parse_iso_date(value) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def long_date_label(value) -> str:
    """2024-06-26 -> 'Wednesday, June 26, 2024'"""
    d = parse_iso_date(value)
    if d is None:
        return str(value)
    return f"{d:%A, %B} {d.day}, {d.year}"
