import pandas as pd

from ..concerts import parse_iso_date
from ..submission import clean_feedback, parse_rating

# Legacy sheet headers -> response fields
COL_MAP = {
    "concert_date": "concert_date",
    "concert": "concert_date",
    "date": "concert_date",
    "rating": "rating",
    "score": "rating",
    "feedback": "feedback",
    "comment": "feedback",
    "comments": "feedback",
    "created_at": "created_at",
    "submitted_at": "created_at",
    "timestamp": "created_at",
}


def standardize_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    df.columns = [COL_MAP.get(c, c) for c in df.columns]
    return df


def _missing(v) -> bool:
    return v is None or (isinstance(v, float) and pd.isna(v)) or v is pd.NaT


def to_date(v):
    if _missing(v):
        return None
    if isinstance(v, pd.Timestamp):
        return v.date()
    return parse_iso_date(v)


def to_rating(v):
    if _missing(v):
        return None
    if isinstance(v, float) and v.is_integer():
        v = int(v)
    return parse_rating(v)


def to_feedback(v):
    if _missing(v):
        return None
    return clean_feedback(v)


def to_timestamp(v):
    """Naive UTC datetime, or None when the sheet has no usable time."""
    if _missing(v):
        return None
    stamp = pd.to_datetime(v, errors="coerce", utc=True)
    if pd.isna(stamp):
        return None
    return stamp.tz_convert(None).to_pydatetime()
