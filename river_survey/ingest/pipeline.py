# river_survey/ingest/pipeline.py
import logging
from pathlib import Path
from typing import List, NamedTuple

import pandas as pd

from ..storage import SurveyStore
from .mapper import standardize_columns, to_date, to_feedback, to_rating, to_timestamp

logger = logging.getLogger(__name__)

ALLOWED = {".xlsx", ".xls", ".csv"}
REQUIRED = ("concert_date", "rating")


class IngestError(Exception):
    pass


class IngestWriteError(IngestError):
    """The sheet was fine but the store refused the rows."""


class IngestResult(NamedTuple):
    rows: int
    skipped: List[str]


def read_any(path: Path) -> pd.DataFrame:
    suf = path.suffix.lower()
    if suf not in ALLOWED:
        raise IngestError(f"Unsupported file type: {suf}")
    if suf == ".csv":
        try:
            return pd.read_csv(path, encoding="utf-8-sig")
        except UnicodeDecodeError:
            return pd.read_csv(path, encoding="latin-1")
    return pd.read_excel(path, engine="openpyxl" if suf == ".xlsx" else None)


def rows_from_frame(df: pd.DataFrame):
    """Map sheet rows to insertable dicts; returns (rows, skipped messages)."""
    df = standardize_columns(df.dropna(how="all"))
    missing = [c for c in REQUIRED if c not in df.columns]
    if missing:
        raise IngestError(f"Missing required columns: {missing}")

    rows, skipped = [], []
    for index, row in df.iterrows():
        line = index + 2  # header is line 1
        concert_date = to_date(row.get("concert_date"))
        rating = to_rating(row.get("rating"))
        if concert_date is None:
            skipped.append(f"Row {line}: invalid concert_date")
            continue
        if rating is None:
            skipped.append(f"Row {line}: rating must be 1-5")
            continue
        rows.append({
            "concert_date": concert_date,
            "rating": rating,
            "feedback": to_feedback(row.get("feedback")),
            # legacy rows may have no time at all; they stay NULL
            "created_at": to_timestamp(row.get("created_at")),
        })
    return rows, skipped


def ingest_file(path: Path, store: SurveyStore = None) -> IngestResult:
    """
    Read a CSV/Excel sheet of previously collected responses and store them.
    Invalid rows are skipped and reported; the valid ones go in one insert.
    """
    df = read_any(path)
    if df.empty:
        return IngestResult(0, [])
    rows, skipped = rows_from_frame(df)
    if not rows:
        return IngestResult(0, skipped)

    result = (store or SurveyStore()).insert(rows)
    if not result.ok:
        raise IngestWriteError(result.error)
    logger.info(f"Ingested {len(rows)} responses from {path.name} ({len(skipped)} skipped)")
    return IngestResult(len(rows), skipped)
