# river_survey/reporting/export.py
from io import BytesIO

import pandas as pd

from .aggregator import RATING_BINS

RESPONSE_COLUMNS = ["id", "concert_date", "rating", "feedback", "created_at"]


def responses_frame(rows) -> pd.DataFrame:
    df = pd.DataFrame(list(rows), columns=RESPONSE_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce", utc=True, format="ISO8601").dt.tz_localize(None)
    return df


def summary_frame(summaries) -> pd.DataFrame:
    records = []
    for summary in summaries.values():
        rec = {
            "concert_date": summary.concert_date,
            "total_responses": summary.total_responses,
            "average_rating": round(summary.average_rating, 2),
        }
        for i in range(RATING_BINS):
            rec[f"rating_{i + 1}"] = summary.rating_distribution[i]
        rec["feedback_count"] = len(summary.feedback)
        records.append(rec)
    columns = ["concert_date", "total_responses", "average_rating"]
    columns += [f"rating_{i + 1}" for i in range(RATING_BINS)] + ["feedback_count"]
    return pd.DataFrame(records, columns=columns)


def export_workbook(rows, summaries) -> BytesIO:
    """Two-sheet xlsx: raw responses and the per-date summary."""
    output = BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        responses_frame(rows).to_excel(writer, sheet_name="Responses", index=False)
        summary_frame(summaries).to_excel(writer, sheet_name="Summary", index=False)
    output.seek(0)
    return output
