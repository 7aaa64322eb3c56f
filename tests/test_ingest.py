"""Legacy spreadsheet import."""
import io

import pandas as pd
import pytest

from river_survey.ingest.pipeline import IngestError, ingest_file, rows_from_frame
from river_survey.models import SurveyResponse

CSV = (
    "Concert Date,Rating,Comments,Submitted At\n"
    "2024-06-26,5,Loved it,2024-06-26T18:30:00Z\n"
    "2024-06-26,3,,\n"
    "not-a-date,4,bad date,\n"
    "2024-07-31,9,bad rating,\n"
    ",,,\n"
)


class TestRowsFromFrame:

    def test_maps_aliases_and_skips_invalid_rows(self):
        rows, skipped = rows_from_frame(pd.read_csv(io.StringIO(CSV)))

        assert [r["rating"] for r in rows] == [5, 3]
        assert rows[0]["feedback"] == "Loved it"
        assert rows[0]["created_at"].hour == 18
        assert rows[0]["created_at"].tzinfo is None
        assert rows[1]["feedback"] is None
        assert rows[1]["created_at"] is None
        assert skipped == ["Row 4: invalid concert_date", "Row 5: rating must be 1-5"]

    def test_missing_required_column(self):
        with pytest.raises(IngestError):
            rows_from_frame(pd.DataFrame({"feedback": ["hi"]}))


class TestIngestFile:

    def test_csv_is_stored(self, app_ctx, tmp_path):
        path = tmp_path / "legacy.csv"
        path.write_text(CSV, encoding="utf-8")

        result = ingest_file(path)

        assert result.rows == 2
        assert len(result.skipped) == 2
        assert SurveyResponse.query.count() == 2
        assert SurveyResponse.query.filter(SurveyResponse.created_at.is_(None)).count() == 1

    def test_unsupported_suffix(self, app_ctx, tmp_path):
        path = tmp_path / "legacy.txt"
        path.write_text("x", encoding="utf-8")
        with pytest.raises(IngestError):
            ingest_file(path)


class TestUploadRoute:

    def test_upload_csv(self, app, client):
        resp = client.post(
            "/api/v1/ingest/upload",
            data={"file": (io.BytesIO(CSV.encode("utf-8")), "legacy.csv")},
            content_type="multipart/form-data",
        )
        body = resp.get_json()

        assert resp.status_code == 200
        assert body["message"] == "ingested"
        assert body["rows"] == 2
        with app.app_context():
            assert SurveyResponse.query.count() == 2

    def test_upload_sanitizes_filename(self, app, client):
        resp = client.post(
            "/api/v1/ingest/upload",
            data={"file": (io.BytesIO(CSV.encode("utf-8")), "../../old responses.csv")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 200
        assert resp.get_json()["rows"] == 2

    def test_upload_requires_file(self, client):
        resp = client.post("/api/v1/ingest/upload", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "no file"}

    def test_upload_rejects_other_formats(self, client):
        resp = client.post(
            "/api/v1/ingest/upload",
            data={"file": (io.BytesIO(b"hello"), "notes.txt")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "invalid format"}
