"""Report view models: emoji lookup, bar widths, hour slots and drill-down."""
import pytest

from river_survey.reporting.aggregator import aggregate
from river_survey.reporting.render import (
    RATING_EMOJIS,
    bar_width,
    build_report,
    drill_down,
    format_time,
    hour_label,
    rating_emoji,
)


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (1, 0), (5, 4), (3.4, 2), (3.5, 3), (4.49, 3), (0.2, 0), (7, 4),
    ])
    def test_rating_emoji_rounds_and_clamps(self, value, expected):
        assert rating_emoji(value) == RATING_EMOJIS[expected]

    def test_bar_width_never_divides_by_zero(self):
        assert bar_width(0, 0) == 0.0
        assert bar_width(1, 4) == 25.0

    def test_hour_labels(self, window):
        assert hour_label(16, window) == "4:00 PM"
        assert hour_label(20, window) == "8:00 PM"
        assert hour_label(21, window) == "9:00 PM+"

    def test_format_time(self, window):
        assert format_time("2024-06-26T18:05:00Z", window) == "6:05 PM"
        assert format_time(None, window) == "Time not recorded"


class TestBuildReport:

    def test_date_section(self, window, row):
        report = build_report(aggregate([row(5), row(3, feedback="ok")], window), window)

        assert len(report) == 1
        section = report[0]
        assert section["label"] == "Wednesday, June 26, 2024"
        assert section["total_responses"] == 2
        assert section["average_display"] == "4.0"
        assert section["average_emoji"] == RATING_EMOJIS[3]
        assert [b["width"] for b in section["bars"]] == [0.0, 0.0, 50.0, 0.0, 50.0]
        assert section["feedback"] == ["ok"]

    def test_every_hour_slot_is_present(self, window, row):
        report = build_report(aggregate([row(4)], window), window)
        slots = report[0]["hours"]

        assert [s["hour"] for s in slots] == [16, 17, 18, 19, 20, 21]
        empty = slots[0]
        assert empty["total"] == 0
        assert empty["submissions"] == 0
        assert all(b["width"] == 0.0 for b in empty["bars"])
        busy = slots[2]
        assert busy["total"] == 1
        assert busy["bars"][3]["width"] == 100.0

    def test_empty_report(self, window):
        assert build_report({}, window) == []


class TestDrillDown:

    def test_newest_first_and_formatted(self, window, row):
        responses = [
            row(2, created_at=None, id=1),
            row(5, created_at="2024-06-26T16:10:00Z", id=2, feedback="nice"),
            row(3, created_at="2024-06-26T16:40:00Z", id=3),
        ]
        summary = aggregate(responses, window)["2024-06-26"]
        rows = drill_down(summary, "16:00", window)

        assert [r["id"] for r in rows] == [3, 2, 1]
        assert rows[0]["time"] == "4:40 PM"
        assert rows[1]["feedback"] == "nice"
        assert rows[2]["time"] == "Time not recorded"
        assert rows[1]["emoji"] == RATING_EMOJIS[4]

    def test_unknown_bucket_is_empty(self, window, row):
        summary = aggregate([row(4)], window)["2024-06-26"]
        assert drill_down(summary, "20:00", window) == []
