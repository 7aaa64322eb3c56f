import logging

from flask import Blueprint, abort, current_app, render_template

from ..concerts import long_date_label, parse_iso_date
from ..reporting.aggregator import HourWindow, aggregate, hour_key
from ..reporting.render import build_report, drill_down, hour_label
from ..storage import SurveyStore

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)


def current_window() -> HourWindow:
    cfg = current_app.config
    return HourWindow(floor=cfg["HOUR_FLOOR"], ceiling=cfg["HOUR_CEILING"], tz=cfg["REPORT_TIMEZONE"])


def load_summaries(window: HourWindow):
    """Read every response and aggregate. Returns None when the read fails."""
    result = SurveyStore().select(order_by="concert_date", ascending=False)
    if not result.ok:
        logger.error(f"Error fetching responses: {result.error}")
        return None
    return aggregate(result.data, window)


@bp.get("/admin")
def dashboard():
    window = current_window()
    summaries = load_summaries(window)
    if summaries is None:
        return render_template("error.html", message="Error loading responses"), 500
    return render_template("admin.html", report=build_report(summaries, window))


@bp.get("/admin/<date>/<int:hour>")
def submissions(date, hour):
    if parse_iso_date(date) is None:
        abort(404)
    window = current_window()
    summaries = load_summaries(window)
    if summaries is None:
        return render_template("error.html", message="Error loading responses"), 500
    summary = summaries.get(date)
    if summary is None or hour not in window.hours():
        abort(404)
    return render_template(
        "submissions.html",
        date_label=long_date_label(date),
        hour_label=hour_label(hour, window),
        hour_key=hour_key(hour),
        responses=drill_down(summary, hour_key(hour), window),
    )
