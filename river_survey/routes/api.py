import logging
from datetime import datetime

from flask import Blueprint, abort, jsonify, request, send_file

from ..reporting.aggregator import aggregate, hour_key
from ..reporting.export import export_workbook
from ..reporting.render import drill_down
from ..storage import SurveyStore
from ..submission import RATING_REQUIRED, SUBMIT_FAILED, SubmissionError, UnknownConcertDate, submit
from .admin import current_window, load_summaries

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


@bp.get("/health")
def health():
    return {"status": "ok"}


@bp.post("/responses")
def create_response():
    """Record one survey response sent as JSON."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": RATING_REQUIRED}), 400
    try:
        recorded = submit(
            data.get("concert_date"),
            data.get("rating"),
            data.get("feedback"),
            data.get("submission_token"),
        )
    except UnknownConcertDate:
        return jsonify({"error": "unknown concert date"}), 404
    except SubmissionError:
        return jsonify({"error": RATING_REQUIRED}), 400
    if not recorded:
        return jsonify({"error": SUBMIT_FAILED}), 500
    return jsonify({"success": True}), 201


@bp.get("/report")
def report():
    summaries = load_summaries(current_window())
    if summaries is None:
        return jsonify({"error": "Error loading responses"}), 500
    return jsonify([s.to_dict() for s in summaries.values()])


@bp.get("/report/<date>/<int:hour>")
def report_bucket(date, hour):
    window = current_window()
    summaries = load_summaries(window)
    if summaries is None:
        return jsonify({"error": "Error loading responses"}), 500
    summary = summaries.get(date)
    if summary is None or hour not in window.hours():
        abort(404)
    return jsonify({
        "concert_date": date,
        "hour": hour_key(hour),
        "responses": drill_down(summary, hour_key(hour), window),
    })


@bp.get("/export")
def export():
    """Export every response plus the per-date summary to Excel"""
    result = SurveyStore().select(order_by="concert_date", ascending=False)
    if not result.ok:
        return jsonify({"error": "Export failed"}), 500
    if not result.data:
        return jsonify({"error": "No data to export"}), 404

    try:
        output = export_workbook(result.data, aggregate(result.data, current_window()))
    except Exception as e:
        logger.error(f"Export error: {str(e)}")
        return jsonify({"error": "Export failed"}), 500

    filename = f"survey_responses_{datetime.now().strftime('%Y%m%d')}.xlsx"
    return send_file(
        output,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=filename,
    )
