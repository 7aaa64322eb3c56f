from flask import Blueprint, abort, current_app, render_template, request

from ..concerts import concert_dates, is_valid_date, long_date_label
from ..submission import (
    RATING_REQUIRED,
    SUBMIT_FAILED,
    SubmissionError,
    new_token,
    parse_rating,
    submit,
)
from ..reporting.render import RATING_EMOJIS

bp = Blueprint("survey", __name__)


@bp.get("/")
def home():
    return render_template("index.html", concerts=concert_dates())


def _render_form(date, status=None, error=None, rating=None, feedback="", token=None, code=200):
    page = render_template(
        "survey.html",
        date=date,
        title=f"Music on the River - {long_date_label(date)}",
        emojis=RATING_EMOJIS,
        status=status,
        error=error,
        rating=rating,
        feedback=feedback,
        token=token or new_token(),
        reset_seconds=current_app.config["SUCCESS_RESET_SECONDS"],
    )
    return page, code


@bp.get("/<date>")
def survey_form(date):
    if not is_valid_date(date):
        abort(404)
    return _render_form(date)


@bp.post("/<date>")
def survey_submit(date):
    if not is_valid_date(date):
        abort(404)
    rating = request.form.get("rating")
    feedback = request.form.get("feedback", "")
    token = request.form.get("submission_token")
    try:
        recorded = submit(date, rating, feedback, token)
    except SubmissionError:
        return _render_form(date, error=RATING_REQUIRED, feedback=feedback, token=token, code=400)
    if not recorded:
        # same token on retry, so a write that did land is not doubled
        return _render_form(
            date, error=SUBMIT_FAILED, rating=parse_rating(rating),
            feedback=feedback, token=token, code=500,
        )
    return _render_form(date, status="success")
