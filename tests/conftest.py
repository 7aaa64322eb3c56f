"""
Pytest configuration and fixtures for river_survey tests.
"""
import pytest

from river_survey import create_app
from river_survey.extensions import db
from river_survey.reporting.aggregator import HourWindow


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def window():
    return HourWindow(floor=16, ceiling=21, tz="UTC")


def make_row(rating, concert_date="2024-06-26", created_at="2024-06-26T18:30:00Z", feedback=None, id=None):
    return {
        "id": id,
        "concert_date": concert_date,
        "rating": rating,
        "feedback": feedback,
        "created_at": created_at,
    }


@pytest.fixture
def row():
    return make_row
