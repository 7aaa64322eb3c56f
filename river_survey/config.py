import os
import tempfile
from dotenv import load_dotenv
load_dotenv()

DEFAULT_CONCERT_DATES = (
    "2024-01-01=Test Date;"
    "2024-03-19=Today's Test Date;"
    "2024-06-26=June 26th, 2024;"
    "2024-07-31=July 31st, 2024;"
    "2024-08-28=August 28th, 2024;"
    "2024-09-25=September 25th, 2024"
)


def _database_url():
    url = os.getenv("DATABASE_URL", "sqlite:///river_survey.db")
    # SQLAlchemy 1.4+ no longer accepts the postgres:// scheme
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def parse_concert_dates(raw: str):
    """'2024-06-26=June 26th, 2024;...' -> [("2024-06-26", "June 26th, 2024"), ...]"""
    pairs = []
    for chunk in raw.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        date, _, label = chunk.partition("=")
        date = date.strip()
        pairs.append((date, label.strip() or date))
    return pairs


class Settings:
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key")
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Reporting window: hours outside [HOUR_FLOOR, HOUR_CEILING] collapse into the edge buckets
    REPORT_TIMEZONE = os.getenv("REPORT_TIMEZONE", "UTC")
    HOUR_FLOOR = int(os.getenv("HOUR_FLOOR", 16))
    HOUR_CEILING = int(os.getenv("HOUR_CEILING", 21))

    CONCERT_DATES = parse_concert_dates(os.getenv("CONCERT_DATES", DEFAULT_CONCERT_DATES))
    SUCCESS_RESET_SECONDS = int(os.getenv("SUCCESS_RESET_SECONDS", 1))


class DevelopmentConfig(Settings):
    DEBUG = True
    TESTING = False


class ProductionConfig(Settings):
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_timeout": 20,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
    }


class TestingConfig(Settings):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    UPLOAD_DIR = os.path.join(tempfile.gettempdir(), "river_survey_uploads")
    SQLALCHEMY_ENGINE_OPTIONS = {}
    REPORT_TIMEZONE = "UTC"
    HOUR_FLOOR = 16
    HOUR_CEILING = 21
    CONCERT_DATES = parse_concert_dates(DEFAULT_CONCERT_DATES)


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
