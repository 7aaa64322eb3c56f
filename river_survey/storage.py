# river_survey/storage.py
"""
Storage boundary for survey responses.

Everything above this module sees two calls, "write these rows" and "read all
rows", each answering with a ``StoreResult(data, error)``. Database exceptions
never escape: they are logged here, the session is rolled back, and callers get
an opaque error string.
"""
import logging
from typing import List, NamedTuple, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .extensions import db
from .models import SurveyResponse

logger = logging.getLogger(__name__)

TABLE = SurveyResponse.__tablename__
_ORDERABLE = {"id", "concert_date", "rating", "created_at"}


class StoreResult(NamedTuple):
    data: Optional[List[dict]]
    error: Optional[str]

    @property
    def ok(self) -> bool:
        return self.error is None


class SurveyStore:
    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def _existing_by_token(self, tokens):
        if not tokens:
            return {}
        found = self.session.query(SurveyResponse).filter(
            SurveyResponse.submission_token.in_(tokens)
        ).all()
        return {r.submission_token: r for r in found}

    def insert(self, rows: List[dict]) -> StoreResult:
        """Insert rows; a row whose submission_token is already stored is not written again."""
        tokens = [r["submission_token"] for r in rows if r.get("submission_token")]
        try:
            existing = self._existing_by_token(tokens)
            written = []
            for row in rows:
                token = row.get("submission_token")
                if token and token in existing:
                    logger.info(f"Duplicate submission token {token}, keeping the recorded response")
                    written.append(existing[token])
                    continue
                obj = SurveyResponse(
                    concert_date=row["concert_date"],
                    rating=row["rating"],
                    feedback=row.get("feedback"),
                    created_at=row.get("created_at"),
                    submission_token=token,
                )
                self.session.add(obj)
                written.append(obj)
            self.session.commit()
            return StoreResult([r.to_dict() for r in written], None)
        except IntegrityError as e:
            # Two requests raced with the same token: the other one won
            self.session.rollback()
            existing = self._existing_by_token(tokens)
            if tokens and len(rows) == len(tokens) and all(t in existing for t in tokens):
                return StoreResult([existing[t].to_dict() for t in tokens], None)
            logger.error(f"Insert into {TABLE} rejected: {e}")
            return StoreResult(None, "insert rejected")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Insert into {TABLE} failed: {e}")
            return StoreResult(None, "insert failed")

    def select(self, order_by: str = "concert_date", ascending: bool = True) -> StoreResult:
        if order_by not in _ORDERABLE:
            return StoreResult(None, f"cannot order by {order_by}")
        column = getattr(SurveyResponse, order_by)
        ordering = column.asc() if ascending else column.desc()
        try:
            rows = self.session.query(SurveyResponse).order_by(ordering, SurveyResponse.id).all()
            return StoreResult([r.to_dict() for r in rows], None)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Select from {TABLE} failed: {e}")
            return StoreResult(None, "select failed")
