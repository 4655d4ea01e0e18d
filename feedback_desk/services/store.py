"""
Feedback persistence.

One contract (FeedbackStore), one SQLAlchemy implementation, and a thin
variant per relational backend that only supplies engine/pool options.
Callers never see SQLAlchemy or driver exceptions: every failure is rolled
back, logged in full and re-raised as PersistenceError.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, List, Optional, Type

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from feedback_desk.errors import PersistenceError
from feedback_desk.extensions import db
from feedback_desk.models import Feedback, STATUS_PENDING

logger = logging.getLogger(__name__)

# Fields a caller may supply to insert(); id/status/created_at belong to the store.
INSERT_FIELDS = (
    "type",
    "department",
    "target_role",
    "target_name",
    "description",
    "submitter_name",
    "submitter_phone",
    "ip_address",
)


def day_bounds_utc(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """[start, end) of a civil day in ``tz``, expressed in UTC."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


class FeedbackStore(ABC):
    backend: str = ""
    label: str = ""

    @abstractmethod
    def insert(self, fields: dict) -> int: ...

    @abstractmethod
    def get(self, feedback_id: int) -> Optional[Feedback]: ...

    @abstractmethod
    def list_all(self) -> List[Feedback]: ...

    @abstractmethod
    def update_status(self, feedback_id: int, status: str) -> bool: ...

    @abstractmethod
    def delete_by_id(self, feedback_id: int) -> bool: ...

    @abstractmethod
    def count_all(self) -> int: ...

    @abstractmethod
    def count_by_type(self, feedback_type: str) -> int: ...

    @abstractmethod
    def count_by_status(self, status: str) -> int: ...

    @abstractmethod
    def count_created_on(self, day: date, tz: tzinfo = timezone.utc) -> int: ...

    @abstractmethod
    def ping(self) -> None: ...


class SqlFeedbackStore(FeedbackStore):
    """Flask-SQLAlchemy implementation; needs an application context."""

    def __init__(self, database=None):
        self._db = database or db

    @property
    def session(self):
        return self._db.session

    @classmethod
    def engine_options(cls, url: str, pool_size: int = 10, pool_timeout: float = 10) -> dict:
        # Bounded pool: callers queue for up to pool_timeout, then TimeoutError -> PersistenceError.
        return {
            "pool_size": pool_size,
            "max_overflow": 0,
            "pool_timeout": pool_timeout,
            "pool_pre_ping": True,
        }

    def _fail(self, action: str, exc: Exception) -> PersistenceError:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            logger.exception("feedback_store_rollback_failed", extra={"event": "store_rollback_failed"})
        logger.exception(
            "feedback_store_error",
            extra={"event": "store_error", "action": action, "backend": self.backend, "error": repr(exc)},
        )
        return PersistenceError()

    # --- writes ---

    def insert(self, fields: dict) -> int:
        values = {k: fields.get(k) if fields.get(k) is not None else "" for k in INSERT_FIELDS}
        row = Feedback(**values, status=STATUS_PENDING)
        try:
            self.session.add(row)
            self.session.flush()
            new_id = int(row.id)
            self.session.commit()
            return new_id
        except SQLAlchemyError as exc:
            raise self._fail("insert", exc) from exc

    def update_status(self, feedback_id: int, status: str) -> bool:
        try:
            result = self.session.execute(
                update(Feedback).where(Feedback.id == feedback_id).values(status=status)
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update_status", exc) from exc
        # MySQL reports "changed" rows by default; re-check so an unchanged status still counts as found.
        if result.rowcount:
            return True
        return self.get(feedback_id) is not None

    def delete_by_id(self, feedback_id: int) -> bool:
        try:
            result = self.session.execute(delete(Feedback).where(Feedback.id == feedback_id))
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc
        return bool(result.rowcount)

    # --- reads ---

    def get(self, feedback_id: int) -> Optional[Feedback]:
        try:
            # populate_existing: an earlier bulk UPDATE bypasses the identity map
            return self.session.execute(
                select(Feedback).where(Feedback.id == feedback_id).execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._fail("get", exc) from exc

    def list_all(self) -> List[Feedback]:
        stmt = (
            select(Feedback)
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
            .execution_options(populate_existing=True)
        )
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise self._fail("list_all", exc) from exc

    def _count(self, *criteria) -> int:
        stmt = select(func.count(Feedback.id))
        for c in criteria:
            stmt = stmt.where(c)
        try:
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as exc:
            raise self._fail("count", exc) from exc

    def count_all(self) -> int:
        return self._count()

    def count_by_type(self, feedback_type: str) -> int:
        return self._count(Feedback.type == feedback_type)

    def count_by_status(self, status: str) -> int:
        return self._count(Feedback.status == status)

    def count_created_on(self, day: date, tz: tzinfo = timezone.utc) -> int:
        start, end = day_bounds_utc(day, tz)
        return self._count(Feedback.created_at >= start, Feedback.created_at < end)

    def ping(self) -> None:
        try:
            self.session.execute(select(1)).scalar_one()
        except SQLAlchemyError as exc:
            raise self._fail("ping", exc) from exc


class SQLiteFeedbackStore(SqlFeedbackStore):
    backend = "sqlite"
    label = "SQLite"

    @classmethod
    def engine_options(cls, url: str, pool_size: int = 10, pool_timeout: float = 10) -> dict:
        parsed = make_url(url)
        if parsed.database in (None, "", ":memory:"):
            # Flask-SQLAlchemy pins in-memory SQLite to a StaticPool; pool sizing does not apply.
            return {}
        options = super().engine_options(url, pool_size, pool_timeout)
        # pooled connections move between worker threads; timeout is the busy wait on a locked file
        options["connect_args"] = {"check_same_thread": False, "timeout": pool_timeout}
        return options


class PostgresFeedbackStore(SqlFeedbackStore):
    backend = "postgresql"
    label = "PostgreSQL"


class MySQLFeedbackStore(SqlFeedbackStore):
    backend = "mysql"
    label = "MySQL"

    @classmethod
    def engine_options(cls, url: str, pool_size: int = 10, pool_timeout: float = 10) -> dict:
        options = super().engine_options(url, pool_size, pool_timeout)
        # MySQL drops idle connections after wait_timeout (8h default)
        options["pool_recycle"] = 3600
        return options


STORE_VARIANTS: Dict[str, Type[SqlFeedbackStore]] = {
    cls.backend: cls for cls in (SQLiteFeedbackStore, PostgresFeedbackStore, MySQLFeedbackStore)
}
STORE_VARIANTS["mariadb"] = MySQLFeedbackStore


def store_class_for(url: str) -> Type[SqlFeedbackStore]:
    backend = make_url(url).get_backend_name()
    try:
        return STORE_VARIANTS[backend]
    except KeyError:
        raise RuntimeError(f"Unsupported database backend: {backend}") from None
