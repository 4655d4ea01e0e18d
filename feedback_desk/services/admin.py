import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional
from zoneinfo import ZoneInfo

from feedback_desk.errors import NotFoundError, ValidationError
from feedback_desk.models import FEEDBACK_STATUSES, Feedback
from .store import FeedbackStore

logger = logging.getLogger(__name__)


class AdminService:
    """Reads and status changes for administrators; callers must have verified a token first."""

    def __init__(self, store: FeedbackStore, feedback_types: Iterable[str] = ("praise", "complaint", "suggestion"),
                 timezone_name: str = "Asia/Shanghai", clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.feedback_types = tuple(feedback_types)
        self.tz = ZoneInfo(timezone_name)
        self._clock = clock or (lambda: datetime.now(self.tz))

    def list(self) -> List[Feedback]:
        return self.store.list_all()

    def set_status(self, feedback_id: int, status) -> Feedback:
        if not isinstance(status, str) or status.strip().lower() not in FEEDBACK_STATUSES:
            raise ValidationError(f"Unknown status. Must be one of: {', '.join(FEEDBACK_STATUSES)}")
        status = status.strip().lower()
        if not self.store.update_status(feedback_id, status):
            raise NotFoundError()
        logger.info("feedback_status_changed",
                    extra={"event": "feedback_status_changed", "feedback_id": feedback_id, "status": status})
        row = self.store.get(feedback_id)
        if row is None:
            # deleted between the update and the re-read
            raise NotFoundError()
        return row

    def remove(self, feedback_id: int) -> None:
        if not self.store.delete_by_id(feedback_id):
            raise NotFoundError()
        logger.info("feedback_deleted", extra={"event": "feedback_deleted", "feedback_id": feedback_id})

    def today(self):
        """Current civil date in the institution's time zone."""
        return self._clock().astimezone(self.tz).date()

    def statistics(self) -> dict:
        return {
            "total": self.store.count_all(),
            "byType": {t: self.store.count_by_type(t) for t in self.feedback_types},
            "byStatus": {s: self.store.count_by_status(s) for s in FEEDBACK_STATUSES},
            "today": self.store.count_created_on(self.today(), self.tz),
            "timezone": self.tz.key,
        }
