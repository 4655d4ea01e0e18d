import logging
import math
import time
from typing import Callable, Iterable, Optional

from limits import parse
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter

from feedback_desk.errors import ThrottledError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window admission control for public submissions, keyed by client
    identity only. Each instance owns its storage, so tests and apps never
    share counters by accident.
    """

    namespace = "feedback-submit"

    def __init__(self, limit: str = "10 per 10 minutes", storage_uri: str = "memory://",
                 exempt: Optional[Iterable[str]] = None, clock: Callable[[], float] = time.time):
        self.item = parse(limit)
        self.storage = storage_from_string(storage_uri)
        # Moving window: acquisition is a single atomic step per key in every limits backend.
        self._strategy = MovingWindowRateLimiter(self.storage)
        self.exempt = frozenset(exempt or ())
        # must read the same time source as the storage backend
        self._clock = clock

    @classmethod
    def from_config(cls, config) -> "RateLimiter":
        return cls(
            limit=config.get("SUBMIT_RATE_LIMIT", "10 per 10 minutes"),
            storage_uri=config.get("RATELIMIT_STORAGE_URI", "memory://"),
            exempt=config.get("RATELIMIT_EXEMPT_IPS", ()),
        )

    @property
    def window_seconds(self) -> int:
        return self.item.get_expiry()

    def hit(self, identity: str) -> None:
        """Count one submission for ``identity``; ThrottledError once the window is full."""
        if identity in self.exempt:
            return
        if self._strategy.hit(self.item, self.namespace, identity):
            return
        retry_after = self.retry_after(identity)
        logger.warning(
            "submission_throttled",
            extra={"event": "submission_throttled", "identity": identity, "retry_after": retry_after},
        )
        raise ThrottledError(retry_after=retry_after)

    def check(self, identity: str) -> bool:
        """True if a submission from ``identity`` would be admitted now (no side effect)."""
        if identity in self.exempt:
            return True
        return self._strategy.test(self.item, self.namespace, identity)

    def retry_after(self, identity: str) -> int:
        stats = self._strategy.get_window_stats(self.item, self.namespace, identity)
        return max(1, math.ceil(stats.reset_time - self._clock()))

    def reset(self) -> None:
        self.storage.reset()
