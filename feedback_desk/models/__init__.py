from .feedback import (
    Feedback,
    FEEDBACK_STATUSES,
    FIELD_MAX_LENGTHS,
    STATUS_PENDING,
    STATUS_PROCESSING,
    STATUS_RESOLVED,
    STATUS_REJECTED,
)

__all__ = [
    "Feedback",
    "FEEDBACK_STATUSES",
    "FIELD_MAX_LENGTHS",
    "STATUS_PENDING",
    "STATUS_PROCESSING",
    "STATUS_RESOLVED",
    "STATUS_REJECTED",
]
