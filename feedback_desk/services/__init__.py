"""Feedback lifecycle services; instances are built and owned by create_app()."""
from .admin import AdminService
from .auth import AuthService
from .rate_limit import RateLimiter
from .sanitizer import sanitize
from .store import FeedbackStore, store_class_for
from .submission import SubmissionService

__all__ = [
    "AdminService",
    "AuthService",
    "FeedbackStore",
    "RateLimiter",
    "SubmissionService",
    "sanitize",
    "store_class_for",
]
