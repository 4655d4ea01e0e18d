from functools import wraps

from feedback_desk.utils.helpers import bearer_token, service


def admin_required(fn):
    """Reject the request with AuthorizationError before the view (and the store) runs."""
    @wraps(fn)
    def _wrap(*args, **kwargs):
        service("auth").verify(bearer_token())
        return fn(*args, **kwargs)
    return _wrap
