class FeedbackDeskError(Exception):
    """Base for every failure the API reports as ``{success: false, message}``."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FeedbackDeskError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(FeedbackDeskError):
    status_code = 401
    default_message = "Invalid password"


class AuthorizationError(FeedbackDeskError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(FeedbackDeskError):
    status_code = 404
    default_message = "Feedback not found"


class ThrottledError(FeedbackDeskError):
    status_code = 429
    default_message = "Too many submissions, please try again later"

    def __init__(self, message: str | None = None, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class PersistenceError(FeedbackDeskError):
    # Message is what the client sees; driver details stay in the server log.
    status_code = 500
    default_message = "Storage unavailable, please try again later"
