import hmac
import logging
import time
from typing import Callable

from feedback_desk.errors import AuthenticationError, AuthorizationError
from . import tokens

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"


class AuthService:
    """
    Shared-secret login and stateless bearer tokens.

    Tokens carry only a role claim and their issue time; nothing is stored
    server-side, so expiry (24h) or rotating SECRET_KEY are the only ways to
    revoke one.
    """

    def __init__(self, admin_secret: str, signing_key: str, salt: str = "admin-token-v1",
                 clock: Callable[[], float] = time.time,
                 ttl_seconds: int = tokens.ADMIN_TOKEN_TTL_SECONDS):
        if not admin_secret or not signing_key:
            raise ValueError("admin_secret and signing_key are required")
        self._admin_secret = admin_secret.encode("utf-8")
        self._serializer = tokens.serializer(signing_key, salt, clock=clock)
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_config(cls, config) -> "AuthService":
        return cls(
            admin_secret=config["ADMIN_PASSWORD"],
            signing_key=config["SECRET_KEY"],
            salt=config.get("ADMIN_TOKEN_SALT", "admin-token-v1"),
        )

    def login(self, supplied_secret) -> str:
        supplied = (supplied_secret if isinstance(supplied_secret, str) else "").encode("utf-8")
        # compare_digest: no early exit on the first differing byte
        if not hmac.compare_digest(supplied, self._admin_secret):
            logger.warning("admin_login_failed", extra={"event": "admin_login_failed"})
            raise AuthenticationError()
        logger.info("admin_login", extra={"event": "admin_login"})
        return tokens.generate(self._serializer, ROLE_ADMIN)

    def verify(self, token) -> str:
        if not token or not isinstance(token, str):
            raise AuthorizationError()
        role = tokens.verify(self._serializer, token, max_age_seconds=self.ttl_seconds)
        if role != ROLE_ADMIN:
            raise AuthorizationError("Invalid or expired token")
        return role
