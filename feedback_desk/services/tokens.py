import time
from typing import Callable, Optional

from itsdangerous import BadPayload, BadSignature, SignatureExpired, TimestampSigner, URLSafeTimedSerializer

ADMIN_TOKEN_TTL_SECONDS = 24 * 60 * 60


class ClockedTimestampSigner(TimestampSigner):
    """TimestampSigner that reads time from an injectable clock."""

    def __init__(self, *args, clock: Callable[[], float] = time.time, **kwargs):
        super().__init__(*args, **kwargs)
        self._clock = clock

    def get_timestamp(self) -> int:
        return int(self._clock())


def serializer(secret: str, salt: str, clock: Callable[[], float] = time.time) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(
        secret_key=secret,
        salt=salt,
        signer=ClockedTimestampSigner,
        signer_kwargs={"clock": clock},
    )


def generate(ser: URLSafeTimedSerializer, role: str) -> str:
    return ser.dumps({"role": role})


def verify(ser: URLSafeTimedSerializer, token: str, max_age_seconds: int = ADMIN_TOKEN_TTL_SECONDS) -> Optional[str]:
    """Role claim of a valid, unexpired token, else None."""
    try:
        data = ser.loads(token, max_age=max_age_seconds)
    except (BadSignature, SignatureExpired, BadPayload):
        return None
    if not isinstance(data, dict):
        return None
    return data.get("role")
