from flask import current_app, request

from feedback_desk.errors import ValidationError


def client_identity() -> str:
    """
    Apparent client address. Feeds both the stored ip_address and the
    submission rate-limit key so the two always agree. When proxies are
    trusted, ProxyFix has already rewritten remote_addr from X-Forwarded-For.
    """
    return request.remote_addr or "unknown"


def bearer_token() -> str | None:
    header = request.headers.get("Authorization") or ""
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def service(name: str):
    return current_app.extensions["feedback_desk"][name]


def json_object() -> dict:
    """Request body as a dict; an absent body is {}, any other JSON value is a ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
