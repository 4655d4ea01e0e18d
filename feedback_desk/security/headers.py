from flask_talisman import Talisman

# JSON only: nothing may be loaded, framed or submitted from our responses.
API_CSP = {
    "default-src": "'none'",
    "frame-ancestors": "'none'",
    "base-uri": "'none'",
    "form-action": "'none'",
}


def init_security(app):
    """Security headers for staging/production. HTTPS redirect follows FORCE_HTTPS."""
    Talisman(
        app,
        content_security_policy=API_CSP,
        force_https=app.config.get("FORCE_HTTPS", True),
        strict_transport_security=app.config.get("FORCE_HTTPS", True),
        session_cookie_secure=True,
        frame_options="DENY",
        referrer_policy="no-referrer",
    )
    return app
