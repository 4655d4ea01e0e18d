from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

db = SQLAlchemy()
migrate = Migrate()

# Login brute-force guard only. Submission throttling is the app-owned
# RateLimiter in services/rate_limit.py, keyed the same way (remote_addr,
# already rewritten by ProxyFix when proxies are trusted).
# Storage is configured in create_app() via limiter.init_app(...).
limiter = Limiter(key_func=get_remote_address)
