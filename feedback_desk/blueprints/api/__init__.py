from flask import Blueprint

bp = Blueprint("api", __name__, url_prefix="/api")

# Import submodules so their @bp.route decorators register
from . import submit  # noqa: E402,F401
from . import auth  # noqa: E402,F401
from . import admin  # noqa: E402,F401
from . import health  # noqa: E402,F401
