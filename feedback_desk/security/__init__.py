from .headers import init_security
from .policy import admin_required

__all__ = ["admin_required", "init_security"]
