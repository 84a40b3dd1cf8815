"""CLI helpers for chk.

Stderr message emitters with ASCII fallbacks, password-free rendering of
snapshot store URLs, and the ``-L NAME=LEVEL`` option parser.
"""

from .messages import error, success, warn
from .urls import describe_store, sanitize_url

__all__ = ["describe_store", "error", "sanitize_url", "success", "warn"]
