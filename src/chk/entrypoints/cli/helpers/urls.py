"""Display helpers for snapshot store locations."""

from __future__ import annotations

from sqlalchemy.engine import make_url

from chk.config import Settings


def sanitize_url(url: str) -> str:
    """Render a database URL with its password replaced by ``***``."""
    return make_url(url).render_as_string(hide_password=True)


def describe_store(settings: Settings) -> str:
    """Human-readable location of the configured snapshot store."""
    if settings.snapshot_url:
        return sanitize_url(settings.snapshot_url)
    return str(settings.snapshot_dir)
