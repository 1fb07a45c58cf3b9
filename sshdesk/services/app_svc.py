from __future__ import annotations

import logging

from ..db import init_database
from ..errors import storage_errors
from .setting_svc import ensure_default_settings

logger = logging.getLogger(__name__)


def init_app() -> str:
    """Create the schema if absent and seed default settings. Safe to call on every start."""
    with storage_errors("init_database"):
        path = init_database()
    logger.info("SQLite database ready at %s", path)
    ensure_default_settings()
    logger.info("Default settings initialized")
    return f"Database initialized at {path}"
