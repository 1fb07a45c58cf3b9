from __future__ import annotations

# sshdesk/services/utils.py
import datetime as dt


def now_iso() -> str:
    """Current local time as an RFC 3339 string, e.g. 2026-10-16T09:30:00.123456+02:00."""
    return dt.datetime.now().astimezone().isoformat()
