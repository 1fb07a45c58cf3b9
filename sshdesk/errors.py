"""Error types raised by sshdesk commands.

Every failure a command can hit is one of four kinds. Each error keeps the
structured context of the failure (ids, paths, exit codes, stderr) so the
caller can show it or act on it without parsing message text.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Dict, Iterator


class SshDeskError(Exception):
    """Base error for all command failures."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "context": self.context}


class NotFound(SshDeskError):
    kind = "NotFound"
    status_code = 404


class StorageFailure(SshDeskError):
    kind = "StorageFailure"

    @property
    def is_constraint(self) -> bool:
        return bool(self.context.get("constraint"))

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return 409 if self.is_constraint else 500


class IoFailure(SshDeskError):
    kind = "IoFailure"


class SubprocessFailure(SshDeskError):
    kind = "SubprocessFailure"


@contextmanager
def storage_errors(operation: str, **context: Any) -> Iterator[None]:
    """Re-raise sqlite3 errors from the block as StorageFailure."""
    try:
        yield
    except sqlite3.IntegrityError as e:
        raise StorageFailure(f"{operation} failed: {e}", operation=operation, constraint=True, **context) from e
    except sqlite3.Error as e:
        raise StorageFailure(f"{operation} failed: {e}", operation=operation, **context) from e
