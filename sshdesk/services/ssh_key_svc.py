from __future__ import annotations

import logging
import os
from typing import List, Optional

from ..db import atomic, get_conn
from ..errors import IoFailure, NotFound, StorageFailure, storage_errors
from ..models import SshKey
from ..repository import ssh_key_repo
from .keygen import KeyGenerator, SshKeygen
from .utils import now_iso

logger = logging.getLogger(__name__)


def add_ssh_key(name: str, path: str, is_default: bool = False) -> int:
    """Register a key. When is_default is set, every other key loses the flag in the same transaction."""
    now = now_iso()
    with storage_errors("add_ssh_key", name=name, path=path), get_conn() as conn:
        with atomic(conn):
            if is_default:
                ssh_key_repo.clear_default(conn, now)
            key_id = ssh_key_repo.insert(conn, name, path, is_default, now)
    logger.info("SSH key '%s' added with id %s (default=%s)", name, key_id, is_default)
    return key_id


def get_ssh_key(id: int) -> SshKey:
    with storage_errors("get_ssh_key", id=id), get_conn() as conn:
        row = ssh_key_repo.get_one(conn, id)
    if row is None:
        raise NotFound(f"SSH key {id} not found", entity="ssh_key", id=id)
    return SshKey.from_row(row)


def get_ssh_keys() -> List[SshKey]:
    with storage_errors("get_ssh_keys"), get_conn() as conn:
        rows = ssh_key_repo.list_all(conn)
    return [SshKey.from_row(r) for r in rows]


def set_default_ssh_key(id: int) -> None:
    now = now_iso()
    with storage_errors("set_default_ssh_key", id=id), get_conn() as conn:
        with atomic(conn):
            ssh_key_repo.clear_default(conn, now)
            if ssh_key_repo.mark_default(conn, id, now) == 0:
                raise NotFound(f"SSH key {id} not found", entity="ssh_key", id=id)
    logger.info("SSH key %s set as default", id)


def delete_ssh_key(id: int, delete_file: bool = False) -> None:
    """
    Delete a key record, and optionally its private key file plus `<path>.pub`.

    The row delete is rolled back when the private key file cannot be removed.
    Removing the .pub companion is best effort.
    """
    with storage_errors("delete_ssh_key", id=id), get_conn() as conn:
        with atomic(conn):
            path = ssh_key_repo.get_path(conn, id)
            if path is None:
                raise NotFound(f"SSH key {id} not found", entity="ssh_key", id=id)
            ssh_key_repo.remove(conn, id)
            if delete_file:
                _remove_key_files(path)
    logger.info("SSH key %s deleted (delete_file=%s)", id, delete_file)


def _remove_key_files(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        raise IoFailure(f"Failed to delete key file: {e}", path=path) from e
    pub_path = f"{path}.pub"
    try:
        os.remove(pub_path)
    except OSError as e:
        logger.warning("Could not remove public key %s: %s", pub_path, e)


def generate_ssh_key(name: str, generator: Optional[KeyGenerator] = None) -> str:
    """
    Create a new key pair on disk and register it (not as default). Returns the private key path.

    If the record cannot be stored the freshly written key files are removed again.
    """
    gen = generator or SshKeygen()
    path = gen.generate(name)
    try:
        add_ssh_key(name, path, False)
    except StorageFailure:
        for p in (path, f"{path}.pub"):
            try:
                os.remove(p)
            except OSError as e:
                logger.warning("Could not remove unregistered key file %s: %s", p, e)
        raise
    return path
