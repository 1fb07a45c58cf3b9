import os
import sys
import sqlite3
import stat
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "sshdesk_test.db"
    # Point sshdesk to this temp DB
    os.environ["SSHDESK_DB_PATH"] = str(path)
    os.environ.pop("SSHDESK_CONFIG", None)
    os.environ.pop("SSHDESK_KEYGEN", None)
    from sshdesk.db import init_database
    init_database(str(path))
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from sshdesk.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("SSHDESK_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = ["servers", "ssh_keys", "settings", "operation_log"]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def fake_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


def _write_script(path: Path, body: str) -> str:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture()
def fake_keygen(tmp_path):
    """An ssh-keygen stand-in that writes both key files and records its arguments."""
    if os.name != "posix":
        pytest.skip("shell script stub needs a POSIX system")
    args_file = tmp_path / "keygen_args.txt"
    body = (
        f'printf "%s\\n" "$@" > "{args_file}"\n'
        'out=""\n'
        'while [ $# -gt 0 ]; do\n'
        '  case "$1" in\n'
        '    -f) out="$2"; shift 2;;\n'
        '    *) shift;;\n'
        '  esac\n'
        'done\n'
        'echo "PRIVATE KEY" > "$out"\n'
        'echo "ssh-ed25519 AAAAfake test" > "$out.pub"\n'
    )
    return _write_script(tmp_path / "fake-ssh-keygen", body)


@pytest.fixture()
def failing_keygen(tmp_path):
    if os.name != "posix":
        pytest.skip("shell script stub needs a POSIX system")
    body = 'echo "Saving key failed: no space left" >&2\nexit 1\n'
    return _write_script(tmp_path / "failing-ssh-keygen", body)
