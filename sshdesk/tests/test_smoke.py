from sshdesk.db import get_conn


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "sshdesk-api"


def test_init_app_creates_default_settings(client, tmp_db_path):
    r = client.post("/api/app/init")
    assert r.status_code == 200
    assert tmp_db_path in r.json()["message"]

    with get_conn() as conn:
        rows = conn.execute("SELECT key, value FROM settings").fetchall()
    settings = {r["key"]: r["value"] for r in rows}
    assert settings["theme"] == "system"
    assert settings["default_port"] == "22"


def test_init_app_keeps_existing_values(client):
    client.post("/api/app/init")
    client.post("/api/settings/update", json={"key": "theme", "value": "dark"})
    client.post("/api/app/init")
    assert client.get("/api/settings/theme").json()["value"] == "dark"
