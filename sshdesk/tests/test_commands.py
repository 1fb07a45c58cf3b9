import json

import pytest

from sshdesk.commands import COMMANDS, command_names, invoke
from sshdesk.errors import NotFound
from sshdesk.logs import search_logs


def test_registry_exposes_every_command():
    assert set(command_names()) == {
        "init_app",
        "add_ssh_key", "get_ssh_key", "get_ssh_keys", "set_default_ssh_key", "delete_ssh_key", "generate_ssh_key",
        "add_server", "get_server", "get_servers", "update_server", "delete_server",
        "get_setting", "get_settings", "update_setting",
    }
    assert all(callable(fn) for fn in COMMANDS.values())


def test_invoke_by_name():
    x = invoke("add_ssh_key", {"name": "work", "path": "/home/u/.ssh/id1", "is_default": True})
    y = invoke("add_ssh_key", {"name": "home", "path": "/home/u/.ssh/id2", "is_default": True})
    keys = invoke("get_ssh_keys")
    assert [k["is_default"] for k in keys] == [False, True]
    assert invoke("get_ssh_key", {"id": y})["name"] == "home"

    assert invoke("set_default_ssh_key", {"id": x}) is None
    assert invoke("get_ssh_key", {"id": x})["is_default"] is True


def test_invoke_server_commands():
    sid = invoke("add_server", {"name": "s", "host": "h", "username": "u"})
    invoke("update_server", {"id": sid, "name": "s", "host": "h2", "username": "u", "port": 2022})
    assert invoke("get_server", {"id": sid})["host"] == "h2"
    invoke("delete_server", {"id": sid})
    assert invoke("get_servers") == []


def test_unknown_command_is_not_found():
    with pytest.raises(NotFound) as ei:
        invoke("format_disk")
    assert ei.value.context["name"] == "format_disk"


def test_bad_arguments_raise_type_error():
    with pytest.raises(TypeError):
        invoke("get_ssh_key", {"key": 1})
    with pytest.raises(TypeError):
        invoke("generate_ssh_key", {"name": "x", "generator": object()})


def test_invoke_route(client):
    r = client.post("/api/invoke/add_ssh_key", json={"name": "work", "path": "/k/1", "is_default": True})
    assert r.status_code == 200
    key_id = r.json()["result"]

    r = client.post("/api/invoke/get_ssh_key", json={"id": key_id})
    assert r.json()["result"]["path"] == "/k/1"

    assert client.post("/api/invoke/get_ssh_keys").json()["result"][0]["id"] == key_id
    assert client.post("/api/invoke/nope", json={}).status_code == 404
    assert client.post("/api/invoke/get_ssh_key", json={"bogus": 1}).status_code == 422
    assert "add_ssh_key" in client.get("/api/invoke").json()["commands"]


def test_cli_call_and_errors(capsys):
    from sshdesk_cli import main

    assert main(["call", "add_ssh_key", "name=work", "path=/home/u/.ssh/id1", "is_default=true"]) == 0
    key_id = json.loads(capsys.readouterr().out)
    assert invoke("get_ssh_key", {"id": key_id})["is_default"] is True

    assert main(["call", "get_ssh_key", f"id={key_id + 100}"]) == 1
    err = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert err["kind"] == "NotFound"

    assert main(["call", "get_ssh_key", "oops"]) == 2


def test_cli_lists_commands(capsys):
    from sshdesk_cli import main

    assert main(["commands"]) == 0
    assert "generate_ssh_key" in capsys.readouterr().out.split()


def test_invoke_records_mutations_once():
    key_id = invoke("add_ssh_key", {"name": "w", "path": "/k/w"})
    invoke("get_ssh_keys")
    with pytest.raises(NotFound):
        invoke("delete_ssh_key", {"id": key_id + 1})

    total, items = search_logs()
    assert total == 2
    deleted, added = items
    assert (added["command"], added["entity_id"], added["result"]) == ("add_ssh_key", str(key_id), "OK")
    assert (deleted["command"], deleted["error_kind"]) == ("delete_ssh_key", "NotFound")


def test_invoke_route_does_not_double_record(client):
    client.post("/api/invoke/add_server", json={"name": "s", "host": "h", "username": "u"})
    client.post("/api/invoke/add_server", json={"name": "s"})
    total, items = search_logs(entity_type="server")
    assert total == 2
    assert [i["result"] for i in items] == ["ERROR", "OK"]
    assert items[0]["error_kind"] == "InvalidArguments"
