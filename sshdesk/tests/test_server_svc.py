import pytest

from sshdesk.errors import NotFound, StorageFailure
from sshdesk.models import ServerInput
from sshdesk.services.server_svc import add_server, delete_server, get_server, get_servers, update_server
from sshdesk.services.ssh_key_svc import add_ssh_key


def _server(**kw):
    base = {"name": "web", "host": "web.example.com", "username": "deploy"}
    base.update(kw)
    return ServerInput(**base)


def test_add_get_with_defaults():
    server_id = add_server(_server(description="frontend"))
    s = get_server(server_id)
    assert s.id == server_id
    assert s.port == 22
    assert s.ssh_key_id is None
    assert s.description == "frontend"
    assert s.created_at == s.updated_at


def test_server_references_ssh_key():
    key_id = add_ssh_key("deploy", "/keys/deploy", True)
    server_id = add_server(_server(ssh_key_id=key_id))
    assert get_server(server_id).ssh_key_id == key_id


def test_unknown_ssh_key_reference_is_rejected():
    with pytest.raises(StorageFailure) as ei:
        add_server(_server(ssh_key_id=999))
    assert ei.value.is_constraint


def test_name_unique_and_port_range_enforced_by_storage():
    add_server(_server())
    with pytest.raises(StorageFailure):
        add_server(_server(host="other"))
    with pytest.raises(StorageFailure):
        add_server(_server(name="bad-port", port=70000))


def test_update_server():
    server_id = add_server(_server())
    update_server(server_id, _server(host="10.0.0.5", port=2222, username="admin"))
    s = get_server(server_id)
    assert (s.host, s.port, s.username) == ("10.0.0.5", 2222, "admin")


def test_update_missing_server_raises_not_found():
    with pytest.raises(NotFound):
        update_server(404, _server())


def test_list_and_delete():
    a = add_server(_server(name="a"))
    b = add_server(_server(name="b"))
    assert [s.id for s in get_servers()] == [a, b]

    delete_server(a)
    assert [s.id for s in get_servers()] == [b]
    with pytest.raises(NotFound):
        get_server(a)
    with pytest.raises(NotFound):
        delete_server(a)
