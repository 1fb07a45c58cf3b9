"""
Named command registry.

Maps each externally invokable command name to its service function, so any
front end (HTTP invoke route, CLI) dispatches by name with keyword arguments.
"""
from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from .errors import NotFound
from .logs import record
from .models import ServerInput
from .services import app_svc, server_svc, setting_svc, ssh_key_svc


def _add_server(**fields) -> int:
    return server_svc.add_server(ServerInput(**fields))


def _update_server(id: int, **fields) -> None:
    return server_svc.update_server(id, ServerInput(**fields))


COMMANDS: Dict[str, Callable[..., Any]] = {
    "init_app": app_svc.init_app,

    "add_ssh_key": ssh_key_svc.add_ssh_key,
    "get_ssh_key": ssh_key_svc.get_ssh_key,
    "get_ssh_keys": ssh_key_svc.get_ssh_keys,
    "set_default_ssh_key": ssh_key_svc.set_default_ssh_key,
    "delete_ssh_key": ssh_key_svc.delete_ssh_key,
    "generate_ssh_key": ssh_key_svc.generate_ssh_key,

    "add_server": _add_server,
    "get_server": server_svc.get_server,
    "get_servers": server_svc.get_servers,
    "update_server": _update_server,
    "delete_server": server_svc.delete_server,

    "get_setting": setting_svc.get_setting,
    "get_settings": setting_svc.get_settings,
    "update_setting": setting_svc.update_setting,
}

# Arguments callers may not pass over the command boundary.
_INTERNAL_ARGS = {"generator"}


def command_names() -> list[str]:
    return sorted(COMMANDS)


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


def invoke(name: str, args: Optional[Dict[str, Any]] = None) -> Any:
    """
    Run command `name` with keyword `args` and return a JSON-ready result.

    Raises NotFound for an unknown command and TypeError for arguments the
    command does not accept. Mutating commands are written to the operation log.
    """
    fn = COMMANDS.get(name)
    if fn is None:
        raise NotFound(f"Unknown command '{name}'", entity="command", name=name)
    args = dict(args or {})
    blocked = _INTERNAL_ARGS.intersection(args)
    if blocked:
        raise TypeError(f"{name}() got unexpected argument(s): {', '.join(sorted(blocked))}")
    with record(name, args) as op:
        inspect.signature(fn).bind(**args)
        result = fn(**args)
        op.done(result)
    return _to_plain(result)
