#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
sshdesk command line (SQLite + ssh-keygen)

Commands:
  init                Create the database schema and default settings
  commands            List every invokable command name
  call NAME [k=v..]   Invoke a named command, e.g. `call add_ssh_key name=work path=/home/me/.ssh/id1 is_default=true`
  serve               Run the local HTTP API with uvicorn

Notes:
- Values given as k=v are parsed as JSON when possible (true, 3, null), else kept as strings.
- The database location follows SSHDESK_DB_PATH, then config.yaml, then ~/.sshdesk/sshdesk.db.
"""

import argparse
import json
import logging
import os
import sys

from sshdesk.commands import command_names, invoke
from sshdesk.errors import SshDeskError
from sshdesk.services.app_svc import init_app


def parse_kv(pairs):
    out = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"expected key=value, got {item!r}")
        k, v = item.split("=", 1)
        try:
            out[k] = json.loads(v)
        except ValueError:
            out[k] = v
    return out


def cmd_init(args):
    print(init_app())


def cmd_commands(args):
    for name in command_names():
        print(name)


def cmd_call(args):
    result = invoke(args.name, parse_kv(args.args))
    print(json.dumps(result, ensure_ascii=False, indent=2))


def cmd_serve(args):
    import uvicorn
    uvicorn.run("sshdesk.api:app", host=args.host, port=args.port)


def main(argv=None):
    parser = argparse.ArgumentParser(description="SSH key and server manager (SQLite)")
    parser.add_argument("--config", default=None, help="path to config.yaml")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create schema and default settings")
    p_init.set_defaults(func=cmd_init)

    p_cmds = sub.add_parser("commands", help="list command names")
    p_cmds.set_defaults(func=cmd_commands)

    p_call = sub.add_parser("call", help="invoke a named command")
    p_call.add_argument("name")
    p_call.add_argument("args", nargs="*", help="key=value arguments")
    p_call.set_defaults(func=cmd_call)

    p_serve = sub.add_parser("serve", help="run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8765)
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.config:
        os.environ["SSHDESK_CONFIG"] = args.config
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        args.func(args)
    except SshDeskError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1
    except (TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
