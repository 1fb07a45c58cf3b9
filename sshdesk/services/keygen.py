"""
Key pair generation via an external ssh-keygen compatible executable.

Services depend on the KeyGenerator protocol only, so tests and alternative
backends can swap the implementation without touching storage code.
"""
from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from ..db import read_config_yaml
from ..errors import IoFailure, SubprocessFailure

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "ssh-keygen"
KEY_TYPE = "ed25519"


class KeyGenerator(Protocol):
    def generate(self, name: str) -> str:
        """Create a key pair called `name` and return the private key path."""
        ...


def resolve_executable() -> str:
    return os.environ.get("SSHDESK_KEYGEN") or read_config_yaml().get("ssh_keygen") or DEFAULT_EXECUTABLE


def _home_dir() -> Path:
    try:
        return Path.home()
    except (RuntimeError, KeyError) as e:
        raise IoFailure(f"Could not get home directory: {e}") from e


class SshKeygen:
    """Runs `<executable> -t ed25519 -f <path> -N ""` into the user's ~/.ssh directory."""

    def __init__(self, executable: Optional[str] = None, ssh_dir: Optional[Path] = None):
        self.executable = executable or resolve_executable()
        self._ssh_dir = Path(ssh_dir) if ssh_dir else None

    @property
    def ssh_dir(self) -> Path:
        return self._ssh_dir or _home_dir() / ".ssh"

    def ensure_ssh_dir(self) -> Path:
        ssh_dir = self.ssh_dir
        if ssh_dir.exists():
            return ssh_dir
        try:
            ssh_dir.mkdir(parents=True)
            if os.name == "posix":
                os.chmod(ssh_dir, 0o700)
        except OSError as e:
            raise IoFailure(f"Failed to create {ssh_dir}: {e}", path=str(ssh_dir)) from e
        logger.info("Created ssh directory %s", ssh_dir)
        return ssh_dir

    def key_path(self, name: str) -> Path:
        ssh_dir = self.ensure_ssh_dir()
        target = ssh_dir / name
        try:
            resolved_dir = ssh_dir.resolve()
            resolved = target.resolve()
            exists = target.exists() or Path(f"{target}.pub").exists()
        except (ValueError, OSError) as e:
            raise IoFailure(f"Invalid key name {name!r}: {e}", name=name) from e
        if resolved.parent != resolved_dir:
            raise IoFailure(
                f"Key name {name!r} resolves outside {ssh_dir}",
                name=name,
                path=str(resolved),
            )
        if exists:
            raise IoFailure(f"Key file already exists: {target}", name=name, path=str(target))
        return target

    def command(self, path: Path) -> list[str]:
        return [self.executable, "-t", KEY_TYPE, "-f", str(path), "-N", ""]

    def generate(self, name: str) -> str:
        path = self.key_path(name)
        try:
            path_str = os.fsdecode(path)
            path_str.encode("utf-8")
        except UnicodeError as e:
            raise IoFailure(f"Invalid path: {e}", name=name) from e

        cmd = self.command(path)
        logger.debug("Executing %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            raise SubprocessFailure(
                f"Failed to execute {self.executable}: {e}", command=cmd
            ) from e
        if proc.returncode != 0:
            logger.error("%s failed with %s", self.executable, proc.returncode)
            raise SubprocessFailure(
                f"{self.executable} failed: {proc.stderr.strip()}",
                command=cmd,
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
        logger.info("Generated %s key pair at %s", KEY_TYPE, path_str)
        return path_str
