from __future__ import annotations

from sqlite3 import Row
from typing import Optional

from pydantic import BaseModel, Field


class SshKey(BaseModel):
    """An SSH private key known to the app."""

    id: Optional[int] = None
    name: str
    path: str
    is_default: bool = False
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, r: Row) -> "SshKey":
        return cls(
            id=r["id"],
            name=r["name"],
            path=r["path"],
            is_default=bool(r["is_default"]),
            created_at=r["created_at"],
            updated_at=r["updated_at"],
        )


class ServerInput(BaseModel):
    """Editable fields of a server record."""

    name: str
    host: str
    port: int = 22
    username: str
    ssh_key_id: Optional[int] = None
    description: Optional[str] = None


class Server(ServerInput):
    id: Optional[int] = None
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, r: Row) -> "Server":
        return cls(**{k: r[k] for k in r.keys()})


class Setting(BaseModel):
    key: str
    value: str
    updated_at: Optional[str] = Field(default=None)

    @classmethod
    def from_row(cls, r: Row) -> "Setting":
        return cls(key=r["key"], value=r["value"], updated_at=r["updated_at"])
