from __future__ import annotations
from dataclasses import dataclass
from typing import List
from pydantic import BaseModel, Field
from .common import gen_id

ADMIN_ROLE = "ADMIN"

class Account(BaseModel):
    id: str = Field(default_factory=gen_id)
    username: str = ""
    roles: List[str] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    def has_role(self, role: str) -> bool:
        return role.upper() in {r.upper() for r in self.roles}

    @property
    def is_admin(self) -> bool:
        return self.has_role(ADMIN_ROLE)


@dataclass(frozen=True)
class Actor:
    """Appelant d'une opération de modification."""
    id: str
    is_admin: bool = False
