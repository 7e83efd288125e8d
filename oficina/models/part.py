from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional
from .common import gen_id


class Part(BaseModel):
    id: str = Field(default_factory=gen_id)
    ref: Optional[str] = None
    name: str = ""
    label: Optional[str] = None
    description: Optional[str] = None
    price_cents: int = Field(default=0, ge=0)
    unit: str = "unidade"
    active: bool = True
