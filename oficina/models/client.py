from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from .common import gen_id, utcnow

# Les champs restent "souples" : la validation métier (ordre + messages)
# est faite par ClientService, pas par pydantic.

class Address(BaseModel):
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None  # CEP, NNNNN-NNN

class Client(BaseModel):
    id: str = Field(default_factory=gen_id)
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
    author_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        extra = "ignore"

class ClientUpdate(BaseModel):
    """Seuls champs modifiables après création (e-mail et auteur sont figés)."""
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
