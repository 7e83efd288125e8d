from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from .common import gen_id, utcnow


class BudgetServiceLine(BaseModel):
    id: str = Field(default_factory=gen_id)
    budget_id: str
    service_id: str
    quantity: int
    unit_price_cents: int = 0  # prix catalogue au moment de la composition

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


class BudgetPartLine(BaseModel):
    id: str = Field(default_factory=gen_id)
    budget_id: str
    part_id: str
    quantity: int
    unit_price_cents: int = 0

    @property
    def line_total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


class BudgetTotals(BaseModel):
    total_cents: int = 0
    discount_cents: int = 0


class Budget(BaseModel):
    id: str = Field(default_factory=gen_id)
    client_id: str
    created_on: date = Field(default_factory=date.today)
    updated_at: Optional[datetime] = None

    service_lines: List[BudgetServiceLine] = Field(default_factory=list)
    part_lines: List[BudgetPartLine] = Field(default_factory=list)

    # dérivés, toujours recalculés avant écriture
    total_cents: int = 0
    discount_cents: int = 0

    class Config:
        extra = "ignore"

    @property
    def net_cents(self) -> int:
        return max(0, self.total_cents - self.discount_cents)

    def apply_totals(self, totals: BudgetTotals) -> None:
        self.total_cents = totals.total_cents
        self.discount_cents = totals.discount_cents
        self.updated_at = utcnow()


# ---------- Projections entrée / sortie ---------- #

class ServiceQuantity(BaseModel):
    service_id: str
    quantity: int


class PartQuantity(BaseModel):
    part_id: str
    quantity: int


class BudgetRequest(BaseModel):
    client_id: str
    services: List[ServiceQuantity] = Field(default_factory=list)
    parts: List[PartQuantity] = Field(default_factory=list)

    class Config:
        extra = "ignore"  # un total fourni par l'appelant n'est jamais lu


class BudgetResponse(BaseModel):
    id: str
    client_id: str
    created_on: date
    total_cents: int
    discount_cents: int
    net_cents: int
    services: List[ServiceQuantity] = Field(default_factory=list)
    parts: List[PartQuantity] = Field(default_factory=list)
