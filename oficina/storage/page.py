from __future__ import annotations

import math
from typing import Callable, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
U = TypeVar("U")


class Page(BaseModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    page: int = 0
    size: int = 20
    total_elements: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    def map(self, fn: Callable[[T], U]) -> "Page[U]":
        return Page(
            items=[fn(it) for it in self.items],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
        )
