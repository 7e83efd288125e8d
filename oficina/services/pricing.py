from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable

from oficina.exceptions import InvalidArgumentError
from oficina.models.budget import BudgetPartLine, BudgetServiceLine, BudgetTotals

# total brut (centimes) -> remise (centimes)
DiscountPolicy = Callable[[int], int]


def no_discount(total_cents: int) -> int:
    return 0


@dataclass(frozen=True)
class PercentageDiscount:
    """Remise en % du total brut, à partir d'un seuil optionnel."""
    percent: float
    min_total_cents: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.percent <= 100:
            raise InvalidArgumentError("O percentual de desconto deve estar entre 0 e 100.")

    def __call__(self, total_cents: int) -> int:
        if total_cents < self.min_total_cents:
            return 0
        amount = Decimal(total_cents) * Decimal(str(self.percent)) / Decimal(100)
        return int(amount.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_totals(
    service_lines: Iterable[BudgetServiceLine],
    part_lines: Iterable[BudgetPartLine],
    discount_policy: DiscountPolicy = no_discount,
) -> BudgetTotals:
    total = sum(ln.line_total_cents for ln in service_lines)
    total += sum(ln.line_total_cents for ln in part_lines)
    # la remise ne dépasse jamais le total
    discount = min(max(0, int(discount_policy(total))), total)
    return BudgetTotals(total_cents=total, discount_cents=discount)
