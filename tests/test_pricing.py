import pytest

from oficina.exceptions import InvalidArgumentError
from oficina.models.budget import BudgetPartLine, BudgetServiceLine
from oficina.services.pricing import PercentageDiscount, compute_totals, no_discount


def _svc(price, qty):
    return BudgetServiceLine(budget_id="b", service_id="s", quantity=qty, unit_price_cents=price)


def _part(price, qty):
    return BudgetPartLine(budget_id="b", part_id="p", quantity=qty, unit_price_cents=price)


def test_sum_of_lines():
    totals = compute_totals([_svc(1000, 2), _svc(500, 1)], [_part(2000, 1)])
    assert totals.total_cents == 4500
    assert totals.discount_cents == 0


def test_no_lines():
    totals = compute_totals([], [])
    assert (totals.total_cents, totals.discount_cents) == (0, 0)


def test_percentage_discount_rounds_half_up():
    assert PercentageDiscount(10)(4500) == 450
    assert PercentageDiscount(2.5)(1001) == 25
    assert PercentageDiscount(5)(10) == 1


def test_percentage_discount_threshold():
    policy = PercentageDiscount(10, min_total_cents=10000)
    assert policy(9999) == 0
    assert policy(10000) == 1000


@pytest.mark.parametrize("pct", [-1, 101])
def test_percentage_out_of_range(pct):
    with pytest.raises(InvalidArgumentError):
        PercentageDiscount(pct)


def test_discount_clamped_to_total():
    totals = compute_totals([_svc(100, 1)], [], lambda total: total * 3)
    assert totals.discount_cents == 100
    assert compute_totals([_svc(100, 1)], [], lambda total: -50).discount_cents == 0


def test_policy_receives_raw_sum():
    seen = []
    compute_totals([_svc(300, 3)], [_part(50, 2)], lambda t: seen.append(t) or 0)
    assert seen == [1000]
    assert no_discount(1000) == 0
