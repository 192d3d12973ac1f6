"""Tests for the affordability solver."""

import pytest

from personal_finance import tables
from personal_finance.calculators import affordability as afford
from personal_finance.calculators.amortization import monthly_payment
from personal_finance.calculators.insurance import PremiumSchedule

POLICY = afford.AffordabilityPolicy(
    max_front_ratio=0.39, max_back_ratio=0.44, stress_buffer=2.0, stress_floor_rate=5.25
)
NO_INSURANCE = PremiumSchedule.none()


def _constraints(income=10000.0, **kwargs):
    return afford.AffordabilityConstraints.from_policy(POLICY, gross_monthly_income=income, **kwargs)


def test_stress_rate():
    constraints = _constraints()
    assert constraints.stress_rate(5.0) == 7.0
    assert constraints.stress_rate(2.0) == 5.25


def test_front_end_limit_solves_payment():
    result = afford.max_affordable_price(_constraints(), 100000, 5.0, 300, NO_INSURANCE)
    assert result.limiting_constraint == afford.FRONT_END
    assert result.max_price == result.max_price_front
    assert result.stress_rate == 7.0
    # with no other costs the stress payment alone hits 39% of income
    assert monthly_payment(result.max_price - 100000, 7.0, 300) == pytest.approx(3900, rel=1e-6)
    assert result.front_ratio < 0.39
    assert result.front_ratio == pytest.approx(0.39, abs=1e-6)
    assert result.principal == pytest.approx(result.max_price - 100000)
    assert not result.insured


def test_back_end_limit_with_other_debt():
    result = afford.max_affordable_price(
        _constraints(other_monthly_debt=1500), 100000, 5.0, 300, NO_INSURANCE
    )
    assert result.limiting_constraint == afford.BACK_END
    assert result.max_price == result.max_price_back
    assert result.max_price_back < result.max_price_front
    assert result.back_ratio == pytest.approx(0.44, abs=1e-6)


@pytest.mark.parametrize(
    "costs",
    [{}, {"monthly_taxes_insurance_heating": 1000, "other_monthly_debt": 500, "property_tax_rate": 0.01}],
)
def test_price_strictly_increases_with_income(costs):
    prices = [
        afford.max_affordable_price(_constraints(income, **costs), 50000, 5.0, 300, NO_INSURANCE).max_price
        for income in (4000, 6000, 9000, 15000)
    ]
    for lower, higher in zip(prices, prices[1:]):
        assert lower < higher


def test_property_tax_and_condo_fee_lower_the_price():
    base = afford.max_affordable_price(_constraints(), 100000, 5.0, 300, NO_INSURANCE)
    taxed = afford.max_affordable_price(
        _constraints(property_tax_rate=0.01, monthly_condo_fee=400), 100000, 5.0, 300, NO_INSURANCE
    )
    assert taxed.max_price < base.max_price


@pytest.mark.parametrize("income", [3000, 4000])
def test_fixed_costs_above_limit_are_unaffordable(income):
    constraints = _constraints(income, monthly_taxes_insurance_heating=2000)
    result = afford.max_affordable_price(constraints, 100000, 5.0, 300, NO_INSURANCE)
    assert result.unaffordable
    assert result.max_price == 0.0
    assert result.principal == 0.0
    assert result.limiting_constraint == afford.FRONT_END
    assert result.front_ratio == pytest.approx(2000 / income)
    assert afford.affordability_scenarios(result, constraints, 5.0, 300, NO_INSURANCE) == []


def test_costs_exactly_at_limit_are_unaffordable():
    result = afford.max_affordable_price(
        _constraints(monthly_taxes_insurance_heating=3900), 100000, 5.0, 300, NO_INSURANCE
    )
    assert result.unaffordable
    assert result.max_price == 0.0


def test_other_debt_above_back_end_limit_is_unaffordable():
    result = afford.max_affordable_price(
        _constraints(other_monthly_debt=4500), 100000, 5.0, 300, NO_INSURANCE
    )
    assert result.unaffordable
    assert result.limiting_constraint == afford.BACK_END
    assert result.front_ratio == 0.0
    assert result.back_ratio == pytest.approx(0.45)


def test_affordable_result_is_within_limits():
    result = afford.max_affordable_price(
        _constraints(4000, monthly_taxes_insurance_heating=1000), 100000, 5.0, 300, NO_INSURANCE
    )
    assert not result.unaffordable
    assert result.max_price > 100000
    assert result.front_ratio < 0.39
    assert result.back_ratio < 0.44


def test_insurance_premium_reduces_price():
    schedule = tables.premium_schedule()
    insured = afford.max_affordable_price(_constraints(), 30000, 5.0, 300, schedule)
    uninsured = afford.max_affordable_price(_constraints(), 30000, 5.0, 300, NO_INSURANCE)
    assert insured.insured
    assert insured.premium > 0
    assert insured.max_price < uninsured.max_price


@pytest.mark.parametrize(
    "income, down, rate, periods",
    [
        (0, 50000, 5.0, 300),
        (-100, 50000, 5.0, 300),
        (10000, -1, 5.0, 300),
        (10000, 50000, -1.0, 300),
        (10000, 50000, 5.0, 0),
        (10000, 5_000_000, 5.0, 300),
    ],
)
def test_invalid_input_returns_none(income, down, rate, periods):
    assert afford.max_affordable_price(_constraints(income), down, rate, periods, NO_INSURANCE) is None


def test_scenarios():
    constraints = _constraints(property_tax_rate=0.01)
    result = afford.max_affordable_price(constraints, 100000, 5.0, 300, NO_INSURANCE)
    scenarios = afford.affordability_scenarios(result, constraints, 5.0, 300, NO_INSURANCE)
    assert [s.label for s in scenarios] == ["conservative", "moderate", "maximum"]
    assert scenarios[-1].price == round(result.max_price)
    assert scenarios[0].price < scenarios[1].price < scenarios[2].price
    for s in scenarios:
        assert s.property_tax == pytest.approx(s.price * 0.01 / 12)
        assert s.total_monthly == pytest.approx(s.payment + s.property_tax)
