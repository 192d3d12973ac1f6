"""Tests for the multi-debt payoff simulator."""

import pytest

from personal_finance.calculators import debt_payoff as payoff
from personal_finance.calculators.debt_payoff import Debt


def _mixed_debts():
    return [
        Debt("card", 8000, 22.0, 200, "Credit card"),
        Debt("car", 3000, 5.0, 150, "Car loan"),
        Debt("line", 5000, 9.5, 100, "Line of credit"),
    ]


def test_snowball_example():
    debts = [Debt("card", 1000, 0, 100), Debt("loan", 500, 0, 50)]
    result = payoff.simulate(debts, 50, payoff.SNOWBALL)
    assert result.order == ("loan", "card")
    assert result.total_months == 8
    assert dict(result.payoff_month_by_debt_id) == {"loan": 5, "card": 8}
    assert result.total_interest == 0.0
    assert result.total_paid == pytest.approx(1500)


@pytest.mark.parametrize("strategy", payoff.STRATEGIES)
def test_payments_conserve_balance_plus_interest(strategy):
    debts = _mixed_debts()
    result = payoff.simulate(debts, 250, strategy)
    assert not result.never_paid_off
    assert not result.incomplete
    starting = sum(d.balance for d in debts)
    assert result.starting_balance == starting
    assert result.total_paid == pytest.approx(starting + result.total_interest, abs=1e-6)
    assert result.remaining_balance == pytest.approx(0, abs=1e-6)
    assert sum(result.interest_by_debt_id.values()) == pytest.approx(result.total_interest)
    assert max(result.payoff_month_by_debt_id.values()) == result.total_months


@pytest.mark.parametrize(
    "debts, extra",
    [
        (_mixed_debts(), 250),
        (
            [
                Debt("zero", 500, 0, 25, "Family loan"),
                Debt("card", 6000, 19.99, 150, "Credit card"),
                Debt("loan", 4000, 7.0, 100, "Personal loan"),
            ],
            200,
        ),
        (
            [
                Debt("big", 25000, 24.99, 600, "Store card"),
                Debt("small", 1500, 6.0, 50, "Phone plan"),
                Debt("mid", 4000, 12.0, 120, "Line of credit"),
            ],
            300,
        ),
    ],
)
def test_avalanche_never_costs_more_interest(debts, extra):
    comparison = payoff.compare_strategies(debts, extra)
    assert not comparison.avalanche.never_paid_off
    assert not comparison.snowball.incomplete
    assert comparison.avalanche.total_interest <= comparison.snowball.total_interest
    assert comparison.interest_saved >= 0


def test_strategies_pick_different_first_targets():
    comparison = payoff.compare_strategies(_mixed_debts(), 250)
    assert comparison.avalanche.order[0] == "card"
    assert comparison.snowball.order[0] == "car"


def test_payment_below_interest_never_pays_off():
    # 2% a month on 5 000 is 100 of interest against a 50 minimum
    result = payoff.simulate([Debt("x", 5000, 24, 50)], 0, payoff.AVALANCHE)
    assert result.never_paid_off
    assert result.total_months == payoff.MAX_MONTHS
    assert dict(result.payoff_month_by_debt_id) == {}


def test_month_cap_marks_incomplete():
    result = payoff.simulate([Debt("slow", 100000, 12, 1000.5)], 0, payoff.AVALANCHE)
    assert not result.never_paid_off
    assert result.incomplete
    assert result.total_months == payoff.MAX_MONTHS
    assert result.remaining_balance > 0


def test_freed_minimum_rolls_to_next_debt():
    debts = [Debt("a", 100, 0, 100), Debt("b", 1000, 0, 100)]
    ordered = payoff.order_debts(debts, payoff.SNOWBALL)
    state = payoff.initial_state(ordered)

    state = payoff.step(state, ordered, 0)
    assert state.payoff_months == (1, None)
    assert state.balances == (0.0, 900.0)
    assert state.freed == 100

    state = payoff.step(state, ordered, 0)
    assert state.balances == (0.0, 700.0)


def test_step_does_not_mutate_state():
    ordered = payoff.order_debts(_mixed_debts(), payoff.AVALANCHE)
    state = payoff.initial_state(ordered)
    first = payoff.step(state, ordered, 100)
    again = payoff.step(state, ordered, 100)
    assert first == again
    assert state.month == 0
    assert state.balances == (8000, 5000, 3000)


def test_zero_balance_debt_is_paid_at_start():
    debts = [Debt("done", 0, 10, 25), Debt("open", 300, 0, 50)]
    result = payoff.simulate(debts, 0, payoff.AVALANCHE)
    assert result.payoff_month_by_debt_id["done"] == 0
    # the freed 25 joins the 50 minimum from month one
    assert result.payoff_month_by_debt_id["open"] == 4


def test_empty_debt_list():
    result = payoff.simulate([], 100, payoff.SNOWBALL)
    assert result.total_months == 0
    assert result.total_paid == 0
    assert not result.never_paid_off


def test_order_ties_keep_input_order():
    debts = [Debt("first", 1000, 10, 50), Debt("second", 2000, 10, 50)]
    assert [d.id for d in payoff.order_debts(debts, payoff.AVALANCHE)] == ["first", "second"]


def test_unknown_strategy():
    with pytest.raises(ValueError):
        payoff.order_debts(_mixed_debts(), "random")
    assert payoff.simulate(_mixed_debts(), 0, "random") is None


@pytest.mark.parametrize(
    "debts, extra",
    [
        ([Debt("a", -1, 5, 50)], 0),
        ([Debt("a", 100, -5, 50)], 0),
        ([Debt("a", 100, 5, -50)], 0),
        ([Debt("a", 100, 5, 50)], -10),
        ([Debt("a", 100, 5, 50), Debt("a", 200, 5, 50)], 0),
    ],
)
def test_invalid_input_returns_none(debts, extra):
    assert payoff.simulate(debts, extra, payoff.AVALANCHE) is None


def test_payoff_single():
    single = payoff.payoff_single(1200, 0, 100)
    assert single.months == 12
    assert single.total_interest == 0.0
    assert single.total_paid == pytest.approx(1200)

    stuck = payoff.payoff_single(5000, 24, 50)
    assert stuck.never_paid_off
