import math

import pandas as pd
import pytest

from personal_finance import frames
from personal_finance.calculators import amortization, debt_payoff, growth, taxes
from personal_finance.calculators.amortization import LoanTerms
from personal_finance.calculators.debt_payoff import Debt


def test_schedule_frame():
    schedule = amortization.build_schedule(LoanTerms(12000, 0, 18))
    df = frames.schedule_frame(schedule)
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == frames.SCHEDULE_COLUMNS
    assert len(df) == 18
    assert df["ending_balance"].iloc[-1] == 0.0
    assert df["principal_portion"].sum() == pytest.approx(12000)


def test_empty_schedule_keeps_columns():
    schedule = amortization.build_schedule(LoanTerms(0, 5, 12))
    df = frames.schedule_frame(schedule)
    assert df.empty
    assert list(df.columns) == frames.SCHEDULE_COLUMNS


def test_yearly_frame():
    schedule = amortization.build_schedule(LoanTerms(12000, 0, 18))
    df = frames.yearly_frame(amortization.yearly_summary(schedule))
    assert df["year"].tolist() == [1, 2]
    assert df["closing_balance"].iloc[-1] == 0.0


def test_growth_frame():
    df = frames.growth_frame(growth.project(1000, 0, 2, 12, 100))
    assert df["cumulative_deposits"].tolist() == [2200, 3400]


def test_payoff_frame_in_priority_order():
    debts = [Debt("card", 1000, 0, 100, "Card"), Debt("loan", 500, 0, 50, "Loan")]
    result = debt_payoff.simulate(debts, 50, debt_payoff.SNOWBALL)
    df = frames.payoff_frame(result, debts)
    assert df["id"].tolist() == ["loan", "card"]
    assert df["priority"].tolist() == [1, 2]
    assert df["payoff_month"].tolist() == [5, 8]


def test_payoff_frame_open_debt_has_no_month():
    debts = [Debt("x", 5000, 24, 50)]
    result = debt_payoff.simulate(debts, 0, debt_payoff.AVALANCHE)
    df = frames.payoff_frame(result, debts)
    assert pd.isna(df["payoff_month"].iloc[0])


def test_breakdown_frame():
    table = taxes.BracketTable.from_rows(
        [
            {"start": 0, "end": 10000, "rate": 0.10},
            {"start": 10000, "end": None, "rate": 0.20},
        ]
    )
    df = frames.breakdown_frame(taxes.bracket_breakdown(25000, table))
    assert df["taxable"].tolist() == [10000.0, 15000.0]
    assert df["tax"].sum() == pytest.approx(4000)
    assert math.isinf(df["upper"].iloc[-1])
