"""Tabular views of calculator results.

Result records are plain dataclasses; presentation layers usually want a
``pandas.DataFrame`` they can display, chart or export to CSV.  Each helper
takes one result and returns a frame with one row per period, year, debt or
bracket.  An empty result gives an empty frame that still carries the
expected columns.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable, List

import pandas as pd

from personal_finance.calculators.amortization import AmortizationSchedule, YearSummary
from personal_finance.calculators.debt_payoff import Debt, PayoffResult
from personal_finance.calculators.growth import GrowthSeries
from personal_finance.calculators.taxes import BracketSlice

SCHEDULE_COLUMNS = ["period", "payment", "principal_portion", "interest_portion", "ending_balance"]
YEARLY_COLUMNS = ["year", "opening_balance", "total_paid", "principal_paid", "interest_paid", "closing_balance"]
GROWTH_COLUMNS = [
    "period",
    "opening_balance",
    "contribution",
    "interest_earned",
    "balance",
    "cumulative_deposits",
]
PAYOFF_COLUMNS = ["priority", "id", "name", "balance", "annual_rate_percent", "payoff_month", "interest_paid"]
BREAKDOWN_COLUMNS = ["lower", "upper", "rate", "taxable", "tax"]


def schedule_frame(schedule: AmortizationSchedule) -> pd.DataFrame:
    return pd.DataFrame([asdict(row) for row in schedule.rows], columns=SCHEDULE_COLUMNS)


def yearly_frame(years: Iterable[YearSummary]) -> pd.DataFrame:
    return pd.DataFrame([asdict(year) for year in years], columns=YEARLY_COLUMNS)


def growth_frame(series: GrowthSeries) -> pd.DataFrame:
    return pd.DataFrame([asdict(row) for row in series.rows], columns=GROWTH_COLUMNS)


def payoff_frame(result: PayoffResult, debts: Iterable[Debt]) -> pd.DataFrame:
    """One row per debt in the order the strategy paid them.

    ``payoff_month`` is missing (NaN) for debts still open when the
    simulation stopped.
    """
    by_id = {debt.id: debt for debt in debts}
    rows: List[dict] = []
    for priority, debt_id in enumerate(result.order, start=1):
        debt = by_id[debt_id]
        rows.append(
            {
                "priority": priority,
                "id": debt.id,
                "name": debt.name,
                "balance": debt.balance,
                "annual_rate_percent": debt.annual_rate_percent,
                "payoff_month": result.payoff_month_by_debt_id.get(debt.id),
                "interest_paid": result.interest_by_debt_id.get(debt.id, 0.0),
            }
        )
    return pd.DataFrame(rows, columns=PAYOFF_COLUMNS)


def breakdown_frame(slices: Iterable[BracketSlice]) -> pd.DataFrame:
    rows = [
        {
            "lower": s.bracket.lower,
            "upper": s.bracket.upper,
            "rate": s.bracket.rate,
            "taxable": s.taxable,
            "tax": s.tax,
        }
        for s in slices
    ]
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


__all__ = [
    "schedule_frame",
    "yearly_frame",
    "growth_frame",
    "payoff_frame",
    "breakdown_frame",
]
