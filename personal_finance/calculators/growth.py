"""Compound growth of a lump sum with regular deposits.

Each compounding period adds that period's share of the deposits and then
applies the periodic rate:

    balance = (balance + deposit_per_period) * (1 + r)

Deposits are stated per deposit period (monthly by default) and spread
evenly over the compounding periods in a year, so a monthly deposit into a
daily-compounding account adds ``deposit * 12 / 365`` each day.

Results are aggregated into yearly rows.  ``effective_annual_rate`` gives the
annualised yield of a nominal rate at a given compounding frequency, for
comparing accounts that compound differently.

Example
-------

>>> series = project(10000, 4.5, 1, 365, 0)
>>> round(series.final_balance, 2)
10460.25
>>> round(effective_annual_rate(4.5, 12), 6)
0.04594
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

COMPOUNDING_FREQUENCIES: Mapping[str, int] = {
    "daily": 365,
    "monthly": 12,
    "quarterly": 4,
    "semiannual": 2,
    "annually": 1,
}


@dataclass(frozen=True)
class GrowthRow:
    period: int
    opening_balance: float
    contribution: float
    interest_earned: float
    balance: float
    cumulative_deposits: float


@dataclass(frozen=True)
class GrowthSeries:
    rows: Tuple[GrowthRow, ...]
    principal: float
    periodic_rate: float
    compounding_periods_per_year: int
    effective_annual_rate: float

    @property
    def final_balance(self) -> float:
        return self.rows[-1].balance if self.rows else self.principal

    @property
    def total_deposits(self) -> float:
        return self.rows[-1].cumulative_deposits if self.rows else self.principal

    @property
    def total_interest(self) -> float:
        return self.final_balance - self.total_deposits


def effective_annual_rate(annual_rate_percent: float, compounding_periods_per_year: int) -> float:
    """``(1 + r)**n - 1`` for a nominal percent rate compounded ``n`` times a year."""
    r = annual_rate_percent / 100.0 / compounding_periods_per_year
    return (1 + r) ** compounding_periods_per_year - 1


def compare_frequencies(
    annual_rate_percent: float,
    frequencies: Mapping[str, int] = COMPOUNDING_FREQUENCIES,
) -> Dict[str, float]:
    return {name: effective_annual_rate(annual_rate_percent, n) for name, n in frequencies.items()}


def project(
    principal: float,
    annual_rate_percent: float,
    years: int,
    compounding_periods_per_year: int,
    periodic_deposit: float = 0.0,
    deposits_per_year: int = 12,
) -> Optional[GrowthSeries]:
    """Project a balance forward ``years`` years.

    Parameters
    ----------
    principal : float
        Starting balance.
    annual_rate_percent : float
        Nominal annual rate in percent.
    years : int
        Number of whole years to project.  Zero yields an empty series.
    compounding_periods_per_year : int
        Compounding frequency (365 daily, 12 monthly, ...).
    periodic_deposit : float, optional
        Deposit made each deposit period.
    deposits_per_year : int, optional
        Deposit periods per year (12 for monthly deposits).

    Returns
    -------
    GrowthSeries or None
        ``None`` when any amount is negative or a frequency is not positive.
    """
    if (
        principal < 0
        or annual_rate_percent < 0
        or years < 0
        or compounding_periods_per_year <= 0
        or periodic_deposit < 0
        or deposits_per_year <= 0
    ):
        logger.debug("project rejected invalid input")
        return None

    r = annual_rate_percent / 100.0 / compounding_periods_per_year
    yearly_deposits = periodic_deposit * deposits_per_year
    deposit_per_period = yearly_deposits / compounding_periods_per_year

    rows: List[GrowthRow] = []
    balance = float(principal)
    cumulative = float(principal)
    for year in range(1, int(years) + 1):
        opening = balance
        for _ in range(compounding_periods_per_year):
            balance = (balance + deposit_per_period) * (1 + r)
        cumulative += yearly_deposits
        rows.append(
            GrowthRow(
                period=year,
                opening_balance=opening,
                contribution=yearly_deposits,
                interest_earned=balance - opening - yearly_deposits,
                balance=balance,
                cumulative_deposits=cumulative,
            )
        )

    return GrowthSeries(
        rows=tuple(rows),
        principal=float(principal),
        periodic_rate=r,
        compounding_periods_per_year=compounding_periods_per_year,
        effective_annual_rate=effective_annual_rate(annual_rate_percent, compounding_periods_per_year),
    )


__all__ = [
    "COMPOUNDING_FREQUENCIES",
    "GrowthRow",
    "GrowthSeries",
    "effective_annual_rate",
    "compare_frequencies",
    "project",
]
