"""Progressive bracket taxation.

This module computes tax on an income amount from an ordered bracket table.
The algorithm is jurisdiction-agnostic: federal and provincial income tax,
land transfer tax and any other marginal-rate levy all run through
``compute_tax``.  Bracket tables are passed in by the caller (see
``personal_finance.tables``) so nothing here is tied to a particular year.

Tax is accumulated bracket by bracket.  Each bracket contributes the portion
of income that falls inside it times its rate, and accumulation stops at the
first bracket whose lower bound is at or above the income.  Credits are then
subtracted from the gross amount and the result is clamped at zero.

Example
-------

>>> # A single 10% bracket is a flat tax
>>> compute_tax(50000, BracketTable.flat(0.10)).tax
5000.0

>>> # Two brackets: 10% to 10 000 then 20%
>>> table = BracketTable.from_rows([
...     {"start": 0, "end": 10000, "rate": 0.10},
...     {"start": 10000, "end": None, "rate": 0.20},
... ])
>>> round(compute_tax(25000, table).tax, 2)
4000.0
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from personal_finance.exceptions import RateTableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bracket:
    lower: float
    upper: float
    rate: float


@dataclass(frozen=True)
class BracketTable:
    """Ordered, contiguous brackets covering ``[0, inf)``.

    Rates are not required to increase from one bracket to the next.
    """

    brackets: Tuple[Bracket, ...]
    jurisdiction: str = ""
    year: Optional[int] = None

    def __post_init__(self) -> None:
        brackets = tuple(self.brackets)
        object.__setattr__(self, "brackets", brackets)
        if not brackets:
            raise RateTableError("bracket table is empty")
        if brackets[0].lower != 0:
            raise RateTableError(f"first bracket must start at 0, got {brackets[0].lower}")
        for current, following in zip(brackets, brackets[1:]):
            if current.upper != following.lower:
                raise RateTableError(
                    f"brackets are not contiguous at {current.upper} / {following.lower}"
                )
        for bracket in brackets:
            if bracket.upper <= bracket.lower:
                raise RateTableError(f"empty bracket starting at {bracket.lower}")
            if not 0.0 <= bracket.rate <= 1.0:
                raise RateTableError(f"bracket rate {bracket.rate} outside [0, 1]")
        if not math.isinf(brackets[-1].upper):
            raise RateTableError("last bracket must be unbounded")

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Dict],
        jurisdiction: str = "",
        year: Optional[int] = None,
    ) -> "BracketTable":
        """Build a table from ``{"start", "end", "rate"}`` rows.

        ``end`` may be ``None`` for the open top bracket.
        """
        brackets = []
        for row in rows:
            end = row.get("end")
            brackets.append(
                Bracket(
                    lower=float(row["start"]),
                    upper=float("inf") if end is None else float(end),
                    rate=float(row["rate"]),
                )
            )
        return cls(tuple(brackets), jurisdiction=jurisdiction, year=year)

    @classmethod
    def flat(cls, rate: float, jurisdiction: str = "", year: Optional[int] = None) -> "BracketTable":
        return cls((Bracket(0.0, float("inf"), rate),), jurisdiction=jurisdiction, year=year)

    @property
    def lowest_rate(self) -> float:
        """Rate of the first bracket, used as the credit rate by most provinces."""
        return self.brackets[0].rate


@dataclass(frozen=True)
class Credit:
    """An offset against gross tax worth ``amount * rate``.

    A flat exemption or rebate is expressed with ``rate=1.0``.
    """

    amount: float
    rate: float = 1.0
    label: str = ""

    @property
    def value(self) -> float:
        return self.amount * self.rate


@dataclass(frozen=True)
class TaxResult:
    tax: float
    gross_tax: float
    credit_total: float
    marginal_rate: float
    effective_rate: float


@dataclass(frozen=True)
class BracketSlice:
    bracket: Bracket
    taxable: float
    tax: float


_ZERO_RESULT = TaxResult(tax=0.0, gross_tax=0.0, credit_total=0.0, marginal_rate=0.0, effective_rate=0.0)


def bracket_tax(income: float, table: BracketTable) -> float:
    """Raw progressive tax on ``income`` before any credits."""
    tax = 0.0
    for bracket in table.brackets:
        if income <= bracket.lower:
            break
        taxable = min(income, bracket.upper) - bracket.lower
        tax += taxable * bracket.rate
    return tax


def marginal_rate(income: float, table: BracketTable) -> float:
    """Rate of the bracket containing ``income`` (0.0 for non-positive income)."""
    rate = 0.0
    for bracket in table.brackets:
        if income <= bracket.lower:
            break
        rate = bracket.rate
    return rate


def compute_tax(
    income: float,
    table: BracketTable,
    credits: Sequence[Credit] = (),
) -> TaxResult:
    """Compute tax, marginal rate and effective rate on ``income``.

    Parameters
    ----------
    income : float
        Taxable amount.  Non-positive income yields a zero result.
    table : BracketTable
        Brackets to apply.
    credits : sequence of Credit, optional
        Offsets subtracted from the gross bracket tax.  Tax never goes
        below zero.

    Returns
    -------
    TaxResult
    """
    if income <= 0:
        return _ZERO_RESULT
    gross = bracket_tax(income, table)
    credit_total = sum(credit.value for credit in credits)
    tax = max(0.0, gross - credit_total)
    return TaxResult(
        tax=tax,
        gross_tax=gross,
        credit_total=credit_total,
        marginal_rate=marginal_rate(income, table),
        effective_rate=tax / income,
    )


def tax_on_increment(
    base_income: float,
    delta: float,
    table: BracketTable,
    credits: Sequence[Credit] = (),
) -> float:
    """Tax attributable to ``delta`` when stacked on top of ``base_income``.

    The increment is taxed at the rates of the brackets it actually
    occupies, e.g. a capital gain realised on top of employment income.
    """
    with_delta = compute_tax(base_income + delta, table, credits).tax
    without = compute_tax(base_income, table, credits).tax
    return with_delta - without


def bracket_breakdown(income: float, table: BracketTable) -> List[BracketSlice]:
    """Per-bracket taxable amount and tax for the brackets ``income`` reaches."""
    slices: List[BracketSlice] = []
    for bracket in table.brackets:
        if income <= bracket.lower:
            break
        taxable = min(income, bracket.upper) - bracket.lower
        slices.append(BracketSlice(bracket=bracket, taxable=taxable, tax=taxable * bracket.rate))
    return slices


def tax_curve(
    incomes: Iterable[float],
    table: BracketTable,
    credits: Sequence[Credit] = (),
) -> np.ndarray:
    """Tax owed at each income in ``incomes`` as a float array."""
    grid = np.asarray(list(incomes), dtype=float)
    return np.array([compute_tax(x, table, credits).tax for x in grid], dtype=float)


# ---------------------------------------------------------------------------
# Payroll contributions and combined income tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PayrollTable:
    cpp_exemption: float
    cpp_max_earnings: float
    cpp_rate: float
    ei_max_insurable: float
    ei_rate: float


@dataclass(frozen=True)
class IncomeTaxSummary:
    gross_income: float
    federal_tax: float
    provincial_tax: float
    total_tax: float
    cpp: float
    ei: float
    total_deductions: float
    net_income: float
    effective_rate: float
    marginal_rate: float
    monthly_net: float
    biweekly_net: float


def payroll_contributions(income: float, payroll: PayrollTable) -> Tuple[float, float]:
    """Employee CPP and EI contributions on employment ``income``.

    CPP applies to earnings between the basic exemption and the maximum
    pensionable earnings; EI applies up to the maximum insurable earnings.
    Both are rounded to the cent.
    """
    if income <= 0:
        return 0.0, 0.0
    cpp_earnings = min(max(income - payroll.cpp_exemption, 0.0), payroll.cpp_max_earnings - payroll.cpp_exemption)
    cpp = round(cpp_earnings * payroll.cpp_rate, 2)
    ei = round(min(income, payroll.ei_max_insurable) * payroll.ei_rate, 2)
    return cpp, ei


def income_tax(
    income: float,
    federal: BracketTable,
    provincial: BracketTable,
    payroll: PayrollTable,
    federal_basic: float,
    provincial_basic: float,
) -> Optional[IncomeTaxSummary]:
    """Combined federal and provincial income tax on employment income.

    The basic personal amounts are credited at each table's lowest rate, and
    CPP/EI contributions are credited federally at the same rate.
    """
    if income <= 0:
        logger.debug("income_tax called with non-positive income %s", income)
        return None

    cpp, ei = payroll_contributions(income, payroll)
    federal_credits = (
        Credit(federal_basic, federal.lowest_rate, "basic personal amount"),
        Credit(cpp + ei, federal.lowest_rate, "CPP/EI contributions"),
    )
    provincial_credits = (Credit(provincial_basic, provincial.lowest_rate, "basic personal amount"),)

    fed = compute_tax(income, federal, federal_credits)
    prov = compute_tax(income, provincial, provincial_credits)

    total_tax = fed.tax + prov.tax
    total_deductions = total_tax + cpp + ei
    net = income - total_deductions
    return IncomeTaxSummary(
        gross_income=income,
        federal_tax=fed.tax,
        provincial_tax=prov.tax,
        total_tax=total_tax,
        cpp=cpp,
        ei=ei,
        total_deductions=total_deductions,
        net_income=net,
        effective_rate=total_tax / income,
        marginal_rate=fed.marginal_rate + prov.marginal_rate,
        monthly_net=net / 12,
        biweekly_net=net / 26,
    )


# ---------------------------------------------------------------------------
# Land transfer tax
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LandTransferRebate:
    amount: float
    max_price: float


@dataclass(frozen=True)
class LandTransferResult:
    tax: float
    rebate: float
    net_tax: float


def land_transfer_tax(
    price: float,
    table: BracketTable,
    rebate: Optional[LandTransferRebate] = None,
) -> Optional[LandTransferResult]:
    """Land transfer tax on a purchase ``price``.

    A first-time buyer ``rebate`` offsets the tax up to its amount, and only
    applies when the price does not exceed the rebate's price ceiling.
    """
    if price <= 0:
        return None
    gross = bracket_tax(price, table)
    credits: Tuple[Credit, ...] = ()
    if rebate is not None and price <= rebate.max_price:
        credits = (Credit(min(gross, rebate.amount), 1.0, "first-time buyer rebate"),)
    result = compute_tax(price, table, credits)
    return LandTransferResult(tax=gross, rebate=result.credit_total, net_tax=result.tax)


__all__ = [
    "Bracket",
    "BracketTable",
    "BracketSlice",
    "Credit",
    "TaxResult",
    "PayrollTable",
    "IncomeTaxSummary",
    "LandTransferRebate",
    "LandTransferResult",
    "bracket_tax",
    "marginal_rate",
    "compute_tax",
    "tax_on_increment",
    "bracket_breakdown",
    "tax_curve",
    "payroll_contributions",
    "income_tax",
    "land_transfer_tax",
]
