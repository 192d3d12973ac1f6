"""Loan amortization: payment formula, schedules and remaining balance.

The payment is the standard annuity formula

    P * r * (1 + r)**n / ((1 + r)**n - 1)

with ``r`` the periodic rate.  A zero rate simply divides the principal
evenly across the periods.  Schedules walk the loan one period at a time,
putting any extra payment entirely toward principal, and stop as soon as the
balance falls to a cent or less.

Loans whose payment does not cover the first period's interest never
amortize.  ``build_schedule`` detects this before iterating and flags the
result with ``never_paid_off`` instead of looping to the period cap.

Example
-------

>>> monthly_payment(12000, 0, 12)
1000.0

>>> schedule = build_schedule(LoanTerms(principal=12000, annual_rate_percent=0, term_periods=12))
>>> schedule.periods, schedule.final_balance
(12, 0.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

EPSILON = 0.01
MAX_PERIODS = 600


@dataclass(frozen=True)
class LoanTerms:
    """Loan inputs.

    ``fixed_payment`` replaces the annuity payment when the borrower pays a
    set amount (e.g. a fixed card payment); the schedule then runs until
    payoff or the period cap rather than stopping at ``term_periods``.
    """

    principal: float
    annual_rate_percent: float
    term_periods: int
    periodic_extra_payment: float = 0.0
    periods_per_year: int = 12
    fixed_payment: Optional[float] = None

    @property
    def periodic_rate(self) -> float:
        return periodic_rate(self.annual_rate_percent, self.periods_per_year)

    def is_valid(self) -> bool:
        return (
            self.principal >= 0
            and self.annual_rate_percent >= 0
            and self.term_periods > 0
            and self.periodic_extra_payment >= 0
            and self.periods_per_year > 0
            and (self.fixed_payment is None or self.fixed_payment >= 0)
        )


@dataclass(frozen=True)
class AmortizationRow:
    period: int
    payment: float
    principal_portion: float
    interest_portion: float
    ending_balance: float


@dataclass(frozen=True)
class AmortizationSchedule:
    """Result of walking a loan to payoff.

    ``never_paid_off`` means the payment cannot cover interest and no rows
    were generated.  ``incomplete`` means the period cap was hit with a
    balance still outstanding.
    """

    rows: Tuple[AmortizationRow, ...]
    payment: float
    principal: float
    never_paid_off: bool = False
    incomplete: bool = False

    @property
    def periods(self) -> int:
        return len(self.rows)

    @property
    def payoff_period(self) -> Optional[int]:
        if self.never_paid_off or self.incomplete:
            return None
        return len(self.rows)

    @property
    def total_interest(self) -> float:
        return sum(row.interest_portion for row in self.rows)

    @property
    def total_principal(self) -> float:
        return sum(row.principal_portion for row in self.rows)

    @property
    def total_paid(self) -> float:
        return sum(row.payment for row in self.rows)

    @property
    def final_balance(self) -> float:
        if not self.rows:
            return 0.0 if self.principal <= EPSILON else self.principal
        return self.rows[-1].ending_balance


@dataclass(frozen=True)
class YearSummary:
    year: int
    opening_balance: float
    total_paid: float
    principal_paid: float
    interest_paid: float
    closing_balance: float


@dataclass(frozen=True)
class ExtraPaymentSavings:
    interest_saved: float
    periods_saved: int


def periodic_rate(annual_rate_percent: float, periods_per_year: int = 12) -> float:
    return annual_rate_percent / 100.0 / periods_per_year


def monthly_payment(
    principal: float,
    annual_rate_percent: float,
    periods: int,
    periods_per_year: int = 12,
) -> Optional[float]:
    """Level payment that retires ``principal`` over ``periods`` periods.

    Returns ``None`` for a negative principal or rate, or a non-positive
    period count.
    """
    if principal < 0 or annual_rate_percent < 0 or periods <= 0 or periods_per_year <= 0:
        return None
    r = periodic_rate(annual_rate_percent, periods_per_year)
    if r == 0:
        return principal / periods
    growth = (1 + r) ** periods
    return principal * (r * growth) / (growth - 1)


def _scheduled_payment(terms: LoanTerms) -> float:
    if terms.fixed_payment is not None:
        return terms.fixed_payment
    return monthly_payment(
        terms.principal, terms.annual_rate_percent, terms.term_periods, terms.periods_per_year
    )


def build_schedule(terms: LoanTerms) -> Optional[AmortizationSchedule]:
    """Period-by-period amortization schedule for ``terms``.

    The schedule ends at the period the balance reaches zero, which is before
    the nominal term when extra payments are made.  The sub-cent residual left
    by floating point is swept into the final row so the last
    ``ending_balance`` is exactly zero.
    """
    if not terms.is_valid():
        logger.debug("build_schedule rejected invalid terms %s", terms)
        return None

    payment = _scheduled_payment(terms)
    r = terms.periodic_rate
    total = payment + terms.periodic_extra_payment

    if terms.principal <= EPSILON:
        return AmortizationSchedule(rows=(), payment=payment, principal=terms.principal)

    if total <= terms.principal * r:
        logger.info(
            "payment %.2f does not cover first-period interest %.2f; loan never amortizes",
            total,
            terms.principal * r,
        )
        return AmortizationSchedule(
            rows=(), payment=payment, principal=terms.principal, never_paid_off=True
        )

    limit = MAX_PERIODS if terms.fixed_payment is not None else min(terms.term_periods, MAX_PERIODS)
    rows: List[AmortizationRow] = []
    balance = terms.principal
    period = 0
    while balance > EPSILON and period < limit:
        period += 1
        interest = balance * r
        principal_paid = min(total - interest, balance)
        if balance - principal_paid <= EPSILON:
            principal_paid = balance
        balance = max(0.0, balance - principal_paid)
        rows.append(
            AmortizationRow(
                period=period,
                payment=interest + principal_paid,
                principal_portion=principal_paid,
                interest_portion=interest,
                ending_balance=balance,
            )
        )

    incomplete = balance > EPSILON
    if incomplete:
        logger.warning("amortization stopped at %d periods with %.2f outstanding", period, balance)
    return AmortizationSchedule(
        rows=tuple(rows), payment=payment, principal=terms.principal, incomplete=incomplete
    )


def remaining_balance(terms: LoanTerms, periods_elapsed: int) -> Optional[float]:
    """Outstanding balance after ``periods_elapsed`` payments, in closed form.

    Uses ``B * (1 + r)**k - pmt * ((1 + r)**k - 1) / r`` where ``pmt``
    includes any extra payment.  Once the loan is repaid the balance stays
    at zero.
    """
    if not terms.is_valid() or periods_elapsed < 0:
        return None
    if periods_elapsed == 0:
        return terms.principal
    total = _scheduled_payment(terms) + terms.periodic_extra_payment
    r = terms.periodic_rate
    k = periods_elapsed
    if r == 0:
        balance = terms.principal - total * k
    else:
        growth = (1 + r) ** k
        balance = terms.principal * growth - total * (growth - 1) / r
    return max(0.0, balance)


def yearly_summary(schedule: AmortizationSchedule, periods_per_year: int = 12) -> List[YearSummary]:
    """Group schedule rows into per-year totals.

    A partial final year is emitted when the loan is paid off mid-year.
    """
    years: List[YearSummary] = []
    opening = schedule.principal
    for start in range(0, len(schedule.rows), periods_per_year):
        chunk = schedule.rows[start:start + periods_per_year]
        closing = chunk[-1].ending_balance
        years.append(
            YearSummary(
                year=len(years) + 1,
                opening_balance=opening,
                total_paid=sum(row.payment for row in chunk),
                principal_paid=sum(row.principal_portion for row in chunk),
                interest_paid=sum(row.interest_portion for row in chunk),
                closing_balance=closing,
            )
        )
        opening = closing
    return years


def extra_payment_savings(terms: LoanTerms) -> Optional[ExtraPaymentSavings]:
    """Interest and periods saved by ``terms``' extra payment versus none."""
    accelerated = build_schedule(terms)
    base = build_schedule(replace(terms, periodic_extra_payment=0.0))
    if accelerated is None or base is None:
        return None
    if accelerated.never_paid_off or base.never_paid_off:
        return None
    return ExtraPaymentSavings(
        interest_saved=base.total_interest - accelerated.total_interest,
        periods_saved=base.periods - accelerated.periods,
    )


__all__ = [
    "EPSILON",
    "MAX_PERIODS",
    "LoanTerms",
    "AmortizationRow",
    "AmortizationSchedule",
    "YearSummary",
    "ExtraPaymentSavings",
    "periodic_rate",
    "monthly_payment",
    "build_schedule",
    "remaining_balance",
    "yearly_summary",
    "extra_payment_savings",
]
