"""Mortgage refinance comparison.

Breaking a mortgage early costs a prepayment penalty: the greater of a few
months' interest and an interest rate differential (IRD) over the remaining
term.  How the IRD is estimated depends on the lender:

* big banks compare against a discounted posted rate, which widens the
  differential by ``posted_rate_premium`` percentage points
* monoline lenders use the plain contract-rate differential
* credit unions typically charge only the interest penalty

These are estimates, so every constant lives on ``RefinancePolicy`` rather
than in the formulas.  The comparison itself leans on
``amortization.remaining_balance`` to value both loans at any horizon
without replaying their schedules.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .amortization import LoanTerms, monthly_payment, remaining_balance

logger = logging.getLogger(__name__)

BIG_BANK = "big_bank"
MONOLINE = "monoline"
CREDIT_UNION = "credit_union"
LENDER_TYPES = (BIG_BANK, MONOLINE, CREDIT_UNION)

COMPARISON_HORIZON = 60
MAX_COMPARISON_YEARS = 10


@dataclass(frozen=True)
class RefinancePolicy:
    posted_rate_premium: float
    interest_months: int = 3
    discharge_fee: float = 0.0
    appraisal_fee: float = 0.0
    legal_fee: float = 0.0

    @property
    def fixed_fees(self) -> float:
        return self.discharge_fee + self.appraisal_fee + self.legal_fee


@dataclass(frozen=True)
class PenaltyEstimate:
    ird: float
    interest_penalty: float
    penalty: float
    method: str


@dataclass(frozen=True)
class RefinanceYear:
    year: int
    cumulative_saving: float
    net_position: float
    break_even: bool


@dataclass(frozen=True)
class RefinanceComparison:
    months_remaining: int
    old_payment: float
    old_interest: float
    new_balance: float
    new_payment: float
    new_interest: float
    penalty: PenaltyEstimate
    total_costs: float
    monthly_saving: float
    break_even_months: Optional[float]
    interest_saved_over_term: float
    net_saving_over_term: float
    horizon_months: int
    old_horizon_interest: float
    new_horizon_interest: float
    net_horizon_saving: float
    old_horizon_balance: float
    new_horizon_balance: float
    yearly: Tuple[RefinanceYear, ...]

    @property
    def worth_it(self) -> bool:
        return (
            self.net_saving_over_term > 0
            and self.break_even_months is not None
            and self.break_even_months < self.months_remaining
        )


def prepayment_penalty(
    balance: float,
    current_rate: float,
    new_rate: float,
    months_remaining: int,
    lender_type: str,
    policy: RefinancePolicy,
) -> Optional[PenaltyEstimate]:
    """Estimated penalty for breaking the current mortgage."""
    if balance < 0 or current_rate < 0 or new_rate < 0 or months_remaining < 0:
        return None
    if lender_type not in LENDER_TYPES:
        logger.debug("unknown lender type %r", lender_type)
        return None

    interest_penalty = balance * (current_rate / 100 / 12) * policy.interest_months
    if lender_type == BIG_BANK:
        differential = max(0.0, current_rate - new_rate + policy.posted_rate_premium)
        ird = balance * (differential / 100) * (months_remaining / 12)
    elif lender_type == MONOLINE:
        differential = max(0.0, current_rate - new_rate)
        ird = balance * (differential / 100) * (months_remaining / 12)
    else:
        ird = interest_penalty

    penalty = max(interest_penalty, ird)
    method = "interest" if penalty == interest_penalty else "ird"
    return PenaltyEstimate(ird=ird, interest_penalty=interest_penalty, penalty=penalty, method=method)


def _interest_over(terms: LoanTerms, payment: float, months: int) -> float:
    months = min(months, terms.term_periods)
    return payment * months - (terms.principal - remaining_balance(terms, months))


def compare_refinance(
    balance: float,
    current_rate: float,
    months_remaining: int,
    new_rate: float,
    new_amort_periods: int,
    lender_type: str,
    policy: RefinancePolicy,
    other_costs: float = 0.0,
    cash_out: float = 0.0,
) -> Optional[RefinanceComparison]:
    """Compare keeping the current mortgage against refinancing.

    The current loan is assumed to amortize over ``months_remaining``; the
    new loan borrows ``balance + cash_out`` over ``new_amort_periods``.
    """
    if balance <= 0 or months_remaining <= 0 or new_amort_periods <= 0:
        return None
    if current_rate < 0 or new_rate < 0 or other_costs < 0 or cash_out < 0:
        return None
    penalty = prepayment_penalty(balance, current_rate, new_rate, months_remaining, lender_type, policy)
    if penalty is None:
        return None

    old_terms = LoanTerms(balance, current_rate, months_remaining)
    old_payment = monthly_payment(balance, current_rate, months_remaining)
    old_interest = old_payment * months_remaining - balance

    new_balance = balance + cash_out
    new_terms = LoanTerms(new_balance, new_rate, new_amort_periods)
    new_payment = monthly_payment(new_balance, new_rate, new_amort_periods)
    new_interest = new_payment * new_amort_periods - new_balance

    total_costs = penalty.penalty + policy.fixed_fees + other_costs
    monthly_saving = old_payment - new_payment
    break_even = total_costs / monthly_saving if monthly_saving > 0 else None

    interest_saved = old_interest - _interest_over(new_terms, new_payment, months_remaining)
    horizon = min(COMPARISON_HORIZON, months_remaining)
    old_horizon_interest = _interest_over(old_terms, old_payment, horizon)
    new_horizon_interest = _interest_over(new_terms, new_payment, horizon)

    yearly: List[RefinanceYear] = []
    for year in range(1, min(math.ceil(months_remaining / 12), MAX_COMPARISON_YEARS) + 1):
        cumulative = monthly_saving * min(year * 12, months_remaining)
        net = cumulative - total_costs
        yearly.append(RefinanceYear(year=year, cumulative_saving=cumulative, net_position=net, break_even=net >= 0))

    return RefinanceComparison(
        months_remaining=months_remaining,
        old_payment=old_payment,
        old_interest=old_interest,
        new_balance=new_balance,
        new_payment=new_payment,
        new_interest=new_interest,
        penalty=penalty,
        total_costs=total_costs,
        monthly_saving=monthly_saving,
        break_even_months=break_even,
        interest_saved_over_term=interest_saved,
        net_saving_over_term=interest_saved - total_costs,
        horizon_months=horizon,
        old_horizon_interest=old_horizon_interest,
        new_horizon_interest=new_horizon_interest,
        net_horizon_saving=old_horizon_interest - new_horizon_interest - total_costs,
        old_horizon_balance=remaining_balance(old_terms, horizon),
        new_horizon_balance=remaining_balance(new_terms, horizon),
        yearly=tuple(yearly),
    )


__all__ = [
    "BIG_BANK",
    "MONOLINE",
    "CREDIT_UNION",
    "LENDER_TYPES",
    "RefinancePolicy",
    "PenaltyEstimate",
    "RefinanceYear",
    "RefinanceComparison",
    "prepayment_penalty",
    "compare_refinance",
]
