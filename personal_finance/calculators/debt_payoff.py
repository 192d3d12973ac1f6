"""Month-by-month payoff simulation across several debts.

A strategy fixes the priority order once at the start:

* ``avalanche`` – highest interest rate first
* ``snowball`` – smallest balance first

Every month each unpaid debt accrues interest and receives its minimum
payment.  The first unpaid debt in priority order (the *focus* debt) also
receives the extra monthly amount plus the freed pool: the minimums of debts
already paid off.  A debt that is paid off adds its minimum to the pool from
the following month.

The running state is an immutable ``PayoffState`` that ``step`` maps to the
next month's state, so a single month can be inspected or tested on its own.

Example
-------

>>> debts = [Debt("card", 1000, 0, 100), Debt("loan", 500, 0, 50)]
>>> result = simulate(debts, 50, "snowball")
>>> result.total_months, dict(result.payoff_month_by_debt_id)
(8, {'loan': 5, 'card': 8})
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

AVALANCHE = "avalanche"
SNOWBALL = "snowball"
STRATEGIES = (AVALANCHE, SNOWBALL)

EPSILON = 0.01
MAX_MONTHS = 600


@dataclass(frozen=True)
class Debt:
    id: str
    balance: float
    annual_rate_percent: float
    minimum_payment: float
    name: str = ""

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_percent / 100.0 / 12

    def is_valid(self) -> bool:
        return self.balance >= 0 and self.annual_rate_percent >= 0 and self.minimum_payment >= 0


@dataclass(frozen=True)
class PayoffState:
    """Simulation state at the end of ``month``, in priority order."""

    month: int
    balances: Tuple[float, ...]
    payoff_months: Tuple[Optional[int], ...]
    interest_paid: Tuple[float, ...]
    freed: float
    total_interest: float
    total_paid: float

    @property
    def all_paid(self) -> bool:
        return all(month is not None for month in self.payoff_months)

    @property
    def focus(self) -> Optional[int]:
        for index, month in enumerate(self.payoff_months):
            if month is None:
                return index
        return None


@dataclass(frozen=True)
class PayoffResult:
    strategy: str
    order: Tuple[str, ...]
    total_months: int
    total_interest: float
    total_paid: float
    starting_balance: float
    payoff_month_by_debt_id: Mapping[str, int]
    interest_by_debt_id: Mapping[str, float]
    never_paid_off: bool = False
    incomplete: bool = False

    @property
    def remaining_balance(self) -> float:
        return self.starting_balance + self.total_interest - self.total_paid


@dataclass(frozen=True)
class SinglePayoff:
    months: int
    total_interest: float
    total_paid: float
    never_paid_off: bool = False
    incomplete: bool = False


@dataclass(frozen=True)
class StrategyComparison:
    avalanche: PayoffResult
    snowball: PayoffResult

    @property
    def interest_saved(self) -> float:
        """Interest avalanche saves over snowball."""
        return self.snowball.total_interest - self.avalanche.total_interest

    @property
    def months_saved(self) -> int:
        return self.snowball.total_months - self.avalanche.total_months


def order_debts(debts: Sequence[Debt], strategy: str) -> List[Debt]:
    """Priority order for ``strategy``; ties keep their input order."""
    if strategy == AVALANCHE:
        return sorted(debts, key=lambda debt: -debt.annual_rate_percent)
    if strategy == SNOWBALL:
        return sorted(debts, key=lambda debt: debt.balance)
    raise ValueError(f"unknown strategy {strategy!r}")


def initial_state(ordered: Sequence[Debt]) -> PayoffState:
    """Month-zero state.  Debts that start at or below a cent count as paid."""
    payoff_months: List[Optional[int]] = []
    balances: List[float] = []
    freed = 0.0
    for debt in ordered:
        if debt.balance <= EPSILON:
            payoff_months.append(0)
            balances.append(0.0)
            freed += debt.minimum_payment
        else:
            payoff_months.append(None)
            balances.append(debt.balance)
    return PayoffState(
        month=0,
        balances=tuple(balances),
        payoff_months=tuple(payoff_months),
        interest_paid=tuple(0.0 for _ in ordered),
        freed=freed,
        total_interest=0.0,
        total_paid=sum(debt.balance for debt in ordered if debt.balance <= EPSILON),
    )


def step(state: PayoffState, ordered: Sequence[Debt], extra_monthly: float) -> PayoffState:
    """Advance the simulation by one month."""
    month = state.month + 1
    focus = state.focus
    balances = list(state.balances)
    payoff_months = list(state.payoff_months)
    interest_paid = list(state.interest_paid)
    freed = state.freed
    total_interest = state.total_interest
    total_paid = state.total_paid

    for index, debt in enumerate(ordered):
        if payoff_months[index] is not None:
            continue
        interest = balances[index] * debt.monthly_rate
        balance = balances[index] + interest
        total_interest += interest
        interest_paid[index] += interest

        payment = debt.minimum_payment
        if index == focus:
            payment += extra_monthly + state.freed
        applied = min(payment, balance)
        if balance - applied <= EPSILON:
            applied = balance
        balance -= applied
        total_paid += applied

        if balance <= EPSILON:
            balance = 0.0
            payoff_months[index] = month
            freed += debt.minimum_payment
        balances[index] = balance

    return PayoffState(
        month=month,
        balances=tuple(balances),
        payoff_months=tuple(payoff_months),
        interest_paid=tuple(interest_paid),
        freed=freed,
        total_interest=total_interest,
        total_paid=total_paid,
    )


def _diverges(ordered: Sequence[Debt], state: PayoffState, extra_monthly: float) -> bool:
    # Total payments available each month never exceed all minimums plus the
    # extra amount.  If that cannot cover the first month's interest the
    # aggregate balance never falls.
    capacity = sum(debt.minimum_payment for debt in ordered) + extra_monthly
    first_interest = sum(
        balance * debt.monthly_rate
        for debt, balance, paid in zip(ordered, state.balances, state.payoff_months)
        if paid is None
    )
    return capacity <= first_interest


def _valid_inputs(debts: Sequence[Debt], extra_monthly: float, strategy: str) -> bool:
    if strategy not in STRATEGIES or extra_monthly < 0:
        return False
    if not all(debt.is_valid() for debt in debts):
        return False
    return len({debt.id for debt in debts}) == len(debts)


def simulate(debts: Sequence[Debt], extra_monthly: float, strategy: str) -> Optional[PayoffResult]:
    """Pay down ``debts`` month by month under ``strategy``.

    Parameters
    ----------
    debts : sequence of Debt
        Debts to repay.  Ids must be unique.
    extra_monthly : float
        Amount paid each month on top of the minimums.
    strategy : str
        ``"avalanche"`` or ``"snowball"``.

    Returns
    -------
    PayoffResult or None
        ``None`` for invalid input.  When the payments cannot cover the first
        month's interest the result has ``never_paid_off=True`` and a capped
        month count.  When the month cap is reached first, ``incomplete`` is
        set and the last state is reported.
    """
    if not _valid_inputs(debts, extra_monthly, strategy):
        logger.debug("simulate rejected invalid input (strategy=%r, extra=%r)", strategy, extra_monthly)
        return None

    ordered = order_debts(debts, strategy)
    order = tuple(debt.id for debt in ordered)
    starting_balance = sum(debt.balance for debt in ordered)
    state = initial_state(ordered)

    if not state.all_paid and _diverges(ordered, state, extra_monthly):
        logger.info("payments do not cover accruing interest; debts are never paid off")
        return PayoffResult(
            strategy=strategy,
            order=order,
            total_months=MAX_MONTHS,
            total_interest=0.0,
            total_paid=0.0,
            starting_balance=starting_balance,
            payoff_month_by_debt_id=MappingProxyType({}),
            interest_by_debt_id=MappingProxyType({}),
            never_paid_off=True,
        )

    while not state.all_paid and state.month < MAX_MONTHS:
        state = step(state, ordered, extra_monthly)

    incomplete = not state.all_paid
    if incomplete:
        logger.warning("debt simulation hit the %d month cap before payoff", MAX_MONTHS)

    return PayoffResult(
        strategy=strategy,
        order=order,
        total_months=state.month,
        total_interest=state.total_interest,
        total_paid=state.total_paid,
        starting_balance=starting_balance,
        payoff_month_by_debt_id=MappingProxyType(
            {debt.id: month for debt, month in zip(ordered, state.payoff_months) if month is not None}
        ),
        interest_by_debt_id=MappingProxyType(
            {debt.id: interest for debt, interest in zip(ordered, state.interest_paid)}
        ),
        incomplete=incomplete,
    )


def payoff_single(balance: float, annual_rate_percent: float, monthly_payment: float) -> Optional[SinglePayoff]:
    """Months and interest to retire one debt at a fixed monthly payment."""
    result = simulate([Debt("debt", balance, annual_rate_percent, monthly_payment)], 0.0, AVALANCHE)
    if result is None:
        return None
    return SinglePayoff(
        months=result.total_months,
        total_interest=result.total_interest,
        total_paid=result.total_paid,
        never_paid_off=result.never_paid_off,
        incomplete=result.incomplete,
    )


def compare_strategies(debts: Sequence[Debt], extra_monthly: float) -> Optional[StrategyComparison]:
    avalanche = simulate(debts, extra_monthly, AVALANCHE)
    snowball = simulate(debts, extra_monthly, SNOWBALL)
    if avalanche is None or snowball is None:
        return None
    return StrategyComparison(avalanche=avalanche, snowball=snowball)


__all__ = [
    "AVALANCHE",
    "SNOWBALL",
    "STRATEGIES",
    "Debt",
    "PayoffState",
    "PayoffResult",
    "SinglePayoff",
    "StrategyComparison",
    "order_debts",
    "initial_state",
    "step",
    "simulate",
    "payoff_single",
    "compare_strategies",
]
