"""Maximum affordable home price under debt-service ratio limits.

Lenders qualify a buyer against two ratios computed at a stress-tested rate
(the greater of the contract rate plus a buffer and a floor rate):

* front-end (GDS): housing costs / gross monthly income
* back-end (TDS): housing costs plus other debt payments / gross monthly income

Housing costs are the stress-tested mortgage payment, fixed monthly
taxes/insurance/heating, property tax proportional to price and half of any
condo fee.  The mortgage principal is the price less the down payment, plus
a default-insurance premium from ``insurance.PremiumSchedule``.

Both ratios rise with price, so each limit is inverted independently with
``bisection.bisect_max`` and the lower of the two prices wins.  When costs that
do not depend on the mortgage already reach a limit no price qualifies, and
the result is flagged ``unaffordable`` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .amortization import monthly_payment
from .bisection import bisect_max
from .insurance import PremiumSchedule, financed_principal

logger = logging.getLogger(__name__)

FRONT_END = "front_end"
BACK_END = "back_end"

DEFAULT_UPPER_BOUND = 5_000_000.0
DEFAULT_ITERATIONS = 50

SCENARIOS: Tuple[Tuple[str, float], ...] = (
    ("conservative", 0.80),
    ("moderate", 0.90),
    ("maximum", 1.00),
)


@dataclass(frozen=True)
class AffordabilityPolicy:
    max_front_ratio: float
    max_back_ratio: float
    stress_buffer: float
    stress_floor_rate: float


@dataclass(frozen=True)
class AffordabilityConstraints:
    """Borrower income, obligations and the lender limits applied to them.

    ``stress_floor_rate`` is the minimum qualifying rate; the qualifying
    rate is ``max(contract_rate + stress_buffer, stress_floor_rate)``.
    ``property_tax_rate`` is an annual fraction of the price.
    """

    gross_monthly_income: float
    max_front_ratio: float
    max_back_ratio: float
    stress_floor_rate: float
    stress_buffer: float = 0.0
    other_monthly_debt: float = 0.0
    monthly_taxes_insurance_heating: float = 0.0
    property_tax_rate: float = 0.0
    monthly_condo_fee: float = 0.0

    @classmethod
    def from_policy(
        cls,
        policy: AffordabilityPolicy,
        gross_monthly_income: float,
        other_monthly_debt: float = 0.0,
        monthly_taxes_insurance_heating: float = 0.0,
        property_tax_rate: float = 0.0,
        monthly_condo_fee: float = 0.0,
    ) -> "AffordabilityConstraints":
        return cls(
            gross_monthly_income=gross_monthly_income,
            max_front_ratio=policy.max_front_ratio,
            max_back_ratio=policy.max_back_ratio,
            stress_floor_rate=policy.stress_floor_rate,
            stress_buffer=policy.stress_buffer,
            other_monthly_debt=other_monthly_debt,
            monthly_taxes_insurance_heating=monthly_taxes_insurance_heating,
            property_tax_rate=property_tax_rate,
            monthly_condo_fee=monthly_condo_fee,
        )

    def stress_rate(self, contract_rate: float) -> float:
        return max(contract_rate + self.stress_buffer, self.stress_floor_rate)

    def property_tax(self, price: float) -> float:
        return price * self.property_tax_rate / 12

    def housing_cost(self, mortgage_payment: float, price: float) -> float:
        return (
            mortgage_payment
            + self.property_tax(price)
            + self.monthly_taxes_insurance_heating
            + self.monthly_condo_fee * 0.5
        )

    def is_valid(self) -> bool:
        return (
            self.gross_monthly_income > 0
            and self.max_front_ratio > 0
            and self.max_back_ratio > 0
            and self.stress_floor_rate >= 0
            and self.stress_buffer >= 0
            and self.other_monthly_debt >= 0
            and self.monthly_taxes_insurance_heating >= 0
            and self.property_tax_rate >= 0
            and self.monthly_condo_fee >= 0
        )


@dataclass(frozen=True)
class AffordabilityResult:
    max_price: float
    max_price_front: float
    max_price_back: float
    limiting_constraint: str
    stress_rate: float
    down_payment: float
    principal: float
    premium: float
    payment: float
    stress_payment: float
    front_ratio: float
    back_ratio: float
    below_minimum_down: bool = False
    unaffordable: bool = False

    @property
    def insured(self) -> bool:
        return self.premium > 0


@dataclass(frozen=True)
class AffordabilityScenario:
    label: str
    fraction: float
    price: float
    payment: float
    property_tax: float
    total_monthly: float


def _mortgage_payment(
    price: float,
    down_payment: float,
    rate: float,
    amort_periods: int,
    premium_schedule: PremiumSchedule,
) -> float:
    principal, premium = financed_principal(price, down_payment, premium_schedule)
    return monthly_payment(principal + premium, rate, amort_periods)


def front_end_ratio(
    price: float,
    constraints: AffordabilityConstraints,
    down_payment: float,
    stress_rate: float,
    amort_periods: int,
    premium_schedule: PremiumSchedule,
) -> float:
    payment = _mortgage_payment(price, down_payment, stress_rate, amort_periods, premium_schedule)
    return constraints.housing_cost(payment, price) / constraints.gross_monthly_income


def back_end_ratio(
    price: float,
    constraints: AffordabilityConstraints,
    down_payment: float,
    stress_rate: float,
    amort_periods: int,
    premium_schedule: PremiumSchedule,
) -> float:
    front = front_end_ratio(price, constraints, down_payment, stress_rate, amort_periods, premium_schedule)
    return front + constraints.other_monthly_debt / constraints.gross_monthly_income


def max_affordable_price(
    constraints: AffordabilityConstraints,
    down_payment: float,
    rate: float,
    amort_periods: int,
    premium_schedule: PremiumSchedule,
    upper_bound: float = DEFAULT_UPPER_BOUND,
    iterations: int = DEFAULT_ITERATIONS,
) -> Optional[AffordabilityResult]:
    """Highest price satisfying both the front-end and back-end limits.

    Parameters
    ----------
    constraints : AffordabilityConstraints
        Income, obligations and lender limits.
    down_payment : float
        Cash available toward the purchase.  Also the lower end of the search.
    rate : float
        Contract interest rate in percent.
    amort_periods : int
        Amortization length in months.
    premium_schedule : PremiumSchedule
        Default-insurance premium step function.
    upper_bound : float, optional
        Upper end of the price search.
    iterations : int, optional
        Number of bisection steps per constraint.

    Returns
    -------
    AffordabilityResult or None
        ``None`` when income is not positive, inputs are negative, or the down
        payment already meets or exceeds the search range.
        When the costs at a price equal to the down payment (no mortgage at
        all) already reach a limit, no price qualifies: the result has
        ``unaffordable=True``, ``max_price`` 0 and the ratios at that price.
    """
    if not constraints.is_valid():
        logger.debug("max_affordable_price rejected constraints %s", constraints)
        return None
    if down_payment < 0 or rate < 0 or amort_periods <= 0 or iterations <= 0:
        return None
    if down_payment >= upper_bound:
        logger.debug("down payment %.2f outside search range", down_payment)
        return None

    stress = constraints.stress_rate(rate)
    args = (constraints, down_payment, stress, amort_periods, premium_schedule)

    floor_front = front_end_ratio(down_payment, *args)
    floor_back = back_end_ratio(down_payment, *args)
    if floor_front >= constraints.max_front_ratio or floor_back >= constraints.max_back_ratio:
        logger.info("costs other than the mortgage already reach the ratio limits; no price qualifies")
        return AffordabilityResult(
            max_price=0.0,
            max_price_front=0.0,
            max_price_back=0.0,
            limiting_constraint=FRONT_END if floor_front >= constraints.max_front_ratio else BACK_END,
            stress_rate=stress,
            down_payment=0.0,
            principal=0.0,
            premium=0.0,
            payment=0.0,
            stress_payment=0.0,
            front_ratio=floor_front,
            back_ratio=floor_back,
            unaffordable=True,
        )

    max_front = bisect_max(
        lambda price: front_end_ratio(price, *args),
        constraints.max_front_ratio,
        down_payment,
        upper_bound,
        iterations,
    )
    max_back = bisect_max(
        lambda price: back_end_ratio(price, *args),
        constraints.max_back_ratio,
        down_payment,
        upper_bound,
        iterations,
    )
    max_price = min(max_front, max_back)
    limiting = FRONT_END if max_front < max_back else BACK_END

    principal, premium = financed_principal(max_price, down_payment, premium_schedule)
    down = min(down_payment, max_price)
    below_minimum = max_price > 0 and premium_schedule.below_minimum(down / max_price)
    return AffordabilityResult(
        max_price=max_price,
        max_price_front=max_front,
        max_price_back=max_back,
        limiting_constraint=limiting,
        stress_rate=stress,
        down_payment=down,
        principal=principal,
        premium=premium,
        payment=monthly_payment(principal + premium, rate, amort_periods),
        stress_payment=monthly_payment(principal + premium, stress, amort_periods),
        front_ratio=front_end_ratio(max_price, *args) if max_price > 0 else 0.0,
        back_ratio=back_end_ratio(max_price, *args) if max_price > 0 else 0.0,
        below_minimum_down=below_minimum,
    )


def affordability_scenarios(
    result: AffordabilityResult,
    constraints: AffordabilityConstraints,
    rate: float,
    amort_periods: int,
    premium_schedule: PremiumSchedule,
    scenarios: Sequence[Tuple[str, float]] = SCENARIOS,
) -> List[AffordabilityScenario]:
    """Monthly cost at fractions of the maximum price, at the contract rate."""
    if result.unaffordable:
        return []
    rows: List[AffordabilityScenario] = []
    for label, fraction in scenarios:
        price = round(result.max_price * fraction)
        payment = _mortgage_payment(price, result.down_payment, rate, amort_periods, premium_schedule)
        prop_tax = constraints.property_tax(price)
        rows.append(
            AffordabilityScenario(
                label=label,
                fraction=fraction,
                price=price,
                payment=payment,
                property_tax=prop_tax,
                total_monthly=payment
                + prop_tax
                + constraints.monthly_taxes_insurance_heating
                + constraints.monthly_condo_fee,
            )
        )
    return rows


__all__ = [
    "FRONT_END",
    "BACK_END",
    "AffordabilityPolicy",
    "AffordabilityConstraints",
    "AffordabilityResult",
    "AffordabilityScenario",
    "front_end_ratio",
    "back_end_ratio",
    "max_affordable_price",
    "affordability_scenarios",
]
