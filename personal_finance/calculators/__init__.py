"""Core personal-finance calculators.

The `calculators` package contains small, focused modules that each implement
one calculation engine:

* ``taxes`` – progressive bracket tax with credits, payroll contributions and land transfer tax.
* ``amortization`` – loan payment formula, amortization schedules and closed-form remaining balance.
* ``insurance`` – mortgage default-insurance premium tiers.
* ``bisection`` – bounded bisection for inverting monotonic functions.
* ``affordability`` – maximum home price under front-end and back-end debt ratio limits.
* ``debt_payoff`` – month-by-month avalanche and snowball payoff simulation.
* ``growth`` – compound growth with regular deposits and effective annual rates.
* ``refinance`` – prepayment penalties and refinance break-even comparison.

Each module exposes a few public functions with clear parameters and returns.
Invalid input yields ``None`` rather than an exception.  See individual
docstrings for details.
"""

from . import (  # noqa: F401
    taxes,
    amortization,
    insurance,
    bisection,
    affordability,
    debt_payoff,
    growth,
    refinance,
)

__all__ = [
    "taxes",
    "amortization",
    "insurance",
    "bisection",
    "affordability",
    "debt_payoff",
    "growth",
    "refinance",
]
