"""Mortgage default-insurance premiums.

Insured mortgages carry a one-time premium that is added to the principal.
The premium rate is a step function of the down-payment fraction: smaller
down payments pay higher rates, and at or above ``exempt_from`` no insurance
is required.

The affordability solver bisects over price with the down payment held
fixed, so as price rises the down-payment fraction falls.  For the ratio
being bisected to stay non-decreasing in price the premium rate must never
drop as the down-payment fraction shrinks.  ``PremiumSchedule`` enforces
that: tier rates must not rise with the down payment, and fractions below
the smallest minimum down payment are charged that tier's rate, which is
the highest rate in the schedule, rather than zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

from personal_finance.exceptions import RateTableError


@dataclass(frozen=True)
class PremiumSchedule:
    tiers: Tuple[Tuple[float, float], ...]
    exempt_from: float = 0.20

    def __post_init__(self) -> None:
        tiers = tuple(sorted((float(lo), float(rate)) for lo, rate in self.tiers))
        object.__setattr__(self, "tiers", tiers)
        for (_, rate), (_, next_rate) in zip(tiers, tiers[1:]):
            if next_rate > rate:
                raise RateTableError("premium rates must not increase with the down payment")
        if tiers and tiers[-1][0] >= self.exempt_from:
            raise RateTableError("premium tiers must start below the exemption threshold")

    @classmethod
    def from_rows(cls, rows: Iterable[Dict], exempt_from: float = 0.20) -> "PremiumSchedule":
        return cls(tuple((row["min_down"], row["rate"]) for row in rows), exempt_from=exempt_from)

    @classmethod
    def none(cls) -> "PremiumSchedule":
        """Schedule that never charges a premium."""
        return cls((), exempt_from=0.0)

    def rate_for(self, down_fraction: float) -> float:
        if down_fraction >= self.exempt_from or not self.tiers:
            return 0.0
        for lower, rate in reversed(self.tiers):
            if down_fraction >= lower:
                return rate
        # below the minimum down payment: charge the highest tier
        return self.tiers[0][1]

    def below_minimum(self, down_fraction: float) -> bool:
        return bool(self.tiers) and down_fraction < self.tiers[0][0]


def financed_principal(price: float, down_payment: float, schedule: PremiumSchedule) -> Tuple[float, float]:
    """Return ``(principal, premium)`` for a purchase at ``price``.

    The down payment is capped at the price; the premium is charged on the
    borrowed amount and financed on top of it.
    """
    if price <= 0:
        return 0.0, 0.0
    down = min(down_payment, price)
    principal = price - down
    premium = schedule.rate_for(down / price) * principal
    return principal, premium


__all__ = ["PremiumSchedule", "financed_principal"]
