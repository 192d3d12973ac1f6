"""Bounded bisection for inverting monotonic functions."""

from __future__ import annotations

from typing import Callable


def bisect_max(
    func: Callable[[float], float],
    limit: float,
    lo: float,
    hi: float,
    iterations: int = 50,
) -> float:
    """Largest probed ``x`` in ``[lo, hi]`` with ``func(x) < limit``.

    ``func`` must be non-decreasing on the interval.  The search runs a fixed
    number of halvings, so the answer is within ``(hi - lo) / 2**iterations``
    of the true boundary.  Returns ``lo`` when no probe satisfies the limit.
    """
    best = lo
    for _ in range(iterations):
        mid = (lo + hi) / 2
        if func(mid) < limit:
            best = mid
            lo = mid
        else:
            hi = mid
    return best


__all__ = ["bisect_max"]
