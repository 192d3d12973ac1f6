import pytest

from personal_finance.calculators.bisection import bisect_max


def test_finds_boundary():
    x = bisect_max(lambda v: v, 10.0, 0.0, 100.0)
    assert x == pytest.approx(10.0, abs=1e-9)
    assert x < 10.0


def test_no_probe_satisfies_returns_lo():
    assert bisect_max(lambda v: 1.0, 0.5, 3.0, 7.0) == 3.0


def test_every_probe_satisfies_approaches_hi():
    x = bisect_max(lambda v: 0.0, 1.0, 0.0, 8.0)
    assert x == pytest.approx(8.0, abs=1e-9)
    assert x < 8.0


def test_iteration_count_bounds_precision():
    coarse = bisect_max(lambda v: v, 10.0, 0.0, 100.0, iterations=5)
    assert 10.0 - 100.0 / 2 ** 5 <= coarse < 10.0
