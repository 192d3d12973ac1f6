import pytest

from personal_finance import tables
from personal_finance.calculators.insurance import PremiumSchedule, financed_principal
from personal_finance.exceptions import RateTableError


@pytest.fixture
def schedule():
    return PremiumSchedule(((0.05, 0.040), (0.10, 0.031), (0.15, 0.028)), exempt_from=0.20)


@pytest.mark.parametrize(
    "fraction, expected",
    [
        (0.05, 0.040),
        (0.099, 0.040),
        (0.10, 0.031),
        (0.15, 0.028),
        (0.199, 0.028),
        (0.20, 0.0),
        (0.50, 0.0),
        (0.03, 0.040),
    ],
)
def test_rate_for_tiers(schedule, fraction, expected):
    assert schedule.rate_for(fraction) == expected


def test_below_minimum(schedule):
    assert schedule.below_minimum(0.03)
    assert not schedule.below_minimum(0.05)


def test_tiers_are_sorted():
    unsorted = PremiumSchedule(((0.15, 0.028), (0.05, 0.040)))
    assert unsorted.tiers == ((0.05, 0.040), (0.15, 0.028))


def test_rates_rising_with_down_payment_rejected():
    with pytest.raises(RateTableError):
        PremiumSchedule(((0.05, 0.02), (0.10, 0.03)))


def test_tier_at_exemption_rejected():
    with pytest.raises(RateTableError):
        PremiumSchedule(((0.05, 0.04), (0.20, 0.03)), exempt_from=0.20)


def test_financed_principal(schedule):
    principal, premium = financed_principal(500000, 25000, schedule)
    assert principal == 475000
    assert premium == pytest.approx(19000)


def test_financed_principal_down_exceeds_price(schedule):
    assert financed_principal(100000, 150000, schedule) == (0.0, 0.0)
    assert financed_principal(0, 10000, schedule) == (0.0, 0.0)


def test_no_insurance_schedule():
    schedule = PremiumSchedule.none()
    assert schedule.rate_for(0.01) == 0.0
    assert not schedule.below_minimum(0.01)


def test_default_schedule_matches_table():
    assert tables.premium_schedule().rate_for(0.07) == 0.040


def test_below_minimum_charged_highest_rate(schedule):
    highest = max(rate for _, rate in schedule.tiers)
    assert schedule.rate_for(0.01) == highest
    assert schedule.rate_for(0.0) == highest
