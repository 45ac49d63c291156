"""Tests for risk tiers, daily scoring strategies, recovery days and the rolling score."""
import math
from datetime import date, datetime, timedelta

import pytest

from score_app.daily import DayIndex
from score_app.drinks import DrinkCategory, DrinkEvent
from score_app.profile import UserProfile
from score_app.recovery import day_stress, recovery_score, round_score
from score_app.risk import RiskTier, assess_day, classify_risk
from score_app.rolling import daily_scores, rolling_health_score, rolling_score
from score_app.scoring import Strategy, daily_score, get_strategy, simple_score

DAY = date(2024, 6, 15)


def at(day, hour=20, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute)


def units_drink(when, units, category=DrinkCategory.OTHER):
    """A drink of just over `units` standard units at 10% ABV."""
    return DrinkEvent(units * 1000.0 / (10.0 * 0.789) + 0.01, when, category, alcohol_percent=10.0)


def _days_ago(n):
    return DAY - timedelta(days=n)


# --- risk ---

@pytest.mark.parametrize(
    "args, tier",
    [
        ((0, 0, 0, 0), RiskTier.VERY_LOW),
        ((3, 3, 0, 1), RiskTier.LOW),
        ((0, 14, 0, 0), RiskTier.LOW),
        ((6, 6, 0, 1), RiskTier.MODERATE),
        ((1, 21, 0, 1), RiskTier.MODERATE),
        ((1, 5, 1, 1), RiskTier.MODERATE),
        ((1, 5, 0, 5), RiskTier.MODERATE),
        ((8, 8, 0, 1), RiskTier.HIGH),
        ((1, 35, 0, 1), RiskTier.HIGH),
        ((1, 20, 2, 3), RiskTier.HIGH),
        ((1, 20, 2, 2), RiskTier.MODERATE),
        ((10, 10, 0, 1), RiskTier.VERY_HIGH),
        ((0, 50, 0, 0), RiskTier.VERY_HIGH),
        ((0, 20, 3, 0), RiskTier.VERY_HIGH),
    ],
)
def test_classify_risk_table(args, tier):
    assert classify_risk(*args) is tier


def test_risk_tier_order():
    assert RiskTier.VERY_LOW.rank < RiskTier.MODERATE.rank < RiskTier.VERY_HIGH.rank


def test_assess_day_counts_binges_and_streak():
    events = [
        units_drink(at(_days_ago(2)), 6.5),
        units_drink(at(_days_ago(1)), 1.0),
        units_drink(at(DAY), 6.5),
    ]
    a = assess_day(events, DAY)
    assert a.binge_days == 2
    assert a.consecutive_days == 3
    assert a.weekly_units == pytest.approx(14.0, abs=0.01)
    assert a.tier is RiskTier.HIGH


# --- recovery ---

def test_recovery_after_single_heavy_day():
    events = [units_drink(at(_days_ago(1)), 10.5)]
    expected = max(60, round(100 - 40 * math.exp(-0.3)))
    assert expected == 70
    assert daily_score(events, DAY, strategy="accurate").score == expected
    assert daily_score(events, DAY, strategy="simple").score == 100


def test_recovery_decays_over_several_days():
    events = [units_drink(at(_days_ago(2)), 10.5), units_drink(at(_days_ago(1)), 2.5)]
    stress = 8 * math.exp(-0.3) + 40 * math.exp(-0.6)
    assert recovery_score(DayIndex(events), DAY) == round_score(100 - stress) == 72


def test_recovery_floor_and_neutral():
    heavy_week = [units_drink(at(_days_ago(i)), 12) for i in range(1, 8)]
    assert recovery_score(DayIndex(heavy_week), DAY) == 60
    assert recovery_score(DayIndex([]), DAY) == 100
    old = [units_drink(at(_days_ago(8)), 12)]
    assert recovery_score(DayIndex(old), DAY) == 100


@pytest.mark.parametrize("units, stress", [(10, 40), (8.5, 30), (6, 25), (4, 15), (2, 8), (1.9, 3), (0.1, 3)])
def test_day_stress_bands(units, stress):
    assert day_stress(units) == stress


# --- accurate ---

def test_accurate_single_beer_gets_bonus():
    events = [DrinkEvent(330, at(DAY), DrinkCategory.BEER)]
    s = daily_score(events, DAY, strategy=Strategy.ACCURATE)
    assert s.score == 95
    assert s.details["risk_tier"] == "very_low"
    assert s.details["bonus"] == 5


@pytest.mark.parametrize(
    "units, expected",
    [
        (5.0, 75 - 10),   # low tier, BAC ~0.098
        (6.5, 55 - 15),   # moderate tier, BAC ~0.127
        (8.5, 30 - 20),   # high tier, BAC ~0.167
        (10.5, 0),        # very_high tier, BAC penalty clamps to 0
    ],
)
def test_accurate_bac_penalties(units, expected):
    events = [units_drink(at(DAY), units)]
    assert daily_score(events, DAY).score == expected


def test_accurate_binge_speed_penalty():
    fast = [units_drink(at(DAY, 20, m), 1.0) for m in (0, 15, 30, 45)]
    spread = [units_drink(at(DAY, h), 1.0) for h in (8, 12, 16, 20)]
    fast_score = daily_score(fast, DAY, strategy="accurate")
    spread_score = daily_score(spread, DAY, strategy="accurate")
    assert fast_score.details["risk_tier"] == spread_score.details["risk_tier"] == "low"
    assert fast_score.details["bac_penalty"] == spread_score.details["bac_penalty"] == 0
    assert spread_score.score - fast_score.score == 15


def test_accurate_rapid_heavy_penalty():
    drinks = [units_drink(at(DAY, 18), 3.1), units_drink(at(DAY, 21), 3.1)]
    s = daily_score(drinks, DAY)
    assert s.details["binge_penalty"] == 10


def test_accurate_single_drink_has_no_binge_penalty():
    s = daily_score([units_drink(at(DAY), 4.5)], DAY)
    assert s.details["binge_penalty"] == 0


def test_accurate_consecutive_penalties():
    three = [units_drink(at(_days_ago(i)), 1.0) for i in range(3)]
    assert daily_score(three, DAY).score == 90 - 8 + 5
    seven = [units_drink(at(_days_ago(i)), 1.0) for i in range(7)]
    assert daily_score(seven, DAY).score == 55 - 15 + 5


def test_scores_always_in_range():
    logs = [
        [],
        [units_drink(at(DAY, 20, m), 4) for m in range(0, 60, 10)],
        [units_drink(at(_days_ago(i), 22), 12) for i in range(14)],
        [units_drink(at(DAY), 0.2)],
    ]
    for events in logs:
        for strategy in Strategy:
            for offset in range(-2, 16):
                s = daily_score(events, _days_ago(offset), strategy=strategy)
                assert 0 <= s.score <= 100


def test_daily_score_idempotent():
    events = [units_drink(at(_days_ago(1)), 7), units_drink(at(DAY, 19), 2), units_drink(at(DAY, 20), 2)]
    assert daily_score(events, DAY) == daily_score(events, DAY)
    assert daily_score(events, DAY, strategy="simple") == daily_score(events, DAY, strategy="simple")


# --- simple ---

@pytest.mark.parametrize(
    "units, score",
    [(0, 100), (0.5, 90), (1, 90), (1.5, 80), (2, 80), (3, 65), (5, 50), (6, 50), (7, 35), (8, 35), (9, 20)],
)
def test_simple_steps(units, score):
    assert simple_score(units) == score


def test_simple_ignores_profile():
    events = [units_drink(at(DAY, 20, m), 1.8) for m in (0, 10, 20)]
    light = UserProfile(age_years=70, weight_kg=50, gender="female", activity_level="sedentary")
    heavy = UserProfile(age_years=22, weight_kg=110, gender="male", activity_level="very_active")
    a = daily_score(events, DAY, light, "simple")
    b = daily_score(events, DAY, heavy, "simple")
    assert a == b
    assert a.score == 50


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError):
        get_strategy("fancy")


# --- rolling ---

def test_rolling_score_weights():
    assert rolling_score({}) == 100
    expected = (50 + 100 * math.exp(-0.1)) / (1 + math.exp(-0.1))
    assert rolling_score({0: 50, 1: 100}) == round_score(expected) == 74


def test_rolling_empty_log():
    for strategy in Strategy:
        assert rolling_health_score([], DAY, strategy=strategy) == 100
    assert rolling_health_score([units_drink(at(DAY), 9)], DAY, window_days=0) == 100


def test_rolling_simple_single_heavy_day():
    events = [units_drink(at(_days_ago(1)), 9)]
    assert rolling_health_score(events, DAY, strategy="simple") == 93


def test_rolling_heavy_day_lowers_score():
    base = [units_drink(at(_days_ago(i)), 1.5) for i in (0, 3, 9, 20)]
    heavy = base + [units_drink(at(_days_ago(5)), 10.5)]
    for strategy in Strategy:
        assert rolling_health_score(heavy, DAY, strategy=strategy) < rolling_health_score(base, DAY, strategy=strategy)


def test_daily_scores_window():
    scores = daily_scores([units_drink(at(DAY), 1)], DAY, window_days=30)
    assert len(scores) == 30
    assert scores[0].date == _days_ago(29)
    assert scores[-1].date == DAY
