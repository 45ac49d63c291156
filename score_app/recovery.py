"""Recovery scoring for alcohol-free days.

A day without drinks does not score a flat 100: stress from heavy days in the
previous week decays by exp(-0.3 * days_ago) and is subtracted from 100, with
a floor of 60. The floor and decay are calibration constants.
"""

import math
from datetime import date, timedelta

from score_app.daily import DayIndex

NEUTRAL_SCORE = 100
RECOVERY_FLOOR = 60
RECOVERY_DECAY = 0.3
RECOVERY_LOOKBACK_DAYS = 7

# (minimum units, stress) from heaviest to lightest; lighter days add 3.
STRESS_BANDS = (
    (10, 40),
    (8, 30),
    (6, 25),
    (4, 15),
    (2, 8),
)
LIGHT_STRESS = 3


def round_score(value: float) -> int:
    """Round half up."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_score(value)))


def day_stress(units: float) -> int:
    for threshold, stress in STRESS_BANDS:
        if units >= threshold:
            return stress
    return LIGHT_STRESS


def cumulative_stress(index: DayIndex, day: date) -> float:
    """Decayed stress carried into `day` from the 7 days before it."""
    total = 0.0
    for days_ago in range(1, RECOVERY_LOOKBACK_DAYS + 1):
        units = index.units_on(day - timedelta(days=days_ago))
        if units > 0:
            total += day_stress(units) * math.exp(-RECOVERY_DECAY * days_ago)
    return total


def recovery_score(index: DayIndex, day: date) -> int:
    has_history = any(
        index.units_on(day - timedelta(days=i)) > 0 for i in range(1, RECOVERY_LOOKBACK_DAYS + 1)
    )
    if not has_history:
        return NEUTRAL_SCORE
    return max(RECOVERY_FLOOR, round_score(NEUTRAL_SCORE - cumulative_stress(index, day)))
