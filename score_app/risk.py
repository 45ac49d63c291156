"""Risk tiers from daily and weekly consumption patterns."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable

from score_app.daily import DayIndex
from score_app.drinks import DrinkEvent


class RiskTier(str, Enum):
    VERY_LOW = "very_low"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)


_ORDER = [RiskTier.VERY_LOW, RiskTier.LOW, RiskTier.MODERATE, RiskTier.HIGH, RiskTier.VERY_HIGH]


def classify_risk(daily_units: float, weekly_units: float, binge_days: int, consecutive_days: int) -> RiskTier:
    """First matching tier, checked from very_high down."""
    if daily_units >= 10 or weekly_units >= 50 or binge_days >= 3:
        return RiskTier.VERY_HIGH
    if daily_units >= 8 or weekly_units >= 35 or (binge_days >= 2 and consecutive_days >= 3):
        return RiskTier.HIGH
    if daily_units >= 6 or weekly_units >= 21 or binge_days >= 1 or consecutive_days >= 5:
        return RiskTier.MODERATE
    if daily_units >= 3 or weekly_units >= 14:
        return RiskTier.LOW
    return RiskTier.VERY_LOW


@dataclass(frozen=True)
class RiskAssessment:
    date: date
    daily_units: float
    weekly_units: float
    binge_days: int
    consecutive_days: int
    tier: RiskTier


def assess_index(index: DayIndex, day: date) -> RiskAssessment:
    daily = index.units_on(day)
    weekly = index.weekly_units(day)
    binges = index.binge_days(day)
    streak = index.consecutive_days(day)
    return RiskAssessment(
        date=day,
        daily_units=daily,
        weekly_units=weekly,
        binge_days=binges,
        consecutive_days=streak,
        tier=classify_risk(daily, weekly, binges, streak),
    )


def assess_day(events: Iterable[DrinkEvent], day: date) -> RiskAssessment:
    """Gather the classifier inputs for `day` from the event log and classify."""
    return assess_index(DayIndex(events), day)
