"""Daily health scores (0-100) with two interchangeable strategies.

- "accurate": risk-tier base score with binge-speed, peak-BAC and
  consecutive-day penalties; alcohol-free days use the recovery model.
- "simple": step function of the day's units only; alcohol-free days are 100.

Callers pick a strategy per call; there is no global switch.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from score_app.calculations import peak_bac_of
from score_app.daily import DayIndex
from score_app.drinks import DrinkEvent
from score_app.profile import DEFAULT_PROFILE, UserProfile
from score_app.recovery import NEUTRAL_SCORE, clamp_score, recovery_score
from score_app.risk import RiskTier, assess_index

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    ACCURATE = "accurate"
    SIMPLE = "simple"


@dataclass(frozen=True)
class DailyScore:
    date: date
    score: int
    strategy: Strategy
    details: Dict[str, object] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "score": self.score,
            "strategy": self.strategy.value,
            "details": dict(self.details),
        }


TIER_BASE_SCORES = {
    RiskTier.VERY_LOW: 90,
    RiskTier.LOW: 75,
    RiskTier.MODERATE: 55,
    RiskTier.HIGH: 30,
    RiskTier.VERY_HIGH: 10,
}

# Binge speed: (max duration hours, min units, penalty), first match wins.
BINGE_SPEED_PENALTIES = ((2.0, 4.0, 15), (4.0, 6.0, 10))
# Peak BAC: (min BAC %, penalty), first match wins.
BAC_PENALTIES = ((0.15, 20), (0.10, 15), (0.08, 10))
# Consecutive drinking days: (min days, penalty), first match wins.
CONSECUTIVE_PENALTIES = ((7, 15), (3, 8))
MODERATE_BONUS = 5
MODERATE_MAX_UNITS = 2.0
MODERATE_MAX_DRINKS = 2

# Simple strategy: (units strictly above, score), first match wins.
SIMPLE_STEPS = ((8, 20), (6, 35), (4, 50), (2, 65), (1, 80), (0, 90))


class ScoringStrategy(ABC):
    strategy: Strategy

    @abstractmethod
    def score_day(self, index: DayIndex, day: date, profile: UserProfile) -> DailyScore:
        """Score one calendar day from bucketed events."""


class AccurateStrategy(ScoringStrategy):
    strategy = Strategy.ACCURATE

    def score_day(self, index: DayIndex, day: date, profile: UserProfile) -> DailyScore:
        units = index.units_on(day)
        if units == 0:
            score = recovery_score(index, day)
            return DailyScore(day, score, self.strategy, {"recovery": True})

        drinks = index.drinks_on(day)
        risk = assess_index(index, day)
        base = TIER_BASE_SCORES[risk.tier]

        binge_penalty = 0
        if len(drinks) >= 2:
            duration = (drinks[-1].occurred_at - drinks[0].occurred_at).total_seconds() / 3600.0
            for max_hours, min_units, penalty in BINGE_SPEED_PENALTIES:
                if duration < max_hours and units >= min_units:
                    binge_penalty = penalty
                    break

        peak = peak_bac_of(drinks, profile)
        bac_penalty = next((p for threshold, p in BAC_PENALTIES if peak >= threshold), 0)
        consecutive_penalty = next(
            (p for min_days, p in CONSECUTIVE_PENALTIES if risk.consecutive_days >= min_days), 0
        )
        bonus = MODERATE_BONUS if units <= MODERATE_MAX_UNITS and len(drinks) <= MODERATE_MAX_DRINKS else 0

        raw = base - binge_penalty - bac_penalty - consecutive_penalty + bonus
        details = {
            "risk_tier": risk.tier.value,
            "base": base,
            "binge_penalty": binge_penalty,
            "bac_penalty": bac_penalty,
            "consecutive_penalty": consecutive_penalty,
            "bonus": bonus,
            "peak_bac": round(peak, 4),
            "units": round(units, 4),
        }
        logger.debug("Accurate score for %s: %s", day, details)
        return DailyScore(day, clamp_score(raw), self.strategy, details)


class SimpleStrategy(ScoringStrategy):
    strategy = Strategy.SIMPLE

    def score_day(self, index: DayIndex, day: date, profile: UserProfile) -> DailyScore:
        units = index.units_on(day)
        return DailyScore(day, simple_score(units), self.strategy, {"units": round(units, 4)})


def simple_score(units: float) -> int:
    for above, score in SIMPLE_STEPS:
        if units > above:
            return score
    return NEUTRAL_SCORE


STRATEGIES: Dict[Strategy, ScoringStrategy] = {
    Strategy.ACCURATE: AccurateStrategy(),
    Strategy.SIMPLE: SimpleStrategy(),
}


def get_strategy(strategy: Union[Strategy, str]) -> ScoringStrategy:
    """Resolve a strategy tag; raises ValueError for unknown names."""
    return STRATEGIES[Strategy(strategy)]


def score_index(
    index: DayIndex,
    day: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
) -> DailyScore:
    return get_strategy(strategy).score_day(index, day, profile or DEFAULT_PROFILE)


def daily_score(
    events: Iterable[DrinkEvent],
    day: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
) -> DailyScore:
    """Score a calendar day under the chosen strategy."""
    return score_index(DayIndex(events), day, profile, strategy)
