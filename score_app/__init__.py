"""
Alcohol health score engine: drink units, BAC estimate, risk tiers, daily and rolling scores.
Use from project root: python -m score_app.main
"""

from score_app.drinks import (
    DrinkCategory,
    DrinkEvent,
    alcohol_units,
    event_from_dict,
)
from score_app.profile import DEFAULT_PROFILE, UserProfile, processing_rate
from score_app.daily import DailyConsumption, daily_consumption, weekly_consumption
from score_app.calculations import bac_at, peak_bac
from score_app.risk import RiskTier, classify_risk
from score_app.scoring import DailyScore, Strategy, daily_score
from score_app.rolling import rolling_health_score
from score_app.cache import CachedScorer, ScoreCache

__all__ = [
    "DrinkCategory",
    "DrinkEvent",
    "alcohol_units",
    "event_from_dict",
    "UserProfile",
    "DEFAULT_PROFILE",
    "processing_rate",
    "DailyConsumption",
    "daily_consumption",
    "weekly_consumption",
    "bac_at",
    "peak_bac",
    "RiskTier",
    "classify_risk",
    "DailyScore",
    "Strategy",
    "daily_score",
    "rolling_health_score",
    "ScoreCache",
    "CachedScorer",
]
