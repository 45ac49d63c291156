"""Rolling health score: recency-weighted mean of the trailing daily scores.

weight = exp(-0.1 * days_ago); the most recent day is days_ago = 0.
"""

import math
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Union

from score_app.daily import DayIndex
from score_app.drinks import DrinkEvent
from score_app.profile import DEFAULT_PROFILE, UserProfile
from score_app.recovery import NEUTRAL_SCORE, round_score
from score_app.scoring import DailyScore, Strategy, score_index

if TYPE_CHECKING:
    from score_app.cache import ScoreCache

ROLLING_DECAY = 0.1
DEFAULT_WINDOW_DAYS = 30


def rolling_score(scores_by_days_ago: Mapping[int, float]) -> int:
    """Weighted mean of {days_ago: score}; 100 when there is nothing to weigh."""
    total_weight = 0.0
    weighted = 0.0
    for days_ago, score in scores_by_days_ago.items():
        weight = math.exp(-ROLLING_DECAY * days_ago)
        weighted += score * weight
        total_weight += weight
    if total_weight == 0:
        return NEUTRAL_SCORE
    return max(0, min(100, round_score(weighted / total_weight)))


def daily_scores(
    events: Iterable[DrinkEvent],
    as_of: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
    window_days: int = DEFAULT_WINDOW_DAYS,
    cache: Optional["ScoreCache"] = None,
) -> List[DailyScore]:
    """Scores for each day of the window, oldest first."""
    strategy = Strategy(strategy)
    p = profile or DEFAULT_PROFILE
    version = cache.sync_profile(p) if cache is not None else None
    index = None
    out: List[DailyScore] = []
    for days_ago in range(window_days - 1, -1, -1):
        day = as_of - timedelta(days=days_ago)
        cached = cache.get(day, strategy, p) if cache is not None else None
        if cached is None:
            if index is None:
                index = DayIndex(events)
            cached = score_index(index, day, p, strategy)
            if cache is not None:
                cache.put(cached, p, version)
        out.append(cached)
    return out


def rolling_health_score(
    events: Iterable[DrinkEvent],
    as_of: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
    window_days: int = DEFAULT_WINDOW_DAYS,
    cache: Optional["ScoreCache"] = None,
) -> int:
    """The current health score over the trailing `window_days` days."""
    scores = daily_scores(events, as_of, profile, strategy, window_days, cache)
    return rolling_score({(as_of - s.date).days: s.score for s in scores})
