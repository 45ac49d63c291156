"""Per-day score memoization owned by the caller.

Entries are keyed by (day, strategy). When events change, only the days those
events can influence are dropped: the event's own day for "simple", and the
event's day plus the following 13 days for "accurate" (its weekly, recovery
and consecutive-day lookbacks reach back at most 14 days).

Every entry is stamped with the cache version and profile it was computed
against. A writer reads the version before scoring (sync_profile returns it)
and passes it to put(); if any invalidation ran in between, the write is
discarded so a stale score never lands after the drop that should have
removed it.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple, Union

from score_app.daily import CONSECUTIVE_LOOKBACK_DAYS, DayIndex, local_date
from score_app.drinks import DrinkEvent
from score_app.profile import DEFAULT_PROFILE, UserProfile
from score_app.scoring import DailyScore, Strategy, score_index

logger = logging.getLogger(__name__)

INFLUENCE_DAYS = {
    Strategy.SIMPLE: 1,
    Strategy.ACCURATE: CONSECUTIVE_LOOKBACK_DAYS,
}

CacheKey = Tuple[date, Strategy]


@dataclass(frozen=True)
class CacheEntry:
    score: DailyScore
    profile: UserProfile
    version: int


class ScoreCache:
    def __init__(self, profile: Optional[UserProfile] = None):
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()
        self._profile = profile or DEFAULT_PROFILE
        self.version = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def profile(self) -> UserProfile:
        with self._lock:
            return self._profile

    def get(
        self,
        day: date,
        strategy: Union[Strategy, str],
        profile: Optional[UserProfile] = None,
    ) -> Optional[DailyScore]:
        """Cached score, or None. Accurate entries miss unless computed for `profile` (default: current)."""
        strategy = Strategy(strategy)
        with self._lock:
            entry = self._entries.get((day, strategy))
            if entry is None:
                return None
            if strategy is Strategy.ACCURATE and entry.profile != (profile or self._profile):
                return None
            return entry.score

    def entry_version(self, day: date, strategy: Union[Strategy, str]) -> Optional[int]:
        """Version an entry was computed against, or None when not cached."""
        with self._lock:
            entry = self._entries.get((day, Strategy(strategy)))
            return entry.version if entry is not None else None

    def put(
        self,
        score: DailyScore,
        profile: Optional[UserProfile] = None,
        version: Optional[int] = None,
    ) -> bool:
        """Store `score`; returns False when it was computed against a stale version or profile."""
        with self._lock:
            if version is None:
                version = self.version
            used = profile or self._profile
            if version != self.version:
                logger.debug("Discarding %s score for %s computed at version %d (now %d)",
                             score.strategy.value, score.date, version, self.version)
                return False
            if score.strategy is Strategy.ACCURATE and used != self._profile:
                logger.debug("Discarding accurate score for %s computed for a replaced profile", score.date)
                return False
            self._entries[(score.date, score.strategy)] = CacheEntry(score, used, version)
            return True

    def _bump(self) -> None:
        self.version += 1

    def invalidate_days(self, days: Iterable[date], strategy: Union[Strategy, str, None] = None) -> int:
        """Drop cached scores for `days` (all strategies unless one is given). Returns entries dropped."""
        strategies = list(Strategy) if strategy is None else [Strategy(strategy)]
        dropped = 0
        with self._lock:
            for day in set(days):
                for s in strategies:
                    if self._entries.pop((day, s), None) is not None:
                        dropped += 1
            self._bump()
        return dropped

    def invalidate_events(self, events: Iterable[DrinkEvent]) -> int:
        """Drop every cached day the added or removed `events` can affect."""
        event_days = {local_date(e.occurred_at) for e in events}
        dropped = 0
        for strategy, span in INFLUENCE_DAYS.items():
            affected = {day + timedelta(days=offset) for day in event_days for offset in range(span)}
            dropped += self.invalidate_days(affected, strategy)
        logger.debug("Invalidated %d cached scores for %d changed day(s)", dropped, len(event_days))
        return dropped

    def _drop_accurate(self) -> int:
        keys = [k for k in self._entries if k[1] is Strategy.ACCURATE]
        for k in keys:
            del self._entries[k]
        self._bump()
        return len(keys)

    def invalidate_profile(self) -> int:
        """Drop profile-dependent ("accurate") entries."""
        with self._lock:
            return self._drop_accurate()

    def sync_profile(self, profile: UserProfile) -> int:
        """Adopt `profile`, dropping accurate entries if it changed. Returns the version to write against."""
        with self._lock:
            if profile != self._profile:
                self._drop_accurate()
                self._profile = profile
            return self.version

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._bump()


class CachedScorer:
    """daily_score() front end that memoizes through a ScoreCache.

    The caller reports log edits through events_changed(); until then a hit is
    served without rescanning `events`.
    """

    def __init__(self, cache: Optional[ScoreCache] = None):
        self.cache = cache or ScoreCache()

    def daily_score(
        self,
        events: Iterable[DrinkEvent],
        day: date,
        profile: Optional[UserProfile] = None,
        strategy: Union[Strategy, str] = Strategy.ACCURATE,
    ) -> DailyScore:
        p = profile or DEFAULT_PROFILE
        version = self.cache.sync_profile(p)
        hit = self.cache.get(day, strategy, p)
        if hit is not None:
            return hit
        score = score_index(DayIndex(events), day, p, strategy)
        self.cache.put(score, p, version)
        return score

    def events_changed(self, events: Iterable[DrinkEvent]) -> int:
        return self.cache.invalidate_events(events)
