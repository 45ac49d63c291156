"""Tests for the per-day score cache."""
import threading
from datetime import date, datetime, timedelta

import score_app.cache as cache_module
from score_app.cache import CachedScorer, ScoreCache
from score_app.drinks import DrinkCategory, DrinkEvent
from score_app.profile import DEFAULT_PROFILE, UserProfile
from score_app.rolling import daily_scores, rolling_health_score
from score_app.scoring import Strategy, daily_score

DAY = date(2024, 6, 15)


def at(day, hour=20, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute)


def units_drink(when, units, category=DrinkCategory.OTHER):
    """A drink of just over `units` standard units at 10% ABV."""
    return DrinkEvent(units * 1000.0 / (10.0 * 0.789) + 0.01, when, category, alcohol_percent=10.0)


def _warm(cache, events):
    for strategy in Strategy:
        daily_scores(events, DAY, None, strategy, 30, cache)


def test_cached_scorer_matches_engine():
    events = [units_drink(at(DAY - timedelta(days=1)), 8.5), units_drink(at(DAY), 1.0)]
    scorer = CachedScorer()
    first = scorer.daily_score(events, DAY)
    assert first == daily_score(events, DAY)
    assert scorer.daily_score(events, DAY) is first
    assert scorer.cache.entry_version(DAY, Strategy.ACCURATE) == scorer.cache.version


def test_rolling_with_cache_matches_uncached():
    events = [units_drink(at(DAY - timedelta(days=i)), 3.0 + i % 4) for i in range(0, 20, 3)]
    cache = ScoreCache()
    for strategy in Strategy:
        assert rolling_health_score(events, DAY, None, strategy, 30, cache) == rolling_health_score(events, DAY, None, strategy)
    assert len(cache) == 60


def test_invalidate_events_drops_influenced_days_only():
    events = [units_drink(at(DAY - timedelta(days=20)), 2.0)]
    cache = ScoreCache()
    _warm(cache, events)
    changed = units_drink(at(DAY - timedelta(days=10)), 9.0)
    version = cache.version
    cache.invalidate_events([changed])
    assert cache.version > version
    changed_day = DAY - timedelta(days=10)
    assert cache.get(changed_day, Strategy.SIMPLE) is None
    assert cache.get(changed_day + timedelta(days=1), Strategy.SIMPLE) is not None
    for offset in range(14):
        day = changed_day + timedelta(days=offset)
        if day <= DAY:
            assert cache.get(day, Strategy.ACCURATE) is None
    assert cache.get(changed_day - timedelta(days=1), Strategy.ACCURATE) is not None


def test_invalidation_then_recompute_sees_new_event():
    events = []
    scorer = CachedScorer()
    assert scorer.daily_score(events, DAY, strategy="simple").score == 100
    new = units_drink(at(DAY), 9.0)
    events.append(new)
    scorer.events_changed([new])
    assert scorer.daily_score(events, DAY, strategy="simple").score == 20


def test_profile_change_drops_accurate_only():
    events = [units_drink(at(DAY), 5.0)]
    cache = ScoreCache()
    _warm(cache, events)
    cache.sync_profile(UserProfile(weight_kg=50, gender="female"))
    assert cache.get(DAY, Strategy.ACCURATE) is None
    assert cache.get(DAY, Strategy.SIMPLE) is not None
    cache.clear()
    assert len(cache) == 0


def test_invalidate_days_by_strategy():
    cache = ScoreCache()
    _warm(cache, [])
    assert cache.invalidate_days([DAY], Strategy.SIMPLE) == 1
    assert cache.get(DAY, Strategy.ACCURATE) is not None
    assert cache.invalidate_days([DAY]) == 1


def test_stale_version_write_is_discarded():
    cache = ScoreCache()
    version = cache.sync_profile(DEFAULT_PROFILE)
    score = daily_score([units_drink(at(DAY), 3.0)], DAY, strategy="simple")
    cache.invalidate_days([DAY - timedelta(days=3)])
    assert cache.put(score, version=version) is False
    assert cache.get(DAY, Strategy.SIMPLE) is None
    assert cache.entry_version(DAY, Strategy.SIMPLE) is None
    assert cache.put(score, version=cache.version) is True
    assert cache.entry_version(DAY, Strategy.SIMPLE) == cache.version


def test_accurate_entry_misses_for_other_profile():
    events = [units_drink(at(DAY), 4.5)]
    heavy = UserProfile(weight_kg=110)
    cache = ScoreCache(heavy)
    for strategy in Strategy:
        cache.put(daily_score(events, DAY, heavy, strategy), heavy)
    light = UserProfile(weight_kg=45, gender="female")
    assert cache.get(DAY, Strategy.ACCURATE, light) is None
    assert cache.get(DAY, Strategy.ACCURATE, heavy) is not None
    assert cache.get(DAY, Strategy.SIMPLE, light) is not None
    assert cache.put(daily_score(events, DAY, light), light) is False


def test_profile_switch_during_compute_does_not_leak_score(monkeypatch):
    events = [units_drink(at(DAY), 4.5)]
    heavy = UserProfile(weight_kg=110)
    light = UserProfile(weight_kg=45, gender="female")
    expected = daily_score(events, DAY, light)
    assert daily_score(events, DAY, heavy) != expected

    started = threading.Event()
    release = threading.Event()
    real_score_index = cache_module.score_index

    def slow_score_index(index, day, profile, strategy):
        if profile == heavy:
            started.set()
            release.wait(5)
        return real_score_index(index, day, profile, strategy)

    monkeypatch.setattr(cache_module, "score_index", slow_score_index)
    scorer = CachedScorer(ScoreCache())
    results = []
    worker = threading.Thread(target=lambda: results.append(scorer.daily_score(events, DAY, heavy)))
    worker.start()
    assert started.wait(5)
    scorer.cache.sync_profile(light)
    release.set()
    worker.join(5)

    assert results[0] == daily_score(events, DAY, heavy)
    assert scorer.cache.get(DAY, Strategy.ACCURATE, light) is None
    assert scorer.daily_score(events, DAY, light) == expected
    assert scorer.cache.get(DAY, Strategy.ACCURATE, light) == expected
