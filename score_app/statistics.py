"""Summary statistics over a drink log: totals, favourite category, streaks."""

from collections import Counter
from datetime import date, timedelta
from typing import Iterable, Optional

from score_app.daily import DayIndex, local_date
from score_app.drinks import DrinkEvent


def drink_statistics(events: Iterable[DrinkEvent], as_of: date, days: int = 30) -> dict:
    """Totals for the `days` calendar days ending at `as_of` plus the current drinking streak."""
    start = as_of - timedelta(days=days - 1)
    period = [e for e in events if start <= local_date(e.occurred_at) <= as_of]
    index = DayIndex(period)

    total_units = sum(e.units for e in period)
    counts = Counter(e.category.value for e in period)
    most_common = counts.most_common(1)[0][0] if counts else None

    streak = 0
    for offset in range(days):
        if index.drinks_on(as_of - timedelta(days=offset)):
            streak += 1
        else:
            break

    return {
        "total_drinks": len(period),
        "total_alcohol_units": round(total_units, 4),
        "average_daily_units": round(total_units / days, 4) if days > 0 else 0.0,
        "most_common_category": most_common,
        "streak_days": streak,
    }


def longest_sober_streak(events: Iterable[DrinkEvent], start: date, end: Optional[date] = None) -> int:
    """Longest run of alcohol-free days between `start` and `end` inclusive."""
    index = DayIndex(events)
    if end is None:
        end = max(index.days, default=start)
    longest = 0
    current = 0
    day = start
    while day <= end:
        if index.drinks_on(day):
            current = 0
        else:
            current += 1
            longest = max(longest, current)
        day += timedelta(days=1)
    return longest
