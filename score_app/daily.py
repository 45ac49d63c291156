"""Calendar-day aggregation of drink events.

Every component buckets events with local_date(): naive timestamps are taken
as local already, aware ones are converted to the host's local zone first.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List

from score_app.drinks import DrinkEvent
from score_app.units import OZ_PER_ML

BINGE_UNITS = 6.0
WEEK_DAYS = 7
CONSECUTIVE_LOOKBACK_DAYS = 14


@dataclass(frozen=True)
class DailyConsumption:
    date: date
    total_volume_ml: float = 0.0
    total_alcohol_units: float = 0.0
    drink_count: int = 0

    @property
    def total_volume_oz(self) -> float:
        return self.total_volume_ml * OZ_PER_ML


def local_date(moment: datetime) -> date:
    """Local calendar day of a timestamp."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def total_consumption(events: Iterable[DrinkEvent], day: date) -> DailyConsumption:
    volume = 0.0
    units = 0.0
    count = 0
    for e in events:
        volume += e.volume_ml
        units += e.units
        count += 1
    return DailyConsumption(date=day, total_volume_ml=volume, total_alcohol_units=units, drink_count=count)


class DayIndex:
    """Events bucketed by local day, built once per call so multi-day lookups do not rescan the log."""

    def __init__(self, events: Iterable[DrinkEvent]):
        self._by_day: Dict[date, List[DrinkEvent]] = defaultdict(list)
        for e in events:
            self._by_day[local_date(e.occurred_at)].append(e)
        for drinks in self._by_day.values():
            drinks.sort(key=lambda e: e.occurred_at)
        self._units: Dict[date, float] = {
            day: sum(e.units for e in drinks) for day, drinks in self._by_day.items()
        }

    @property
    def days(self) -> List[date]:
        return sorted(self._by_day)

    def drinks_on(self, day: date) -> List[DrinkEvent]:
        """Drinks on a day, oldest first."""
        return list(self._by_day.get(day, ()))

    def units_on(self, day: date) -> float:
        return self._units.get(day, 0.0)

    def consumption(self, day: date) -> DailyConsumption:
        return total_consumption(self._by_day.get(day, ()), day)

    def weekly_consumption(self, day: date) -> DailyConsumption:
        drinks = []
        for offset in range(WEEK_DAYS):
            drinks.extend(self._by_day.get(day - timedelta(days=offset), ()))
        return total_consumption(drinks, day)

    def weekly_units(self, day: date) -> float:
        return sum(self.units_on(day - timedelta(days=offset)) for offset in range(WEEK_DAYS))

    def binge_days(self, day: date) -> int:
        """Days in the 7 days ending at `day` with at least 6 units."""
        return sum(
            1 for offset in range(WEEK_DAYS)
            if self.units_on(day - timedelta(days=offset)) >= BINGE_UNITS
        )

    def consecutive_days(self, day: date) -> int:
        """Unbroken run of drinking days ending at `day`, capped at 14."""
        run = 0
        for offset in range(CONSECUTIVE_LOOKBACK_DAYS):
            if self.units_on(day - timedelta(days=offset)) > 0:
                run += 1
            else:
                break
        return run


def drinks_for_date(events: Iterable[DrinkEvent], day: date) -> List[DrinkEvent]:
    return [e for e in events if local_date(e.occurred_at) == day]


def daily_consumption(events: Iterable[DrinkEvent], day: date) -> DailyConsumption:
    """Volume, units and count of the drinks on `day`."""
    return total_consumption(drinks_for_date(events, day), day)


def weekly_consumption(events: Iterable[DrinkEvent], day: date) -> DailyConsumption:
    """Totals over the 7 calendar days ending at `day` inclusive."""
    return DayIndex(events).weekly_consumption(day)


def weekly_breakdown(events: Iterable[DrinkEvent], start: date) -> List[DailyConsumption]:
    """One DailyConsumption per day for the 7 days starting at `start`."""
    index = DayIndex(events)
    return [index.consumption(start + timedelta(days=i)) for i in range(WEEK_DAYS)]


def binge_days(events: Iterable[DrinkEvent], day: date) -> int:
    return DayIndex(events).binge_days(day)


def consecutive_days(events: Iterable[DrinkEvent], day: date) -> int:
    return DayIndex(events).consecutive_days(day)


def consumption_to_dict(c: DailyConsumption) -> dict:
    return {
        "date": c.date.isoformat(),
        "total_volume_ml": round(c.total_volume_ml, 2),
        "total_volume_oz": round(c.total_volume_oz, 2),
        "total_alcohol_units": round(c.total_alcohol_units, 4),
        "drink_count": c.drink_count,
    }
