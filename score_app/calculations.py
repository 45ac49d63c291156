"""BAC estimate using Widmark-style distribution and gram-based elimination.

Model:
- Each drink adds grams = units * 10
- The body clears `processing_rate(profile)` grams per hour from each drink
- BAC = [remaining grams / (body_weight_g * r)] * 100
- r = 0.68 (male), 0.55 (female)
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from score_app.daily import DayIndex
from score_app.drinks import DrinkEvent
from score_app.profile import DEFAULT_PROFILE, UserProfile, processing_rate

# Distribution ratio (Widmark r)
R_MALE = 0.68
R_FEMALE = 0.55

SOBER_BAC_THRESHOLD = 0.001

# Extra hours of recovery after the alcohol itself is processed, by daily units.
RECOVERY_EXTRA_HOURS = (
    (10, 24.0),
    (8, 16.0),
    (6, 12.0),
    (4, 6.0),
    (2, 2.0),
)


def _hours_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / 3600.0


def distribution_ratio(profile: UserProfile) -> float:
    return R_MALE if profile.is_male else R_FEMALE


def bac_from_grams(grams_alcohol: float, profile: Optional[UserProfile] = None) -> float:
    """BAC (%) for grams of ethanol currently in the body."""
    p = profile or DEFAULT_PROFILE
    return max(0.0, grams_alcohol / (p.weight_kg * 1000.0 * distribution_ratio(p)) * 100.0)


def remaining_grams(event: DrinkEvent, moment: datetime, rate: float) -> float:
    """Grams of a drink still unprocessed at `moment`."""
    elapsed = max(0.0, _hours_between(moment, event.occurred_at))
    return max(0.0, event.grams - elapsed * rate)


def bac_at(events: Iterable[DrinkEvent], moment: datetime, profile: Optional[UserProfile] = None) -> float:
    """BAC (%) at `moment` from the drinks taken at or before it."""
    p = profile or DEFAULT_PROFILE
    rate = processing_rate(p)
    grams = sum(remaining_grams(e, moment, rate) for e in events if e.occurred_at <= moment)
    return bac_from_grams(grams, p)


def peak_bac_of(drinks: List[DrinkEvent], profile: Optional[UserProfile] = None) -> float:
    """Highest BAC right after any of `drinks`, each counted from the drinks up to it."""
    if not drinks:
        return 0.0
    return max(bac_at(drinks, d.occurred_at, profile) for d in drinks)


def peak_bac(events: Iterable[DrinkEvent], day: date, profile: Optional[UserProfile] = None) -> float:
    """Peak BAC (%) reached on a calendar day."""
    return peak_bac_of(DayIndex(events).drinks_on(day), profile)


def bac_curve(
    events: Iterable[DrinkEvent],
    profile: Optional[UserProfile] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    step_hours: float = 0.25,
) -> List[Tuple[datetime, float]]:
    """Return (moment, bac_percent) pairs for graphing.

    Defaults to the span from the first drink until BAC is back to zero.
    """
    if step_hours <= 0:
        raise ValueError("step_hours must be > 0")
    drinks = sorted(events, key=lambda e: e.occurred_at)
    if not drinks:
        return []

    p = profile or DEFAULT_PROFILE
    if start is None:
        start = drinks[0].occurred_at
    if end is None:
        rate = processing_rate(p)
        end = max(d.occurred_at + timedelta(hours=d.grams / rate) for d in drinks)
    end = max(end, start)

    points: List[Tuple[datetime, float]] = []
    step = timedelta(hours=step_hours)
    t = start
    while t <= end:
        points.append((t, round(bac_at(drinks, t, p), 4)))
        t += step
    return points


def hours_until_sober(
    events: Iterable[DrinkEvent],
    moment: datetime,
    profile: Optional[UserProfile] = None,
) -> float:
    """Hours from `moment` until every logged drink is fully processed."""
    p = profile or DEFAULT_PROFILE
    rate = processing_rate(p)
    hours = 0.0
    for e in events:
        if e.occurred_at > moment:
            continue
        hours = max(hours, remaining_grams(e, moment, rate) / rate)
    return round(hours, 2)


def recovery_time_hours(total_units: float, profile: Optional[UserProfile] = None) -> float:
    """Hours to process a day's alcohol plus the extra recovery heavy days need."""
    hours = total_units * 10.0 / processing_rate(profile)
    for threshold, extra in RECOVERY_EXTRA_HOURS:
        if total_units >= threshold:
            return hours + extra
    return hours
