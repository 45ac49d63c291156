"""
Health-score-over-time chart. Produces an image file or returns data for web/iOS.
"""

from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from score_app.cache import ScoreCache
from score_app.drinks import DrinkEvent
from score_app.profile import UserProfile
from score_app.rolling import DEFAULT_WINDOW_DAYS, daily_scores, rolling_health_score
from score_app.scoring import Strategy


def score_curve_data(
    events: Iterable[DrinkEvent],
    as_of: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
    days: int = DEFAULT_WINDOW_DAYS,
) -> List[Tuple[date, int, int]]:
    """(day, daily_score, rolling_score_as_of_day) for the last `days` days, for any frontend."""
    events = list(events)
    cache = ScoreCache(profile)
    daily = daily_scores(events, as_of, profile, strategy, days, cache)
    points = []
    for s in daily:
        rolling = rolling_health_score(events, s.date, profile, strategy, DEFAULT_WINDOW_DAYS, cache)
        points.append((s.date, s.score, rolling))
    return points


def save_score_graph(
    events: Iterable[DrinkEvent],
    as_of: date,
    profile: Optional[UserProfile] = None,
    strategy: Union[Strategy, str] = Strategy.ACCURATE,
    output_path: str = "score_graph.png",
    days: int = DEFAULT_WINDOW_DAYS,
    title: str = "Health score",
) -> str:
    """
    Plot daily and rolling scores with matplotlib and save to file.
    Returns path to saved file. Requires: pip install matplotlib
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for save_score_graph. pip install matplotlib")

    points = score_curve_data(events, as_of, profile, strategy, days)
    if not points:
        dates, scores, rolling = [as_of], [100], [100]
    else:
        dates, scores, rolling = zip(*points)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(dates, scores, width=timedelta(days=0.8), color="#93c5fd", label="Daily score")
    ax.plot(dates, rolling, color="#2563eb", linewidth=2, label="Rolling score")
    ax.axhline(y=60, color="#dc2626", linestyle="--", linewidth=1, label="Recovery floor (60)")
    ax.set_xlabel("Day")
    ax.set_ylabel("Score")
    ax.set_title(f"{title} ({Strategy(strategy).value})")
    ax.legend(loc="lower left")
    ax.set_ylim(0, 105)
    ax.grid(True, alpha=0.3)
    fig.autofmt_xdate()
    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
