"""
Health score CLI. Run from project root: python -m score_app.main --events drinks.yaml
Loads a drink log (YAML or JSON), prints the day's score, peak BAC, risk tier and
rolling score, and optionally saves a score graph.
"""

import argparse
import logging
import sys
from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Tuple

import yaml

from score_app.calculations import peak_bac, recovery_time_hours
from score_app.daily import daily_consumption, weekly_consumption
from score_app.drinks import DrinkCategory, DrinkEvent, event_from_dict
from score_app.graph import save_score_graph
from score_app.profile import UserProfile, profile_from_dict
from score_app.risk import assess_day
from score_app.rolling import DEFAULT_WINDOW_DAYS, rolling_health_score
from score_app.scoring import Strategy, daily_score

logger = logging.getLogger(__name__)


def load_log(path: str) -> Tuple[List[DrinkEvent], UserProfile]:
    """Read events and an optional profile from a YAML/JSON file.

    The file is either a list of events or a mapping with `events` and `profile`.
    """
    with open(path, encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)
    if data is None:
        data = []
    if isinstance(data, list):
        data = {"events": data}
    if not isinstance(data, dict):
        raise ValueError("log file must contain a list of events or a mapping")
    events_raw = data.get("events") or []
    if not isinstance(events_raw, list):
        raise ValueError("events must be a list")
    events = [event_from_dict(e) for e in events_raw]
    return events, profile_from_dict(data.get("profile"))


def demo_log(day: date) -> List[DrinkEvent]:
    """Two pints last night, a quick three-shot evening two days ago."""
    evening = datetime.combine(day, datetime.min.time()).replace(hour=20)
    return [
        DrinkEvent(500, evening - timedelta(days=1), DrinkCategory.BEER),
        DrinkEvent(500, evening - timedelta(days=1, hours=-1), DrinkCategory.BEER),
        DrinkEvent(40, evening - timedelta(days=2), DrinkCategory.SPIRITS),
        DrinkEvent(40, evening - timedelta(days=2, minutes=-20), DrinkCategory.SPIRITS),
        DrinkEvent(40, evening - timedelta(days=2, minutes=-40), DrinkCategory.SPIRITS),
    ]


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Alcohol health score: daily and rolling scores from a drink log")
    parser.add_argument("--events", type=str, metavar="FILE", help="YAML or JSON drink log")
    parser.add_argument("--date", type=str, help="Day to score (YYYY-MM-DD, default today)")
    parser.add_argument("--strategy", choices=[s.value for s in Strategy], default=Strategy.ACCURATE.value)
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW_DAYS, help="Rolling window in days")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save score graph to FILE (e.g. score.png)")
    parser.add_argument("--demo", action="store_true", help="Score a built-in demo log")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        day = date.fromisoformat(args.date) if args.date else date.today()
    except ValueError:
        print(f"Invalid --date {args.date!r}, expected YYYY-MM-DD", file=sys.stderr)
        return 1

    if args.events:
        try:
            events, profile = load_log(args.events)
        except (OSError, yaml.YAMLError, TypeError, ValueError) as exc:
            print(f"Could not read {args.events}: {exc}", file=sys.stderr)
            return 1
    elif args.demo:
        events, profile = demo_log(day), UserProfile()
        print("Demo log: 2 pints yesterday, 3 quick shots the day before")
    else:
        parser.print_usage(sys.stderr)
        print("Use --events FILE or --demo", file=sys.stderr)
        return 1

    strategy = Strategy(args.strategy)
    consumption = daily_consumption(events, day)
    weekly = weekly_consumption(events, day)
    score = daily_score(events, day, profile, strategy)
    risk = assess_day(events, day)
    rolling = rolling_health_score(events, day, profile, strategy, args.window)

    print(f"Date: {day.isoformat()}  strategy: {strategy.value}")
    print(f"Drinks: {consumption.drink_count}, units: {consumption.total_alcohol_units:.2f} (7-day {weekly.total_alcohol_units:.2f})")
    print(f"Peak BAC: {peak_bac(events, day, profile):.3f}%  risk: {risk.tier.value}")
    print(f"Recovery time: {recovery_time_hours(consumption.total_alcohol_units, profile):.1f}h")
    print(f"Daily score: {score.score}/100")
    print(f"Rolling score ({args.window}d): {rolling}/100")

    if args.graph:
        try:
            path = save_score_graph(events, day, profile, strategy, output_path=args.graph, days=args.window)
            print(f"Graph saved: {path}")
        except ImportError:
            print("matplotlib not installed. pip install matplotlib", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
