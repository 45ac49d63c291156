"""Alcohol health score Flask app.

Stateless JSON API over the scoring engine: callers send the drink log and
profile with every request; nothing is stored server-side.

Run from project root:
    python app.py
"""

import logging
import os
from datetime import date, datetime, time, timedelta
from typing import Any

from flask import Flask, jsonify, request

from score_app.calculations import bac_curve, hours_until_sober, peak_bac, recovery_time_hours
from score_app.catalog import list_by_category
from score_app.daily import (
    DayIndex,
    consumption_to_dict,
    daily_consumption,
    weekly_breakdown,
    weekly_consumption,
)
from score_app.drinks import alcohol_units, event_from_dict, effective_percent
from score_app.profile import profile_from_dict, profile_to_dict, processing_rate
from score_app.risk import assess_index, classify_risk
from score_app.rolling import DEFAULT_WINDOW_DAYS, daily_scores, rolling_score
from score_app.scoring import Strategy, daily_score
from score_app.statistics import drink_statistics, longest_sober_streak

logging.basicConfig(
    level=getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)

MAX_EVENTS = 5000
MAX_VOLUME_ML = 5000.0
MAX_WINDOW_DAYS = 365


def _default_strategy() -> str:
    return os.environ.get("SCORE_DEFAULT_STRATEGY", Strategy.ACCURATE.value)


def _default_window_days() -> int:
    try:
        return int(os.environ.get("SCORE_WINDOW_DAYS", DEFAULT_WINDOW_DAYS))
    except ValueError:
        return DEFAULT_WINDOW_DAYS


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _parse_events(data: dict[str, Any]) -> list:
    raw = data.get("events", [])
    if not isinstance(raw, list):
        raise ValueError("events must be a list")
    if len(raw) > MAX_EVENTS:
        raise ValueError(f"at most {MAX_EVENTS} events per request")
    events = [event_from_dict(e) for e in raw]
    for e in events:
        if e.volume_ml <= 0 or e.volume_ml > MAX_VOLUME_ML:
            raise ValueError("volume_ml must be between 0 and 5000")
        if e.alcohol_percent is not None and not 0 <= e.alcohol_percent <= 100:
            raise ValueError("alcohol_percent must be between 0 and 100")
    return events


def _parse_day(value: Any, field: str) -> date:
    if value is None or value == "":
        return date.today()
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValueError(f"{field} must be YYYY-MM-DD")


def _parse_strategy(value: Any) -> Strategy:
    try:
        return Strategy(str(value or _default_strategy()).strip().lower())
    except ValueError:
        raise ValueError("strategy must be accurate or simple")


def _parse_window(value: Any) -> int:
    if value is None:
        return _default_window_days()
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("window_days must be an integer")
    window = value
    if window < 0 or window > MAX_WINDOW_DAYS:
        raise ValueError(f"window_days must be between 0 and {MAX_WINDOW_DAYS}")
    return window


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/catalog")
def api_catalog():
    region = request.args.get("region", "eu")
    if region not in {"eu", "us"}:
        return _bad_request("region must be eu or us")
    return jsonify({"region": region, "categories": list_by_category(region)})


@app.route("/api/units", methods=["POST"])
def api_units():
    data = _json_body()
    try:
        volume = float(data.get("volume_ml"))
        percent_raw = data.get("alcohol_percent")
        percent = float(percent_raw) if percent_raw is not None else None
    except (TypeError, ValueError):
        return _bad_request("volume_ml is required and alcohol_percent must be a number")
    if volume < 0:
        return _bad_request("volume_ml must not be negative")
    category = data.get("category")
    units = alcohol_units(volume, percent, category)
    return jsonify({
        "units": round(units, 4),
        "grams": round(units * 10, 3),
        "alcohol_percent": effective_percent(percent, category),
    })


@app.route("/api/consumption", methods=["POST"])
def api_consumption():
    data = _json_body()
    try:
        events = _parse_events(data)
        day = _parse_day(data.get("date"), "date")
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    index = DayIndex(events)
    return jsonify({
        "daily": consumption_to_dict(daily_consumption(events, day)),
        "weekly": consumption_to_dict(weekly_consumption(events, day)),
        "week": [consumption_to_dict(c) for c in weekly_breakdown(events, day - timedelta(days=6))],
        "binge_days": index.binge_days(day),
        "consecutive_days": index.consecutive_days(day),
    })


@app.route("/api/bac", methods=["POST"])
def api_bac():
    data = _json_body()
    try:
        events = _parse_events(data)
        day = _parse_day(data.get("date"), "date")
        profile = profile_from_dict(data.get("profile"))
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    drinks = DayIndex(events).drinks_on(day)
    curve = bac_curve(drinks, profile, step_hours=0.25)
    end_of_day = datetime.combine(day, time.max)
    units = sum(d.units for d in drinks)
    return jsonify({
        "date": day.isoformat(),
        "peak_bac": round(peak_bac(events, day, profile), 4),
        "processing_rate_g_per_hour": round(processing_rate(profile), 3),
        "hours_until_sober_at_end_of_day": hours_until_sober(drinks, end_of_day, profile),
        "recovery_time_hours": round(recovery_time_hours(units, profile), 2),
        "curve": [[t.isoformat(), bac] for t, bac in curve],
        "profile": profile_to_dict(profile),
    })


@app.route("/api/risk", methods=["POST"])
def api_risk():
    data = _json_body()
    if "events" in data:
        try:
            events = _parse_events(data)
            day = _parse_day(data.get("date"), "date")
        except (TypeError, ValueError) as exc:
            return _bad_request(str(exc))
        a = assess_index(DayIndex(events), day)
        return jsonify({
            "risk_tier": a.tier.value,
            "daily_units": round(a.daily_units, 4),
            "weekly_units": round(a.weekly_units, 4),
            "binge_days": a.binge_days,
            "consecutive_days": a.consecutive_days,
        })
    try:
        daily = float(data.get("daily_units", 0))
        weekly = float(data.get("weekly_units", 0))
        binges = int(data.get("binge_days", 0))
        streak = int(data.get("consecutive_days", 0))
    except (TypeError, ValueError):
        return _bad_request("daily_units, weekly_units, binge_days and consecutive_days must be numbers")
    return jsonify({"risk_tier": classify_risk(daily, weekly, binges, streak).value})


@app.route("/api/score", methods=["POST"])
def api_score():
    data = _json_body()
    try:
        events = _parse_events(data)
        day = _parse_day(data.get("date"), "date")
        profile = profile_from_dict(data.get("profile"))
        strategy = _parse_strategy(data.get("strategy"))
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    return jsonify(daily_score(events, day, profile, strategy).to_dict())


@app.route("/api/rolling", methods=["POST"])
def api_rolling():
    data = _json_body()
    try:
        events = _parse_events(data)
        as_of = _parse_day(data.get("as_of"), "as_of")
        profile = profile_from_dict(data.get("profile"))
        strategy = _parse_strategy(data.get("strategy"))
        window = _parse_window(data.get("window_days"))
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    scores = daily_scores(events, as_of, profile, strategy, window)
    logger.info("Rolling score for %d events over %d days (%s)", len(events), window, strategy.value)
    return jsonify({
        "as_of": as_of.isoformat(),
        "strategy": strategy.value,
        "window_days": window,
        "score": rolling_score({(as_of - s.date).days: s.score for s in scores}),
        "days": [{"date": s.date.isoformat(), "score": s.score} for s in scores],
    })


@app.route("/api/statistics", methods=["POST"])
def api_statistics():
    data = _json_body()
    try:
        events = _parse_events(data)
        as_of = _parse_day(data.get("as_of"), "as_of")
        days = _parse_window(data.get("days", DEFAULT_WINDOW_DAYS))
    except (TypeError, ValueError) as exc:
        return _bad_request(str(exc))
    stats = drink_statistics(events, as_of, days)
    stats["longest_sober_streak"] = longest_sober_streak(events, as_of - timedelta(days=days - 1), as_of)
    return jsonify(stats)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
