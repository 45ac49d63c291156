"""Drink events and alcohol-unit helpers.

1 standard unit = 10 g of pure ethanol (WHO).
units = volume_ml * percent * 0.789 / 1000
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Ethanol density (g/mL).
ETHANOL_DENSITY = 0.789

# Grams of pure ethanol per standard unit.
GRAMS_PER_UNIT = 10.0

# Used when neither the event nor its category carries a percentage.
DEFAULT_ALCOHOL_PERCENT = 5.0


class DrinkCategory(str, Enum):
    BEER = "beer"
    WINE = "wine"
    COCKTAIL = "cocktail"
    SPIRITS = "spirits"
    OTHER = "other"


CATEGORY_ALCOHOL_PERCENT = {
    DrinkCategory.BEER: 5.0,
    DrinkCategory.WINE: 12.0,
    DrinkCategory.COCKTAIL: 15.0,
    DrinkCategory.SPIRITS: 40.0,
    DrinkCategory.OTHER: 5.0,
}


def parse_category(value: Any) -> DrinkCategory:
    """Map a category name to DrinkCategory; unknown names become OTHER."""
    if isinstance(value, DrinkCategory):
        return value
    try:
        return DrinkCategory(str(value).strip().lower())
    except ValueError:
        logger.debug("Unknown drink category %r, treating as 'other'", value)
        return DrinkCategory.OTHER


@dataclass(frozen=True)
class DrinkEvent:
    """One logged drink. Immutable; edits are delete + recreate."""

    volume_ml: float
    occurred_at: datetime
    category: DrinkCategory = DrinkCategory.OTHER
    alcohol_percent: Optional[float] = None
    is_approximate: bool = False
    user_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def units(self) -> float:
        return alcohol_units(self.volume_ml, self.alcohol_percent, self.category)

    @property
    def grams(self) -> float:
        return self.units * GRAMS_PER_UNIT


def effective_percent(percent: Optional[float], category: Any = None) -> float:
    """Event percentage, else the category default, else 5%. 0 counts as missing."""
    if percent:
        return percent
    if category is not None:
        return CATEGORY_ALCOHOL_PERCENT.get(parse_category(category), DEFAULT_ALCOHOL_PERCENT)
    return DEFAULT_ALCOHOL_PERCENT


def alcohol_units(volume_ml: float, percent: Optional[float] = None, category: Any = None) -> float:
    """Standard alcohol units (10 g ethanol each) in a drink."""
    return volume_ml * effective_percent(percent, category) * ETHANOL_DENSITY / 1000.0


def alcohol_grams(volume_ml: float, percent: Optional[float] = None, category: Any = None) -> float:
    """Grams of pure ethanol in a drink."""
    return alcohol_units(volume_ml, percent, category) * GRAMS_PER_UNIT


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted).

    Offset-aware values are converted to naive local time so parsed logs
    never mix naive and aware datetimes.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    else:
        raise ValueError("timestamp must be an ISO-8601 string")
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def event_from_dict(raw: Dict[str, Any]) -> DrinkEvent:
    """Build a DrinkEvent from a JSON/YAML mapping.

    Accepts snake_case keys and the camelCase names used by the mobile client
    (volumeMl, alcoholPercent, occurredAt, drinkCategory, isApproximate, userId).
    Raises ValueError when volume or timestamp is missing or unparsable.
    """
    if not isinstance(raw, dict):
        raise ValueError("event must be an object")

    def pick(*keys):
        for key in keys:
            if key in raw and raw[key] is not None:
                return raw[key]
        return None

    volume = pick("volume_ml", "volumeMl", "amount_ml")
    if volume is None:
        raise ValueError("event volume_ml is required")
    occurred = pick("occurred_at", "occurredAt", "timestamp")
    if occurred is None:
        raise ValueError("event occurred_at is required")
    percent = pick("alcohol_percent", "alcoholPercent", "alcohol_percentage")

    kwargs = {
        "volume_ml": float(volume),
        "occurred_at": parse_datetime(occurred),
        "category": parse_category(pick("category", "drinkCategory", "drink_type") or "other"),
        "alcohol_percent": float(percent) if percent is not None else None,
        "is_approximate": bool(pick("is_approximate", "isApproximate") or False),
        "user_id": pick("user_id", "userId"),
    }
    event_id = pick("id")
    if event_id is not None:
        kwargs["id"] = str(event_id)
    return DrinkEvent(**kwargs)


def event_to_dict(event: DrinkEvent) -> Dict[str, Any]:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "category": event.category.value,
        "volume_ml": event.volume_ml,
        "alcohol_percent": event.alcohol_percent,
        "occurred_at": event.occurred_at.isoformat(),
        "is_approximate": event.is_approximate,
        "units": round(event.units, 4),
    }
