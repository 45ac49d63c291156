"""
Serving catalog: named serving options per drink category, in EU (cl) and US (oz) sizes.
Option amounts resolve to mL through score_app.units.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from score_app.drinks import CATEGORY_ALCOHOL_PERCENT, DrinkCategory, parse_category
from score_app.units import to_ml


@dataclass
class ServingOption:
    key: str
    eu: Tuple[float, str]
    us: Tuple[float, str]


def _o(key: str, eu_amount: float, eu_unit: str, us_amount: float, us_unit: str) -> ServingOption:
    return ServingOption(key=key, eu=(eu_amount, eu_unit), us=(us_amount, us_unit))


SERVING_OPTIONS: Dict[str, ServingOption] = {o.key: o for o in [
    _o("can", 33, "cl", 12, "oz"),
    _o("bottle", 75, "cl", 25.4, "oz"),
    _o("pint", 50, "cl", 16, "oz"),
    _o("large", 100, "cl", 33.8, "oz"),
    _o("glass", 12.5, "cl", 5, "oz"),
    _o("large_glass", 18, "cl", 6, "oz"),
    _o("standard", 1, "drink", 1, "drink"),
    _o("strong", 1.5, "drink", 1.5, "drink"),
    _o("double", 2, "drink", 2, "drink"),
    _o("shot", 3, "cl", 1, "oz"),
    _o("tall", 40, "cl", 13.5, "oz"),
    _o("small", 8, "cl", 3, "oz"),
    _o("medium", 25, "cl", 8, "oz"),
    _o("extra_large", 150, "cl", 50.7, "oz"),
]}

# (default option, allowed options) per category.
CATEGORY_OPTIONS: Dict[DrinkCategory, Tuple[str, List[str]]] = {
    DrinkCategory.BEER: ("medium", ["medium", "can", "pint", "large"]),
    DrinkCategory.WINE: ("glass", ["glass", "large_glass", "bottle", "small"]),
    DrinkCategory.COCKTAIL: ("standard", ["standard", "strong", "double", "small"]),
    DrinkCategory.SPIRITS: ("shot", ["shot", "standard", "double", "small"]),
    DrinkCategory.OTHER: ("standard", ["standard", "strong", "double"]),
}


def get_option(key: str) -> Optional[ServingOption]:
    return SERVING_OPTIONS.get(key)


def serving_volume_ml(key: str, region: str = "eu") -> Optional[float]:
    """mL for a serving option in the given region ('eu' or 'us'); None if unknown."""
    option = get_option(key)
    if option is None:
        return None
    amount, unit = option.us if region == "us" else option.eu
    return to_ml(amount, unit)


def is_valid_option(category, key: str) -> bool:
    _, options = CATEGORY_OPTIONS[parse_category(category)]
    return key in options


def default_serving(category, region: str = "eu") -> Tuple[str, float]:
    """(option key, mL) of the default serving for a category."""
    key, _ = CATEGORY_OPTIONS[parse_category(category)]
    return key, serving_volume_ml(key, region)


def list_by_category(region: str = "eu") -> Dict[str, dict]:
    """Group serving options by category for UI pickers."""
    out: Dict[str, dict] = {}
    for category, (default_key, keys) in CATEGORY_OPTIONS.items():
        out[category.value] = {
            "default_option": default_key,
            "alcohol_percent": CATEGORY_ALCOHOL_PERCENT[category],
            "options": [
                {
                    "key": key,
                    "amount": (SERVING_OPTIONS[key].us if region == "us" else SERVING_OPTIONS[key].eu)[0],
                    "unit": (SERVING_OPTIONS[key].us if region == "us" else SERVING_OPTIONS[key].eu)[1],
                    "volume_ml": round(serving_volume_ml(key, region), 2),
                }
                for key in keys
            ],
        }
    return out
