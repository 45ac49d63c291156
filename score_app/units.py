"""Volume unit conversions.

mL is the storage unit; cl, l, oz and "drink" are display units.
A "drink" serving is 200 mL.
"""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

ML_PER_UNIT: Dict[str, float] = {
    "ml": 1.0,
    "cl": 10.0,
    "l": 1000.0,
    "oz": 29.5735,
    "drink": 200.0,
}

# mL -> fl oz, kept separate from 1 / 29.5735 so totals match the stored display values.
OZ_PER_ML = 0.033814


def _factor(unit: str):
    return ML_PER_UNIT.get(str(unit).strip().lower())


def to_ml(amount: float, unit: str) -> float:
    """Convert an amount in `unit` to mL. Unknown units pass through unchanged."""
    factor = _factor(unit)
    if factor is None:
        logger.debug("Unknown volume unit %r, using identity conversion", unit)
        return amount
    return amount * factor


def from_ml(amount_ml: float, unit: str) -> float:
    """Convert mL to `unit`. Unknown units pass through unchanged."""
    key = str(unit).strip().lower()
    if key == "oz":
        return amount_ml * OZ_PER_ML
    factor = _factor(key)
    if factor is None:
        logger.debug("Unknown volume unit %r, using identity conversion", unit)
        return amount_ml
    return amount_ml / factor


def convert(amount: float, from_unit: str, to_unit: str) -> float:
    if str(from_unit).strip().lower() == str(to_unit).strip().lower():
        return amount
    if _factor(from_unit) is None or _factor(to_unit) is None:
        logger.debug("Cannot convert %r -> %r, using identity conversion", from_unit, to_unit)
        return amount
    return from_ml(to_ml(amount, from_unit), to_unit)


def format_amount(amount_ml: float, preferred_unit: str = "ml") -> str:
    """Display string for a stored mL amount: oz when preferred, cl otherwise."""
    if amount_ml <= 0:
        return "0"
    unit = "oz" if str(preferred_unit).strip().lower() == "oz" else "cl"
    value = from_ml(amount_ml, unit)
    if value < 10:
        return f"{value:.1f} {unit}"
    return f"{int(value + 0.5)} {unit}"
