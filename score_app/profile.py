"""User profile and the metabolic processing rate derived from it.

Processing rate (grams of ethanol eliminated per hour):
- base 10 g/h, x1.15 for men
- +0.1 g/h per kg above 70 kg (men) / 60 kg (women)
- x max(0.8, 1 - 0.01 * (age - 30)) above age 30
- x activity multiplier
- clamped to [8, 15]
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

BASE_PROCESSING_RATE = 10.0
MALE_RATE_MULTIPLIER = 1.15
WEIGHT_RATE_PER_KG = 0.1
BASE_WEIGHT_MALE_KG = 70.0
BASE_WEIGHT_FEMALE_KG = 60.0
AGE_THRESHOLD = 30
AGE_RATE_PER_YEAR = 0.01
MIN_AGE_FACTOR = 0.8
MIN_PROCESSING_RATE = 8.0
MAX_PROCESSING_RATE = 15.0

ACTIVITY_MULTIPLIERS = {
    "sedentary": 0.90,
    "lightly_active": 0.95,
    "moderately_active": 1.05,
    "very_active": 1.10,
}

GENDERS = ("male", "female")


@dataclass(frozen=True)
class UserProfile:
    age_years: float = 25
    weight_kg: float = 75.0
    gender: str = "male"
    activity_level: str = "lightly_active"
    drink_habits: str = "occasionally"

    @property
    def is_male(self) -> bool:
        return self.gender == "male"


DEFAULT_PROFILE = UserProfile()


def processing_rate(profile: Optional[UserProfile] = None) -> float:
    """Grams of ethanol the body clears per hour."""
    p = profile or DEFAULT_PROFILE
    rate = BASE_PROCESSING_RATE
    if p.is_male:
        rate *= MALE_RATE_MULTIPLIER

    base_weight = BASE_WEIGHT_MALE_KG if p.is_male else BASE_WEIGHT_FEMALE_KG
    if p.weight_kg > base_weight:
        rate += (p.weight_kg - base_weight) * WEIGHT_RATE_PER_KG

    if p.age_years > AGE_THRESHOLD:
        rate *= max(MIN_AGE_FACTOR, 1 - (p.age_years - AGE_THRESHOLD) * AGE_RATE_PER_YEAR)

    rate *= ACTIVITY_MULTIPLIERS.get(p.activity_level, 1.0)
    return max(MIN_PROCESSING_RATE, min(MAX_PROCESSING_RATE, rate))


def profile_from_dict(raw: Optional[Dict[str, Any]]) -> UserProfile:
    """Build a profile from a mapping; missing keys take the default profile's values.

    Raises ValueError on a non-numeric age/weight or an unknown gender/activity level.
    """
    if raw is None:
        return DEFAULT_PROFILE
    if not isinstance(raw, dict):
        raise ValueError("profile must be an object")

    gender = str(raw.get("gender", DEFAULT_PROFILE.gender)).strip().lower()
    if gender not in GENDERS:
        raise ValueError("gender must be male or female")
    activity = str(raw.get("activity_level", raw.get("activityLevel", DEFAULT_PROFILE.activity_level))).strip().lower()
    if activity not in ACTIVITY_MULTIPLIERS:
        raise ValueError(f"activity_level must be one of {', '.join(ACTIVITY_MULTIPLIERS)}")

    return UserProfile(
        age_years=float(raw.get("age_years", raw.get("age", DEFAULT_PROFILE.age_years))),
        weight_kg=float(raw.get("weight_kg", raw.get("weightKg", DEFAULT_PROFILE.weight_kg))),
        gender=gender,
        activity_level=activity,
        drink_habits=str(raw.get("drink_habits", raw.get("drinkHabits", DEFAULT_PROFILE.drink_habits))),
    )


def profile_to_dict(profile: UserProfile) -> Dict[str, Any]:
    return {
        "age_years": profile.age_years,
        "weight_kg": profile.weight_kg,
        "gender": profile.gender,
        "activity_level": profile.activity_level,
        "drink_habits": profile.drink_habits,
    }
