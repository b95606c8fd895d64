"""Biometric inputs for goal calculation."""

from dataclasses import dataclass
from enum import Enum


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


class WeightGoal(str, Enum):
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class PregnancyStatus(str, Enum):
    NONE = "none"
    PREGNANT = "pregnant"
    BREASTFEEDING = "breastfeeding"


class Trimester(int, Enum):
    FIRST = 1
    SECOND = 2
    THIRD = 3


@dataclass(frozen=True)
class BiometricInput:
    """Form values used to derive a goal profile; never persisted."""

    weight_lb: float | None
    height_ft: float | None
    height_in: float | None
    age: int | None
    sex: Sex = Sex.MALE
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    goal: WeightGoal = WeightGoal.LOSE
    pregnancy_status: PregnancyStatus = PregnancyStatus.NONE
    trimester: Trimester = Trimester.FIRST
