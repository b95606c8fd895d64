"""Domain errors."""


class NutritionGoalsError(Exception):
    """Base class for domain errors."""

    code = "NutritionGoalsError"


class InvalidBiometricInputError(NutritionGoalsError, ValueError):
    """Biometric fields are missing or not numeric."""

    code = "InvalidBiometricInput"


class BelowMinimumAgeError(NutritionGoalsError, ValueError):
    """Subject is younger than the supported minimum age."""

    code = "BelowMinimumAge"


class UnsupportedUnitError(NutritionGoalsError, ValueError):
    """Unit cannot be applied to the given record."""

    code = "UnsupportedUnit"


class InvalidRecordError(NutritionGoalsError, ValueError):
    """Nutrient record is malformed."""

    code = "InvalidRecord"


class AccountNotFoundError(NutritionGoalsError, LookupError):
    """Account record does not exist."""

    code = "AccountNotFound"


class GoalPersistenceError(NutritionGoalsError):
    """Goal profile could not be stored; the caller may retry."""

    code = "GoalPersistenceFailed"
