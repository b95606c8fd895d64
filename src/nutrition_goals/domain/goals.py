"""Daily goal profile."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class GoalProfile:
    """Daily nutrient targets owned by an account.

    Field names match ``Nutrients`` so targets and totals can be paired by name.
    Water is the only target expressed in millilitres.
    """

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
    water_ml: float
    fiber_g: int
    total_sugars_g: int
    added_sugars_g: int
    trans_fat_g: int
    saturated_fat_g: int
    polyunsaturated_fat_g: int
    monounsaturated_fat_g: int
    cholesterol_mg: int
    sodium_mg: int
    potassium_mg: int
    calcium_mg: int
    iron_mg: int
    vitamin_a_mcg: int
    vitamin_c_mg: int
    vitamin_d_mcg: int

    def as_dict(self) -> dict[str, float]:
        """Return targets keyed by field name."""
        return asdict(self)
