"""Nutrition domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient breakdown for a portion."""

    calories: float
    protein: float
    carbs: float
    fats: float


@dataclass(frozen=True)
class MacroData:
    """A described portion ready to become a food entry."""

    description: str
    macros: MacroProfile


@dataclass(frozen=True)
class NutrientValues:
    """Optional nutrient amounts in one unit basis."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None

    def any_present(self) -> bool:
        """Return True when at least one value is known."""
        return any(
            value is not None
            for value in (self.calories, self.protein, self.carbs, self.fats)
        )


@dataclass(frozen=True)
class NutritionRecord:
    """Tolerant view of a third-party product record."""

    product_name: str | None = None
    brand: str | None = None
    serving_size: str | None = None
    per_100g: NutrientValues = field(default_factory=NutrientValues)
    per_serving: NutrientValues = field(default_factory=NutrientValues)
    code: str | None = None


@dataclass(frozen=True)
class FoodCandidate:
    """Search hit with its normalized macros, if any."""

    label: str
    record: NutritionRecord
    macro_data: MacroData | None
