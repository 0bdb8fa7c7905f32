"""Normalize third-party nutrition records into portion macros."""

import math
import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from ninja_training.domain.macros import (
    MacroData,
    MacroProfile,
    NutrientValues,
    NutritionRecord,
)

# Enough digits to quantize any finite float to one decimal place.
_DECIMAL_PRECISION = 400

_SERVING_GRAMS = re.compile(r"([0-9]+)\s*g", re.IGNORECASE)

_PER_100G_KEYS = {
    "calories": "energy-kcal_100g",
    "protein": "proteins_100g",
    "carbs": "carbohydrates_100g",
    "fats": "fat_100g",
}
_PER_SERVING_KEYS = {
    "calories": "energy-kcal_serving",
    "protein": "proteins_serving",
    "carbs": "carbohydrates_serving",
    "fats": "fat_serving",
}


def to_number(value: object) -> float | None:
    """Return a finite, non-negative float for numeric input, otherwise None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def parse_nutrition_record(raw: object) -> NutritionRecord:
    """Build a record from an OpenFoodFacts product without trusting any key."""
    if not isinstance(raw, dict):
        return NutritionRecord()
    nutriments = raw.get("nutriments")
    if not isinstance(nutriments, dict):
        nutriments = {}
    return NutritionRecord(
        product_name=_optional_text(raw.get("product_name")),
        brand=_optional_text(raw.get("brands")),
        serving_size=_optional_text(raw.get("serving_size")),
        per_100g=_nutrient_values(nutriments, _PER_100G_KEYS),
        per_serving=_nutrient_values(nutriments, _PER_SERVING_KEYS),
        code=_optional_text(raw.get("code")),
    )


def parse_serving_grams(serving_size: str | None) -> int | None:
    """Return the first integer gram quantity in a serving size string."""
    if not serving_size:
        return None
    match = _SERVING_GRAMS.search(serving_size)
    if match is None:
        return None
    return int(match.group(1) or 1)


def describe_product(record: NutritionRecord) -> str:
    """Return the product label, e.g. ``Oats (Brand)``."""
    name = record.product_name or "Food"
    if record.brand:
        return f"{name} ({record.brand})"
    return name


def normalize(record: NutritionRecord, grams: float) -> MacroData | None:
    """Scale a record to ``grams``.

    Per-100g values win over per-serving values. Returns None when the
    record has no usable nutrition data or the portion is out of range.
    """
    if not math.isfinite(grams) or grams <= 0:
        return None
    if record.per_100g.any_present():
        return _scaled(record, record.per_100g, grams / 100, grams)

    serving_grams = parse_serving_grams(record.serving_size)
    if serving_grams and record.per_serving.any_present():
        return _scaled(record, record.per_serving, grams / serving_grams, grams)
    return None


def format_grams(grams: float) -> str:
    """Format a gram amount without a trailing ``.0``."""
    if float(grams).is_integer():
        return str(int(grams))
    return str(grams)


def round_calories(value: float) -> int:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_grams(value: float) -> float:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return float(
            Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        )


def _scaled(
    record: NutritionRecord, values: NutrientValues, factor: float, grams: float
) -> MacroData | None:
    scaled = [
        max((value or 0.0) * factor, 0.0)
        for value in (values.calories, values.protein, values.carbs, values.fats)
    ]
    # Overflowed products carry no usable amount.
    if not all(math.isfinite(value) for value in scaled):
        return None
    calories, protein, carbs, fats = scaled
    return MacroData(
        description=f"{describe_product(record)} - {format_grams(grams)}g",
        macros=MacroProfile(
            calories=round_calories(calories),
            protein=round_grams(protein),
            carbs=round_grams(carbs),
            fats=round_grams(fats),
        ),
    )


def _nutrient_values(
    nutriments: dict[str, object], keys: dict[str, str]
) -> NutrientValues:
    return NutrientValues(
        calories=to_number(nutriments.get(keys["calories"])),
        protein=to_number(nutriments.get(keys["protein"])),
        carbs=to_number(nutriments.get(keys["carbs"])),
        fats=to_number(nutriments.get(keys["fats"])),
    )


def _optional_text(value: object) -> str | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None
