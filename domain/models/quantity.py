"""
PhysicalQuantity value object for counter steps.

Part of RIT-14: Canonical SI storage for counter targets and responses

A physical quantity is a display unit inside a unit family (mass, length,
time, ...) together with the linear mapping to the family's SI base unit:

    si_value = display_value * scale + offset

Offsets are only non-zero for temperature scales.
"""

from enum import Enum
from typing import Dict, Iterable

from pydantic import BaseModel, Field


class Dimension(str, Enum):
    """Unit families. Conversion is only legal inside one family."""

    MASS = "mass"
    LENGTH = "length"
    TIME = "time"
    TEMPERATURE = "temperature"
    VOLUME = "volume"
    DIMENSIONLESS = "dimensionless"


class PhysicalQuantity(BaseModel):
    """
    A display unit and its conversion to the SI base unit of its dimension.

    Examples:
        >>> pounds = PhysicalQuantity(
        ...     key="lb", dimension=Dimension.MASS, label="Pounds",
        ...     si_unit="kg", scale=0.45359237,
        ... )
    """

    key: str = Field(..., min_length=1, description="Stable unit key, e.g. 'km'")
    dimension: Dimension = Field(..., description="Unit family")
    label: str = Field(..., min_length=1, description="Human readable label")
    si_unit: str = Field(..., description="SI base unit of the dimension")
    scale: float = Field(..., description="Multiplier from display unit to SI")
    offset: float = Field(default=0.0, description="Additive offset applied after scaling")

    @property
    def is_time(self) -> bool:
        """True for time-flavored quantities (they may carry a target duration)."""
        return self.dimension == Dimension.TIME

    def __str__(self) -> str:
        return f"{self.label} ({self.key})"

    model_config = {"frozen": True}


def _q(key: str, dimension: Dimension, label: str, si_unit: str, scale: float, offset: float = 0.0) -> PhysicalQuantity:
    return PhysicalQuantity(
        key=key,
        dimension=dimension,
        label=label,
        si_unit=si_unit,
        scale=scale,
        offset=offset,
    )


# Conversion constants
LB_TO_KG = 0.45359237
OZ_TO_KG = 0.028349523125
MILE_TO_M = 1609.344
FOOT_TO_M = 0.3048
INCH_TO_M = 0.0254
FL_OZ_TO_M3 = 2.95735295625e-5
CUP_TO_M3 = 2.365882365e-4

DEFAULT_QUANTITIES: tuple = (
    # Mass (SI: kilogram)
    _q("kg", Dimension.MASS, "Kilograms", "kg", 1.0),
    _q("g", Dimension.MASS, "Grams", "kg", 0.001),
    _q("lb", Dimension.MASS, "Pounds", "kg", LB_TO_KG),
    _q("oz", Dimension.MASS, "Ounces", "kg", OZ_TO_KG),
    # Length / distance (SI: metre)
    _q("m", Dimension.LENGTH, "Meters", "m", 1.0),
    _q("km", Dimension.LENGTH, "Kilometers", "m", 1000.0),
    _q("cm", Dimension.LENGTH, "Centimeters", "m", 0.01),
    _q("mm", Dimension.LENGTH, "Millimeters", "m", 0.001),
    _q("mi", Dimension.LENGTH, "Miles", "m", MILE_TO_M),
    _q("ft", Dimension.LENGTH, "Feet", "m", FOOT_TO_M),
    _q("in", Dimension.LENGTH, "Inches", "m", INCH_TO_M),
    # Time (SI: second)
    _q("s", Dimension.TIME, "Seconds", "s", 1.0),
    _q("min", Dimension.TIME, "Minutes", "s", 60.0),
    _q("h", Dimension.TIME, "Hours", "s", 3600.0),
    _q("day", Dimension.TIME, "Days", "s", 86400.0),
    _q("week", Dimension.TIME, "Weeks", "s", 604800.0),
    # Temperature (SI: kelvin)
    _q("K", Dimension.TEMPERATURE, "Kelvin", "K", 1.0),
    _q("degC", Dimension.TEMPERATURE, "Degrees Celsius", "K", 1.0, 273.15),
    _q("degF", Dimension.TEMPERATURE, "Degrees Fahrenheit", "K", 5.0 / 9.0, 273.15 - 32.0 * 5.0 / 9.0),
    # Volume (SI: cubic metre)
    _q("ml", Dimension.VOLUME, "Milliliters", "m3", 1e-6),
    _q("l", Dimension.VOLUME, "Liters", "m3", 1e-3),
    _q("fl_oz", Dimension.VOLUME, "Fluid ounces", "m3", FL_OZ_TO_M3),
    _q("cup", Dimension.VOLUME, "Cups", "m3", CUP_TO_M3),
    # Dimensionless
    _q("count", Dimension.DIMENSIONLESS, "Count", "1", 1.0),
    _q("servings", Dimension.DIMENSIONLESS, "Servings", "1", 1.0),
    _q("steps", Dimension.DIMENSIONLESS, "Steps", "1", 1.0),
    _q("percent", Dimension.DIMENSIONLESS, "Percent", "1", 0.01),
)


def build_catalog(quantities: Iterable[PhysicalQuantity]) -> Dict[str, PhysicalQuantity]:
    """Index quantities by key. Later entries win on duplicate keys."""
    return {q.key: q for q in quantities}
