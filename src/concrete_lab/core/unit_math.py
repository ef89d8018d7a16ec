"""
Geometric and physical formulas for concrete specimens.

Units: dimensions in mm, surface in mm², force in kN, mass in g,
stress in MPa, density in kg/m³. Every derived value is ``None`` when its
raw input is missing, non-positive or the geometry is degenerate.
"""

import math
from typing import Optional, Union

from .constants import (
    SLUMP_BANDS, SLUMP_INDETERMINATE_BELOW, SLUMP_TOP_CLASS, SURFACE_DECIMALS
)
from .enums import ConsistencyClass, SpecimenShape

Number = Union[int, float]


def parse_measurement(value) -> Optional[float]:
    """
    Coerce a raw input into a float.
    Empty strings, non-numeric text, NaN and booleans are treated as unset.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _positive(value) -> Optional[float]:
    number = parse_measurement(value)
    if number is None or number <= 0:
        return None
    return number


def surface_area(shape: SpecimenShape, diameter: Number, height: Optional[Number] = None) -> Optional[float]:
    """
    Loaded cross-section: side² for cubes, π·(d/2)² for cylinders.
    ``height`` is accepted for signature symmetry with volume; it plays no part.
    """
    d = _positive(diameter)
    if d is None:
        return None
    if SpecimenShape(shape) == SpecimenShape.CUBIC:
        return d * d
    return math.pi * (d / 2) ** 2


def round_surface(surface: Optional[float]) -> Optional[float]:
    if surface is None:
        return None
    return round(surface, SURFACE_DECIMALS)


def volume(surface: Optional[Number], height: Optional[Number]) -> Optional[float]:
    s = _positive(surface)
    h = _positive(height)
    if s is None or h is None:
        return None
    return s * h


def stress(force: Optional[Number], surface: Optional[Number]) -> Optional[float]:
    """Compressive strength (MPa) = force(kN)·1000 / surface(mm²)."""
    f = _positive(force)
    s = _positive(surface)
    if f is None or s is None:
        return None
    return (f * 1000) / s


def density(weight: Optional[Number], surface: Optional[Number], height: Optional[Number]) -> Optional[float]:
    """Density (kg/m³) = weight(g) / volume(mm³) · 1e6."""
    w = _positive(weight)
    v = volume(surface, height)
    if w is None or v is None:
        return None
    return (w / v) * 1_000_000


def consistency_class(slump: Optional[Number]) -> Optional[ConsistencyClass]:
    """Slump class per NF EN 206; each band includes its upper edge."""
    value = parse_measurement(slump)
    if value is None:
        return None
    if value < SLUMP_INDETERMINATE_BELOW:
        return ConsistencyClass.INDETERMINATE
    for upper, code in SLUMP_BANDS:
        if value <= upper:
            return ConsistencyClass(code)
    return ConsistencyClass(SLUMP_TOP_CLASS)
