import math

import pytest

from concrete_lab.core.enums import ConsistencyClass, SpecimenShape
from concrete_lab.core.unit_math import (
    consistency_class, density, parse_measurement, round_surface, stress, surface_area, volume
)


def test_surface_area_cube_and_cylinder():
    assert surface_area(SpecimenShape.CUBIC, 150, 150) == 22500
    assert surface_area(SpecimenShape.CYLINDRICAL, 160, 320) == pytest.approx(math.pi * 80 ** 2)
    assert round_surface(surface_area(SpecimenShape.CYLINDRICAL, 160)) == 20106.19
    assert round_surface(surface_area(SpecimenShape.CYLINDRICAL, 110)) == 9503.32


def test_surface_area_ignores_height():
    assert surface_area(SpecimenShape.CUBIC, 100, 100) == surface_area(SpecimenShape.CUBIC, 100, 999)


def test_surface_area_degenerate_geometry_is_absent():
    assert surface_area(SpecimenShape.CUBIC, 0) is None
    assert surface_area(SpecimenShape.CYLINDRICAL, None) is None


def test_stress_cube_example():
    """Cube 150x150 broken at 600 kN gives about 26.67 MPa."""
    assert stress(600, 22500) == pytest.approx(26.67, abs=0.005)


@pytest.mark.parametrize("force", [None, 0, -5, "", "abc"])
def test_stress_absent_without_positive_force(force):
    assert stress(force, 22500) is None


@pytest.mark.parametrize("surface", [None, 0, -1])
def test_stress_guards_surface(surface):
    assert stress(600, surface) is None


def test_density_formula():
    # 8100 g in a 150 mm cube -> 2400 kg/m³
    assert density(8100, 22500, 150) == pytest.approx(2400.0)
    assert volume(22500, 150) == 3_375_000


@pytest.mark.parametrize("weight", [None, 0, -100, "n/a"])
def test_density_absent_without_positive_weight(weight):
    assert density(weight, 22500, 150) is None


def test_density_zero_volume_is_absent():
    assert density(8100, 22500, 0) is None
    assert density(8100, None, 150) is None


@pytest.mark.parametrize("slump, expected", [
    (0, ConsistencyClass.INDETERMINATE),
    (9, ConsistencyClass.INDETERMINATE),
    (10, ConsistencyClass.S1),
    (40, ConsistencyClass.S1),
    (41, ConsistencyClass.S2),
    (90, ConsistencyClass.S2),
    (91, ConsistencyClass.S3),
    (150, ConsistencyClass.S3),
    (151, ConsistencyClass.S4),
    (210, ConsistencyClass.S4),
    (211, ConsistencyClass.S5),
])
def test_consistency_class_bands(slump, expected):
    assert consistency_class(slump) == expected


def test_consistency_class_absent_slump():
    assert consistency_class(None) is None
    assert consistency_class("") is None


def test_parse_measurement():
    assert parse_measurement("12.5") == 12.5
    assert parse_measurement("12,5") == 12.5
    assert parse_measurement(7) == 7.0
    assert parse_measurement("  ") is None
    assert parse_measurement("abc") is None
    assert parse_measurement(float("nan")) is None
    assert parse_measurement(True) is None
    assert parse_measurement(0) == 0.0
