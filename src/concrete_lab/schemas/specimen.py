from typing import Optional, Union
from datetime import date
from pydantic import Field, field_validator

from concrete_lab.core.constants import DEFAULT_PACK_COUNT, DEFAULT_PACK_AGE
from concrete_lab.core.date_math import to_day
from concrete_lab.core.enums import DimensionPreset, SpecimenShape
from concrete_lab.core.unit_math import parse_measurement
from .base import BaseSchema


def parse_shape(v):
    """Map stored labels such as 'Cubique 15x15' or 'cube' onto SpecimenShape."""
    if isinstance(v, SpecimenShape) or not isinstance(v, str):
        return v
    label = v.strip().lower()
    if label.startswith("cub"):
        return SpecimenShape.CUBIC
    if label.startswith("cyl"):
        return SpecimenShape.CYLINDRICAL
    return v


def parse_day(v):
    if isinstance(v, str):
        if not v.strip():
            return None
        day = to_day(v)
        return day if day is not None else v
    return to_day(v) if v is not None else None


class Specimen(BaseSchema):
    number: int = Field(..., ge=1, description="Position within the test (1..N)")
    reference: Optional[str] = Field(None, description="Free label")
    age: int = Field(..., ge=0, description="Days from casting to crushing")
    casting_date: Optional[date] = Field(None, description="Casting date")
    crushing_date: Optional[date] = Field(None, description="Scheduled crushing date")
    specimen_type: SpecimenShape = Field(..., description="Cubic or cylindrical")
    diameter: float = Field(..., gt=0, description="Diameter, or side for cubes (mm)")
    height: float = Field(..., gt=0, description="Height (mm)")
    surface: Optional[float] = Field(None, description="Loaded surface (mm²)")
    weight: Optional[float] = Field(None, description="Measured mass (g)")
    force: Optional[float] = Field(None, description="Failure load (kN)")
    stress: Optional[float] = Field(None, description="Compressive strength (MPa)")
    density: Optional[float] = Field(None, description="Density (kg/m³)")

    @field_validator('specimen_type', mode='before')
    @classmethod
    def parse_specimen_type(cls, v):
        return parse_shape(v)

    @field_validator('casting_date', 'crushing_date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return parse_day(v)

    @field_validator('surface', 'weight', 'force', 'stress', 'density', mode='before')
    @classmethod
    def parse_number(cls, v):
        return parse_measurement(v)

    @property
    def is_tested(self) -> bool:
        # A measured 0 MPa still counts as a result
        return self.stress is not None


class CustomDimension(BaseSchema):
    """Geometry entered by hand instead of a catalogue preset."""
    shape: SpecimenShape
    diameter: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    @field_validator('shape', mode='before')
    @classmethod
    def parse_shape(cls, v):
        return parse_shape(v)


class PackRequest(BaseSchema):
    age: int = Field(DEFAULT_PACK_AGE, description="Target age in days")
    count: int = Field(DEFAULT_PACK_COUNT, description="Number of specimens to cast")
    dimension_preset: Union[DimensionPreset, CustomDimension, str] = Field(
        DimensionPreset.CYLINDER_160_320, description="Geometry preset"
    )
    sampling_date: date = Field(..., description="Sampling (casting) date")

    @field_validator('sampling_date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return parse_day(v)


class MeasurementEntry(BaseSchema):
    """Raw lab readings for one specimen; malformed values become None."""
    weight: Optional[float] = None
    force: Optional[float] = None

    @field_validator('weight', 'force', mode='before')
    @classmethod
    def parse_number(cls, v):
        return parse_measurement(v)
