from typing import List, Optional, Union
from datetime import date
from pydantic import Field, field_validator

from concrete_lab.core.unit_math import parse_measurement
from .base import BaseSchema, DBModel
from .specimen import Specimen, parse_day

# ---------------------- Concrete Test Models ----------------------

class ConcreteTestBase(BaseSchema):
    # Project / structure
    project_id: Optional[Union[int, str]] = Field(None, description="Owning project")
    project_name: Optional[str] = Field(None, description="Project name (display cache)")
    company_name: Optional[str] = Field(None, description="Company name (display cache)")
    structure_name: Optional[str] = Field("", description="Structure, e.g. Bâtiment A")
    element_name: Optional[str] = Field("", description="Element, e.g. Dalle Niv 1")

    # Dates and volume
    reception_date: Optional[date] = Field(None, description="Reception date")
    sampling_date: Optional[date] = Field(None, description="Sampling date")
    volume: Optional[float] = Field(None, description="Concrete volume (m³)")

    # Concrete characteristics
    concrete_class: Optional[str] = Field("", description="Strength class, e.g. C25/30")
    consistency_class: Optional[str] = Field(None, description="Derived from slump (S1..S5)")
    mix_type: Optional[str] = Field("", description="Mix design")
    formula_info: Optional[str] = Field("", description="Mix complement")
    manufacturer: Optional[str] = Field("", description="Concrete supplier")
    manufacturing_place: Optional[str] = Field("", description="Batching plant or site")
    delivery_method: Optional[str] = Field("", description="Truck mixer, skip...")

    # Fresh concrete
    slump: Optional[float] = Field(None, description="Measured slump (mm)")
    sampling_place: Optional[str] = Field("", description="Sampling location")
    external_temp: Optional[float] = Field(None, description="Air temperature (°C)")
    concrete_temp: Optional[float] = Field(None, description="Concrete temperature (°C)")

    # Specimen making
    tightening: Optional[str] = Field("", description="Compaction method")
    vibration_time: Optional[float] = Field(None, description="Vibration time (s)")
    layers: Optional[int] = Field(None, description="Number of layers")
    curing: Optional[str] = Field("", description="Curing conditions")

    # Hardened concrete test
    test_type: Optional[str] = Field("", description="Compression, splitting, flexure")
    standard: Optional[str] = Field("", description="Reference standard")
    preparation: Optional[str] = Field("", description="End preparation")
    press_machine: Optional[str] = Field("", description="Press used")

    specimens: List[Specimen] = Field(default_factory=list)

    @field_validator('reception_date', 'sampling_date', mode='before')
    @classmethod
    def parse_date(cls, v):
        return parse_day(v)

    @field_validator('volume', 'slump', 'external_temp', 'concrete_temp', 'vibration_time', mode='before')
    @classmethod
    def parse_number(cls, v):
        return parse_measurement(v)

    @field_validator('layers', mode='before')
    @classmethod
    def parse_layers(cls, v):
        number = parse_measurement(v)
        return int(number) if number is not None else None

    @property
    def specimen_count(self) -> int:
        return len(self.specimens)

    def to_document(self):
        document = super().to_document()
        document["specimenCount"] = self.specimen_count
        return document

class ConcreteTestCreate(ConcreteTestBase):
    """Payload for a new sampling sheet; id and reference are assigned on save."""
    pass

class ConcreteTest(ConcreteTestBase, DBModel):
    """A stored sampling sheet ("fiche de prélèvement")."""
    reference: str = Field(..., description="2025-B-0001")
    sequence_number: Optional[int] = Field(None, description="Sequence within the year")
    year: Optional[int] = Field(None, description="Numbering year")
    last_modified: Optional[str] = None
