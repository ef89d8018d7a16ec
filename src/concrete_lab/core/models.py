from typing import List, Optional, Union
from datetime import date as DateType
from pydantic import Field

from concrete_lab.schemas.base import BaseSchema
from concrete_lab.schemas.specimen import Specimen
from .enums import ReportVariant, SpecimenShape, UrgencyClass

class Geometry(BaseSchema):
    shape: SpecimenShape
    diameter: float
    height: float
    surface: float

class ClassifiedSpecimen(BaseSchema):
    """One pending specimen placed in the short-horizon work queue."""
    test_id: Union[int, str]
    test_reference: str
    project_name: str
    specimen: Specimen
    crushing_date: DateType
    urgency_class: UrgencyClass

class NotificationTask(BaseSchema):
    """Consolidated work item: untested specimens of one test due on one day."""
    test_id: Union[int, str]
    test_reference: str
    project_name: str
    target_date: DateType
    urgency_class: UrgencyClass
    specimen_count: int = 0
    representative_age: int

class TaskSummary(BaseSchema):
    overdue: int = 0
    today: int = 0
    upcoming: int = 0

    @property
    def total(self) -> int:
        return self.overdue + self.today + self.upcoming

class ReportRow(BaseSchema):
    number: int
    age: int
    casting_date: Optional[DateType] = None
    crushing_date: Optional[DateType] = None
    specimen_type: SpecimenShape
    diameter: float
    height: float
    weight: Optional[float] = None
    force: Optional[float] = None
    stress: Optional[float] = None
    density: Optional[float] = None
    stress_display: str
    density_display: str

class AgeSummary(BaseSchema):
    age: int
    specimen_count: int
    tested_count: int
    mean_stress: Optional[float] = None
    mean_density: Optional[float] = None

class ConformityVerdict(BaseSchema):
    age: int
    mean_stress: float
    target_strength: float
    required_stress: float
    percent_of_target: float
    is_conform: bool

class ConformityAssessment(BaseSchema):
    target_strength: Optional[float] = None
    early: Optional[ConformityVerdict] = Field(None, description="Probable conformity at 7 days")
    characteristic: Optional[ConformityVerdict] = Field(None, description="Conformity at 28 days")

class ReportView(BaseSchema):
    test_id: Union[int, str]
    test_reference: str
    variant: ReportVariant
    title: str
    rows: List[ReportRow] = Field(default_factory=list)
    age_summaries: List[AgeSummary] = Field(default_factory=list)
    conformity: ConformityAssessment = Field(default_factory=ConformityAssessment)
