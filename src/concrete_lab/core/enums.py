from enum import Enum

class SpecimenShape(str, Enum):
    CUBIC = "Cubique"
    CYLINDRICAL = "Cylindrique"

class DimensionPreset(str, Enum):
    CYLINDER_160_320 = "160x320"
    CYLINDER_110_220 = "110x220"
    CUBE_150 = "150x150"
    CUBE_100 = "100x100"

class ConsistencyClass(str, Enum):
    INDETERMINATE = "Indet."
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"
    S4 = "S4"
    S5 = "S5"

class UrgencyClass(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"

    @property
    def priority(self) -> int:
        return _URGENCY_PRIORITY[self]

_URGENCY_PRIORITY = {
    UrgencyClass.OVERDUE: 0,
    UrgencyClass.TODAY: 1,
    UrgencyClass.UPCOMING: 2,
}

class ReportVariant(str, Enum):
    PROVISIONAL = "PV"
    FINAL = "RP"

    @classmethod
    def _missing_(cls, value):
        # Also accept "provisional" / "final" and lower-case codes
        if isinstance(value, str):
            text = value.strip()
            for member in cls:
                if text.upper() == member.value or text.upper() == member.name:
                    return member
        return None

class MeasurementField(str, Enum):
    WEIGHT = "weight"
    FORCE = "force"

class DataCategory(str, Enum):
    CONCRETE_TESTS = "concrete_tests"
