"""Specimen pack generation and list maintenance for one concrete test."""

import logging
from datetime import date
from typing import Dict, List, Tuple, Union

from .date_math import DateLike, add_days, to_day
from .enums import DimensionPreset, SpecimenShape
from .exceptions import InvalidPackRequest, SpecimenNotFound, UnknownPreset
from .models import Geometry
from .unit_math import round_surface, surface_area
from concrete_lab.schemas.specimen import CustomDimension, PackRequest, Specimen

logger = logging.getLogger(__name__)

# (shape, diameter or side, height) in mm
PRESET_DIMENSIONS: Dict[DimensionPreset, Tuple[SpecimenShape, float, float]] = {
    DimensionPreset.CYLINDER_160_320: (SpecimenShape.CYLINDRICAL, 160.0, 320.0),
    DimensionPreset.CYLINDER_110_220: (SpecimenShape.CYLINDRICAL, 110.0, 220.0),
    DimensionPreset.CUBE_150: (SpecimenShape.CUBIC, 150.0, 150.0),
    DimensionPreset.CUBE_100: (SpecimenShape.CUBIC, 100.0, 100.0),
}

PresetLike = Union[DimensionPreset, CustomDimension, str, dict]


class PackGenerator:
    """Builds batches of specimens and keeps the 1..N numbering intact."""

    @staticmethod
    def resolve_preset(preset: PresetLike) -> Geometry:
        """
        Turn a preset into concrete geometry.
        Raises UnknownPreset instead of falling back to a default shape.
        """
        if isinstance(preset, dict):
            try:
                preset = CustomDimension(**preset)
            except ValueError as e:
                raise UnknownPreset(f"Invalid custom dimension: {preset!r} ({e})") from e

        if isinstance(preset, CustomDimension):
            shape, diameter, height = preset.shape, preset.diameter, preset.height
        else:
            try:
                key = DimensionPreset(preset)
            except ValueError:
                raise UnknownPreset(f"Unknown dimension preset: {preset!r}") from None
            shape, diameter, height = PRESET_DIMENSIONS[key]

        surface = round_surface(surface_area(shape, diameter, height))
        return Geometry(shape=shape, diameter=diameter, height=height, surface=surface)

    @staticmethod
    def generate_pack(current_count: int, age: int, count: int,
                      preset: PresetLike, sampling_date: DateLike) -> List[Specimen]:
        """
        New specimens numbered from ``current_count + 1``.
        Casting date is the sampling date, crushing date is sampling date + age.
        """
        if count is None or count <= 0:
            raise InvalidPackRequest(f"Pack count must be positive, got {count}")
        if age is None or age < 0:
            raise InvalidPackRequest(f"Pack age must not be negative, got {age}")
        casting_date = to_day(sampling_date)
        if casting_date is None:
            raise InvalidPackRequest(f"Invalid sampling date: {sampling_date!r}")

        geometry = PackGenerator.resolve_preset(preset)
        crushing_date = add_days(casting_date, age)

        return [
            Specimen(
                number=current_count + i + 1,
                age=age,
                casting_date=casting_date,
                crushing_date=crushing_date,
                specimen_type=geometry.shape,
                diameter=geometry.diameter,
                height=geometry.height,
                surface=geometry.surface,
            )
            for i in range(count)
        ]

    @staticmethod
    def append_pack(specimens: List[Specimen], request: PackRequest) -> List[Specimen]:
        """Return the specimen list extended with the requested pack."""
        new_specimens = PackGenerator.generate_pack(
            current_count=len(specimens),
            age=request.age,
            count=request.count,
            preset=request.dimension_preset,
            sampling_date=request.sampling_date,
        )
        logger.info(f"Pack of {request.count} specimens at {request.age} days added "
                    f"(numbers {new_specimens[0].number}-{new_specimens[-1].number})")
        return list(specimens) + new_specimens

    @staticmethod
    def renumber(specimens: List[Specimen]) -> List[Specimen]:
        return [s.model_copy(update={"number": i + 1}) for i, s in enumerate(specimens)]

    @staticmethod
    def remove_specimen(specimens: List[Specimen], number: int) -> List[Specimen]:
        """Drop one whole specimen and renumber the rest from 1."""
        remaining = [s for s in specimens if s.number != number]
        if len(remaining) == len(specimens):
            raise SpecimenNotFound(f"No specimen #{number}")
        return PackGenerator.renumber(remaining)

    @staticmethod
    def reschedule(specimens: List[Specimen], sampling_date: DateLike) -> List[Specimen]:
        """Cascade a new sampling date to every specimen, keeping each age."""
        casting_date: date = to_day(sampling_date)
        if casting_date is None:
            raise ValueError(f"Invalid sampling date: {sampling_date!r}")
        return [
            s.model_copy(update={
                "casting_date": casting_date,
                "crushing_date": add_days(casting_date, s.age),
            })
            for s in specimens
        ]
