"""
Single place where a specimen's derived results are computed.

Inline row edits, the detail view and the quick-entry batch all go through
``recompute`` so identical raw inputs always give identical results.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Union

from .date_math import DateLike, to_day
from .enums import MeasurementField
from .unit_math import density, parse_measurement, round_surface, stress, surface_area
from concrete_lab.schemas.specimen import MeasurementEntry, Specimen

logger = logging.getLogger(__name__)

UNSET: Any = object()


class SpecimenEditor:

    @staticmethod
    def recompute(specimen: Specimen) -> Specimen:
        """Refresh surface (if missing), stress and density from raw inputs."""
        surface = specimen.surface
        if surface is None or surface <= 0:
            surface = round_surface(surface_area(specimen.specimen_type, specimen.diameter, specimen.height))
        return specimen.model_copy(update={
            "surface": surface,
            "stress": stress(specimen.force, surface),
            "density": density(specimen.weight, surface, specimen.height),
        })

    @staticmethod
    def apply_measurement(specimen: Specimen, field: Union[MeasurementField, str], value) -> Specimen:
        """Inline edit of one raw reading (weight in g or force in kN)."""
        try:
            name = MeasurementField(field).value
        except ValueError:
            raise ValueError(f"Not an editable measurement: {field!r}") from None
        updated = specimen.model_copy(update={name: parse_measurement(value)})
        return SpecimenEditor.recompute(updated)

    @staticmethod
    def apply_measurements(specimen: Specimen, weight=UNSET, force=UNSET) -> Specimen:
        """Detail-view edit; omitted readings keep their current value."""
        changes: Dict[str, Optional[float]] = {}
        if weight is not UNSET:
            changes["weight"] = parse_measurement(weight)
        if force is not UNSET:
            changes["force"] = parse_measurement(force)
        return SpecimenEditor.recompute(specimen.model_copy(update=changes))

    @staticmethod
    def specimens_due_on(specimens: List[Specimen], target_date: DateLike) -> List[Specimen]:
        target: Optional[date] = to_day(target_date)
        if target is None:
            return []
        return [s for s in specimens if s.crushing_date is not None and s.crushing_date == target]

    @staticmethod
    def apply_quick_entry(specimens: List[Specimen], target_date: DateLike,
                          entries: Mapping[int, Union[MeasurementEntry, Mapping[str, Any]]]) -> List[Specimen]:
        """
        Batch entry for the specimens crushed on ``target_date``.

        ``entries`` maps specimen number to its readings. Entries for specimens
        not due that day are ignored; the full list is returned in order.
        """
        due_numbers = {s.number for s in SpecimenEditor.specimens_due_on(specimens, target_date)}
        ignored = set(entries) - due_numbers
        if ignored:
            logger.warning(f"Quick entry ignored specimens not due on {target_date}: {sorted(ignored)}")

        result = []
        for s in specimens:
            entry = entries.get(s.number) if s.number in due_numbers else None
            if entry is None:
                result.append(s)
                continue
            if not isinstance(entry, MeasurementEntry):
                entry = MeasurementEntry(**entry)
            readings = {name: getattr(entry, name) for name in entry.model_fields_set}
            result.append(SpecimenEditor.apply_measurements(s, **readings))
        return result
