"""
Concrete Test Service
Entry points used by the UI/HTTP layers to create sampling sheets and edit
their specimens.

Edits are applied to a per-session working copy first, then persisted as a
replacement of the document fields they touch. When the write fails the
working copy is restored from the snapshot taken before the edit and
PersistenceError is raised. Concurrent sessions are not merged: the last
write wins.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from concrete_lab.core.date_math import DateLike, to_day
from concrete_lab.core.enums import MeasurementField
from concrete_lab.core.exceptions import (
    InvalidPackRequest, PersistenceError, SpecimenNotFound, TestNotFound
)
from concrete_lab.core.pack_generator import PackGenerator, PresetLike
from concrete_lab.core.specimen_editor import UNSET, SpecimenEditor
from concrete_lab.core.unit_math import consistency_class, parse_measurement
from concrete_lab.schemas.concrete_test import ConcreteTest, ConcreteTestCreate
from concrete_lab.schemas.specimen import MeasurementEntry, PackRequest, Specimen
from concrete_lab.services.data_service import DataService

logger = logging.getLogger(__name__)


class ConcreteTestService:
    """Sampling sheet and specimen editing service."""

    def __init__(self, data_service: DataService = None):
        self.data_service = data_service or DataService()
        self._working: Dict[int, ConcreteTest] = {}

    # ------------------ Working copy ------------------

    def working_copy(self, test_id: int) -> ConcreteTest:
        """Local copy of a test, loaded from the store on first access."""
        if test_id not in self._working:
            test = self.data_service.get_test(test_id)
            if test is None:
                raise TestNotFound(f"No concrete test with id {test_id}")
            self._working[test_id] = test
        return self._working[test_id]

    def refresh(self, test_id: int) -> ConcreteTest:
        self._working.pop(test_id, None)
        return self.working_copy(test_id)

    def _commit(self, test_id: int, mutate: Callable[[ConcreteTest], ConcreteTest],
                fields: List[str]) -> ConcreteTest:
        snapshot = self.working_copy(test_id)
        updated = mutate(snapshot)
        self._working[test_id] = updated

        document = updated.to_document()
        payload = {key: document.get(key) for key in fields}
        if not self.data_service.update_test(test_id, payload):
            self._working[test_id] = snapshot
            logger.warning(f"Test {snapshot.reference}: write failed, edit rolled back")
            raise PersistenceError(f"Could not save test {snapshot.reference}")
        return updated

    def _specimen(self, test: ConcreteTest, number: int) -> Specimen:
        for s in test.specimens:
            if s.number == number:
                return s
        raise SpecimenNotFound(f"Test {test.reference}: no specimen #{number}")

    # ------------------ Sampling sheet ------------------

    def create_test(self, payload: Union[ConcreteTestCreate, Mapping[str, Any]]) -> ConcreteTest:
        """Register a sampling event; the consistency class follows the slump."""
        if not isinstance(payload, ConcreteTestCreate):
            payload = ConcreteTestCreate.model_validate(payload)
        consistency = consistency_class(payload.slump)
        payload = payload.model_copy(update={
            "consistency_class": consistency.value if consistency else None
        })
        created = self.data_service.add_test(payload)
        if created is None:
            raise PersistenceError("Could not save the new concrete test")
        self._working[created.id] = created
        return created

    def update_slump(self, test_id: int, slump) -> ConcreteTest:
        value = parse_measurement(slump)
        consistency = consistency_class(value)

        def mutate(test: ConcreteTest) -> ConcreteTest:
            return test.model_copy(update={
                "slump": value,
                "consistency_class": consistency.value if consistency else None,
            })

        return self._commit(test_id, mutate, ["slump", "consistencyClass"])

    def change_sampling_date(self, test_id: int, sampling_date: DateLike) -> ConcreteTest:
        """Move the sampling date and cascade it to every specimen."""
        new_date: Optional[date] = to_day(sampling_date)
        if new_date is None:
            raise ValueError(f"Invalid sampling date: {sampling_date!r}")

        def mutate(test: ConcreteTest) -> ConcreteTest:
            return test.model_copy(update={
                "sampling_date": new_date,
                "specimens": PackGenerator.reschedule(test.specimens, new_date),
            })

        updated = self._commit(test_id, mutate, ["samplingDate", "specimens"])
        logger.info(f"Test {updated.reference}: sampling date moved to {new_date}, "
                    f"{updated.specimen_count} specimens rescheduled")
        return updated

    # ------------------ Packs ------------------

    def add_pack(self, test_id: int, age: int, count: int,
                 dimension_preset: PresetLike) -> List[Specimen]:
        """Append a pack cast on the test's sampling date; returns the new specimens."""
        test = self.working_copy(test_id)
        if test.sampling_date is None:
            raise InvalidPackRequest(f"Test {test.reference} has no sampling date")
        request = PackRequest(
            age=age,
            count=count,
            dimension_preset=dimension_preset,
            sampling_date=test.sampling_date,
        )
        # Validate before touching the working copy
        specimens = PackGenerator.append_pack(test.specimens, request)

        updated = self._commit(
            test_id, lambda t: t.model_copy(update={"specimens": specimens}), ["specimens"]
        )
        return updated.specimens[len(test.specimens):]

    def remove_specimen(self, test_id: int, number: int) -> List[Specimen]:
        specimens = PackGenerator.remove_specimen(self.working_copy(test_id).specimens, number)
        updated = self._commit(
            test_id, lambda t: t.model_copy(update={"specimens": specimens}), ["specimens"]
        )
        logger.info(f"Test {updated.reference}: specimen #{number} removed")
        return updated.specimens

    # ------------------ Measurements ------------------

    def _replace_specimen(self, test_id: int, edited: Specimen) -> Specimen:
        def mutate(test: ConcreteTest) -> ConcreteTest:
            return test.model_copy(update={
                "specimens": [edited if s.number == edited.number else s for s in test.specimens]
            })

        self._commit(test_id, mutate, ["specimens"])
        return edited

    def record_measurement(self, test_id: int, number: int,
                           field: Union[MeasurementField, str], value) -> Specimen:
        """Inline (row-level) edit of a single reading."""
        specimen = self._specimen(self.working_copy(test_id), number)
        return self._replace_specimen(test_id, SpecimenEditor.apply_measurement(specimen, field, value))

    def record_measurements(self, test_id: int, number: int, weight=UNSET, force=UNSET) -> Specimen:
        """Detail-view edit of one specimen; omitted readings keep their value, None clears."""
        specimen = self._specimen(self.working_copy(test_id), number)
        edited = SpecimenEditor.apply_measurements(specimen, weight=weight, force=force)
        return self._replace_specimen(test_id, edited)

    def specimens_for_quick_entry(self, test_id: int, target_date: DateLike) -> List[Specimen]:
        return SpecimenEditor.specimens_due_on(self.working_copy(test_id).specimens, target_date)

    def quick_entry(self, test_id: int, target_date: DateLike,
                    entries: Mapping[int, Union[MeasurementEntry, Mapping[str, Any]]]) -> List[Specimen]:
        """Batch entry for one crushing day; returns the specimens due that day."""
        specimens = SpecimenEditor.apply_quick_entry(self.working_copy(test_id).specimens, target_date, entries)
        updated = self._commit(
            test_id, lambda t: t.model_copy(update={"specimens": specimens}), ["specimens"]
        )
        logger.info(f"Test {updated.reference}: quick entry saved for {to_day(target_date)}")
        return SpecimenEditor.specimens_due_on(updated.specimens, target_date)
