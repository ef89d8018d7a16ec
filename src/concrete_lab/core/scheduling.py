"""
Short-horizon classification of specimens awaiting their crushing test.

Only untested specimens due yesterday or earlier (overdue), today, or
tomorrow (upcoming) are surfaced; later dates belong to the calendar.
"""

import logging
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .constants import NOTIFICATION_HORIZON_DAYS, UNKNOWN_PROJECT_NAME
from .date_math import DateLike, days_between, to_day
from .enums import UrgencyClass
from .models import ClassifiedSpecimen
from concrete_lab.schemas.concrete_test import ConcreteTestBase
from concrete_lab.schemas.specimen import Specimen

logger = logging.getLogger(__name__)

TestLike = Union[ConcreteTestBase, Mapping[str, Any]]


class SchedulingClassifier:

    @staticmethod
    def classify_specimen(specimen: Specimen, today: DateLike) -> Optional[UrgencyClass]:
        """Urgency bucket of one specimen, or None when it is not surfaced."""
        if specimen.is_tested or specimen.crushing_date is None:
            return None

        diff_days = days_between(to_day(today), specimen.crushing_date)
        if diff_days < 0:
            return UrgencyClass.OVERDUE
        if diff_days == 0:
            return UrgencyClass.TODAY
        if diff_days == NOTIFICATION_HORIZON_DAYS:
            return UrgencyClass.UPCOMING
        return None

    @staticmethod
    def classify(tests: Iterable[TestLike], today: DateLike) -> List[ClassifiedSpecimen]:
        """
        Scan every test and return the surfaced specimens, tests in input
        order and specimens in list order. Malformed records are skipped.
        """
        day: Optional[date] = to_day(today)
        if day is None:
            raise ValueError(f"Invalid reference date: {today!r}")

        classified: List[ClassifiedSpecimen] = []
        for test in tests:
            header = SchedulingClassifier._test_header(test)
            if header is None:
                logger.warning("Skipping concrete test record without an id")
                continue
            test_id, reference, project_name, raw_specimens = header

            for raw in raw_specimens:
                specimen = SchedulingClassifier._as_specimen(raw, reference)
                if specimen is None:
                    continue
                urgency = SchedulingClassifier.classify_specimen(specimen, day)
                if urgency is None:
                    continue
                try:
                    entry = ClassifiedSpecimen(
                        test_id=test_id,
                        test_reference=reference,
                        project_name=project_name,
                        specimen=specimen,
                        crushing_date=specimen.crushing_date,
                        urgency_class=urgency,
                    )
                except ValidationError as e:
                    logger.warning(f"Test {reference or test_id}: malformed header, skipped ({e.error_count()} errors)")
                    break
                classified.append(entry)
        return classified

    @staticmethod
    def _test_header(test: TestLike) -> Optional[Tuple[Any, str, str, list]]:
        if isinstance(test, ConcreteTestBase):
            test_id = getattr(test, "id", None)
            reference = getattr(test, "reference", "") or ""
            project_name = test.project_name
            specimens = test.specimens
        elif isinstance(test, Mapping):
            test_id = test.get("id", test.get("_id"))
            reference = test.get("reference") or ""
            project_name = test.get("projectName") or test.get("project_name")
            specimens = test.get("specimens") or []
        else:
            return None

        if test_id is None:
            return None
        if not isinstance(specimens, list):
            logger.warning(f"Test {reference or test_id}: specimens is not a list, skipped")
            specimens = []
        return test_id, str(reference), str(project_name or UNKNOWN_PROJECT_NAME), specimens

    @staticmethod
    def _as_specimen(raw: Any, reference: str) -> Optional[Specimen]:
        if isinstance(raw, Specimen):
            return raw
        try:
            return Specimen.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Test {reference}: malformed specimen skipped ({e.error_count()} errors)")
            return None
