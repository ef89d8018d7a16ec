"""Turns classified specimens into one actionable task per test and day."""

from collections import Counter
from typing import Dict, Iterable, List, Tuple

from .models import ClassifiedSpecimen, NotificationTask, TaskSummary
from .enums import UrgencyClass


class TaskConsolidator:

    @staticmethod
    def consolidate(classified: Iterable[ClassifiedSpecimen]) -> List[NotificationTask]:
        """
        Group by (test, crushing day), counting specimens. The first member of
        a group supplies its age. Tasks are ordered overdue, today, upcoming;
        within one class the order of first encounter is kept.
        """
        groups: Dict[Tuple[object, object], NotificationTask] = {}
        for item in classified:
            key = (item.test_id, item.crushing_date)
            task = groups.get(key)
            if task is None:
                groups[key] = NotificationTask(
                    test_id=item.test_id,
                    test_reference=item.test_reference,
                    project_name=item.project_name,
                    target_date=item.crushing_date,
                    urgency_class=item.urgency_class,
                    specimen_count=1,
                    representative_age=item.specimen.age,
                )
            else:
                task.specimen_count += 1

        # sorted() is stable, so insertion order survives within a class
        return sorted(groups.values(), key=lambda t: t.urgency_class.priority)

    @staticmethod
    def summarize(tasks: Iterable[NotificationTask]) -> TaskSummary:
        counts = Counter(t.urgency_class for t in tasks)
        return TaskSummary(
            overdue=counts[UrgencyClass.OVERDUE],
            today=counts[UrgencyClass.TODAY],
            upcoming=counts[UrgencyClass.UPCOMING],
        )
