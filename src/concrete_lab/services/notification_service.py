"""
Notification Service Module
Builds the operator's task queue from the latest snapshot of all tests.
"""

import logging
from datetime import date
from typing import List, Optional

from concrete_lab.core.date_math import DateLike, to_day
from concrete_lab.core.models import NotificationTask, TaskSummary
from concrete_lab.core.scheduling import SchedulingClassifier
from concrete_lab.core.task_consolidator import TaskConsolidator
from concrete_lab.services.data_service import DataService

logger = logging.getLogger(__name__)


class NotificationService:
    """Overdue / today / tomorrow crushing tasks. Nothing is cached."""

    def __init__(self, data_service: DataService):
        self.data_service = data_service

    def get_tasks(self, today: Optional[DateLike] = None) -> List[NotificationTask]:
        day: date = to_day(today) if today is not None else date.today()
        tests = self.data_service.get_all_tests()
        classified = SchedulingClassifier.classify(tests, day)
        tasks = TaskConsolidator.consolidate(classified)
        logger.info(f"Task queue for {day}: {len(tasks)} tasks from {len(classified)} specimens")
        return tasks

    def get_summary(self, today: Optional[DateLike] = None) -> TaskSummary:
        return TaskConsolidator.summarize(self.get_tasks(today))
