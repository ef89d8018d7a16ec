"""
Data Service Module
Handles persistence of concrete tests in a single JSON document.
"""

import json
import shutil
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from concrete_lab.config import BACKUP_DIR, DATA_FILE, MAX_BACKUPS
from concrete_lab.core.constants import (
    DATETIME_FORMAT, REFERENCE_LETTER, REFERENCE_SEQUENCE_WIDTH
)
from concrete_lab.core.enums import DataCategory
from concrete_lab.core.exceptions import FileLockException
from concrete_lab.schemas.concrete_test import ConcreteTest, ConcreteTestCreate
from concrete_lab.schemas.specimen import Specimen
from concrete_lab.utils.file_lock import file_lock

logger = logging.getLogger(__name__)

TESTS_KEY = DataCategory.CONCRETE_TESTS.value


class DataService:
    """Service for reading and writing concrete tests."""

    def __init__(self, data_file: Optional[Path] = None, backup_dir: Optional[Path] = None):
        self.data_file = Path(data_file) if data_file else DATA_FILE
        self.backup_dir = Path(backup_dir) if backup_dir else BACKUP_DIR

    # -------------------- Document I/O --------------------
    def get_initial_data(self) -> Dict[str, Any]:
        """Return the default data structure."""
        return {TESTS_KEY: []}

    def _ensure_data_structure(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(data.get(TESTS_KEY), list):
            data[TESTS_KEY] = []
        return data

    def load_data(self) -> Dict[str, Any]:
        """Load data from JSON file; a missing or corrupt file gives the initial structure."""
        if not self.data_file.exists():
            return self.get_initial_data()
        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load data from {self.data_file}: {e}")
            return self.get_initial_data()
        if not isinstance(data, dict):
            logger.error(f"Data format is incorrect (not a dict) in {self.data_file}")
            return self.get_initial_data()
        return self._ensure_data_structure(data)

    def save_data(self, data: Dict[str, Any]) -> bool:
        """Save data to JSON file with atomic write and locking."""
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)

            with file_lock(self.data_file, timeout=10):
                # 1. Backup of the previous document
                self.create_backup()

                # 2. Atomic write
                temp_file = self.data_file.with_suffix('.tmp')
                with open(temp_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, ensure_ascii=False, indent=4)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(temp_file, self.data_file)
            return True
        except (OSError, TypeError, ValueError, FileLockException) as e:
            logger.error(f"Failed to save data: {e}")
            return False

    def create_backup(self) -> bool:
        """Copy the current data file into the backup directory."""
        if not self.data_file.exists():
            return False
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            backup_file = self.backup_dir / f"data_backup_{timestamp}.json"
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.data_file, backup_file)
            self._cleanup_old_backups(max_backups=MAX_BACKUPS)
            logger.debug(f"Backup created: {backup_file}")
            return True
        except OSError as e:
            logger.error(f"Backup creation failed: {e}")
            return False

    def _cleanup_old_backups(self, max_backups: int = MAX_BACKUPS) -> None:
        """Remove old backups to save space."""
        backup_files = list(self.backup_dir.glob("data_backup_*.json"))
        if len(backup_files) <= max_backups:
            return
        backup_files.sort(key=lambda x: x.stat().st_mtime)
        for file in backup_files[:-max_backups]:
            file.unlink()
            logger.info(f"Deleted old backup: {file}")

    # -------------------- Helpers --------------------
    def _get_next_id(self, items: List[Dict[str, Any]]) -> int:
        """Next integer ID, ignoring non-integer IDs."""
        ids = []
        for item in items:
            val = item.get("id")
            if isinstance(val, int):
                ids.append(val)
            elif isinstance(val, str) and val.isdigit():
                ids.append(int(val))
        return max(ids, default=0) + 1

    @staticmethod
    def format_reference(year: int, sequence: int) -> str:
        """Sampling sheet number, e.g. 2025-B-0001."""
        return f"{year}-{REFERENCE_LETTER}-{str(sequence).zfill(REFERENCE_SEQUENCE_WIDTH)}"

    @staticmethod
    def _next_sequence(items: Iterable[Dict[str, Any]], year: int) -> int:
        sequences = [
            item.get("sequenceNumber") for item in items
            if item.get("year") == year and isinstance(item.get("sequenceNumber"), int)
        ]
        return max(sequences, default=0) + 1

    @staticmethod
    def _find_index(items: List[Dict[str, Any]], test_id: int) -> Optional[int]:
        for i, item in enumerate(items):
            if item.get("id") == test_id:
                return i
        return None

    # -------------------- Concrete Tests --------------------
    def get_all_tests(self) -> List[Dict[str, Any]]:
        """Raw documents of every test, embedded specimens included."""
        return self.load_data().get(TESTS_KEY, [])

    def get_test(self, test_id: int) -> Optional[ConcreteTest]:
        items = self.get_all_tests()
        index = self._find_index(items, test_id)
        if index is None:
            return None
        try:
            return ConcreteTest.model_validate(items[index])
        except ValidationError as e:
            logger.error(f"Stored test {test_id} is invalid: {e}")
            return None

    def add_test(self, test: Union[ConcreteTestCreate, Dict[str, Any]],
                 now: Optional[datetime] = None) -> Optional[ConcreteTest]:
        """Store a new test, assigning its id and yearly reference."""
        if not isinstance(test, ConcreteTestCreate):
            test = ConcreteTestCreate.model_validate(test)
        now = now or datetime.now()

        data = self.load_data()
        items = data[TESTS_KEY]
        sequence = self._next_sequence(items, now.year)

        created = ConcreteTest(
            **test.model_dump(),
            id=self._get_next_id(items),
            reference=self.format_reference(now.year, sequence),
            sequence_number=sequence,
            year=now.year,
            created_at=now.strftime(DATETIME_FORMAT),
        )
        items.append(created.to_document())
        if not self.save_data(data):
            return None
        logger.info(f"Concrete test {created.reference} created (id={created.id})")
        return created

    def update_test(self, test_id: int, updates: Union[ConcreteTest, Dict[str, Any]]) -> bool:
        """
        Merge ``updates`` (camelCase document keys) into the stored test.
        A payload carrying ``specimens`` replaces the whole array.
        """
        if isinstance(updates, ConcreteTest):
            updates = updates.to_document()
        data = self.load_data()
        items = data[TESTS_KEY]
        index = self._find_index(items, test_id)
        if index is None:
            logger.warning(f"Update of unknown test {test_id}")
            return False

        document = dict(items[index])
        document.update({k: v for k, v in updates.items() if k not in ("id", "reference")})
        if "specimens" in updates:
            document["specimenCount"] = len(updates["specimens"] or [])
        document["lastModified"] = datetime.now().strftime(DATETIME_FORMAT)
        items[index] = document
        return self.save_data(data)

    def replace_specimens(self, test_id: int, specimens: List[Specimen]) -> bool:
        return self.update_test(test_id, {"specimens": [s.to_document() for s in specimens]})

    def delete_test(self, test_id: int) -> bool:
        data = self.load_data()
        items = data[TESTS_KEY]
        remaining = [x for x in items if x.get("id") != test_id]
        if len(remaining) == len(items):
            return False
        data[TESTS_KEY] = remaining
        return self.save_data(data)
