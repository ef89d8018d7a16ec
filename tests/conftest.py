import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to python path so the package imports without installation
root_dir = Path(__file__).parent.parent
src_dir = root_dir / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from concrete_lab.core.container import ServiceContainer
from concrete_lab.core.enums import DataCategory
from concrete_lab.services.data_service import DataService

TODAY = date(2025, 3, 10)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def mock_data_file(tmp_path):
    """Empty data document in a temporary directory."""
    d = tmp_path / "concrete_tests.json"
    d.write_text('{"%s": []}' % DataCategory.CONCRETE_TESTS.value, encoding='utf-8')
    return d


@pytest.fixture
def data_service(mock_data_file):
    return DataService(data_file=mock_data_file, backup_dir=mock_data_file.parent / "backups")


@pytest.fixture
def container(data_service):
    return ServiceContainer(data_service)


@pytest.fixture
def make_specimen():
    """Raw specimen document as stored in the JSON file."""
    def _make(number, age=28, crushing_date="2025-03-10", stress=None, **extra):
        doc = {
            "number": number,
            "age": age,
            "castingDate": "2025-02-10",
            "crushingDate": crushing_date,
            "specimenType": "Cylindrique",
            "diameter": 160,
            "height": 320,
            "surface": 20106.19,
        }
        if stress is not None:
            doc["stress"] = stress
        doc.update(extra)
        return doc
    return _make
