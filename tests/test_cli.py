from typer.testing import CliRunner

from concrete_lab.cli import app
from concrete_lab.core.container import ServiceContainer
from concrete_lab.core.enums import DimensionPreset
from concrete_lab.services.data_service import DataService

runner = CliRunner()


def _seed(data_file):
    container = ServiceContainer(DataService(data_file=data_file, backup_dir=data_file.parent / "backups"))
    tests = container.concrete_test_service
    created = tests.create_test({"projectName": "Tour A", "samplingDate": "2025-03-03"})
    tests.add_pack(created.id, age=7, count=2, dimension_preset=DimensionPreset.CUBE_150)
    tests.record_measurement(created.id, 1, "force", 450)
    return created


def test_tasks_command(mock_data_file):
    created = _seed(mock_data_file)
    result = runner.invoke(app, ["tasks", "--today", "2025-03-10", "--data-file", str(mock_data_file)])
    assert result.exit_code == 0
    assert "[AUJOURD'HUI]" in result.output
    assert created.reference in result.output
    assert "1 éprouvette(s)" in result.output


def test_tasks_command_empty_queue(mock_data_file):
    result = runner.invoke(app, ["tasks", "--today", "2025-03-10", "--data-file", str(mock_data_file)])
    assert result.exit_code == 0
    assert "Aucune tâche" in result.output


def test_tasks_command_rejects_bad_date(mock_data_file):
    result = runner.invoke(app, ["tasks", "--today", "10/03/2025", "--data-file", str(mock_data_file)])
    assert result.exit_code != 0


def test_report_command(mock_data_file):
    created = _seed(mock_data_file)
    result = runner.invoke(app, ["report", str(created.id), "--variant", "PV", "--data-file", str(mock_data_file)])
    assert result.exit_code == 0
    assert "PROCÈS VERBAL" in result.output
    assert "20.0 MPa" in result.output


def test_report_command_unknown_test(mock_data_file):
    result = runner.invoke(app, ["report", "42", "--data-file", str(mock_data_file)])
    assert result.exit_code == 1
