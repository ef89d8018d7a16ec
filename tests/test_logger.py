import logging.handlers

from concrete_lab.utils.logger import setup_logger


def test_setup_logger_attaches_handlers_once(tmp_path):
    log_file = tmp_path / "app.log"
    logger = setup_logger("concrete_lab_test_once", log_file=log_file)
    again = setup_logger("concrete_lab_test_once", log_file=log_file)

    assert logger is again
    assert len(logger.handlers) == 2

    logger.info("pack added")
    for handler in logger.handlers:
        handler.flush()
    assert "INFO - pack added" in log_file.read_text(encoding="utf-8")


def test_setup_logger_without_console(tmp_path):
    logger = setup_logger("concrete_lab_test_quiet", log_file=tmp_path / "q.log", console=False)
    assert [type(h) for h in logger.handlers] == [logging.handlers.RotatingFileHandler]
