import logging
import logging.handlers

from bill_extractor.utils.logger import (
    ROOT_LOGGER_NAME,
    get_logger,
    setup_logger,
    setup_logger_from_config,
)


def test_get_logger_places_modules_under_namespace():
    assert get_logger("main").name == "bill_extractor.main"
    assert get_logger("bill_extractor.extraction").name == "bill_extractor.extraction"


def test_console_logs_go_to_stderr(capsys):
    setup_logger(level="INFO", colorize=False)
    get_logger("tests").info("bill parsed")
    get_logger("tests").debug("not shown")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "| INFO     | bill_extractor.tests | bill parsed" in captured.err
    assert "not shown" not in captured.err


def test_setup_replaces_handlers(tmp_path):
    setup_logger()
    logger = setup_logger(level="debug", log_file=tmp_path / "logs" / "run.log",
                          rotation={"backup_count": 2})

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 2
    file_handler = logger.handlers[1]
    assert isinstance(file_handler, logging.handlers.RotatingFileHandler)
    assert file_handler.backupCount == 2
    assert file_handler.maxBytes == 10 * 1024 * 1024

    get_logger("tests").warning("written to file")
    file_handler.flush()
    assert "written to file" in (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")


def test_level_override_from_caller():
    logger = setup_logger_from_config("WARNING")
    assert logger is logging.getLogger(ROOT_LOGGER_NAME)
    assert logger.level == logging.WARNING
