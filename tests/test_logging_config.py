import logging

import pytest

from geogrid.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("geogrid")
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(saved_level)


def test_setup_is_repeatable(package_logger):
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG)

    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_log_file(package_logger, tmp_path):
    log_file = tmp_path / "geogrid.log"

    setup_logging(logging.INFO, log_file=str(log_file))
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 2
    assert "Logging initialized (level INFO)." in log_file.read_text(encoding="utf-8")


def test_reconfiguring_closes_previous_file_handler(package_logger, tmp_path):
    setup_logging(logging.INFO, log_file=str(tmp_path / "first.log"))
    file_handler = next(h for h in package_logger.handlers if isinstance(h, logging.FileHandler))

    setup_logging(logging.INFO)

    assert file_handler not in package_logger.handlers
    assert file_handler.stream is None
