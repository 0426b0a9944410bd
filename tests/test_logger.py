import logging

import pytest

from gesteasy.logger import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def clean_logger():
    yield
    logging.getLogger(LOGGER_NAME).handlers.clear()
    logging.getLogger(LOGGER_NAME).setLevel(logging.NOTSET)


def test_get_logger_children():
    assert get_logger().name == "gesteasy"
    assert get_logger("pipeline").name == "gesteasy.pipeline"


def test_setup_logging_levels():
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    logger = setup_logging(debug=False)
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "gesteasy.log"
    logger = setup_logging(log_file=str(log_file))
    get_logger("test").info("hello from test")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from test" in log_file.read_text()
