"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest

from dropship_manager.config import settings
from dropship_manager.utils.logger import LOGGER_NAME, setup_logger


def _clear_handlers():
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        handler.close()
        package_logger.removeHandler(handler)


@pytest.fixture
def clean_logger():
    _clear_handlers()
    yield logging.getLogger(LOGGER_NAME)
    _clear_handlers()


def test_log_dir_is_outside_installed_package():
    package_dir = Path(settings.__file__).resolve().parent.parent

    assert package_dir not in (Path.cwd() / settings.LOG_DIR).resolve().parents


def test_log_file_relative_to_working_directory(tmp_path, monkeypatch, clean_logger):
    monkeypatch.chdir(tmp_path)

    setup_logger()

    assert (tmp_path / settings.LOG_DIR / "dropship.log").exists()


def test_handlers_not_duplicated(tmp_path, clean_logger):
    setup_logger(log_dir=tmp_path)
    setup_logger(log_dir=tmp_path)

    assert len(clean_logger.handlers) == 2
