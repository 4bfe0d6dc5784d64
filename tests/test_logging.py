"""Tests for logging setup."""
import logging
import warnings

import pytest

from apprating.utils.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    logging.captureWarnings(False)
    for name in ("apprating", "py.warnings"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.propagate = True


class TestLogging:
    def test_get_logger_namespace(self):
        assert get_logger("apprating.core.models").name == "apprating.core.models"
        assert get_logger("tests").name == "apprating.tests"
        assert get_logger("appratingx").name == "apprating.appratingx"

    def test_file_handler_receives_module_logs(self, tmp_path):
        setup_logging("DEBUG", log_dir=tmp_path, log_file="run.log")
        get_logger("apprating.core.cleaning").info("cleaned %d rows", 3)
        for handler in logging.getLogger("apprating").handlers:
            handler.flush()
        text = (tmp_path / "run.log").read_text(encoding="utf-8")
        assert "cleaned 3 rows" in text
        assert "apprating.core.cleaning" in text

    def test_library_warnings_are_captured(self, tmp_path):
        setup_logging("INFO", log_dir=tmp_path, log_file="run.log")
        with warnings.catch_warnings():
            warnings.simplefilter("always")
            warnings.warn("lbfgs failed to converge", UserWarning)
        for handler in logging.getLogger("py.warnings").handlers:
            handler.flush()
        assert "lbfgs failed to converge" in (tmp_path / "run.log").read_text(encoding="utf-8")

    def test_level_applied(self):
        setup_logging("WARNING", capture_warnings=False)
        assert logging.getLogger("apprating").level == logging.WARNING
