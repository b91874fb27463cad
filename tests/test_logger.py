import logging
from types import SimpleNamespace

import pytest

from src.utils.logger import LIBRARY_LEVELS, get_logger, setup_logger, setup_logger_from_config


@pytest.fixture(autouse=True)
def isolated_root(monkeypatch):
    root = logging.getLogger()
    levels = {name: logging.getLogger(name).level for name in [None, *LIBRARY_LEVELS]}
    monkeypatch.setattr(root, "handlers", [])
    yield
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestSetupLogger:
    def test_configures_root_by_default(self):
        logger = setup_logger(log_level="debug")

        assert logger is logging.getLogger()
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logger(log_level="chatty").level == logging.INFO

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logger()
        assert len(setup_logger().handlers) == 1

    def test_driver_and_graphql_loggers_are_quieted(self):
        setup_logger(log_level="DEBUG")

        assert logging.getLogger("pymongo").level == logging.WARNING
        assert logging.getLogger("strawberry.execution").level == logging.CRITICAL

    def test_file_output(self, tmp_path):
        log_file = tmp_path / "logs" / "api.log"
        setup_logger(log_file=str(log_file))

        get_logger("task-graph.tests").info("📝 written")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "📝 written" in log_file.read_text(encoding="utf-8")

    def test_from_config(self):
        config = SimpleNamespace(log_level="WARNING", log_file="")
        logger = setup_logger_from_config(config)

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
