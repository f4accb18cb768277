"""Tests for configuration and logging setup."""

import logging

from daytrack.utils.config import Config
from daytrack.utils.logger import get_logger, setup_logging


class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        config = Config()
        assert config.confidence_threshold == 0.4
        assert config.habit_rate_window_days == 30
        assert config.llm_timeout > 0
        assert config.db_path.name.endswith(".db")

    def test_ensure_dirs(self, tmp_path):
        config = Config(data_dir=tmp_path / "data", db_path=tmp_path / "db" / "daytrack.db")
        config.ensure_dirs()
        assert (tmp_path / "data").is_dir()
        assert (tmp_path / "db").is_dir()


class TestLogging:
    """Tests for structlog setup."""

    def test_events_reach_stdlib_logging(self, caplog):
        get_logger("daytrack.test").warning("something_happened", key="value")
        assert "something_happened" in caplog.text
        assert "key=value" in caplog.text

    def test_level_filters(self, caplog):
        setup_logging("ERROR")
        try:
            get_logger("daytrack.test.level").warning("quiet_event")
            assert "quiet_event" not in caplog.text
        finally:
            setup_logging()
        assert logging.getLogger().level == logging.WARNING
