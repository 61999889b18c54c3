import logging

import pytest

from tdd_notes.core.logging.builder import make_dict_config, setup_logging
from tdd_notes.core.logging.filters import RequestIdFilter
from tdd_notes.core.logging.formatters import ColorFormatter, JsonFormatter
from tdd_notes.tests.test_fixtures.settings import make_test_settings


@pytest.fixture(autouse=True)
def restore_logging(test_settings):
    yield
    setup_logging(test_settings)


def test_stdout_mode_handlers():
    cfg = make_dict_config(make_test_settings(LOG_TO_STDOUT=True))

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["loggers"][""]["handlers"] == ["console", "error_console"]


def test_file_mode_handlers(tmp_path):
    cfg = make_dict_config(make_test_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path))

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"


def test_formatter_selection():
    text_cfg = make_dict_config(make_test_settings(LOG_FORMAT="text"))
    json_cfg = make_dict_config(make_test_settings(LOG_FORMAT="json", ENV="production"))

    assert text_cfg["formatters"]["standard"]["()"] is ColorFormatter
    assert text_cfg["handlers"]["console"]["formatter"] == "standard"
    assert json_cfg["handlers"]["console"]["formatter"] == "json"
    assert json_cfg["formatters"]["json"]["()"] is JsonFormatter
    assert json_cfg["formatters"]["json"]["env"] == "production"


def test_sql_logging_toggle():
    quiet = make_dict_config(make_test_settings(ENABLE_SQL_LOGGING=False))
    loud = make_dict_config(make_test_settings(ENABLE_SQL_LOGGING=True))

    assert quiet["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert loud["loggers"]["sqlalchemy.engine"]["level"] == "DEBUG"


def test_setup_logging_creates_log_dir(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging(make_test_settings(LOG_TO_STDOUT=False, LOG_DIR=log_dir))

    assert log_dir.exists()
    logging.getLogger("tdd_notes.tests").error("written to disk")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "written to disk" in (log_dir / "errors.log").read_text(encoding="utf-8")


def test_setup_logging_installs_single_root_request_id_filter():
    settings = make_test_settings()
    setup_logging(settings)
    setup_logging(settings)

    root_filters = [f for f in logging.getLogger().filters if isinstance(f, RequestIdFilter)]
    assert len(root_filters) == 1
