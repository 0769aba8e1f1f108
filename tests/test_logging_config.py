import logging

from timetravel.logging_config import setup_logging


def test_setup_logging_writes_file(tmp_path, monkeypatch):
    monkeypatch.delenv("TIMETRAVEL_LOG_LEVEL", raising=False)
    log_file = tmp_path / "logs" / "timetravel.log"
    logger = setup_logging(level="DEBUG", log_file=str(log_file), console=False)
    try:
        logging.getLogger("timetravel.core.controller").debug("hello from test")
        for handler in logger.handlers:
            handler.flush()
        assert "hello from test" in log_file.read_text()
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()


def test_env_overrides_level(monkeypatch):
    monkeypatch.setenv("TIMETRAVEL_LOG_LEVEL", "warning")
    logger = setup_logging(level="DEBUG", console=False)
    assert logger.level == logging.WARNING
    logger.handlers.clear()
