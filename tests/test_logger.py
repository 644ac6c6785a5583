# File: tests/test_logger.py
import logging

from llms_txt.logger import ConsoleHandler, LOGGER_NAME, configure, get_logger, init_logging


def test_get_logger_names():
    assert get_logger().name == LOGGER_NAME
    assert get_logger("llms_txt.crawler.robots").name == "llms_txt.crawler.robots"
    assert get_logger("robots").name == "llms_txt.robots"


def test_configure_with_log_file(tmp_path):
    log_file = tmp_path / "logs" / "llms.log"
    try:
        lg = configure(level="DEBUG", log_file=log_file, log_format="%(levelname)s %(message)s")
        assert lg.level == logging.DEBUG
        assert lg.propagate is False
        assert any(isinstance(h, ConsoleHandler) for h in lg.handlers)

        get_logger("llms_txt.sources.fs").debug("collected %d items", 3)
        for handler in lg.handlers:
            handler.flush()
        assert "DEBUG collected 3 items" in log_file.read_text(encoding="utf-8")
    finally:
        init_logging()


def test_replace_handlers():
    try:
        configure(replace_handlers=True)
        configure(replace_handlers=False)
        assert len(get_logger().handlers) == 2
        init_logging()
        assert len(get_logger().handlers) == 1
    finally:
        init_logging()
