import json
import logging

from rich.logging import RichHandler

from wsd.utils.log import LOG_FILE_ENV, LOG_LEVEL_ENV, JSONFormatter, get_logger


def test_console_handler_attached_once(monkeypatch):
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    logger = get_logger("wsd.tests.console")
    get_logger("wsd.tests.console")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)


def test_json_file_output(monkeypatch, tmp_path):
    log_path = tmp_path / "logs" / "wsd.jsonl"
    monkeypatch.setenv(LOG_FILE_ENV, str(log_path))
    logger = get_logger("wsd.tests.file")
    try:
        logger.warning("RSSI %d dBm out of range", 12)
        for handler in logger.handlers:
            handler.flush()
        line = log_path.read_text(encoding="utf-8").strip().splitlines()[-1]
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    record = json.loads(line)
    assert record["level"] == "WARNING"
    assert record["logger"] == "wsd.tests.file"
    assert record["function"] == "test_json_file_output"
    assert record["message"] == "RSSI 12 dBm out of range"


def test_json_formatter():
    record = logging.LogRecord("wsd", logging.INFO, __file__, 1, "hello %s", ("there",), None)
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "hello there"
    assert payload["level"] == "INFO"


def test_level_from_environment(monkeypatch):
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
    assert get_logger("wsd.tests.level_env").level == logging.DEBUG
    assert get_logger("wsd.tests.level_arg", logging.WARNING).level == logging.WARNING


def test_default_level_is_info(monkeypatch):
    monkeypatch.delenv(LOG_FILE_ENV, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    assert get_logger("wsd.tests.level_default").level == logging.INFO
