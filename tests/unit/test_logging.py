from __future__ import annotations

import json
import logging

import pytest

from nomad.utils.logging import JsonLogFormatter, _json_formatter, configure_logging, get_logger

EXPECTED_COLUMNS = 3


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.columns = EXPECTED_COLUMNS
    record.record_type = "Person"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["columns"] == EXPECTED_COLUMNS
    assert payload["record_type"] == "Person"
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"column": "first_name"}

    payload = json.loads(_json_formatter(record))

    assert payload["column"] == "first_name"
    assert "extra" not in payload


def test_json_formatter_stringifies_unserializable_values() -> None:
    record = _record()
    record.value = b"\x00"

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["value"] == "b'\\x00'"


def test_configure_logging_json_output(capsys, restore_root_logger) -> None:
    configure_logging(level="DEBUG", json_logs=True)

    get_logger("nomad.test").debug("Ignoring unknown column", extra={"column": "shoe_size"})

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Ignoring unknown column"
    assert payload["column"] == "shoe_size"
    assert payload["level"] == "DEBUG"


def test_configure_logging_console_respects_level(capsys, restore_root_logger) -> None:
    configure_logging(level="WARNING")
    log = get_logger("nomad.test")

    log.info("quiet")
    log.warning("loud")

    err = capsys.readouterr().err
    assert "quiet" not in err
    assert "WARNING | nomad.test | loud" in err


def test_get_logger_without_name_is_root() -> None:
    assert get_logger() is logging.getLogger()
    assert get_logger("nomad.record").name == "nomad.record"


def test_log_formatter_name_does_not_shadow_record_formatter() -> None:
    import nomad
    from nomad.utils import logging as nomad_logging

    assert not hasattr(nomad_logging, "JsonFormatter")
    assert nomad.JsonFormatter is not JsonLogFormatter
    assert not issubclass(nomad.JsonFormatter, logging.Formatter)


def test_configure_logging_uses_json_log_formatter(restore_root_logger) -> None:
    configure_logging(level="INFO", json_logs=True)

    handlers = restore_root_logger.handlers
    assert any(isinstance(handler.formatter, JsonLogFormatter) for handler in handlers)
