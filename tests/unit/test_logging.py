from __future__ import annotations

import json
import logging

from realmsapi.utils.logging import _json_formatter

EXPECTED_PORT = 19132
EXPECTED_ATTEMPT = 2


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.port = EXPECTED_PORT
    record.code = "AbCdEfGhIjK"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["port"] == EXPECTED_PORT
    assert payload["code"] == "AbCdEfGhIjK"
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"attempt": EXPECTED_ATTEMPT}

    payload = json.loads(_json_formatter(record))

    assert payload["attempt"] == EXPECTED_ATTEMPT
    assert "extra" not in payload


def test_json_formatter_renders_exceptions() -> None:
    try:
        raise ValueError("bad code")
    except ValueError:
        import sys

        record = logging.LogRecord(
            name="test.logger",
            level=logging.ERROR,
            pathname=__file__,
            lineno=1,
            msg="failed",
            args=(),
            exc_info=sys.exc_info(),
        )

    payload = json.loads(_json_formatter(record))

    assert "ValueError: bad code" in payload["exc_info"]
