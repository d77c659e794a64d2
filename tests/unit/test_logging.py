from __future__ import annotations

import json
import logging
import sys

from skills_viewer.utils.logging import LIBRARY_LEVELS, JsonFormatter, _json_formatter, configure_logging

EXPECTED_TOTAL = 25
EXPECTED_PAGE = 2


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_promotes_standard_extra_fields() -> None:
    payload = json.loads(_json_formatter(_record(total=EXPECTED_TOTAL, table="user")))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["total"] == EXPECTED_TOTAL
    assert payload["table"] == "user"
    assert "pathname" not in payload
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    payload = json.loads(_json_formatter(_record(extra={"page": EXPECTED_PAGE})))

    assert payload["page"] == EXPECTED_PAGE
    assert "extra" not in payload


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise RuntimeError("db down")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()

    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: db down" in payload["exc_info"]


def test_configure_logging_quiets_chatty_libraries() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    saved_library_levels = {name: logging.getLogger(name).level for name in LIBRARY_LEVELS}
    try:
        configure_logging(level="DEBUG", json_logs=True)

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("psycopg.pool").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        for name, level in saved_library_levels.items():
            logging.getLogger(name).setLevel(level)
