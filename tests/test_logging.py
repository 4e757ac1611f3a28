from __future__ import annotations

import logging

import orjson

from tenderflow.core.logging import (
    JSONFormatter,
    get_contextual_logger,
    get_logger,
    setup_logging,
)


def test_json_formatter_keeps_context_fields():
    record = logging.LogRecord("tenderflow.tenders", logging.INFO, __file__, 1, "Edited %s", ("t-1",), None)
    record.operation = "edit_tender"
    record.version = 2

    data = orjson.loads(JSONFormatter().format(record))

    assert data["message"] == "Edited t-1"
    assert data["level"] == "INFO"
    assert data["operation"] == "edit_tender"
    assert data["version"] == 2
    assert "tender_id" not in data


def test_file_log_is_json_lines(tmp_path, clean_logging):
    log_file = tmp_path / "logs" / "app.log"
    setup_logging(level="DEBUG", log_file=log_file, json_format=True, rich_console=False)

    log = get_contextual_logger("approvals", operation="record_approval", entity_id="b-1")
    log.info("Approval recorded [bold]", extra={"user_id": "alice"})
    for handler in logging.getLogger("tenderflow").handlers:
        handler.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    data = orjson.loads(lines[-1])
    assert data["logger"] == "tenderflow.approvals"
    assert data["operation"] == "record_approval"
    assert data["entity_id"] == "b-1"
    assert data["user_id"] == "alice"


def test_logger_names_are_namespaced():
    assert get_logger("tenders").name == "tenderflow.tenders"
    assert get_logger().name == "tenderflow"
