import json
import logging

import structlog

from src.timetable.logging import get_logger, setup_logging


def test_logs_go_to_stderr_not_stdout(capsys):
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        setup_logging(json_output=True, log_level="INFO")
        log = get_logger("tests.logging")
        log.info("sheet_skipped", sheet="Monday")
        log.debug("hidden_event")
    finally:
        structlog.reset_defaults()
        root.handlers, root.level = handlers, level

    captured = capsys.readouterr()
    assert captured.out == ""
    lines = captured.err.strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event"] == "sheet_skipped"
    assert record["sheet"] == "Monday"
    assert record["level"] == "info"
