"""Tests for the structlog setup."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.config import OTEL_SERVICE_NAME
from src.utils import logger as logger_module
from src.utils.logger import QUIET_LOGGERS, bind_context, clear_context, get_logger, log_step


def test_service_name_added_to_events():
    event = logger_module._add_service(None, "info", {"event": "x"})
    assert event["service"] == OTEL_SERVICE_NAME
    assert logger_module._add_service(None, "info", {"service": "other"})["service"] == "other"


def test_http_client_loggers_are_quiet():
    import logging

    get_logger("dispatch_slips.test")
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_logging_with_context_and_steps_does_not_raise():
    log = get_logger("dispatch_slips.test", run="t1")
    bind_context(command="loading-slip")
    try:
        log.info("test.event", orders=2)
        log_step("routing", "test.step", {"North": 2})
        log_step("routing", "test.step")
    finally:
        clear_context()
