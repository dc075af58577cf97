"""logging_config モジュールのテスト"""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest
from schooldesk.logging_config import CloudLoggingFormatter, setup_logging


def _make_record(
    message: str = "test message", level: int = logging.INFO, exc_info=None
) -> logging.LogRecord:
    """テスト用の LogRecord を生成するヘルパー"""
    return logging.LogRecord(
        name="schooldesk.services.record_store",
        level=level,
        pathname="",
        lineno=0,
        msg=message,
        args=(),
        exc_info=exc_info,
    )


def _env_without(*names: str) -> dict:
    return {k: v for k, v in os.environ.items() if k not in names}


class TestCloudLoggingFormatter:
    """CloudLoggingFormatter の単体テスト"""

    @pytest.mark.parametrize(
        "level, severity",
        [
            (logging.DEBUG, "DEBUG"),
            (logging.INFO, "INFO"),
            (logging.WARNING, "WARNING"),
            (logging.ERROR, "ERROR"),
            (logging.CRITICAL, "CRITICAL"),
            (25, "DEFAULT"),
        ],
    )
    def test_severity_mapping(self, level, severity):
        parsed = json.loads(CloudLoggingFormatter().format(_make_record(level=level)))

        assert parsed["severity"] == severity

    def test_required_fields_present(self):
        """必須フィールド (severity, message, logger, timestamp) が含まれること"""
        parsed = json.loads(CloudLoggingFormatter().format(_make_record()))

        assert parsed["message"] == "test message"
        assert parsed["logger"] == "schooldesk.services.record_store"
        assert "timestamp" in parsed
        assert "exception" not in parsed

    def test_exception_info_included(self):
        try:
            raise ValueError("cache corrupt")
        except ValueError:
            exc_info = sys.exc_info()

        parsed = json.loads(
            CloudLoggingFormatter().format(_make_record(exc_info=exc_info))
        )

        assert "ValueError" in parsed["exception"]
        assert "cache corrupt" in parsed["exception"]

    def test_extra_fields_are_merged(self):
        record = _make_record()
        record.extra_fields = {"kind": "schedule", "records": 4}

        parsed = json.loads(CloudLoggingFormatter().format(record))

        assert parsed["kind"] == "schedule"
        assert parsed["records"] == 4

    def test_korean_message_is_not_escaped(self):
        output = CloudLoggingFormatter().format(_make_record("일정이 저장되었습니다"))

        assert "일정이 저장되었습니다" in output


class TestSetupLogging:
    """setup_logging() の動作テスト"""

    def test_uses_json_formatter_in_cloud_run(self):
        with patch.dict("os.environ", {"K_SERVICE": "schooldesk-api"}, clear=False):
            setup_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_log_format_json_forces_json_locally(self):
        env = _env_without("K_SERVICE", "CLOUD_RUN_JOB")
        env["LOG_FORMAT"] = "json"
        with patch.dict("os.environ", env, clear=True):
            setup_logging()

        assert isinstance(logging.getLogger().handlers[0].formatter, CloudLoggingFormatter)

    def test_uses_text_formatter_in_local_env(self):
        env = _env_without("K_SERVICE", "CLOUD_RUN_JOB", "LOG_FORMAT")
        with patch.dict("os.environ", env, clear=True):
            setup_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0].formatter, CloudLoggingFormatter)

    def test_log_level_respected(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}, clear=False):
            setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_handlers_cleared_on_reinitialize(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_http_client_loggers_are_quieted(self):
        with patch.dict("os.environ", {"LOG_LEVEL": "DEBUG"}, clear=False):
            setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
