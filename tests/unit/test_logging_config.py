"""Unit tests for trapezoidal logging configuration."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from unittest import mock

import trapezoidal
from trapezoidal.logging_config import (
    LOGGER_NAME,
    JsonFormatter,
    _clear_handlers,
    _get_level,
    _get_logger,
)


def _flush() -> None:
    for handler in _get_logger().handlers:
        handler.flush()


class TestSilentByDefault:
    def test_import_produces_no_log_output(self, capfd):
        import importlib

        importlib.reload(trapezoidal)

        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_logger_has_null_handler(self):
        logger = logging.getLogger(LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_integration_is_silent(self, capfd):
        trapezoidal.integrate_threaded(lambda x: x, 0.0, 1.0, 10, 2)
        captured = capfd.readouterr()
        assert captured.err == ""


class TestEnableConsoleLogging:
    def test_adds_stream_handler(self):
        trapezoidal.enable_console_logging()
        assert any(isinstance(h, logging.StreamHandler) for h in _get_logger().handlers)

    def test_sets_level(self):
        trapezoidal.enable_console_logging(level="DEBUG")
        assert _get_logger().level == logging.DEBUG

    def test_outputs_to_stderr(self, capfd):
        trapezoidal.enable_console_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("test message")
        assert "test message" in capfd.readouterr().err

    def test_custom_format(self, capfd):
        trapezoidal.enable_console_logging(level="INFO", format="[CUSTOM] %(message)s")
        logging.getLogger(f"{LOGGER_NAME}.test").info("hello")
        assert "[CUSTOM] hello" in capfd.readouterr().err

    def test_pool_lifecycle_logged(self, capfd):
        trapezoidal.enable_console_logging(level="INFO")
        pool = trapezoidal.create_pool(capacity=1, name="logged-pool")
        pool.shutdown()
        err = capfd.readouterr().err
        assert "Started pool logged-pool" in err
        assert "Shutting down pool logged-pool" in err


class TestEnableFileLogging:
    def test_creates_rotating_file_handler(self, tmp_path):
        trapezoidal.enable_file_logging(tmp_path / "test.log")
        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)

    def test_creates_parent_directories(self, tmp_path):
        log_file = tmp_path / "subdir" / "nested" / "test.log"
        trapezoidal.enable_file_logging(log_file)
        assert log_file.parent.exists()

    def test_writes_to_file(self, tmp_path):
        log_file = tmp_path / "test.log"
        trapezoidal.enable_file_logging(log_file, level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("file test message")
        _flush()
        assert "file test message" in log_file.read_text()

    def test_respects_rotation_settings(self, tmp_path):
        handler = trapezoidal.enable_file_logging(
            tmp_path / "test.log", max_bytes=1000, backup_count=3
        )
        assert handler.maxBytes == 1000
        assert handler.backupCount == 3

    def test_json_format(self, tmp_path):
        log_file = tmp_path / "test.json"
        trapezoidal.enable_file_logging(log_file, level="INFO", json_format=True)
        logging.getLogger(f"{LOGGER_NAME}.test").info("json line")
        _flush()
        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "json line"


class TestJsonLogging:
    def test_formatter_fields(self):
        record = logging.LogRecord(
            name="trapezoidal.test", level=logging.INFO, pathname="", lineno=0,
            msg="hello %s", args=("world",), exc_info=None,
        )
        data = json.loads(JsonFormatter().format(record))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "trapezoidal.test"
        assert "thread" in data
        assert "timestamp" in data

    def test_formatter_includes_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            import sys

            record = logging.LogRecord(
                name="trapezoidal.test", level=logging.ERROR, pathname="", lineno=0,
                msg="failed", args=(), exc_info=sys.exc_info(),
            )
        data = json.loads(JsonFormatter().format(record))
        assert "ValueError" in data["exception"]

    def test_outputs_json_to_stderr(self, capfd):
        trapezoidal.enable_json_logging(level="INFO")
        logging.getLogger(f"{LOGGER_NAME}.test").info("structured")
        line = capfd.readouterr().err.strip()
        assert json.loads(line)["message"] == "structured"


class TestConfigureFromEnv:
    def test_no_env_vars_does_nothing(self):
        with mock.patch.dict("os.environ", {}, clear=True):
            trapezoidal.configure_from_env()
        handlers = [h for h in _get_logger().handlers if not isinstance(h, logging.NullHandler)]
        assert handlers == []

    def test_level_enables_console(self):
        with mock.patch.dict("os.environ", {"TRAP_LOGGING": "DEBUG"}, clear=True):
            trapezoidal.configure_from_env()
        assert _get_logger().level == logging.DEBUG
        assert any(type(h) is logging.StreamHandler for h in _get_logger().handlers)

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "env.log"
        with mock.patch.dict("os.environ", {"TRAP_LOG_FILE": str(log_file)}, clear=True):
            trapezoidal.configure_from_env()
        assert any(isinstance(h, RotatingFileHandler) for h in _get_logger().handlers)
        assert _get_logger().level == logging.INFO

    def test_json_console(self):
        env = {"TRAP_LOGGING": "INFO", "TRAP_LOG_JSON": "1"}
        with mock.patch.dict("os.environ", env, clear=True):
            trapezoidal.configure_from_env()
        assert any(isinstance(h.formatter, JsonFormatter) for h in _get_logger().handlers)


class TestLevelsAndDisable:
    def test_get_level(self):
        assert _get_level("debug") == logging.DEBUG
        assert _get_level(logging.ERROR) == logging.ERROR
        assert _get_level("nonsense") == logging.INFO

    def test_set_level(self):
        trapezoidal.set_level("WARNING")
        assert _get_logger().level == logging.WARNING

    def test_disable_logging(self, capfd):
        trapezoidal.enable_console_logging()
        trapezoidal.disable_logging()
        logging.getLogger(f"{LOGGER_NAME}.test").critical("should not appear")
        assert capfd.readouterr().err == ""
        assert _get_logger().level == logging.CRITICAL + 1

    def test_clear_handlers_keeps_null_handler(self):
        trapezoidal.enable_console_logging()
        _clear_handlers()
        assert all(isinstance(h, logging.NullHandler) for h in _get_logger().handlers)
