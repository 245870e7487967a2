"""Tests for structured logging behavior."""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
import unittest
from unittest import mock

import structlog

from observable_registry.config import RegistrySettings
from observable_registry.logging_utils import build_formatter, configure_logging
from observable_registry.observable import Observable


class ConfigureLoggingTests(unittest.TestCase):
    """Validate configure_logging() handler setup behavior."""

    def setUp(self) -> None:
        # Preserve root logger state so tests do not pollute each other.
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        for handler in root.handlers:
            if handler not in self._original_handlers:
                handler.close()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def test_configure_logging_adds_stderr_handler(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        root = logging.getLogger()
        stream_handlers = [
            h
            for h in root.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.WARNING)

    def test_configure_logging_structured_uses_structlog_formatter(self) -> None:
        configure_logging({"level": "DEBUG", "structured": True, "log_to_file": False})
        root = logging.getLogger()
        formatters = [h.formatter for h in root.handlers]
        self.assertTrue(
            any(isinstance(f, structlog.stdlib.ProcessorFormatter) for f in formatters)
        )

    def test_configure_logging_plain_formatter_when_not_structured(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        root = logging.getLogger()
        formatters = [h.formatter for h in root.handlers]
        self.assertFalse(
            any(isinstance(f, structlog.stdlib.ProcessorFormatter) for f in formatters)
        )

    def test_configure_logging_sets_root_level(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        self.assertEqual(logging.getLogger().level, logging.DEBUG)

    def test_configure_logging_file_handler_created(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = str(Path(tmp) / "registry.log")
            configure_logging(
                {
                    "level": "DEBUG",
                    "structured": False,
                    "log_to_file": True,
                    "log_file_path": log_path,
                }
            )
            root = logging.getLogger()
            file_handlers = [
                h for h in root.handlers if isinstance(h, logging.FileHandler)
            ]
            self.assertEqual(len(file_handlers), 1)
            self.assertTrue(Path(log_path).exists())
            file_handlers[0].close()

    def test_stderr_handler_filters_to_package_loggers(self) -> None:
        configure_logging({"level": "DEBUG", "structured": False, "log_to_file": False})
        root = logging.getLogger()
        handler = root.handlers[0]

        def make_record(name: str) -> logging.LogRecord:
            return logging.LogRecord(
                name=name,
                level=logging.WARNING,
                pathname=__file__,
                lineno=1,
                msg="msg",
                args=(),
                exc_info=None,
            )

        self.assertTrue(handler.filter(make_record("observable_registry.observable")))
        self.assertFalse(handler.filter(make_record("somelib.module")))

    def test_build_formatter_leaves_structlog_configuration_alone(self) -> None:
        with mock.patch.object(structlog, "configure") as configure:
            build_formatter(structured=True)
            configure.assert_not_called()
            configure_logging(
                {"level": "INFO", "structured": True, "log_to_file": False}
            )
            configure.assert_called_once()

    def test_structured_formatter_renders_json_with_extra_fields(self) -> None:
        formatter = build_formatter(structured=True)
        record = logging.LogRecord(
            name="observable_registry.observable",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="observable.listener_leak",
            args=(),
            exc_info=None,
        )
        record.listener_count = 11

        data = json.loads(formatter.format(record))
        self.assertEqual(data["event"], "observable.listener_leak")
        self.assertEqual(data["level"], "warning")
        self.assertEqual(data["listener_count"], 11)


class RegistryDiagnosticsTests(unittest.TestCase):
    """Validate the warnings and debug events emitted by Observable."""

    def make_owner(self, **settings: object) -> Observable:
        owner = Observable()
        owner.registry_settings = RegistrySettings(**settings)
        return owner

    def test_duplicate_listener_warning(self) -> None:
        owner = self.make_owner(warn_on_duplicate=True)
        listener = print
        owner.on("tick", listener)
        with self.assertLogs("observable_registry.observable", level="WARNING") as logs:
            owner.on("tick", listener)
        self.assertTrue(
            any("observable.duplicate_listener" in line for line in logs.output)
        )
        self.assertEqual(len(owner.listeners("tick")), 2)

    def test_listener_leak_warning_emitted_once_per_crossing(self) -> None:
        owner = self.make_owner(max_listeners=2)
        owner.on("tick", lambda _: None)
        owner.on("tick", lambda _: None)
        with self.assertLogs("observable_registry.observable", level="WARNING") as logs:
            owner.on("tick", lambda _: None)
            owner.on("tick", lambda _: None)
        leak_lines = [line for line in logs.output if "observable.listener_leak" in line]
        self.assertEqual(len(leak_lines), 1)

    def test_debug_events_logs_lifecycle(self) -> None:
        owner = self.make_owner(debug_events=True)
        with self.assertLogs("observable_registry.observable", level="DEBUG") as logs:
            dispose = owner.on("tick", lambda _: None)
            owner.fire("tick")
            dispose()
        joined = "\n".join(logs.output)
        self.assertIn("observable.subscribe", joined)
        self.assertIn("observable.fire", joined)
        self.assertIn("observable.unsubscribe", joined)

    def test_configure_applies_to_subclasses(self) -> None:
        class Quiet(Observable):
            pass

        class Loud(Quiet):
            pass

        Quiet.configure({"debug_events": True})
        self.assertTrue(Loud().registry_settings.debug_events)
        self.assertFalse(Observable().registry_settings.debug_events)


if __name__ == "__main__":
    unittest.main()
