"""Tests for config persistence and input sanitization.

Ensures malformed config data is safely normalized on load and that socket
locations and logging setup follow the documented defaults.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from quickfile import config, paths
from quickfile.logs import configure_logging
from quickfile.opener import launch_opener


class ConfigBehaviorTests(unittest.TestCase):
    def test_theme_name_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("quickfile.config.CONFIG_PATH", config_path):
                self.assertIsNone(config.load_theme_name())
                config.save_theme_name("  ocean ")
                self.assertEqual(config.load_theme_name(), "ocean")

    def test_malformed_config_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2", encoding="utf-8")
            with mock.patch("quickfile.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_reconnect_seconds(), config.DEFAULT_RECONNECT_SECONDS)
                self.assertEqual(config.load_opener_command(), config.default_opener_command())

            config_path.write_text('["not", "an", "object"]', encoding="utf-8")
            with mock.patch("quickfile.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})

    def test_opener_accepts_string_or_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("quickfile.config.CONFIG_PATH", config_path):
                config.save_config({"opener": "code --reuse-window"})
                self.assertEqual(config.load_opener_command(), ["code", "--reuse-window"])
                config.save_config({"opener": ["nvim-remote", "-s"]})
                self.assertEqual(config.load_opener_command(), ["nvim-remote", "-s"])
                config.save_config({"opener": ["ok", 3]})
                self.assertEqual(config.load_opener_command(), config.default_opener_command())

    def test_reconnect_seconds_sanitized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("quickfile.config.CONFIG_PATH", config_path):
                config.save_config({"reconnect_seconds": 2.5})
                self.assertEqual(config.load_reconnect_seconds(), 2.5)
                config.save_config({"reconnect_seconds": -3})
                self.assertEqual(config.load_reconnect_seconds(), 0.0)
                config.save_config({"reconnect_seconds": True})
                self.assertEqual(config.load_reconnect_seconds(), config.DEFAULT_RECONNECT_SECONDS)


class SocketPathTests(unittest.TestCase):
    def test_bridge_sockets_live_in_tmp(self) -> None:
        self.assertEqual(paths.BRIDGE_SOCKETS.request, Path("/tmp/quickfile-daemon.sock"))
        self.assertEqual(paths.BRIDGE_SOCKETS.response, Path("/tmp/quickfile-response.sock"))

    def test_session_sockets_use_runtime_dir_for_uid(self) -> None:
        with mock.patch("quickfile.paths.resolve_user_id", return_value=1000):
            sockets = paths.session_socket_paths()

        self.assertEqual(sockets.request, Path("/run/user/1000/quickfile-daemon.sock"))
        self.assertEqual(sockets.response, Path("/run/user/1000/quickfile-response.sock"))

    def test_explicit_runtime_dir_skips_uid_lookup(self) -> None:
        with mock.patch("quickfile.paths.resolve_user_id") as resolve:
            sockets = paths.session_socket_paths(Path("/custom"))

        resolve.assert_not_called()
        self.assertEqual(sockets.request, Path("/custom/quickfile-daemon.sock"))

    def test_unknown_uid_yields_none(self) -> None:
        with mock.patch("quickfile.paths.resolve_user_id", return_value=None):
            self.assertIsNone(paths.session_socket_paths())

    def test_resolve_user_id_parses_command_output(self) -> None:
        completed = subprocess.CompletedProcess(["id", "-u"], 0, stdout="501\n")
        with mock.patch("quickfile.paths.subprocess.run", return_value=completed):
            self.assertEqual(paths.resolve_user_id(), 501)

    def test_resolve_user_id_handles_failures(self) -> None:
        with mock.patch("quickfile.paths.subprocess.run", side_effect=FileNotFoundError("id")):
            with self.assertLogs("quickfile.paths", level="WARNING"):
                self.assertIsNone(paths.resolve_user_id())
        garbage = subprocess.CompletedProcess(["id", "-u"], 0, stdout="nobody\n")
        with mock.patch("quickfile.paths.subprocess.run", return_value=garbage):
            with self.assertLogs("quickfile.paths", level="WARNING"):
                self.assertIsNone(paths.resolve_user_id())


class LoggingSetupTests(unittest.TestCase):
    def tearDown(self) -> None:
        package_logger = logging.getLogger("quickfile")
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()

    def test_file_logging_writes_debug_records_when_verbose(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "quickfile.log"
            handler = configure_logging(verbose=True, log_path=log_path)
            logging.getLogger("quickfile.transport").debug("hello %s", "world")
            handler.flush()

            self.assertIn("DEBUG quickfile.transport: hello world", log_path.read_text(encoding="utf-8"))

    def test_default_level_is_warning_and_handlers_are_replaced(self) -> None:
        configure_logging()
        configure_logging()
        package_logger = logging.getLogger("quickfile")

        self.assertEqual(len(package_logger.handlers), 1)
        self.assertEqual(package_logger.level, logging.WARNING)
        self.assertFalse(package_logger.propagate)


class OpenerTests(unittest.TestCase):
    def test_launch_opener_runs_detached_command(self) -> None:
        with mock.patch("quickfile.opener.subprocess.Popen") as popen:
            self.assertIsNone(launch_opener("/tmp/a b.txt", ["xdg-open"]))

        args, kwargs = popen.call_args
        self.assertEqual(args[0], ["xdg-open", "/tmp/a b.txt"])
        self.assertTrue(kwargs["start_new_session"])

    def test_launch_opener_reports_errors_as_strings(self) -> None:
        self.assertIn("empty", launch_opener("/tmp/x", []))
        with mock.patch("quickfile.opener.subprocess.Popen", side_effect=OSError("no such file")):
            self.assertIn("no such file", launch_opener("/tmp/x", ["missing-opener"]))


if __name__ == "__main__":
    unittest.main()
