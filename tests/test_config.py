from __future__ import annotations

import logging
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from awsome.runtime import config
from awsome.runtime.app import build_services, persist_favorites
from awsome.runtime.logging_config import resolve_log_level, setup_logging
from awsome.services import ServiceKind


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_or_malformed_config_loads_as_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                self.assertIsNone(config.load_favorites())

    def test_favorites_round_trip_as_short_names(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                config.save_favorites([ServiceKind.DYNAMODB, ServiceKind.S3])

                self.assertEqual(config.load_config()["favorites"], ["S3", "DynamoDB"])
                self.assertEqual(config.load_favorites(), {ServiceKind.S3, ServiceKind.DYNAMODB})

    def test_unknown_favorite_names_are_dropped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text('{"favorites": ["IAM", "Lambda", 3]}', encoding="utf-8")
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_favorites(), {ServiceKind.IAM})

    def test_save_preserves_other_keys(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text('{"aws_profile": " dev ", "aws_region": ""}', encoding="utf-8")
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                config.save_favorites([ServiceKind.EC2])

                self.assertEqual(config.load_aws_profile(), "dev")
                self.assertIsNone(config.load_aws_region())

    def test_log_level_must_be_known(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                config.save_config({"log_level": "debug"})
                self.assertEqual(config.load_log_level(), "DEBUG")
                config.save_config({"log_level": "chatty"})
                self.assertIsNone(config.load_log_level())


class FavoriteWiringTests(unittest.TestCase):
    def test_catalog_defaults_without_saved_favorites(self) -> None:
        services = build_services(None)

        self.assertEqual([s.favorite for s in services], [True, True, False, False, False, False, False, False])

    def test_saved_favorites_replace_defaults(self) -> None:
        services = build_services({ServiceKind.CLOUDWATCH})

        self.assertEqual([s.favorite for s in services], [False, False, False, True, False, False, False, False])

    def test_persist_favorites_writes_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("awsome.runtime.config.CONFIG_PATH", config_path):
                services = build_services({ServiceKind.IAM})
                persist_favorites(services)

                self.assertEqual(config.load_config()["favorites"], ["IAM"])


class LoggingSetupTests(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("awsome")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_explicit_level_beats_environment_and_config(self) -> None:
        with mock.patch.dict(os.environ, {"AWSOME_LOG_LEVEL": "ERROR"}), mock.patch(
            "awsome.runtime.logging_config.load_log_level", return_value="WARNING"
        ):
            self.assertEqual(resolve_log_level("debug"), "DEBUG")
            self.assertEqual(resolve_log_level(), "ERROR")

    def test_config_level_then_default(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True), mock.patch(
            "awsome.runtime.logging_config.load_log_level", return_value="WARNING"
        ):
            self.assertEqual(resolve_log_level(), "WARNING")
        with mock.patch.dict(os.environ, {}, clear=True), mock.patch(
            "awsome.runtime.logging_config.load_log_level", return_value=None
        ):
            self.assertEqual(resolve_log_level(), "INFO")

    def test_setup_writes_records_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "logs" / "awsome.log"
            with mock.patch("awsome.runtime.logging_config.load_log_level", return_value=None):
                self.assertEqual(setup_logging("INFO", log_path=log_path), log_path)

            logging.getLogger("awsome.runtime.refresh").info("list EC2 path=None")
            for handler in logging.getLogger("awsome").handlers:
                handler.flush()

            text = log_path.read_text(encoding="utf-8")
            self.assertIn("awsome.runtime.refresh - INFO - list EC2 path=None", text)
            self.tearDown()


if __name__ == "__main__":
    unittest.main()
