import json
import logging
import os
import unittest
from unittest.mock import patch

from exegesis.client.config import DEFAULT_MODEL, GenerationConfig
from exegesis.utils.errors import MISSING_API_KEY_MESSAGE, ConfigurationError
from exegesis.utils.logger import JSONFormatter, redact_secrets


class GenerationConfigTests(unittest.TestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_without_key(self) -> None:
        config = GenerationConfig.from_env()

        self.assertIsNone(config.api_key)
        self.assertFalse(config.has_api_key)
        self.assertEqual(config.model, DEFAULT_MODEL)
        self.assertEqual(config.max_attempts, 3)
        self.assertEqual(config.base_delay_seconds, 1.0)
        self.assertIsNone(config.request_timeout_seconds)

    @patch.dict(
        os.environ,
        {
            "GOOGLE_API_KEY": " abc123 ",
            "GEMINI_MODEL": "gemini-2.5-flash-lite",
            "STUDY_MAX_ATTEMPTS": "5",
            "STUDY_BASE_DELAY_SECONDS": "0.5",
            "STUDY_REQUEST_TIMEOUT_SECONDS": "30",
        },
        clear=True,
    )
    def test_from_env_reads_overrides(self) -> None:
        config = GenerationConfig.from_env()

        self.assertEqual(config.require_api_key(), "abc123")
        self.assertEqual(config.model, "gemini-2.5-flash-lite")
        self.assertEqual(config.max_attempts, 5)
        self.assertEqual(config.base_delay_seconds, 0.5)
        self.assertEqual(config.request_timeout_seconds, 30.0)

    def test_blank_key_is_a_configuration_error(self) -> None:
        with self.assertRaises(ConfigurationError) as ctx:
            GenerationConfig(api_key="   ").require_api_key()
        self.assertEqual(str(ctx.exception), MISSING_API_KEY_MESSAGE)


class JSONFormatterTests(unittest.TestCase):
    def test_whitelisted_extras_are_included(self) -> None:
        record = logging.LogRecord("exegesis", logging.WARNING, __file__, 1, "attempt failed", None, None)
        record.event = "attempt_failed"
        record.attempt = 2
        record.status_code = None
        record.api_key = "secret"

        data = json.loads(JSONFormatter().format(record))

        self.assertEqual(data["level"], "WARNING")
        self.assertEqual(data["message"], "attempt failed")
        self.assertEqual(data["event"], "attempt_failed")
        self.assertEqual(data["attempt"], 2)
        self.assertNotIn("status_code", data)
        self.assertNotIn("api_key", data)

    def test_api_keys_are_redacted_from_message(self) -> None:
        key = "AIzaSyA1234567890abcdefghijklmnop"
        record = logging.LogRecord(
            "exegesis",
            logging.WARNING,
            __file__,
            1,
            "POST https://generativelanguage.googleapis.com/v1beta/models?key=%s failed",
            (key,),
            None,
        )

        data = json.loads(JSONFormatter().format(record))

        self.assertNotIn(key, data["message"])
        self.assertIn("?key=***", data["message"])

    def test_redact_secrets_masks_bare_keys(self) -> None:
        self.assertEqual(
            redact_secrets("invalid key AIzaSyA1234567890abcdefghijklmnop"),
            "invalid key ***",
        )


if __name__ == "__main__":
    unittest.main()
