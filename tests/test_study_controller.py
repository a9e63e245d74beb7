import unittest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from main import app
from exegesis.client.config import GenerationConfig
from exegesis.controller.study_controller import get_generation_config
from exegesis.study.model import parse_study
from exegesis.study.request import Depth, Mode, Translation
from exegesis.utils.errors import (
    GENERATION_FAILED_MESSAGE,
    MISSING_API_KEY_MESSAGE,
    ConfigurationError,
    StudyGenerationFailed,
)

from study_fixtures import book_payload, passage_payload

META = {"reference": "Mateus 3:11", "translation": "NVI", "generated_at": "2024-03-05T10:00:00+00:00"}


def _study(payload, mode):
    payload["meta"] = dict(META)
    payload["mode"] = mode
    return parse_study(payload)


class StudyControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        app.dependency_overrides[get_generation_config] = lambda: GenerationConfig(api_key="test-key")
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_passage_study_is_returned_with_mode_tag(self, mock_generate) -> None:
        mock_generate.return_value = _study(passage_payload(), "passage")

        response = self.client.post("/study", json={"subject": "Mateus 3:11", "depth": "sermon"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["mode"], "passage")
        self.assertEqual(body["meta"]["reference"], "Mateus 3:11")
        self.assertNotIn("bookIntro", body)
        self.assertNotIn("publisher", body["content"]["bibliography"][1])

        request, config = mock_generate.call_args.args
        self.assertEqual(request.subject, "Mateus 3:11")
        self.assertIs(request.depth, Depth.SERMON)
        self.assertEqual(config.api_key, "test-key")

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_book_study_uses_wire_name(self, mock_generate) -> None:
        mock_generate.return_value = _study(book_payload(), "book")

        response = self.client.post("/study", json={"subject": "Romanos", "mode": "book"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["mode"], "book")
        self.assertIn("bookIntro", body)
        self.assertNotIn("summary", body)
        self.assertIs(mock_generate.call_args.args[0].mode, Mode.BOOK)

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_missing_credential_returns_remediation_message(self, mock_generate) -> None:
        mock_generate.side_effect = ConfigurationError()

        response = self.client.post("/study", json={"subject": "Jo 3:16"})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], MISSING_API_KEY_MESSAGE)

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_generation_failure_returns_generic_message(self, mock_generate) -> None:
        mock_generate.side_effect = StudyGenerationFailed()

        response = self.client.post("/study", json={"subject": "Jo 3:16"})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], GENERATION_FAILED_MESSAGE)

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_mapped_failures_are_logged_with_status(self, mock_generate) -> None:
        mock_generate.side_effect = StudyGenerationFailed()

        with self.assertLogs("exegesis.controller.study_controller", level="ERROR") as logs:
            self.client.post("/study", json={"subject": "Jo 3:16", "mode": "book"})

        record = logs.records[0]
        self.assertEqual(record.event, "study_failed")
        self.assertEqual(record.status_code, 502)
        self.assertEqual(record.mode, "book")

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_invalid_payloads_are_rejected_before_generation(self, mock_generate) -> None:
        for payload in (
            {"subject": "   "},
            {"subject": "Jo 3:16", "translation": "XYZ"},
            {"subject": "Jo 3:16", "depth": "exhaustive"},
            {"subject": "Jo 3:16", "mode": "chapter"},
            {"subject": "x" * 121},
        ):
            with self.subTest(payload=payload):
                self.assertEqual(self.client.post("/study", json=payload).status_code, 422)
        mock_generate.assert_not_called()

    @patch("exegesis.controller.study_controller.generate_study", new_callable=AsyncMock)
    def test_markdown_endpoint(self, mock_generate) -> None:
        mock_generate.return_value = _study(passage_payload(), "passage")

        response = self.client.post("/study/markdown", json={"subject": "Mateus 3:11"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/markdown"))
        self.assertTrue(response.text.startswith("# Estudo Exegético: Mateus 3:11"))

    def test_options_endpoint_lists_supported_values(self) -> None:
        response = self.client.get("/study/options")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["translations"], [t.value for t in Translation])
        self.assertEqual(body["depths"], ["quick", "detailed", "academic", "sermon"])
        self.assertEqual(body["modes"], ["passage", "book"])

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
