"""Integration tests for the command-line interface."""

import json
import logging

import pytest

from conftest import FakeEmbeddingModel, FakeVisionModel
from stylematch import cli
from stylematch.core.pipeline import StyleMatchPipeline
from stylematch.core.use_cases import analyze_outfit
from stylematch.utils.exceptions import UpstreamError
from stylematch.utils.logger import set_package_log_level

SNEAKER_REPLY = '{"items": ["White Canvas Sneakers", "Black Jeans"], "category": "Jackets", "gender": "Women"}'


@pytest.fixture
def image_file(tmp_path, sample_jpeg_bytes):
    path = tmp_path / "jacket.jpg"
    path.write_bytes(sample_jpeg_bytes)
    return path


@pytest.fixture
def fake_openai(monkeypatch):
    """Replace the OpenAI-backed pipeline with fake models."""
    models = {
        "vision": FakeVisionModel(SNEAKER_REPLY),
        "embedding": FakeEmbeddingModel(default=[1.0, 0.0]),
    }

    def from_openai(api_key, config=None, catalog=None):
        models["api_key"] = api_key
        return StyleMatchPipeline(models["vision"], models["embedding"], catalog=catalog, config=config)

    monkeypatch.setattr(cli.StyleMatchPipeline, "from_openai", from_openai)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return models


@pytest.fixture
def restore_log_level():
    yield
    set_package_log_level("INFO")


class TestCli:
    """Test the stylematch command."""

    def test_success_to_stdout(self, fake_openai, image_file, capsys):
        """Test a successful run prints the response and exits 0."""
        exit_code = cli.main([str(image_file), "--api-key", "sk-test", "--top-k", "2"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert payload["success"] is True
        assert [r["recommendedItem"] for r in payload["recommendations"]] == ["White Canvas Sneakers", "Black Jeans"]
        assert all(len(r["matches"]) == 2 for r in payload["recommendations"])
        assert fake_openai["api_key"] == "sk-test"

    def test_api_key_from_environment(self, fake_openai, image_file, monkeypatch, capsys):
        """Test OPENAI_API_KEY is read at the CLI boundary."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert cli.main([str(image_file)]) == 0
        assert fake_openai["api_key"] == "sk-env"

    def test_output_file(self, fake_openai, image_file, tmp_path):
        """Test --output writes the JSON result to a file."""
        output = tmp_path / "out" / "result.json"
        assert cli.main([str(image_file), "--api-key", "sk-test", "--output", str(output)]) == 0
        assert json.loads(output.read_text())["success"] is True

    def test_failure_with_fallback(self, fake_openai, image_file, capsys):
        """Test a failed run exits 1 and can include fallback suggestions."""
        fake_openai["vision"].error = UpstreamError("Vision API timed out", service="vision")

        exit_code = cli.main([str(image_file), "--api-key", "sk-test", "--fallback"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert payload["success"] is False
        assert payload["errorType"] == "UpstreamError"
        assert [rec["category"] for rec in payload["fallbackRecommendations"]] == [
            "Tops", "Bottoms", "Outerwear", "Accessories"
        ]

    def test_failure_without_fallback(self, fake_openai, image_file, capsys):
        """Test fallback suggestions are only added on request."""
        fake_openai["vision"].reply = "not json"
        assert cli.main([str(image_file), "--api-key", "sk-test"]) == 1
        assert "fallbackRecommendations" not in json.loads(capsys.readouterr().out)

    def test_missing_image(self, fake_openai, tmp_path):
        """Test a missing image path exits 1."""
        assert cli.main([str(tmp_path / "missing.jpg"), "--api-key", "sk-test"]) == 1

    def test_invalid_threshold(self, fake_openai, image_file, capsys):
        """Test an out-of-range override is reported as a config error."""
        exit_code = cli.main([str(image_file), "--api-key", "sk-test", "--threshold", "3"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert payload["errorType"] == "ConfigError"

    def test_missing_api_key(self, image_file, monkeypatch, capsys):
        """Test running without credentials fails cleanly."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        exit_code = cli.main([str(image_file)])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert payload["errorType"] == "ValidationError"

    def test_custom_catalog(self, fake_openai, image_file, tmp_path, capsys):
        """Test --catalog replaces the built-in items."""
        catalog_path = tmp_path / "catalog.json"
        catalog_path.write_text(json.dumps([
            {"id": "x1", "name": "Grey Hoodie", "category": "Tops", "description": "Soft grey hoodie"},
        ]))

        assert cli.main([str(image_file), "--api-key", "sk-test", "--catalog", str(catalog_path)]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["recommendations"][0]["matches"][0]["id"] == "x1"

    def test_log_level_reaches_pipeline_loggers(self, fake_openai, image_file, restore_log_level):
        """Test --log-level applies to package loggers, not just the CLI's."""
        assert cli.main([str(image_file), "--api-key", "sk-test", "--log-level", "ERROR"]) == 0

        pipeline_logger = logging.getLogger(analyze_outfit.__name__)
        assert pipeline_logger.level == logging.ERROR
        assert all(handler.level == logging.ERROR for handler in pipeline_logger.handlers)
        assert logging.getLogger(cli.__name__).level == logging.ERROR
