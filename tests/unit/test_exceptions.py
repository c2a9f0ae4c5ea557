"""Unit tests for the exception hierarchy."""

from stylematch.utils.exceptions import (
    ConfigError,
    InvalidImageError,
    ParseError,
    StyleMatchError,
    UpstreamError,
    ValidationError,
)


class TestStyleMatchError:
    """Test the base exception."""

    def test_default_code_from_class_name(self):
        """Test the code is derived from the class name."""
        assert StyleMatchError("boom").code == "STYLE_MATCH_ERROR"

    def test_str_includes_code(self):
        """Test str() shows the code and message."""
        assert str(StyleMatchError("boom", code="APP_001")) == "[APP_001] boom"

    def test_to_dict(self):
        """Test serialization for logs."""
        error = StyleMatchError("boom", code="APP_001", context={"step": "embed"})
        assert error.to_dict() == {
            "error_type": "StyleMatchError",
            "message": "boom",
            "code": "APP_001",
            "context": {"step": "embed"},
        }


class TestSubclasses:
    """Test the specialised errors."""

    def test_all_share_base(self):
        """Test every error can be caught as StyleMatchError."""
        for error in (ConfigError(), UpstreamError(), ParseError(), ValidationError(), InvalidImageError()):
            assert isinstance(error, StyleMatchError)

    def test_upstream_error_context(self):
        """Test service and status code are recorded."""
        error = UpstreamError("Embedding API error", service="embedding", status_code=503)
        assert error.code == "UPSTREAM_ERROR"
        assert error.service == "embedding"
        assert error.status_code == 503
        assert error.context == {"service": "embedding", "status_code": 503}

    def test_parse_error_truncates_raw_output(self):
        """Test long model output is truncated in the context."""
        error = ParseError("bad reply", raw_output="x" * 1000)
        assert error.code == "PARSE_ERROR"
        assert len(error.context["raw_output"]) == 200

    def test_validation_error_context(self):
        """Test field, value and allowed values are recorded."""
        error = ValidationError("bad category", field="category", value="Shoes", allowed=("Sneakers", "Boots"))
        assert error.code == "VALIDATION_ERROR"
        assert error.context == {"field": "category", "value": "Shoes", "allowed": ["Sneakers", "Boots"]}

    def test_invalid_image_is_validation_error(self):
        """Test image errors are validation errors with their own code."""
        error = InvalidImageError("too big", reason="too_large")
        assert isinstance(error, ValidationError)
        assert error.code == "INVALID_IMAGE"
        assert error.context["reason"] == "too_large"

    def test_config_error_path(self):
        """Test the config path is recorded."""
        error = ConfigError("missing", path="/tmp/config.yaml")
        assert error.code == "CONFIG_ERROR"
        assert error.context["path"] == "/tmp/config.yaml"
