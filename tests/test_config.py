"""Tests for AppConfig model."""

import pytest
from pydantic import ValidationError

from fileconverter.converters.base import ConversionOptions
from fileconverter.models.config import AppConfig


class TestAppConfig:
    """Test AppConfig serialization and validation."""

    def test_default_values(self):
        config = AppConfig()
        assert config.output_dir == ""
        assert config.default_format == ""
        assert config.quality == 90
        assert config.last_source_dir == ""
        assert config.page_margin == 50.0
        assert config.text_font_size == 12.0
        assert config.table_font_size == 10.0
        assert config.log_retention_days == 7
        assert config.write_log_file is True

    def test_custom_values(self):
        config = AppConfig(output_dir="/tmp/out", default_format="pdf", quality=75, write_log_file=False)
        assert config.output_dir == "/tmp/out"
        assert config.default_format == "pdf"
        assert config.quality == 75
        assert config.write_log_file is False

    @pytest.mark.parametrize("quality", [0, 101, -5])
    def test_quality_out_of_range(self, quality):
        with pytest.raises(ValidationError):
            AppConfig(quality=quality)

    def test_font_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            AppConfig(text_font_size=0)

    def test_model_dump_json_roundtrip(self):
        original = AppConfig(output_dir="/data", quality=60, page_margin=36)
        restored = AppConfig.model_validate_json(original.model_dump_json())
        assert restored == original


class TestConversionOptions:
    def test_defaults(self):
        options = ConversionOptions()
        assert options.quality == 90
        assert options.width is None
        assert options.height is None
        assert not options.wants_resize

    def test_resize_requested(self):
        assert ConversionOptions(height=10).wants_resize

    @pytest.mark.parametrize("kwargs", [{"quality": 0}, {"quality": 101}, {"width": 0}, {"height": -1}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            ConversionOptions(**kwargs)

    def test_frozen(self):
        options = ConversionOptions()
        with pytest.raises(ValidationError):
            options.quality = 10
