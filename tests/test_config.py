"""Tests for pipeline configuration."""

import pytest

from photopdf.config import PipelineConfig
from photopdf.layout import PageSize


class TestDefaults:
    """Default values."""

    def test_defaults(self):
        config = PipelineConfig()
        assert config.max_edge_pixels == 2048
        assert config.jpeg_quality == 0.85
        assert config.margin_pt == 20.0
        assert config.page is PageSize.A4
        assert config.phone_portrait_heuristic
        assert config.allow_upscale

    def test_quality_percent(self):
        assert PipelineConfig().jpeg_quality_percent == 85
        assert PipelineConfig(jpeg_quality=1.0).jpeg_quality_percent == 95
        assert PipelineConfig(jpeg_quality=0.001).jpeg_quality_percent == 1


class TestValidation:
    """Invalid settings are rejected."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_edge_pixels": 0},
            {"jpeg_quality": 0},
            {"jpeg_quality": 1.5},
            {"margin_pt": -1},
            {"margin_pt": 297.5},
            {"page_size": "Letter"},
        ],
    )
    def test_rejects(self, kwargs):
        with pytest.raises(ValueError):
            PipelineConfig(**kwargs)

    def test_zero_margin_allowed(self):
        assert PipelineConfig(margin_pt=0).margin_pt == 0
