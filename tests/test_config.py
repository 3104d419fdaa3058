"""Unit tests for render settings and the ini loader."""

import pytest


class TestRenderSettings:
    """Tests for settings validation."""

    def test_defaults(self):
        from whitted.config import PassSettings, RenderSettings

        settings = RenderSettings()
        assert (settings.width, settings.height) == (640, 480)
        assert settings.aspect_ratio == pytest.approx(4.0 / 3.0)
        assert settings.realtime_pass() == PassSettings(raster_block=8, sample_count=1)
        assert settings.background_pass() == PassSettings(raster_block=1, sample_count=32)
        assert not settings.show_light_sources
        assert settings.multithreaded

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -4},
            {"realtime_raster_size": 6},
            {"background_raster_size": 0},
            {"realtime_sample_count": 0},
            {"background_sample_count": -1},
        ],
    )
    def test_invalid_values_raise(self, kwargs):
        from whitted.config import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)


class TestLoadSettings:
    """Tests for reading ini files."""

    def test_default_file_round_trip(self, tmp_path):
        from whitted.config import RenderSettings, load_settings, write_default_settings

        path = tmp_path / "raytracer.ini"
        write_default_settings(path)
        assert load_settings(path) == RenderSettings()

    def test_partial_section_keeps_defaults(self, tmp_path):
        from whitted.config import load_settings

        path = tmp_path / "partial.ini"
        path.write_text(
            "[video]\n"
            "Width = 320  # narrow\n"
            "BackgroundSampleCount = 4\n"
            "ShowLightSources = yes\n"
            "[mouse]\n"
            "Sensitivity = 3\n"
        )
        settings = load_settings(path)
        assert settings.width == 320
        assert settings.height == 480
        assert settings.background_sample_count == 4
        assert settings.show_light_sources

    def test_missing_section_uses_defaults(self, tmp_path, caplog):
        from whitted.config import RenderSettings, load_settings

        path = tmp_path / "empty.ini"
        path.write_text("[keyboard]\nForward = W\n")
        with caplog.at_level("WARNING", logger="whitted.config"):
            assert load_settings(path) == RenderSettings()
        assert "video" in caplog.text

    def test_missing_file_raises(self, tmp_path):
        from whitted.config import load_settings

        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.ini")

    @pytest.mark.parametrize(
        "line",
        [
            "Width = wide",
            "Multithreaded = perhaps",
            "RealtimeRasterSize = 3",
        ],
    )
    def test_invalid_values_raise(self, tmp_path, line):
        from whitted.config import load_settings

        path = tmp_path / "bad.ini"
        path.write_text(f"[video]\n{line}\n")
        with pytest.raises(ValueError):
            load_settings(path)

    def test_unparseable_file_raises(self, tmp_path):
        from whitted.config import load_settings

        path = tmp_path / "broken.ini"
        path.write_text("Width = 320\n")
        with pytest.raises(ValueError):
            load_settings(path)
