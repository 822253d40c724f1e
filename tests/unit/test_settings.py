import logging

from bugtrack_center.config.settings import DEFAULT_LOGO_URL, AppSettings


def test_settings_default_values() -> None:
    settings = AppSettings(LOG_LEVEL="debug")
    assert settings.db_url == "sqlite:///./bugtrack.db"
    assert settings.default_logo_url == DEFAULT_LOGO_URL
    assert settings.default_emphasis_color == "#6366f1"
    assert settings.max_video_size_mb == 20
    assert settings.seed_versions[0] == "1.0"
    assert settings.seed_versions[-1] == "1.2.5"
    assert len(settings.seed_versions) == 11
    assert settings.log_level_value == logging.DEBUG


def test_settings_parse_seed_versions_and_unknown_level() -> None:
    settings = AppSettings(SEED_VERSIONS=" 2.0 , ,2.1", LOG_LEVEL="loud", DEFAULT_EMPHASIS_COLOR="#ABCDEF ")
    assert settings.seed_versions == ["2.0", "2.1"]
    assert settings.log_level_value == logging.INFO
    assert settings.default_emphasis_color == "#abcdef"
