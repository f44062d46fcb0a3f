"""
Unit tests for settings and configuration file loading.
"""

from pathlib import Path

import pytest

from vatsim_dataformats.config import (
    Settings,
    clear_settings_cache,
    get_settings,
    load_yaml_config,
)
from vatsim_dataformats.exceptions import ValidationError
from vatsim_dataformats.privacyfilter import REMOVE_LINE, THROW_EXCEPTION

CONFIG_YAML = """
logging:
  level: DEBUG
encoding:
  input: iso-8859-1
max_log_line_length: 40
privacy_filter:
  remove_real_name_and_homebase: true
  flight_plan_remarks_remove_all_if_containing:
    - STREAM
  incomplete_filtering_strategy: remove_line
"""

ENV_VARS = (
    "VATSIM_DATAFORMATS_LOG_LEVEL",
    "VATSIM_DATAFORMATS_INPUT_ENCODING",
    "VATSIM_DATAFORMATS_MAX_LOG_LINE_LENGTH",
    "VATSIM_FILTER_REMOVE_REAL_NAME",
    "VATSIM_FILTER_SUBSTITUTE_OBSERVER_PREFIX",
    "VATSIM_FILTER_REMARKS_REMOVE_ALL",
    "VATSIM_FILTER_REMARKS_TRIGGERS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


class TestLoadYamlConfig:
    """Tests for load_yaml_config."""

    def test_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        config = load_yaml_config(path)

        assert config["logging"]["level"] == "DEBUG"
        assert config["privacy_filter"]["flight_plan_remarks_remove_all_if_containing"] == ["STREAM"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml_config(path) == {}

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_yaml_config(path)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.input_encoding == "auto"
        assert settings.output_encoding == "iso-8859-1"
        assert settings.max_log_line_length == 0
        assert not settings.privacy_filter.is_any_feature_enabled
        assert settings.validate() == []

    def test_validate(self) -> None:
        settings = Settings(log_level="LOUD", input_encoding="utf-16", max_log_line_length=-1)

        errors = settings.validate()

        assert len(errors) == 3
        assert any("log_level" in error for error in errors)
        assert any("input_encoding" in error for error in errors)
        assert any("max_log_line_length" in error for error in errors)

    def test_from_dict(self) -> None:
        settings = Settings.from_dict(
            {
                "logging": {"level": "DEBUG"},
                "encoding": {"input": "utf-8"},
                "max_log_line_length": "25",
                "privacy_filter": {"substitute_observer_prefix": True},
            }
        )

        assert settings.log_level == "DEBUG"
        assert settings.input_encoding == "utf-8"
        assert settings.output_encoding == "iso-8859-1"
        assert settings.max_log_line_length == 25
        assert settings.privacy_filter.substitute_observer_prefix

    def test_from_empty_dict(self) -> None:
        assert Settings.from_dict({}) == Settings()

    def test_from_dict_unknown_strategy(self) -> None:
        with pytest.raises(ValidationError):
            Settings.from_dict({"privacy_filter": {"unstable_result_strategy": "unknown"}})

    def test_to_dict(self) -> None:
        result = Settings().to_dict()

        assert result["logging"] == {"level": "INFO"}
        assert result["encoding"] == {"input": "auto", "output": "iso-8859-1"}
        assert result["privacy_filter"]["unstable_result_strategy"] == "throw"

    def test_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("VATSIM_DATAFORMATS_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("VATSIM_DATAFORMATS_MAX_LOG_LINE_LENGTH", "80")
        monkeypatch.setenv("VATSIM_FILTER_REMOVE_REAL_NAME", "true")
        monkeypatch.setenv("VATSIM_FILTER_REMARKS_TRIGGERS", "STREAM, TWITCH ,,")

        settings = Settings.from_env()

        assert settings.log_level == "WARNING"
        assert settings.max_log_line_length == 80
        assert settings.privacy_filter.remove_real_name_and_homebase
        assert not settings.privacy_filter.substitute_observer_prefix
        assert settings.privacy_filter.flight_plan_remarks_remove_all_if_containing == ["STREAM", "TWITCH"]

    def test_from_env_invalid_number(self, monkeypatch) -> None:
        monkeypatch.setenv("VATSIM_DATAFORMATS_MAX_LOG_LINE_LENGTH", "many")
        assert Settings.from_env().max_log_line_length == 0


class TestGetSettings:
    """Tests for cached settings loading."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)

        settings = get_settings(str(path))

        assert settings.log_level == "DEBUG"
        assert settings.input_encoding == "iso-8859-1"
        assert settings.max_log_line_length == 40
        assert settings.privacy_filter.remove_real_name_and_homebase
        assert settings.privacy_filter.incomplete_filtering_strategy is REMOVE_LINE
        assert settings.privacy_filter.unwanted_modification_strategy is THROW_EXCEPTION

    def test_missing_file_falls_back_to_env(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("VATSIM_DATAFORMATS_LOG_LEVEL", "ERROR")

        settings = get_settings(str(tmp_path / "missing.yaml"))

        assert settings.log_level == "ERROR"

    def test_invalid_file_falls_back_to_env(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("logging: [unclosed\n")
        monkeypatch.setenv("VATSIM_FILTER_SUBSTITUTE_OBSERVER_PREFIX", "true")

        settings = get_settings(str(path))

        assert settings.privacy_filter.substitute_observer_prefix

    def test_cache(self, tmp_path: Path, monkeypatch) -> None:
        path = str(tmp_path / "missing.yaml")
        first = get_settings(path)

        monkeypatch.setenv("VATSIM_DATAFORMATS_LOG_LEVEL", "DEBUG")
        assert get_settings(path) is first

        clear_settings_cache()
        assert get_settings(path).log_level == "DEBUG"
